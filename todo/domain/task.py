from typing import NewType, Any
from datetime import date, datetime
from dataclasses import dataclass, fields
from enum import Enum

TaskId = NewType("TaskId", str)
UserId = NewType("UserId", str)


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self):
        return "UNSET"

UNSET = _Unset.UNSET


@dataclass(frozen=True)
class Task():
    """
    Model domenowy pojedynczego zadania; niemutowalny; `task_id`, `owner_id`
    i `created_at` nadaje wyłącznie repozytorium przy pierwszym zapisie
    """
    task_id: TaskId
    title: str
    created_at: datetime
    owner_id: UserId
    description: str | None = None
    due_date: date | None = None
    completed: bool = False


@dataclass(frozen=True)
class TaskDraft():
    """Dane nowego zadania podawane przez UI (bez id, właściciela i czasu utworzenia)."""
    title: str
    description: str | None = None
    due_date: date | None = None
    completed: bool = False


@dataclass(frozen=True)
class TaskUpdate():
    """
    Częściowa aktualizacja zadania.

    Każde pole domyślnie ma wartość `UNSET` i wtedy nie jest ani walidowane,
    ani zapisywane. `None` w `description`/`due_date` oznacza wyczyszczenie pola.
    """
    title: str | _Unset = UNSET
    description: str | None | _Unset = UNSET
    completed: bool | _Unset = UNSET
    due_date: date | None | _Unset = UNSET

    def provided(self) -> dict[str, Any]:
        """Zwraca tylko pola ustawione przez wywołującego."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not UNSET:
                result[f.name] = value
        return result

    def is_empty(self) -> bool:
        return not self.provided()


@dataclass(frozen=True)
class TaskStats():
    total: int
    completed: int
    pending: int
    completion_rate: float
