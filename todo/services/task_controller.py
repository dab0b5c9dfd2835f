from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Generic, TypeVar, Awaitable, Callable
from todo.services.task_repository import TaskRepository
from todo.domain.task import Task, TaskDraft, TaskUpdate, TaskId, TaskStats
from todo.domain.enums import ErrorKind, TaskFilter
from todo.domain.errors import DomainError, TaskNotFoundError, StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MISSING_ID_MESSAGE = "Identyfikator zadania jest wymagany"


@dataclass(frozen=True)
class ControllerResult(Generic[T]):
    """
    Wynik operacji kontrolera dla warstwy prezentacji.

    `ok=False` zawsze niesie `error` (rodzaj błędu) i co najmniej jeden komunikat
    gotowy do wyświetlenia.
    """
    ok: bool
    value: T | None = None
    error: ErrorKind | None = None
    messages: list[str] = field(default_factory=list)

    @classmethod
    def success(cls, value: T | None = None, message: str | None = None) -> "ControllerResult[T]":
        return cls(ok=True, value=value, messages=[message] if message else [])

    @classmethod
    def failure(cls, kind: ErrorKind, messages: list[str]) -> "ControllerResult[T]":
        return cls(ok=False, error=kind, messages=list(messages))

    @classmethod
    def from_error(cls, error: DomainError) -> "ControllerResult[T]":
        return cls.failure(error.kind, error.messages)

    @property
    def message(self) -> str:
        return "\n".join(self.messages)


class TaskController:
    """
    Fasada dla UI nad TaskRepository.

    Każda metoda odpowiada operacji repozytorium, ale zamiast rzucać wyjątki
    domenowe zwraca `ControllerResult`. Dodatkowo: filtrowanie po statusie
    i przełączanie ukończenia.

    :param repository: Skonfigurowane repozytorium zadań.
    """
    def __init__(self, repository: TaskRepository) -> None:
        self.repository = repository

    async def _call(self, operation: str, action: Callable[[], Awaitable[T]], message: str | None = None) -> ControllerResult[T]:
        try:
            value = await action()
        except StoreUnavailableError as e:
            logger.error("TaskController.%s: %s", operation, e)
            return ControllerResult.from_error(e)
        except DomainError as e:
            logger.info("TaskController.%s odrzucone (%s): %s", operation, e.kind, e)
            return ControllerResult.from_error(e)
        return ControllerResult.success(value, message)

    @staticmethod
    def _missing_id(task_id: str | None) -> ControllerResult | None:
        if not task_id or not task_id.strip():
            return ControllerResult.failure(ErrorKind.INVALID_INPUT, [MISSING_ID_MESSAGE])
        return None

    async def get_all_tasks(self) -> ControllerResult[list[Task]]:
        return await self._call("get_all_tasks", self.repository.list)

    async def get_task(self, task_id: str) -> ControllerResult[Task]:
        """Pobiera zadanie; brak rekordu zamieniany jest na wynik NOT_FOUND."""
        if (invalid := self._missing_id(task_id)) is not None:
            return invalid

        async def action() -> Task:
            task = await self.repository.get_by_id(TaskId(task_id.strip()))
            if task is None:
                raise TaskNotFoundError(task_id)
            return task

        return await self._call("get_task", action)

    async def create_task(self, draft: TaskDraft) -> ControllerResult[TaskId]:
        return await self._call(
            "create_task",
            lambda: self.repository.create(draft),
            "Zadanie zostało utworzone",
        )

    async def update_task(self, task_id: str, update: TaskUpdate) -> ControllerResult[Task]:
        if (invalid := self._missing_id(task_id)) is not None:
            return invalid
        return await self._call(
            "update_task",
            lambda: self.repository.update(TaskId(task_id.strip()), update),
            "Zadanie zostało zaktualizowane",
        )

    async def delete_task(self, task_id: str) -> ControllerResult[None]:
        if (invalid := self._missing_id(task_id)) is not None:
            return invalid
        return await self._call(
            "delete_task",
            lambda: self.repository.delete(TaskId(task_id.strip())),
            "Zadanie zostało usunięte",
        )

    async def toggle_task_completion(self, task_id: str) -> ControllerResult[Task]:
        """
            Odczyt, potem zapis: pobiera zadanie, odwraca `completed`, zapisuje.

            - Brak zadania -> NOT_FOUND.
            - Zwraca zadanie po zmianie.
        """
        if (invalid := self._missing_id(task_id)) is not None:
            return invalid

        async def action() -> Task:
            tid = TaskId(task_id.strip())
            task = await self.repository.get_by_id(tid)
            if task is None:
                raise TaskNotFoundError(tid)
            return await self.repository.update(tid, TaskUpdate(completed=not task.completed))

        return await self._call("toggle_task_completion", action)

    async def tasks_by_status(self, completed: bool) -> ControllerResult[list[Task]]:
        async def action() -> list[Task]:
            return [t for t in await self.repository.list() if t.completed == completed]

        return await self._call("tasks_by_status", action)

    async def tasks_by_filter(self, task_filter: TaskFilter) -> ControllerResult[list[Task]]:
        if task_filter == TaskFilter.ALL:
            return await self.get_all_tasks()
        return await self.tasks_by_status(task_filter == TaskFilter.COMPLETED)

    async def search_tasks(self, term: str | None) -> ControllerResult[list[Task]]:
        return await self._call("search_tasks", lambda: self.repository.search(term))

    async def task_stats(self) -> ControllerResult[TaskStats]:
        return await self._call("task_stats", self.repository.stats)
