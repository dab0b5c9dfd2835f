from datetime import date, datetime, timezone
from typing import Any
from todo.domain.task import Task, TaskDraft, TaskUpdate, TaskId, UserId
from todo.domain.validation import TaskValidator
from todo.domain.errors import TaskValidationError, UnauthenticatedError

### COMMENTS
# ==========================================================
# Mapowanie Task <-> dokument w magazynie (domain/mapper.py).
# ==========================================================
# Schemat dokumentu (kolekcja "Tareas"):
#     titulo, Descripcion, Fecha, completed, userId, createdAt
# Wielkość liter w "Descripcion"/"Fecha" pochodzi z istniejących danych, nie zmieniamy jej.
#
# Wcześniejszy wariant (kolekcja "tasks"):
#     title, description, dueDate, userId, createdAt
# jest tylko migrowany (`legacy_to_storage`), nie jest czytany bezpośrednio.
#
# - createdAt: ISO 8601 UTC, stała szerokość mikrosekund, sufiks 'Z'
#   (porządek leksykalny == porządek czasowy, magazyn może po nim sortować).
# - Fecha: 'YYYY-MM-DD'.

TITLE = "titulo"
DESCRIPTION = "Descripcion"
DUE_DATE = "Fecha"
COMPLETED = "completed"
OWNER = "userId"
CREATED_AT = "createdAt"

LEGACY_FIELDS = {
    "title": TITLE,
    "description": DESCRIPTION,
    "dueDate": DUE_DATE,
    "completed": COMPLETED,
    "userId": OWNER,
    "createdAt": CREATED_AT,
}

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def encode_dt(dt: datetime) -> str:
    # ISO 8601 w UTC z sufiksem 'Z'
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")

def decode_dt(s: str) -> datetime:
    # '...Z' -> aware UTC
    return datetime.fromisoformat(s.replace("Z", "+00:00")).astimezone(timezone.utc)

def encode_date(d: date) -> str:
    return d.isoformat()

def decode_date(s: str) -> date:
    if len(s) == 10:
        return date.fromisoformat(s)
    return decode_dt(s).date()


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None

def _flag(value: Any) -> bool:
    return value if isinstance(value, bool) else False

def _optional_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return decode_date(value)
        except ValueError:
            return None
    return None

def _timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str) and value:
        try:
            return decode_dt(value)
        except ValueError:
            return EPOCH
    return EPOCH


class TaskMapper:
    """Czyste funkcje tłumaczące model domenowy na dokument i z powrotem."""

    @staticmethod
    def to_storage(draft: TaskDraft, owner_id: UserId | None, created_at: datetime) -> dict[str, Any]:
        """
            Buduje dokument dla nowego zadania.

            :raises UnauthenticatedError: Gdy brak właściciela.
            :raises TaskValidationError: Gdy tytuł lub opis łamią reguły.
        """
        if not owner_id:
            raise UnauthenticatedError()

        errors = TaskValidator.validate_title(draft.title).errors
        errors += TaskValidator.validate_description(draft.description).errors
        if errors:
            raise TaskValidationError(errors)

        record: dict[str, Any] = {
            TITLE: draft.title,
            COMPLETED: bool(draft.completed),
            OWNER: str(owner_id),
            CREATED_AT: encode_dt(created_at),
        }
        if draft.description is not None:
            record[DESCRIPTION] = draft.description
        if draft.due_date is not None:
            record[DUE_DATE] = encode_date(draft.due_date)
        return record

    @staticmethod
    def from_storage(doc_id: str, record: dict[str, Any]) -> Task:
        """Odczyt jest tolerancyjny: brakujące lub uszkodzone pola opcjonalne dostają wartości domyślne."""
        title = record.get(TITLE)
        owner = record.get(OWNER)
        return Task(
            task_id=TaskId(doc_id),
            title=title if isinstance(title, str) else "",
            created_at=_timestamp(record.get(CREATED_AT)),
            owner_id=UserId(owner if isinstance(owner, str) else ""),
            description=_optional_str(record.get(DESCRIPTION)),
            due_date=_optional_date(record.get(DUE_DATE)),
            completed=_flag(record.get(COMPLETED)),
        )

    @staticmethod
    def update_to_storage(update: TaskUpdate) -> dict[str, Any]:
        """Mapuje tylko pola obecne w aktualizacji; pozostałe nie trafiają do zapisu."""
        provided = update.provided()
        result: dict[str, Any] = {}
        if "title" in provided:
            result[TITLE] = provided["title"]
        if "description" in provided:
            result[DESCRIPTION] = provided["description"]
        if "completed" in provided:
            result[COMPLETED] = bool(provided["completed"])
        if "due_date" in provided:
            due = provided["due_date"]
            result[DUE_DATE] = encode_date(due) if due is not None else None
        return result

    @staticmethod
    def legacy_to_storage(record: dict[str, Any]) -> dict[str, Any]:
        """Przepisuje dokument ze starego schematu (title/description/dueDate) na bieżący."""
        result: dict[str, Any] = {}
        for old_name, new_name in LEGACY_FIELDS.items():
            if old_name in record and record[old_name] is not None:
                result[new_name] = record[old_name]

        result[TITLE] = result.get(TITLE) if isinstance(result.get(TITLE), str) else ""
        result[COMPLETED] = _flag(result.get(COMPLETED))
        result[CREATED_AT] = encode_dt(_timestamp(result.get(CREATED_AT)))
        if DUE_DATE in result:
            due = _optional_date(result[DUE_DATE])
            if due is None:
                del result[DUE_DATE]
            else:
                result[DUE_DATE] = encode_date(due)
        return result
