from datetime import date, datetime
from todo.api.colors import TaskColor


def format_date(value: date | None) -> str:
    """Data w formacie DD/MM/YYYY; brak daty -> pusty napis."""
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")


def format_datetime(value: datetime | None) -> str:
    """Data i godzina w strefie lokalnej (DD/MM/YYYY HH:MM)."""
    if value is None:
        return ""
    return value.astimezone().strftime("%d/%m/%Y %H:%M")


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max(0, max_length - 3)] + "..."


def status_text(completed: bool) -> str:
    return "Ukończone" if completed else "Oczekujące"


def color_status(completed: bool) -> str:
    """Zwraca status w Rich-markup z kolorem."""
    color = TaskColor.GREEN if completed else TaskColor.YELLOW
    return f"{color}{status_text(completed)}{TaskColor.RESET}"
