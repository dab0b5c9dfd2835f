import asyncio
from datetime import datetime
from typing import Awaitable, Callable, Optional, TypeVar
from typer import Argument, Option, Typer, Exit
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from todo.config import Settings
from todo.logging_setup import setup_logging
from todo.bootstrap import AppContainer, build_container
from todo.domain.task import Task, TaskDraft, TaskUpdate
from todo.domain.enums import ErrorKind, TaskFilter, AlarmType
from todo.domain.errors import DomainError
from todo.services.task_controller import ControllerResult
from todo.services.migration import migrate_legacy_tasks
from todo.api.formatting import format_date, format_datetime, truncate_text, color_status


### COMMENTS
# ==========================================================
# CLI (Typer + Rich): interfejs użytkownika dla zadań.
# ==========================================================
# Rola:
# - Mapuje komendy na metody TaskController / AlarmController.
# - Wyświetla wyniki w czytelnej formie (tabele, panele, kolory).
# - Wyniki z `ok=False` drukuje jako czerwony panel z komunikatami.
#
# Zasady:
# - Zero logiki biznesowej, wszystko przez kontrolery.
# - Jednorazowy bootstrap zależności (build_container) w callbacku.
# - Każda komenda to jedno `asyncio.run`, magazyn zamykany na końcu.


app = Typer(help="Todo: osobista lista zadań")
console = Console()

container: AppContainer | None = None  # ustawimy w callbacku

T = TypeVar("T")

ERROR_TITLES = {
    ErrorKind.UNAUTHENTICATED: "Brak sesji",
    ErrorKind.INVALID_INPUT: "Błąd walidacji",
    ErrorKind.NOT_FOUND: "Nie znaleziono",
    ErrorKind.FORBIDDEN: "Brak uprawnień",
    ErrorKind.STORE_UNAVAILABLE: "Błąd magazynu",
}

HINTS = {
    ErrorKind.UNAUTHENTICATED: "Użyj 'todo login <użytkownik>'",
    ErrorKind.NOT_FOUND: "Użyj 'todo list', żeby znaleźć poprawne ID",
}


@app.callback()
def main() -> None:
    """Bootstrap zależności na starcie procesu CLI."""
    global container
    settings = Settings.from_env()
    setup_logging(log_dir=settings.log_dir, app_name=settings.app_name, console_level=settings.log_level)
    container = build_container(settings)


def run(action: Callable[[AppContainer], Awaitable[T]]) -> T:
    """Uruchamia akcję asynchroniczną i zawsze zamyka połączenia magazynu."""
    async def _main() -> T:
        try:
            return await action(container)
        finally:
            await container.store.close()
    return asyncio.run(_main())


def short_id(task_id: str, n: int = 8) -> str:
    """Zwraca skróconą wersję ID do wyświetlenia (np. pierwsze 8 znaków)."""
    return task_id[:n]


def print_failure(result: ControllerResult) -> None:
    lines = [f"❌ {m}" for m in result.messages]
    hint = HINTS.get(result.error)
    if hint:
        lines.append(f"[dim]{hint}[/]")
    console.print(Panel.fit(
        "\n".join(lines),
        title=ERROR_TITLES.get(result.error, "Błąd"),
        border_style="red",
    ))


def ensure_ok(result: ControllerResult) -> None:
    if not result.ok:
        print_failure(result)
        raise Exit(code=1)


def render_list(items: list[Task], title: str | None = None) -> None:
    """Renderuje tabelę Rich z kolumnami: ID, Title, Due, Created, Status."""

    table = Table(show_lines=True, header_style="bold", title=title)
    table.add_column("ID", no_wrap=True, style="cyan")
    table.add_column("Title")
    table.add_column("Due", no_wrap=True)
    table.add_column("Created At", no_wrap=True, style="dim")
    table.add_column("Status", no_wrap=True)

    for t in items:
        table.add_row(
            short_id(t.task_id),
            truncate_text(t.title, 40),
            format_date(t.due_date),
            format_datetime(t.created_at),
            color_status(t.completed),
        )

    console.print(table)
    console.print(f"[dim]Razem: {len(items)}[/dim]")


def render_task(task: Task) -> None:
    lines = [
        f"ID: {task.task_id}",
        f"Title: {task.title}",
        f"Description: {task.description or '[dim]brak[/]'}",
        f"Due: {format_date(task.due_date) or '[dim]brak[/]'}",
        f"Created: {format_datetime(task.created_at)}",
        f"Status: {color_status(task.completed)}",
    ]
    console.print(Panel.fit("\n".join(lines), title="Szczegóły zadania", border_style="cyan"))


@app.command("login")
def login(user_id: str) -> None:
    """Zapisuje sesję użytkownika (dostawca tożsamości jest poza aplikacją)."""
    try:
        container.session.sign_in(user_id)
    except (ValueError, DomainError) as e:
        console.print(Panel.fit(f"❌ {e}", title="Logowanie", border_style="red"))
        raise Exit(code=1)
    console.print(Panel.fit(f"✅ Zalogowano jako [cyan]{user_id.strip()}[/]", border_style="green"))


@app.command("logout")
def logout() -> None:
    container.session.sign_out()
    console.print(Panel.fit("🟡 Wylogowano", border_style="yellow"))


@app.command("whoami")
def whoami() -> None:
    user = container.session.current_user()
    if user is None:
        console.print("[dim]Brak zalogowanego użytkownika[/]")
        raise Exit(code=1)
    console.print(user)


@app.command("add")
def add(
    title: str,
    desc: Optional[str] = Option(None, "--desc", "-d"),
    due: Optional[datetime] = Option(None, "--due", formats=["%Y-%m-%d"]),
) -> None:
    """
    Dodaje nowe zadanie.

    Flow:
    - tasks.create_task(TaskDraft(...))
    - Sukces: Panel „✅ Dodano zadanie”, pokaż skrócone ID.
    - Błąd walidacji: wszystkie komunikaty naraz.
    """
    draft = TaskDraft(title=title, description=desc, due_date=due.date() if due else None)
    result = run(lambda c: c.tasks.create_task(draft))
    ensure_ok(result)
    console.print(Panel.fit(
        f"✅ Dodano zadanie\n[cyan]ID:[/cyan] {result.value}\n[dim]Title:[/dim] {title}",
        title="Sukces",
        border_style="green",
    ))


@app.command("list")
def list_cmd(
    status: TaskFilter = Option(TaskFilter.ALL, "--status", "-s"),
) -> None:
    """Listuje zadania od najnowszego, opcjonalnie tylko oczekujące/ukończone."""
    result = run(lambda c: c.tasks.tasks_by_filter(status))
    ensure_ok(result)
    render_list(result.value)


@app.command("show")
def show(task_id: str) -> None:
    result = run(lambda c: c.tasks.get_task(task_id))
    ensure_ok(result)
    render_task(result.value)


@app.command("edit")
def edit(
    task_id: str,
    title: Optional[str] = Option(None, "--title", "-t"),
    desc: Optional[str] = Option(None, "--desc", "-d"),
    due: Optional[datetime] = Option(None, "--due", formats=["%Y-%m-%d"]),
    clear_desc: bool = Option(False, "--clear-desc"),
    clear_due: bool = Option(False, "--clear-due"),
) -> None:
    """
    Częściowa edycja: zmieniane są tylko podane pola.

    --clear-desc / --clear-due czyszczą pole zamiast je ustawiać.
    """
    changes = {}
    if title is not None:
        changes["title"] = title
    if clear_desc:
        changes["description"] = None
    elif desc is not None:
        changes["description"] = desc
    if clear_due:
        changes["due_date"] = None
    elif due is not None:
        changes["due_date"] = due.date()

    result = run(lambda c: c.tasks.update_task(task_id, TaskUpdate(**changes)))
    ensure_ok(result)
    render_task(result.value)


@app.command("done")
def done(task_id: str) -> None:
    """Przełącza status zadania (oczekujące <-> ukończone)."""
    result = run(lambda c: c.tasks.toggle_task_completion(task_id))
    ensure_ok(result)
    task = result.value
    console.print(Panel.fit(
        f"✅ ID: {short_id(task.task_id)}\n[dim]Title:[/dim] {task.title}\nStatus: {color_status(task.completed)}",
        title="Sukces",
        border_style="green",
    ))


@app.command("rm")
def rm(task_id: str) -> None:
    result = run(lambda c: c.tasks.delete_task(task_id))
    ensure_ok(result)
    console.print(Panel.fit(
        f"🟡 Zadanie usunięte\nID: {short_id(task_id)}",
        title="Usunięto",
        border_style="yellow",
    ))


@app.command("search")
def search(term: str = Argument("")) -> None:
    """Szuka frazy w tytule i opisie (bez rozróżniania wielkości liter)."""
    result = run(lambda c: c.tasks.search_tasks(term))
    ensure_ok(result)
    render_list(result.value, title=f"Wyniki dla: {term}" if term.strip() else None)


@app.command("stats")
def stats() -> None:
    result = run(lambda c: c.tasks.task_stats())
    ensure_ok(result)
    s = result.value
    console.print(Panel.fit(
        f"Wszystkie: {s.total}\n"
        f"Ukończone: [green]{s.completed}[/]\n"
        f"Oczekujące: [yellow]{s.pending}[/]\n"
        f"Procent ukończenia: {s.completion_rate}%",
        title="Statystyki",
        border_style="cyan",
    ))


@app.command("alarm")
def alarm(
    alarm_type: Optional[AlarmType] = Option(None, "--type"),
    vibration: Optional[int] = Option(None, "--vibration", help="Czas wibracji w ms (50-5000)"),
    flash: Optional[int] = Option(None, "--flash", help="Czas błysku w ms (1000-10000)"),
) -> None:
    """Uruchamia alarm (wibracja/lampa) i czeka na automatyczne wyłączenie lampy."""
    async def action(c: AppContainer):
        response = await c.alarms.handle_alarm_request(
            type=alarm_type, vibration_duration=vibration, flash_duration=flash,
        )
        await c.alarms.service.wait_idle()
        return response

    response = run(action)
    if not response.success:
        console.print(Panel.fit(f"❌ {response.message}\n[dim]{response.error}[/]", title="Alarm", border_style="red"))
        raise Exit(code=1)
    console.print(Panel.fit(f"🔔 {response.message}", title="Alarm", border_style="green"))


@app.command("migrate")
def migrate() -> None:
    """Przenosi zadania ze starego schematu do bieżącej kolekcji."""
    settings = container.settings
    try:
        report = run(lambda c: migrate_legacy_tasks(c.store, settings.legacy_collection, settings.tasks_collection))
    except DomainError as e:
        console.print(Panel.fit(f"❌ {e}", title="Migracja", border_style="red"))
        raise Exit(code=1)
    console.print(Panel.fit(
        f"✅ Przeniesiono: {report.migrated}\nPominięto: {len(report.skipped)}",
        title="Migracja",
        border_style="green",
    ))


if __name__ == "__main__":
    app()
