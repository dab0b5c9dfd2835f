from dataclasses import dataclass
from todo.config import Settings
from todo.ports.document_store import DocumentStore
from todo.adapters.sql.document_store import SqlDocumentStore
from todo.adapters.session.file_session import FileSession
from todo.adapters.system.clock_system import SystemClock
from todo.adapters.system.feedback_simulated import SimulatedFeedbackDevice
from todo.services.task_repository import TaskRepository
from todo.services.task_controller import TaskController
from todo.services.alarm_service import AlarmService
from todo.services.alarm_controller import AlarmController


@dataclass
class AppContainer:
    """Jawnie zbudowany graf zależności aplikacji (bez singletonów)."""
    settings: Settings
    store: DocumentStore
    session: FileSession
    tasks: TaskController
    alarms: AlarmController


def build_container(settings: Settings) -> AppContainer:
    """Składa aplikację: magazyn SQL + sesja w pliku + zegar systemowy + symulowane urządzenie."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    store = SqlDocumentStore(settings.database_url)
    session = FileSession(settings.session_file)
    repository = TaskRepository(store, session, SystemClock(), settings.tasks_collection)
    return AppContainer(
        settings=settings,
        store=store,
        session=session,
        tasks=TaskController(repository),
        alarms=AlarmController(AlarmService(SimulatedFeedbackDevice())),
    )
