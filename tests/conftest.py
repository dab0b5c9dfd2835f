import pytest
from todo.adapters.memory.document_store import InMemoryDocumentStore
from todo.adapters.session.memory_session import InMemorySession
from todo.services.task_repository import TaskRepository
from todo.services.task_controller import TaskController
from fakes import FakeIdProvider, FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryDocumentStore(FakeIdProvider())


@pytest.fixture
def session():
    """Sesja zalogowana jako 'alice'."""
    return InMemorySession("alice")


@pytest.fixture
def repo(store, session, clock):
    return TaskRepository(store, session, clock)


@pytest.fixture
def controller(repo):
    return TaskController(repo)
