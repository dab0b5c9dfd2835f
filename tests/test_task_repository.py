import pytest
from datetime import date
from todo.adapters.session.memory_session import InMemorySession
from todo.services.task_repository import TaskRepository
from todo.domain.task import TaskDraft, TaskUpdate, TaskStats
from todo.domain.errors import (
    UnauthenticatedError,
    TaskValidationError,
    TaskNotFoundError,
    TaskAccessDeniedError,
    StoreUnavailableError,
)
from fakes import FailingDocumentStore, FakeClock, FakeIdProvider


@pytest.mark.asyncio
async def test_create_then_get_returns_same_fields(repo, store):
    # Arrange
    draft = TaskDraft(title="Kup mleko", description="2% bez laktozy", due_date=date(2025, 1, 10))

    # Act
    task_id = await repo.create(draft)
    task = await repo.get_by_id(task_id)

    # Assert
    assert task.task_id == task_id
    assert task.title == draft.title
    assert task.description == draft.description
    assert task.due_date == draft.due_date
    assert task.completed is False
    assert task.owner_id == "alice"
    assert task.created_at.tzinfo is not None
    assert store.count("Tareas") == 1


@pytest.mark.asyncio
async def test_create_stamps_owner_and_clock_time(repo, store, clock):
    task_id = await repo.create(TaskDraft(title="A"))

    doc = await store.get("Tareas", task_id)
    assert doc.data["userId"] == "alice"
    assert doc.data["createdAt"] == "2025-01-01T12:00:00.000000Z"


@pytest.mark.asyncio
async def test_create_with_empty_title_persists_nothing(repo, store):
    with pytest.raises(TaskValidationError) as exc:
        await repo.create(TaskDraft(title=""))

    assert "Tytuł jest wymagany" in exc.value.errors
    assert store.count("Tareas") == 0


@pytest.mark.asyncio
async def test_create_rejects_due_date_in_the_past(repo):
    with pytest.raises(TaskValidationError) as exc:
        await repo.create(TaskDraft(title="A", due_date=date(2024, 12, 31)))
    assert exc.value.errors == ["Termin nie może być wcześniejszy niż dzisiaj"]


@pytest.mark.asyncio
async def test_create_requires_session(store, clock):
    repo = TaskRepository(store, InMemorySession(), clock)
    with pytest.raises(UnauthenticatedError):
        await repo.create(TaskDraft(title="A"))
    assert store.count("Tareas") == 0


@pytest.mark.asyncio
async def test_get_missing_returns_none(repo):
    assert await repo.get_by_id("non-existent-id") is None


@pytest.mark.asyncio
async def test_get_foreign_task_is_forbidden(store, clock):
    alice = TaskRepository(store, InMemorySession("alice"), clock)
    bob = TaskRepository(store, InMemorySession("bob"), clock)
    task_id = await alice.create(TaskDraft(title="Tylko moje"))

    with pytest.raises(TaskAccessDeniedError):
        await bob.get_by_id(task_id)


@pytest.mark.asyncio
async def test_update_changes_only_given_field(repo, store):
    task_id = await repo.create(TaskDraft(title="A", description="opis", due_date=date(2025, 2, 1)))
    before = (await store.get("Tareas", task_id)).data

    updated = await repo.update(task_id, TaskUpdate(title="x"))

    after = (await store.get("Tareas", task_id)).data
    assert after["titulo"] == "x"
    assert {k: v for k, v in after.items() if k != "titulo"} == {k: v for k, v in before.items() if k != "titulo"}
    assert updated.title == "x"
    assert updated.description == "opis"


@pytest.mark.asyncio
async def test_update_can_clear_optional_fields(repo):
    task_id = await repo.create(TaskDraft(title="A", description="opis", due_date=date(2025, 2, 1)))

    await repo.update(task_id, TaskUpdate(description=None, due_date=None))

    task = await repo.get_by_id(task_id)
    assert task.description is None
    assert task.due_date is None


@pytest.mark.asyncio
async def test_update_validates_only_supplied_fields(repo, store):
    task_id = await repo.create(TaskDraft(title="A"))

    with pytest.raises(TaskValidationError):
        await repo.update(task_id, TaskUpdate(title="  "))
    assert (await repo.get_by_id(task_id)).title == "A"


@pytest.mark.asyncio
async def test_empty_update_does_not_write(clock):
    store = FailingDocumentStore("update", id_provider=FakeIdProvider())
    repo = TaskRepository(store, InMemorySession("alice"), clock)
    task_id = await repo.create(TaskDraft(title="A"))

    task = await repo.update(task_id, TaskUpdate())

    assert task.title == "A"
    assert "update" not in store.calls


@pytest.mark.asyncio
async def test_update_missing_and_foreign(store, clock):
    alice = TaskRepository(store, InMemorySession("alice"), clock)
    bob = TaskRepository(store, InMemorySession("bob"), clock)
    task_id = await alice.create(TaskDraft(title="A"))

    with pytest.raises(TaskNotFoundError):
        await alice.update("nope", TaskUpdate(title="B"))
    with pytest.raises(TaskAccessDeniedError):
        await bob.update(task_id, TaskUpdate(title="B"))
    assert (await alice.get_by_id(task_id)).title == "A"


@pytest.mark.asyncio
async def test_delete_then_get_is_not_found(repo):
    task_id = await repo.create(TaskDraft(title="A"))

    await repo.delete(task_id)

    assert await repo.get_by_id(task_id) is None
    with pytest.raises(TaskNotFoundError):
        await repo.delete(task_id)


@pytest.mark.asyncio
async def test_delete_foreign_task_is_forbidden(store, clock):
    alice = TaskRepository(store, InMemorySession("alice"), clock)
    bob = TaskRepository(store, InMemorySession("bob"), clock)
    task_id = await alice.create(TaskDraft(title="A"))

    with pytest.raises(TaskAccessDeniedError):
        await bob.delete(task_id)
    assert store.count("Tareas") == 1


@pytest.mark.asyncio
async def test_list_is_newest_first_and_scoped_to_owner(store, clock):
    alice = TaskRepository(store, InMemorySession("alice"), clock)
    bob = TaskRepository(store, InMemorySession("bob"), clock)
    await alice.create(TaskDraft(title="pierwsze"))
    await bob.create(TaskDraft(title="cudze"))
    await alice.create(TaskDraft(title="drugie"))
    await alice.create(TaskDraft(title="trzecie"))

    items = await alice.list()

    assert [t.title for t in items] == ["trzecie", "drugie", "pierwsze"]
    assert all(t.owner_id == "alice" for t in items)


@pytest.mark.asyncio
async def test_list_empty_returns_no_items(repo):
    assert await repo.list() == []


@pytest.mark.asyncio
async def test_search_empty_term_returns_everything_in_order(repo):
    for title in ["A", "B", "C"]:
        await repo.create(TaskDraft(title=title))

    assert [t.title for t in await repo.search("")] == ["C", "B", "A"]
    assert [t.title for t in await repo.search("   ")] == ["C", "B", "A"]


@pytest.mark.asyncio
async def test_search_matches_title_and_description_case_insensitive(repo):
    await repo.create(TaskDraft(title="Kup MLEKO"))
    await repo.create(TaskDraft(title="Zadzwoń", description="zapytać o mleko"))
    await repo.create(TaskDraft(title="Czytaj książkę"))

    found = await repo.search("  Mleko ")

    assert [t.title for t in found] == ["Zadzwoń", "Kup MLEKO"]


@pytest.mark.asyncio
async def test_stats_for_no_tasks(repo):
    assert await repo.stats() == TaskStats(total=0, completed=0, pending=0, completion_rate=0)


@pytest.mark.asyncio
async def test_stats_rounds_rate_to_two_decimals(repo):
    ids = [await repo.create(TaskDraft(title=t)) for t in ["A", "B", "C"]]
    await repo.update(ids[0], TaskUpdate(completed=True))

    stats = await repo.stats()
    assert stats == TaskStats(total=3, completed=1, pending=2, completion_rate=33.33)

    await repo.update(ids[1], TaskUpdate(completed=True))
    assert (await repo.stats()).completion_rate == 66.67


@pytest.mark.asyncio
@pytest.mark.parametrize("op", ["add", "get", "find", "update", "delete"])
async def test_store_failures_surface_as_store_unavailable(op):
    seed = FailingDocumentStore(id_provider=FakeIdProvider())
    repo = TaskRepository(seed, InMemorySession("alice"), FakeClock())
    task_id = await repo.create(TaskDraft(title="A"))
    seed.fail_on = {op}

    with pytest.raises(StoreUnavailableError):
        if op == "add":
            await repo.create(TaskDraft(title="B"))
        elif op == "get":
            await repo.get_by_id(task_id)
        elif op == "find":
            await repo.list()
        elif op == "update":
            await repo.update(task_id, TaskUpdate(title="B"))
        else:
            await repo.delete(task_id)
