from __future__ import annotations
import logging
import math
from dataclasses import replace
from todo.ports.document_store import DocumentStore, DocumentStoreError, DocumentNotFoundError
from todo.ports.session import SessionProvider
from todo.ports.clock import Clock
from todo.domain.task import Task, TaskDraft, TaskUpdate, TaskId, TaskStats, UserId
from todo.domain.mapper import TaskMapper, OWNER, CREATED_AT
from todo.domain.validation import TaskValidator
from todo.domain.errors import (
    UnauthenticatedError,
    TaskValidationError,
    TaskNotFoundError,
    TaskAccessDeniedError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "Tareas"


### COMMENTS
# ==========================================================
# Repozytorium zadań (services/task_repository.py): CRUD na magazynie dokumentów.
# ==========================================================
# Rola:
# - Jedyny zapisujący `userId` i `createdAt`; UI nigdy ich nie podaje.
# - Każda operacja wymaga sesji (UnauthenticatedError).
# - Walidacja przed jakimkolwiek wywołaniem magazynu (create: fail-fast).
# - update/delete: najpierw jeden odczyt (istnienie + właściciel), potem zapis.
# - Kontrola właściciela jest tutaj, magazyn jej nie wykonuje.
#
# Zasady:
# - Błędy magazynu nie są ponawiane; logujemy je i zgłaszamy StoreUnavailableError.
# - Brak kontroli wersji: równoległe zapisy tego samego zadania, wygrywa ostatni (per pole).


class TaskRepository:
    """
    Operacje CRUD na zadaniach bieżącego użytkownika.

    :param store: Implementacja portu DocumentStore.
    :param session: Źródło tożsamości zalogowanego użytkownika.
    :param clock: Źródło czasu (createdAt, "dzisiaj" dla walidacji terminu).
    :param collection: Nazwa kolekcji z zadaniami.
    """
    def __init__(
        self,
        store: DocumentStore,
        session: SessionProvider,
        clock: Clock,
        collection: str = DEFAULT_COLLECTION,
    ) -> None:
        self.store = store
        self.session = session
        self.clock = clock
        self.collection = collection

    def _require_user(self) -> UserId:
        user = self.session.current_user()
        if not user:
            raise UnauthenticatedError()
        return user

    async def create(self, draft: TaskDraft) -> TaskId:
        """
            Tworzy nowe zadanie i zapisuje je w magazynie.

            - Walidacja całego szkicu (`TaskValidationError` z listą błędów).
            - `userId` z bieżącej sesji, `createdAt` z zegara.
            - Dokładnie jeden zapis w magazynie.

            :param draft: Dane nowego zadania.
            :return: Identyfikator nadany przez magazyn.
            :raises UnauthenticatedError: Gdy brak sesji.
            :raises TaskValidationError: Gdy dane są niepoprawne.
            :raises StoreUnavailableError: Gdy zapis się nie powiódł.
        """
        owner = self._require_user()
        result = TaskValidator.validate(draft, self.clock.today())
        if not result.is_valid:
            raise TaskValidationError(result.errors)

        record = TaskMapper.to_storage(draft, owner, self.clock.now())
        try:
            doc_id = await self.store.add(self.collection, record)
        except DocumentStoreError:
            logger.exception("Zapis nowego zadania nie powiódł się (user=%s)", owner)
            raise StoreUnavailableError("utworzyć zadania")

        logger.info("Utworzono zadanie %s (user=%s)", doc_id, owner)
        return TaskId(doc_id)

    async def get_by_id(self, task_id: TaskId) -> Task | None:
        """
            Zwraca zadanie o podanym identyfikatorze.

            - Brak rekordu to `None`, nie błąd.
            - Rekord innego użytkownika to `TaskAccessDeniedError`.
        """
        owner = self._require_user()
        try:
            doc = await self.store.get(self.collection, task_id)
        except DocumentStoreError:
            logger.exception("Odczyt zadania %s nie powiódł się", task_id)
            raise StoreUnavailableError("pobrać zadania")

        if doc is None:
            return None
        if doc.data.get(OWNER) != owner:
            logger.warning("Odmowa dostępu do zadania %s dla użytkownika %s", task_id, owner)
            raise TaskAccessDeniedError(task_id)
        return TaskMapper.from_storage(doc.doc_id, doc.data)

    async def _get_existing(self, task_id: TaskId) -> Task:
        task = await self.get_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def update(self, task_id: TaskId, update: TaskUpdate) -> Task:
        """
            Częściowa aktualizacja zadania.

            - Najpierw istnienie i właściciel (jak w `get_by_id`, brak -> TaskNotFoundError).
            - Walidowane są tylko pola obecne w `update`.
            - Zapis dotyka wyłącznie podanych pól; pusta aktualizacja nic nie zapisuje.

            :return: Zadanie po zmianie.
        """
        existing = await self._get_existing(task_id)

        result = TaskValidator.validate(update, self.clock.today())
        if not result.is_valid:
            raise TaskValidationError(result.errors)

        if update.is_empty():
            return existing

        fields = TaskMapper.update_to_storage(update)
        try:
            await self.store.update(self.collection, task_id, fields)
        except DocumentNotFoundError:
            # usunięte między odczytem a zapisem
            raise TaskNotFoundError(task_id)
        except DocumentStoreError:
            logger.exception("Aktualizacja zadania %s nie powiodła się", task_id)
            raise StoreUnavailableError("zaktualizować zadania")

        logger.info("Zaktualizowano zadanie %s: %s", task_id, sorted(fields))
        return replace(existing, **update.provided())

    async def delete(self, task_id: TaskId) -> None:
        """
            Usuwa (hard delete) zadanie.

            Nie jest idempotentne: brak rekordu albo cudzy rekord to błąd,
            żeby ujawnić pomyłki wywołującego.
        """
        await self._get_existing(task_id)
        try:
            await self.store.delete(self.collection, task_id)
        except DocumentStoreError:
            logger.exception("Usunięcie zadania %s nie powiodło się", task_id)
            raise StoreUnavailableError("usunąć zadania")
        logger.info("Usunięto zadanie %s", task_id)

    async def list(self) -> list[Task]:
        """Wszystkie zadania bieżącego użytkownika, od najnowszego (createdAt DESC)."""
        owner = self._require_user()
        try:
            docs = await self.store.find(
                self.collection,
                where=(OWNER, owner),
                order_by=CREATED_AT,
                descending=True,
            )
        except DocumentStoreError:
            logger.exception("Pobranie listy zadań nie powiodło się (user=%s)", owner)
            raise StoreUnavailableError("pobrać listy zadań")
        return [TaskMapper.from_storage(d.doc_id, d.data) for d in docs]

    async def search(self, term: str | None) -> list[Task]:
        """
            Wyszukiwanie po tytule i opisie (bez rozróżniania wielkości liter).

            Filtr działa po stronie klienta na wyniku `list()`; pusty termin
            zwraca pełną listę.
        """
        tasks = await self.list()
        if not term or not term.strip():
            return tasks

        needle = term.strip().lower()
        return [
            t for t in tasks
            if needle in t.title.lower()
            or (t.description is not None and needle in t.description.lower())
        ]

    async def stats(self) -> TaskStats:
        """Liczniki: wszystkie, ukończone, oczekujące, procent ukończenia (2 miejsca po przecinku)."""
        tasks = await self.list()
        total = len(tasks)
        completed = sum(1 for t in tasks if t.completed)
        rate = completed / total * 100 if total > 0 else 0
        return TaskStats(
            total=total,
            completed=completed,
            pending=total - completed,
            completion_rate=math.floor(rate * 100 + 0.5) / 100,
        )
