import asyncio
from datetime import datetime, timedelta, timezone, date
from todo.adapters.memory.document_store import InMemoryDocumentStore
from todo.ports.document_store import DocumentStoreError


class FakeIdProvider:
    def __init__(self):
        self.counter = 0
    def new_id(self) -> str:
        self.counter += 1
        return f"id-{self.counter:03d}"


class FakeClock:
    def __init__(self, fixed: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        # każdy odczyt now() przesuwa zegar o `step`, żeby createdAt były różne
        self.fixed = fixed or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        self.step = step
        self._current = self.fixed
    def now(self) -> datetime:
        value = self._current
        self._current = self._current + self.step
        return value
    def today(self) -> date:
        return self.fixed.date()


class FailingDocumentStore(InMemoryDocumentStore):
    """Magazyn w pamięci, który zgłasza awarię dla wskazanych operacji."""

    def __init__(self, *fail_on: str, **kwargs):
        super().__init__(**kwargs)
        self.fail_on = set(fail_on)
        self.calls: list[str] = []

    def _maybe_fail(self, op: str) -> None:
        self.calls.append(op)
        if op in self.fail_on:
            raise DocumentStoreError(f"{op} failed")

    async def add(self, collection, data):
        self._maybe_fail("add")
        return await super().add(collection, data)

    async def get(self, collection, doc_id):
        self._maybe_fail("get")
        return await super().get(collection, doc_id)

    async def update(self, collection, doc_id, fields):
        self._maybe_fail("update")
        return await super().update(collection, doc_id, fields)

    async def delete(self, collection, doc_id):
        self._maybe_fail("delete")
        return await super().delete(collection, doc_id)

    async def find(self, collection, **kwargs):
        self._maybe_fail("find")
        return await super().find(collection, **kwargs)


class RecordingFeedbackDevice:
    def __init__(self, fail_vibrate: bool = False, fail_flash: bool = False):
        self.fail_vibrate = fail_vibrate
        self.fail_flash = fail_flash
        self.calls: list[tuple] = []
        self.flash_lit = False

    async def vibrate(self, duration_ms: int) -> None:
        self.calls.append(("vibrate", duration_ms))
        if self.fail_vibrate:
            raise RuntimeError("haptics unavailable")

    async def flash_on(self) -> None:
        self.calls.append(("flash_on",))
        if self.fail_flash:
            raise RuntimeError("torch unavailable")
        self.flash_lit = True

    async def flash_off(self) -> None:
        self.calls.append(("flash_off",))
        self.flash_lit = False


class SlowFeedbackDevice(RecordingFeedbackDevice):
    """Oddaje sterowanie pętli zdarzeń w trakcie włączania lampy."""

    async def flash_on(self) -> None:
        await asyncio.sleep(0)
        await super().flash_on()
