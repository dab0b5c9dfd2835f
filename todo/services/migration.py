import logging
from dataclasses import dataclass, field
from todo.ports.document_store import DocumentStore, DocumentStoreError
from todo.domain.mapper import TaskMapper, OWNER
from todo.domain.errors import StoreUnavailableError
from todo.services.task_repository import DEFAULT_COLLECTION

logger = logging.getLogger(__name__)

LEGACY_COLLECTION = "tasks"


@dataclass
class MigrationReport:
    migrated: int = 0
    skipped: list[str] = field(default_factory=list)


async def migrate_legacy_tasks(
    store: DocumentStore,
    source: str = LEGACY_COLLECTION,
    target: str = DEFAULT_COLLECTION,
) -> MigrationReport:
    """
    Przenosi zadania ze starego schematu (title/description/dueDate) do bieżącego.

    - Identyfikator dokumentu zostaje zachowany.
    - Dokument bez `userId` jest pomijany (nie da się ustalić właściciela).
    - Źródło jest usuwane dopiero po zapisie w kolekcji docelowej.

    :raises StoreUnavailableError: Gdy magazyn zawiedzie; już przeniesione dokumenty zostają.
    """
    report = MigrationReport()
    try:
        docs = await store.find(source)
        for doc in docs:
            if not doc.data.get(OWNER):
                logger.warning("Pomijam dokument %s/%s bez userId", source, doc.doc_id)
                report.skipped.append(doc.doc_id)
                continue
            await store.put(target, doc.doc_id, TaskMapper.legacy_to_storage(doc.data))
            await store.delete(source, doc.doc_id)
            report.migrated += 1
    except DocumentStoreError:
        logger.exception("Migracja %s -> %s przerwana po %d dokumentach", source, target, report.migrated)
        raise StoreUnavailableError("przenieść zadań")

    logger.info("Migracja %s -> %s: przeniesiono %d, pominięto %d",
                source, target, report.migrated, len(report.skipped))
    return report
