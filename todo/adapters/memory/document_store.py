from copy import deepcopy
from typing import Iterable, Optional
from todo.ports.document_store import Document, DocumentStoreError, DocumentNotFoundError, StoredDocument
from todo.ports.id_provider import IdProvider
from todo.adapters.system.id_provider_auto import AutoIdProvider

### COMMENTS
# ==========================================================
# Adapter pamięciowy magazynu dokumentów (adapters/memory/document_store.py).
# ==========================================================
# - Służy do testów i trybu demo (bez trwałego zapisu).
# - Dane: `_collections: dict[kolekcja, dict[doc_id, Document]]`.
# - Dokumenty są kopiowane przy zapisie i odczycie, żeby wywołujący
#   nie mógł zmienić stanu magazynu przez referencję.
# - Zasady zgodne z kontraktem portu:
#     * `add`    -> nadaje id; kolizja id to DocumentStoreError,
#     * `update` -> scala pola albo zgłasza DocumentNotFoundError,
#     * `delete` -> brak dokumentu to no-op,
#     * `find`   -> filtr równości + sort + tiebreaker po doc_id.


class InMemoryDocumentStore:
    """
        Inicjalizuje magazyn z opcjonalnym zestawem startowych dokumentów.
        :param id_provider: Generator identyfikatorów (domyślnie AutoIdProvider).
        :param initial: Iterable trójek (kolekcja, doc_id, dokument) do wstępnego załadowania.
    """
    def __init__(
        self,
        id_provider: IdProvider | None = None,
        initial: Iterable[tuple[str, str, Document]] | None = None,
    ) -> None:
        self._ids = id_provider or AutoIdProvider()
        self._collections: dict[str, dict[str, Document]] = {}
        for collection, doc_id, data in (initial or []):
            self._collection(collection)[doc_id] = deepcopy(data)

    def _collection(self, name: str) -> dict[str, Document]:
        return self._collections.setdefault(name, {})

    async def add(self, collection: str, data: Document) -> str:
        docs = self._collection(collection)
        doc_id = self._ids.new_id()
        if doc_id in docs:
            raise DocumentStoreError(f"{collection}/{doc_id} already exists")
        docs[doc_id] = deepcopy(data)
        return doc_id

    async def put(self, collection: str, doc_id: str, data: Document) -> None:
        self._collection(collection)[doc_id] = deepcopy(data)

    async def get(self, collection: str, doc_id: str) -> Optional[StoredDocument]:
        docs = self._collection(collection)
        if doc_id in docs:
            return StoredDocument(doc_id, deepcopy(docs[doc_id]))
        return None

    async def update(self, collection: str, doc_id: str, fields: Document) -> None:
        docs = self._collection(collection)
        if doc_id not in docs:
            raise DocumentNotFoundError(collection, doc_id)
        docs[doc_id].update(deepcopy(fields))

    async def delete(self, collection: str, doc_id: str) -> None:
        self._collection(collection).pop(doc_id, None)

    async def find(
        self,
        collection: str,
        *,
        where: Optional[tuple[str, str]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[StoredDocument]:
        docs = [
            StoredDocument(doc_id, deepcopy(data))
            for doc_id, data in self._collection(collection).items()
        ]
        if where is not None:
            field, value = where
            docs = [d for d in docs if d.data.get(field) == value]

        # tiebreaker po doc_id, potem stabilny sort po polu
        docs.sort(key=lambda d: d.doc_id)
        if order_by is not None:
            docs.sort(key=lambda d: str(d.data.get(order_by) or ""), reverse=descending)
        return docs

    async def close(self) -> None:
        return None

    def count(self, collection: str) -> int:
        """Liczba dokumentów w kolekcji (pomocnicze dla testów i demo)."""
        return len(self._collection(collection))
