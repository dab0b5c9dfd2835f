from dataclasses import dataclass
from typing import Any, Protocol, Optional


### COMMENTS
# ==========================================================
# Kontrakt magazynu dokumentów (ports/document_store.py).
# ==========================================================
# Ten moduł definiuje interfejs (Protocol) dla zdalnej bazy dokumentów.
# - Jest niezależny od technologii (pamięć, SQL, usługa w chmurze).
# - Dokument to słownik bez schematu, identyfikowany parą (kolekcja, doc_id).
# - Adaptery NIE znają pojęć domenowych (Task, właściciel, walidacja).
# - Błędy techniczne adaptery zgłaszają jako DocumentStoreError;
#   mapowaniem na błędy domenowe zajmuje się repozytorium zadań.
# - Wszystkie operacje są asynchroniczne (zdalne wywołanie request/response).

Document = dict[str, Any]


class DocumentStoreError(Exception):
    """Awaria techniczna magazynu (połączenie, dysk, uszkodzone dane)."""


class DocumentNotFoundError(DocumentStoreError):
    """Aktualizacja dokumentu, który nie istnieje."""
    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} not found")


@dataclass(frozen=True)
class StoredDocument:
    doc_id: str
    data: Document


class DocumentStore(Protocol):
    """Interfejs magazynu dokumentów pogrupowanych w nazwane kolekcje.

    Adaptery (implementacje) muszą:
    - nadawać identyfikator przy `add` (dokładnie raz),
    - przy `update` scalać tylko podane pola, reszta dokumentu zostaje bez zmian,
    - przy `find` sortować stabilnie (tiebreaker po `doc_id` rosnąco),
    - zgłaszać błędy techniczne jako `DocumentStoreError`.
    """

    async def add(self, collection: str, data: Document) -> str:
        """Zapisuje nowy dokument i zwraca nadany identyfikator."""

    async def put(self, collection: str, doc_id: str, data: Document) -> None:
        """Zapisuje dokument pod wskazanym identyfikatorem (nadpisuje istniejący)."""

    async def get(self, collection: str, doc_id: str) -> Optional[StoredDocument]:
        """Zwraca dokument albo `None`, jeśli nie istnieje (to nie jest błąd)."""

    async def update(self, collection: str, doc_id: str, fields: Document) -> None:
        """Częściowy zapis: nadpisuje tylko klucze z `fields`.

        Wyjątki:
            DocumentNotFoundError: Gdy dokument nie istnieje.
        """

    async def delete(self, collection: str, doc_id: str) -> None:
        """Twarde usunięcie. Brak dokumentu nie jest błędem na tym poziomie."""

    async def find(
        self,
        collection: str,
        *,
        where: Optional[tuple[str, str]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[StoredDocument]:
        """Zwraca dokumenty kolekcji, opcjonalnie filtrowane równością `where=(pole, wartość)`.

        Sortowanie:
            - po `order_by` (rosnąco albo malejąco gdy `descending`),
            - tiebreaker po `doc_id` rosnąco.
        """

    async def close(self) -> None:
        """Zwalnia połączenia (no-op dla adapterów bez zasobów)."""
