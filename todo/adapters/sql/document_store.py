from __future__ import annotations
import asyncio
from pathlib import Path
from typing import Optional
import sqlalchemy as db
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from todo.ports.document_store import Document, DocumentStoreError, DocumentNotFoundError, StoredDocument
from todo.ports.id_provider import IdProvider
from todo.adapters.system.id_provider_auto import AutoIdProvider


def sqlite_url(path: Path) -> str:
    # absolutna ścieżka -> sqlite+aiosqlite:////abs/path.db
    return f"sqlite+aiosqlite:///{path}"


class SqlDocumentStore:
    """
    Magazyn dokumentów na SQLAlchemy (async). Jedna tabela `documents`:
    klucz (collection, doc_id) + treść dokumentu w kolumnie JSON.
    """

    def __init__(self, url: str | Path, id_provider: IdProvider | None = None, echo: bool = False) -> None:
        """
        url: np. 'sqlite+aiosqlite:///data/todo.db' lub Path do pliku (zostanie zrobiony URL)
        """
        if isinstance(url, Path):
            url.parent.mkdir(parents=True, exist_ok=True)
            db_url = sqlite_url(url)
        else:
            db_url = url

        self.engine: AsyncEngine = create_async_engine(db_url, echo=echo)
        self.meta = db.MetaData()
        self._ids = id_provider or AutoIdProvider()
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

        self.documents = db.Table(
            "documents",
            self.meta,
            db.Column("collection", db.String, primary_key=True),
            db.Column("doc_id", db.String, primary_key=True),
            db.Column("data", db.JSON, nullable=False),
        )

    async def _ensure_schema(self) -> None:
        # utwórz tabelę jeśli nie istnieje
        if self._schema_ready:
            return
        async with self._schema_lock:
            if self._schema_ready:
                return
            try:
                async with self.engine.begin() as conn:
                    await conn.run_sync(self.meta.create_all)
            except (SQLAlchemyError, OSError) as e:
                raise DocumentStoreError(str(e)) from e
            self._schema_ready = True

    def _key(self, collection: str, doc_id: str):
        return db.and_(
            self.documents.c.collection == collection,
            self.documents.c.doc_id == doc_id,
        )

    async def add(self, collection: str, data: Document) -> str:
        await self._ensure_schema()
        doc_id = self._ids.new_id()
        stmt = db.insert(self.documents).values(collection=collection, doc_id=doc_id, data=dict(data))
        try:
            async with self.engine.begin() as conn:
                await conn.execute(stmt)
        except IntegrityError as e:
            # konflikt PK
            raise DocumentStoreError(f"{collection}/{doc_id} already exists") from e
        except (SQLAlchemyError, OSError) as e:
            raise DocumentStoreError(str(e)) from e
        return doc_id

    async def put(self, collection: str, doc_id: str, data: Document) -> None:
        await self._ensure_schema()
        try:
            async with self.engine.begin() as conn:
                await conn.execute(db.delete(self.documents).where(self._key(collection, doc_id)))
                await conn.execute(
                    db.insert(self.documents).values(collection=collection, doc_id=doc_id, data=dict(data))
                )
        except (SQLAlchemyError, OSError) as e:
            raise DocumentStoreError(str(e)) from e

    async def get(self, collection: str, doc_id: str) -> Optional[StoredDocument]:
        await self._ensure_schema()
        stmt = db.select(self.documents.c.data).where(self._key(collection, doc_id))
        try:
            async with self.engine.connect() as conn:
                row = (await conn.execute(stmt)).first()
        except (SQLAlchemyError, OSError) as e:
            raise DocumentStoreError(str(e)) from e
        if row is None:
            return None
        return StoredDocument(doc_id, dict(row.data))

    async def update(self, collection: str, doc_id: str, fields: Document) -> None:
        await self._ensure_schema()
        select_stmt = db.select(self.documents.c.data).where(self._key(collection, doc_id))
        try:
            async with self.engine.begin() as conn:
                row = (await conn.execute(select_stmt)).first()
                if row is None:
                    raise DocumentNotFoundError(collection, doc_id)
                merged = {**row.data, **fields}
                await conn.execute(
                    db.update(self.documents).where(self._key(collection, doc_id)).values(data=merged)
                )
        except (SQLAlchemyError, OSError) as e:
            raise DocumentStoreError(str(e)) from e

    async def delete(self, collection: str, doc_id: str) -> None:
        await self._ensure_schema()
        stmt = db.delete(self.documents).where(self._key(collection, doc_id))
        try:
            async with self.engine.begin() as conn:
                await conn.execute(stmt)
        except (SQLAlchemyError, OSError) as e:
            raise DocumentStoreError(str(e)) from e

    async def find(
        self,
        collection: str,
        *,
        where: Optional[tuple[str, str]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[StoredDocument]:
        await self._ensure_schema()
        stmt = db.select(self.documents.c.doc_id, self.documents.c.data).where(
            self.documents.c.collection == collection
        )
        if where is not None:
            field, value = where
            stmt = stmt.where(self.documents.c.data[field].as_string() == value)

        # sortowanie stabilne: pole + tie-breaker po doc_id ASC
        ordering = []
        if order_by is not None:
            column = self.documents.c.data[order_by].as_string()
            ordering.append(column.desc() if descending else column.asc())
        ordering.append(self.documents.c.doc_id.asc())
        stmt = stmt.order_by(*ordering)

        try:
            async with self.engine.connect() as conn:
                rows = (await conn.execute(stmt)).all()
        except (SQLAlchemyError, OSError) as e:
            raise DocumentStoreError(str(e)) from e
        return [StoredDocument(r.doc_id, dict(r.data)) for r in rows]

    async def close(self) -> None:
        await self.engine.dispose()
