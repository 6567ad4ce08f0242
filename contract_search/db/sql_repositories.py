"""SQL implementation of the document store."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from contract_search.db.models import Chunk, Document
from contract_search.db.queries import query_chunks, query_documents
from contract_search.db.repositories import ChunkFilter, DocumentFilter, NewChunk, NewDocument
from contract_search.errors import StoreError
from contract_search.models.docs import ContractDocument, DocumentChunk


def _to_document(row: Document) -> ContractDocument:
    return ContractDocument(
        doc_id=row.doc_id,
        user_id=row.user_id,
        filename=row.filename,
        contract_name=row.contract_name,
        parties=row.parties,
        uploaded_on=row.uploaded_on,
        expiry_date=row.expiry_date,
        status=row.status,
        risk_score=row.risk_score,
        file_size=row.file_size,
        file_type=row.file_type,
    )


def _to_chunk(row: Chunk) -> DocumentChunk:
    return DocumentChunk(
        chunk_id=row.chunk_id,
        doc_id=row.doc_id,
        user_id=row.user_id,
        text_chunk=row.text_chunk,
        chunk_index=row.chunk_index,
        page_number=row.page_number,
        embedding=row.embedding,
        metadata=row.metadata_,
        created_at=row.created_at,
    )


class SqlDocumentStore:
    """SQL implementation of DocumentStore.

    Each operation runs in its own session so that independent operations
    (e.g. two search stages) may be awaited concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert_document(self, record: NewDocument) -> uuid.UUID:
        """Insert a document."""
        doc_id = uuid.uuid4()
        doc = Document(
            doc_id=doc_id,
            user_id=record.user_id,
            filename=record.filename,
            contract_name=record.contract_name,
            parties=record.parties,
            uploaded_on=datetime.now(timezone.utc),
            expiry_date=record.expiry_date,
            status=record.status.value,
            risk_score=record.risk_score.value,
            file_size=record.file_size,
            file_type=record.file_type,
        )

        async with self._session_factory() as session:
            try:
                session.add(doc)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise StoreError("insert_document", str(e)) from e

        return doc_id

    async def insert_chunks(self, batch: list[NewChunk]) -> None:
        """Insert chunks with a single executemany statement."""
        if not batch:
            return

        created_at = datetime.now(timezone.utc)
        rows = [
            {
                "chunk_id": uuid.uuid4(),
                "doc_id": chunk.doc_id,
                "user_id": chunk.user_id,
                "text_chunk": chunk.text_chunk,
                "chunk_index": chunk.chunk_index,
                "page_number": chunk.page_number,
                "embedding": chunk.embedding,
                "metadata_": chunk.metadata,
                "created_at": created_at,
            }
            for chunk in batch
        ]

        async with self._session_factory() as session:
            try:
                await session.execute(insert(Chunk), rows)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise StoreError("insert_chunks", str(e)) from e

    async def select_documents(
        self, criteria: DocumentFilter, limit: int | None = None
    ) -> list[ContractDocument]:
        """Select documents matching criteria."""
        stmt = query_documents(criteria)
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                rows = list(result.scalars().all())
            except SQLAlchemyError as e:
                raise StoreError("select_documents", str(e)) from e

        return [_to_document(row) for row in rows]

    async def select_chunks(
        self, criteria: ChunkFilter, limit: int | None = None
    ) -> list[DocumentChunk]:
        """Select chunks matching criteria."""
        stmt = query_chunks(criteria)
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                rows = list(result.scalars().all())
            except SQLAlchemyError as e:
                raise StoreError("select_chunks", str(e)) from e

        return [_to_chunk(row) for row in rows]

    async def delete_document(self, doc_id: uuid.UUID) -> None:
        """Delete a document and its chunks in one transaction.

        Chunks are deleted explicitly; the foreign key cascade is not
        enforced on every backend (sqlite without PRAGMA foreign_keys).
        """
        async with self._session_factory() as session:
            try:
                await session.execute(delete(Chunk).where(Chunk.doc_id == doc_id))
                await session.execute(delete(Document).where(Document.doc_id == doc_id))
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise StoreError("delete_document", str(e)) from e
