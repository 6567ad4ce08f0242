"""In-memory implementation of the document store."""

import uuid
from collections import Counter
from datetime import datetime

from contract_search.db.repositories import ChunkFilter, DocumentFilter, NewChunk, NewDocument
from contract_search.errors import StoreError
from contract_search.models.docs import ContractDocument, DocumentChunk


def _contains(value: str | None, term: str) -> bool:
    return value is not None and term.lower() in value.lower()


class InMemoryDocumentStore:
    """In-memory implementation of DocumentStore.

    Records how often each operation is called and can be told to fail
    specific operations, which makes it usable as a test double.
    """

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self._documents: dict[uuid.UUID, ContractDocument] = {}
        self._chunks: list[DocumentChunk] = []
        self._sequence: dict[uuid.UUID, int] = {}
        self.fail_on: set[str] = set(fail_on or ())
        self.calls: Counter[str] = Counter()

    def _record(self, operation: str) -> None:
        self.calls[operation] += 1
        if operation in self.fail_on:
            raise StoreError(operation, "injected failure")

    async def insert_document(self, record: NewDocument) -> uuid.UUID:
        """Insert a document."""
        self._record("insert_document")

        doc_id = uuid.uuid4()
        self._sequence[doc_id] = len(self._sequence)
        self._documents[doc_id] = ContractDocument(
            doc_id=doc_id,
            user_id=record.user_id,
            filename=record.filename,
            contract_name=record.contract_name,
            parties=record.parties,
            uploaded_on=datetime.now(),
            expiry_date=record.expiry_date,
            status=record.status,
            risk_score=record.risk_score,
            file_size=record.file_size,
            file_type=record.file_type,
        )
        return doc_id

    async def insert_chunks(self, batch: list[NewChunk]) -> None:
        """Insert a batch of chunks."""
        self._record("insert_chunks")

        created_at = datetime.now()
        self._chunks.extend(
            DocumentChunk(
                chunk_id=uuid.uuid4(),
                doc_id=chunk.doc_id,
                user_id=chunk.user_id,
                text_chunk=chunk.text_chunk,
                chunk_index=chunk.chunk_index,
                page_number=chunk.page_number,
                embedding=chunk.embedding,
                metadata=chunk.metadata,
                created_at=created_at,
            )
            for chunk in batch
        )

    async def select_documents(
        self, criteria: DocumentFilter, limit: int | None = None
    ) -> list[ContractDocument]:
        """Select documents matching criteria, newest first."""
        self._record("select_documents")

        results: list[ContractDocument] = []
        for doc in self._documents.values():
            if criteria.user_id is not None and doc.user_id != criteria.user_id:
                continue
            if criteria.name_contains is not None and not _contains(
                doc.contract_name, criteria.name_contains
            ):
                continue
            if criteria.id_in is not None and doc.doc_id not in criteria.id_in:
                continue
            if criteria.status is not None and doc.status != criteria.status:
                continue

            alternatives: list[bool] = []
            if criteria.parties_contains is not None:
                alternatives.append(_contains(doc.parties, criteria.parties_contains))
            if criteria.filename_contains is not None:
                alternatives.append(_contains(doc.filename, criteria.filename_contains))
            if alternatives and not any(alternatives):
                continue

            results.append(doc)

        # Insertion sequence breaks timestamp ties
        results.sort(key=lambda d: (d.uploaded_on, self._sequence[d.doc_id]), reverse=True)
        return results if limit is None else results[:limit]

    async def select_chunks(
        self, criteria: ChunkFilter, limit: int | None = None
    ) -> list[DocumentChunk]:
        """Select chunks matching criteria in insertion order."""
        self._record("select_chunks")

        results = [
            chunk
            for chunk in self._chunks
            if chunk.user_id == criteria.user_id
            and (criteria.text_contains is None or _contains(chunk.text_chunk, criteria.text_contains))
        ]
        return results if limit is None else results[:limit]

    async def delete_document(self, doc_id: uuid.UUID) -> None:
        """Delete a document and its chunks."""
        self._record("delete_document")

        self._documents.pop(doc_id, None)
        self._chunks = [chunk for chunk in self._chunks if chunk.doc_id != doc_id]

    def remove_document_only(self, doc_id: uuid.UUID) -> None:
        """Drop a document but keep its chunks, leaving them orphaned."""
        self._documents.pop(doc_id, None)
