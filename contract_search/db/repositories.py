"""Repository protocol interfaces for data access."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from contract_search.models.common import DocumentStatus, RiskLevel
from contract_search.models.docs import ContractDocument, DocumentChunk


@dataclass
class NewDocument:
    """Document record to insert; the store assigns doc_id."""

    user_id: UUID
    filename: str
    contract_name: str
    risk_score: RiskLevel
    status: DocumentStatus = DocumentStatus.active
    parties: str | None = None
    expiry_date: datetime | None = None
    file_size: int | None = None
    file_type: str | None = None


@dataclass
class NewChunk:
    """Chunk record to insert as part of a batch."""

    doc_id: UUID
    user_id: UUID
    text_chunk: str
    chunk_index: int
    page_number: int | None = None
    embedding: list[float] | None = None
    metadata: dict[str, Any] | None = None


@dataclass
class DocumentFilter:
    """Filter for document selects.

    All criteria are AND-ed except parties_contains and filename_contains,
    which are OR-ed with each other when both are given. Substring
    criteria are case-insensitive.
    """

    user_id: UUID | None = None
    name_contains: str | None = None
    parties_contains: str | None = None
    filename_contains: str | None = None
    id_in: list[UUID] | None = None
    status: DocumentStatus | None = None


@dataclass
class ChunkFilter:
    """Filter for chunk selects (case-insensitive substring on text)."""

    user_id: UUID
    text_contains: str | None = None


class DocumentStore(Protocol):
    """Persistence collaborator for documents and chunks.

    Every method is an await point. Implementations raise StoreError on
    any failure.
    """

    async def insert_document(self, record: NewDocument) -> UUID:
        """Insert a document.

        Args:
            record: Document to insert

        Returns:
            Store-assigned document ID
        """
        ...

    async def insert_chunks(self, batch: list[NewChunk]) -> None:
        """Insert all chunks of one document in a single write.

        Args:
            batch: Chunks to insert
        """
        ...

    async def select_documents(
        self, criteria: DocumentFilter, limit: int | None = None
    ) -> list[ContractDocument]:
        """Select documents matching criteria.

        Args:
            criteria: Filter criteria
            limit: Maximum number of rows, None for no cap

        Returns:
            Matching documents, newest first
        """
        ...

    async def select_chunks(
        self, criteria: ChunkFilter, limit: int | None = None
    ) -> list[DocumentChunk]:
        """Select chunks matching criteria.

        Args:
            criteria: Filter criteria
            limit: Maximum number of rows, None for no cap

        Returns:
            Matching chunks in insertion order
        """
        ...

    async def delete_document(self, doc_id: UUID) -> None:
        """Delete a document together with its chunks.

        Args:
            doc_id: Document ID
        """
        ...
