"""Document domain models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from contract_search.models.common import DocumentStatus, ResultType, RiskLevel


class ContractDocument(BaseModel):
    """Uploaded contract document metadata."""

    doc_id: UUID
    user_id: UUID
    filename: str
    contract_name: str
    parties: str | None = None
    uploaded_on: datetime
    expiry_date: datetime | None = None
    status: DocumentStatus = DocumentStatus.active
    risk_score: RiskLevel = RiskLevel.low
    file_size: int | None = None
    file_type: str | None = None


class DocumentChunk(BaseModel):
    """Fixed-size slice of a document's text."""

    chunk_id: UUID
    doc_id: UUID
    user_id: UUID
    text_chunk: str
    chunk_index: int  # 0-based
    page_number: int | None = None
    embedding: list[float] | None = None
    metadata: dict[str, Any] | None = None
    created_at: datetime


class SearchResult(BaseModel):
    """Unified view over a matched document or chunk."""

    doc_id: UUID
    contract_name: str
    content: str
    chunk_index: int | None = None
    filename: str | None = None
    parties: str | None = None
    status: DocumentStatus | None = None
    risk_score: RiskLevel | None = None
    type: ResultType


class HighlightSpan(BaseModel):
    """Contiguous run of text, either matched by the query or plain."""

    text: str
    matched: bool = Field(default=False)
