"""Models package - re-exports for convenience."""

from contract_search.models.common import DocumentStatus, ResultType, RiskLevel
from contract_search.models.docs import (
    ContractDocument,
    DocumentChunk,
    HighlightSpan,
    SearchResult,
)

__all__ = [
    # Common
    "DocumentStatus",
    "RiskLevel",
    "ResultType",
    # Documents
    "ContractDocument",
    "DocumentChunk",
    "SearchResult",
    "HighlightSpan",
]
