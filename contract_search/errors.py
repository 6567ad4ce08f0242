"""Error taxonomy for ingestion and search."""

from uuid import UUID


class ContractSearchError(Exception):
    """Base exception for contract ingestion and search errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(ContractSearchError):
    """Raised when input to chunking or search is malformed."""


class StoreError(ContractSearchError):
    """Raised when the persistence collaborator fails."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"Store operation '{operation}' failed: {message}")


class SearchUnavailableError(ContractSearchError):
    """Raised when a search cannot be attempted at all."""

    def __init__(self, message: str = "No authenticated user context"):
        super().__init__(message)


class DocumentNotFoundError(ContractSearchError):
    """Raised when a document does not exist or is not owned by the caller."""

    def __init__(self, doc_id: UUID):
        self.doc_id = doc_id
        super().__init__(f"Document '{doc_id}' not found")


class IntegrityWarning(UserWarning):
    """Category for chunks whose parent document cannot be resolved.

    Reported through logs and metrics only; never raised to callers.
    """
