"""Request context for per-user scoping."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Request context containing the caller's identity.

    Passed explicitly into every ingestion, library and search call so that
    all store operations are scoped to one user's documents.
    """

    user_id: UUID
