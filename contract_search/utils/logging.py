"""Structured logging for search stages and ingestion."""

import logging
from typing import Any
from uuid import UUID

from contract_search.errors import IntegrityWarning

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the service."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


class StructuredSearchLogger:
    """Structured logger for search stage execution."""

    def log_stage(
        self,
        user_id: UUID,
        stage: str,
        outcome: str,
        latency_ms: float,
        result_count: int = 0,
        error_reason: str | None = None,
    ) -> None:
        """Log a search stage outcome with structured data."""
        log_data: dict[str, Any] = {
            "user_id": str(user_id),
            "stage": stage,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
            "result_count": result_count,
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Search stage: {stage} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_orphan_chunks(self, user_id: UUID, doc_ids: list[UUID]) -> None:
        """Log chunks whose parent documents could not be resolved."""
        log_data: dict[str, Any] = {
            "user_id": str(user_id),
            "stage": "chunk_content",
            "category": IntegrityWarning.__name__,
            "missing_doc_ids": [str(doc_id) for doc_id in doc_ids],
        }
        logger.warning(
            f"Integrity warning: {len(doc_ids)} chunk parent document(s) not resolvable",
            extra={"structured": log_data},
        )
