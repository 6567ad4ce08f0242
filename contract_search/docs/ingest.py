"""Document ingestion - persist documents and their chunks."""

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel

from contract_search.config import Settings, get_settings
from contract_search.db.context import RequestContext
from contract_search.db.repositories import DocumentStore, NewChunk, NewDocument
from contract_search.docs.chunker import split_content
from contract_search.errors import StoreError
from contract_search.models.common import RiskLevel
from contract_search.utils.metrics import PrometheusSearchMetrics

logger = logging.getLogger(__name__)

DEFAULT_FILE_TYPE = "application/octet-stream"

_metrics = PrometheusSearchMetrics()


class IngestResult(BaseModel):
    """Outcome of ingesting a single file whose document was created."""

    doc_id: UUID
    filename: str
    contract_name: str
    content_length: int
    chunks_created: int
    chunk_error: str | None = None  # set when the chunk batch failed


class FileIngestOutcome(BaseModel):
    """Per-file outcome of a multi-file upload."""

    filename: str
    status: Literal["success", "partial", "error"]
    result: IngestResult | None = None
    error: str | None = None


@dataclass
class UploadedFile:
    """Raw upload as received from the caller."""

    filename: str
    data: bytes | str
    content_type: str | None = None


def decode_content(data: bytes | str) -> str:
    """Decode uploaded bytes to text, best effort.

    Undecodable content yields an empty string so the upload still
    produces a metadata-only document.
    """
    if isinstance(data, str):
        return data

    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("[ingest] content is not UTF-8 text, storing metadata only")
        return ""


def contract_name_from_filename(filename: str) -> str:
    """Derive a display name by dropping the final file extension."""
    name = re.sub(r"\.[^/.]+$", "", filename)
    return name or filename


async def ingest_file(
    *,
    ctx: RequestContext,
    filename: str,
    data: bytes | str,
    store: DocumentStore,
    content_type: str | None = None,
    risk_score: RiskLevel | None = None,
    contract_name: str | None = None,
    parties: str | None = None,
    expiry_date: datetime | None = None,
    settings: Settings | None = None,
) -> IngestResult:
    """Ingest a file: persist its document, then its chunks.

    The document insert must succeed before chunks are attempted. A failed
    chunk batch leaves the document in place and is reported on the result.

    Args:
        ctx: Request context of the uploading user
        filename: Original filename
        data: Raw file content
        store: Document store
        content_type: MIME type, if known
        risk_score: Externally assigned risk (settings default if None)
        contract_name: Display name (filename without extension if None)
        parties: Optional parties text
        expiry_date: Optional expiry timestamp
        settings: Settings override

    Returns:
        IngestResult for the created document

    Raises:
        StoreError: If the document insert fails
    """
    settings = settings or get_settings()
    content = decode_content(data)
    file_size = len(data.encode("utf-8")) if isinstance(data, str) else len(data)

    record = NewDocument(
        user_id=ctx.user_id,
        filename=filename,
        contract_name=contract_name or contract_name_from_filename(filename),
        risk_score=risk_score or RiskLevel(settings.default_risk_score),
        parties=parties,
        expiry_date=expiry_date,
        file_size=file_size,
        file_type=content_type or DEFAULT_FILE_TYPE,
    )

    # Fatal on failure: nothing else has been written yet
    doc_id = await store.insert_document(record)

    chunks = split_content(
        content, chunk_size=settings.chunk_size, threshold=settings.chunk_threshold
    )
    result = IngestResult(
        doc_id=doc_id,
        filename=filename,
        contract_name=record.contract_name,
        content_length=len(content),
        chunks_created=0,
    )

    if not chunks:
        _metrics.inc_ingest("success")
        return result

    batch = [
        NewChunk(
            doc_id=doc_id,
            user_id=ctx.user_id,
            text_chunk=chunk_text,
            chunk_index=index,
        )
        for index, chunk_text in chunks
    ]

    try:
        await store.insert_chunks(batch)
    except StoreError as e:
        logger.warning(
            f"[ingest] doc_id={doc_id} chunk batch failed, document kept without chunks: {e}"
        )
        _metrics.inc_ingest("partial")
        result.chunk_error = str(e)
        return result

    logger.info(f"[ingest] doc_id={doc_id} filename={filename} chunks={len(batch)}")
    _metrics.inc_ingest("success", chunks=len(batch))
    result.chunks_created = len(batch)
    return result


async def ingest_files(
    *,
    ctx: RequestContext,
    uploads: list[UploadedFile],
    store: DocumentStore,
    risk_score: RiskLevel | None = None,
    settings: Settings | None = None,
) -> list[FileIngestOutcome]:
    """Ingest several files concurrently with independent outcomes.

    Args:
        ctx: Request context of the uploading user
        uploads: Files to ingest
        store: Document store
        risk_score: Risk applied to every file (settings default if None)
        settings: Settings override

    Returns:
        One outcome per upload, in input order
    """

    async def _one(upload: UploadedFile) -> FileIngestOutcome:
        try:
            result = await ingest_file(
                ctx=ctx,
                filename=upload.filename,
                data=upload.data,
                content_type=upload.content_type,
                store=store,
                risk_score=risk_score,
                settings=settings,
            )
        except StoreError as e:
            logger.error(f"[ingest] filename={upload.filename} failed: {e}")
            _metrics.inc_ingest("error")
            return FileIngestOutcome(filename=upload.filename, status="error", error=e.message)

        status: Literal["success", "partial"] = "partial" if result.chunk_error else "success"
        return FileIngestOutcome(filename=upload.filename, status=status, result=result)

    return list(await asyncio.gather(*(_one(upload) for upload in uploads)))
