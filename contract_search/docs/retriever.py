"""Document retriever - staged metadata and chunk search."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from contract_search.config import Settings, get_settings
from contract_search.db.context import RequestContext
from contract_search.db.repositories import ChunkFilter, DocumentFilter, DocumentStore
from contract_search.errors import SearchUnavailableError, StoreError
from contract_search.models.common import ResultType
from contract_search.models.docs import ContractDocument, SearchResult
from contract_search.utils.logging import StructuredSearchLogger
from contract_search.utils.metrics import PrometheusSearchMetrics

logger = logging.getLogger(__name__)

STAGE_DOCUMENT = "document_metadata"
STAGE_CHUNK = "chunk_content"
STAGE_FALLBACK = "fallback"

_stage_logger = StructuredSearchLogger()
_metrics = PrometheusSearchMetrics()


def document_summary(doc: ContractDocument) -> str:
    """Summary content for a name-matched document."""
    summary = f"Contract: {doc.contract_name}"
    if doc.parties:
        summary += f" | Parties: {doc.parties}"
    return summary


def fallback_summary(doc: ContractDocument) -> str:
    """Summary content naming the field a broadened match came from."""
    if doc.parties:
        return f"Found in parties: {doc.parties}"
    return f"Found in filename: {doc.filename}"


def _document_result(doc: ContractDocument, content: str) -> SearchResult:
    return SearchResult(
        doc_id=doc.doc_id,
        contract_name=doc.contract_name,
        content=content,
        filename=doc.filename,
        parties=doc.parties,
        status=doc.status,
        risk_score=doc.risk_score,
        type=ResultType.document,
    )


async def _run_stage(
    ctx: RequestContext,
    stage: str,
    run: Callable[[], Awaitable[list[SearchResult]]],
) -> list[SearchResult]:
    """Run one stage, degrading a store failure to an empty contribution."""
    started = time.perf_counter()
    try:
        results = await run()
    except StoreError as e:
        latency_ms = (time.perf_counter() - started) * 1000
        _stage_logger.log_stage(
            ctx.user_id, stage, "store_error", latency_ms, error_reason=e.message
        )
        _metrics.record_stage(stage, "store_error", latency_ms)
        _metrics.inc_stage_error(stage)
        return []

    latency_ms = (time.perf_counter() - started) * 1000
    _stage_logger.log_stage(ctx.user_id, stage, "success", latency_ms, len(results))
    _metrics.record_stage(stage, "success", latency_ms)
    return results


async def search_document_names(
    *, ctx: RequestContext, term: str, store: DocumentStore, limit: int
) -> list[SearchResult]:
    """Stage 1: match the term against document display names."""
    docs = await store.select_documents(
        DocumentFilter(user_id=ctx.user_id, name_contains=term), limit=limit
    )
    return [_document_result(doc, document_summary(doc)) for doc in docs]


async def search_chunk_text(
    *, ctx: RequestContext, term: str, store: DocumentStore, limit: int
) -> list[SearchResult]:
    """Stage 2: match the term against chunk text.

    Parent documents of all matched chunks are resolved with one batched
    lookup. Chunks whose parent cannot be resolved are dropped and
    reported as an integrity warning.
    """
    chunks = await store.select_chunks(
        ChunkFilter(user_id=ctx.user_id, text_contains=term), limit=limit
    )
    if not chunks:
        return []

    doc_ids = list(dict.fromkeys(chunk.doc_id for chunk in chunks))
    docs = await store.select_documents(DocumentFilter(user_id=ctx.user_id, id_in=doc_ids))
    doc_map = {doc.doc_id: doc for doc in docs}

    results: list[SearchResult] = []
    orphaned = 0
    for chunk in chunks:
        doc = doc_map.get(chunk.doc_id)
        if doc is None:
            orphaned += 1
            continue
        results.append(
            SearchResult(
                doc_id=chunk.doc_id,
                contract_name=doc.contract_name,
                content=chunk.text_chunk,
                chunk_index=chunk.chunk_index,
                filename=doc.filename,
                parties=doc.parties,
                status=doc.status,
                risk_score=doc.risk_score,
                type=ResultType.chunk,
            )
        )

    if orphaned:
        missing = [doc_id for doc_id in doc_ids if doc_id not in doc_map]
        _stage_logger.log_orphan_chunks(ctx.user_id, missing)
        _metrics.inc_orphan_chunks(orphaned)

    return results


async def search_parties_or_filename(
    *, ctx: RequestContext, term: str, store: DocumentStore, limit: int
) -> list[SearchResult]:
    """Stage 3: broadened match against parties or filename."""
    docs = await store.select_documents(
        DocumentFilter(user_id=ctx.user_id, parties_contains=term, filename_contains=term),
        limit=limit,
    )
    return [_document_result(doc, fallback_summary(doc)) for doc in docs]


async def search_documents(
    *,
    ctx: RequestContext | None,
    query: str,
    store: DocumentStore,
    settings: Settings | None = None,
) -> list[SearchResult]:
    """Search a user's documents and chunks by free-text query.

    Stages:
    1. Display-name match (document results)
    2. Chunk-text match, resolved to parent documents (chunk results)
    3. Parties/filename match, only if stages 1-2 found nothing

    Results keep stage order and discovery order within a stage. They are
    not ranked and not deduplicated by document.

    Args:
        ctx: Request context; None when no user is authenticated
        query: Free-text query, matched case-insensitively as a substring
        store: Document store
        settings: Settings override for stage limits

    Returns:
        Merged search results, possibly empty

    Raises:
        SearchUnavailableError: If there is no user context
    """
    if ctx is None:
        raise SearchUnavailableError()

    term = query.strip()
    if not term:
        return []

    settings = settings or get_settings()

    # Stages 1 and 2 are independent and issued concurrently
    name_results, chunk_results = await asyncio.gather(
        _run_stage(
            ctx,
            STAGE_DOCUMENT,
            lambda: search_document_names(
                ctx=ctx, term=term, store=store, limit=settings.search_document_limit
            ),
        ),
        _run_stage(
            ctx,
            STAGE_CHUNK,
            lambda: search_chunk_text(
                ctx=ctx, term=term, store=store, limit=settings.search_chunk_limit
            ),
        ),
    )

    results = [*name_results, *chunk_results]
    if results:
        return results

    return await _run_stage(
        ctx,
        STAGE_FALLBACK,
        lambda: search_parties_or_filename(
            ctx=ctx, term=term, store=store, limit=settings.search_fallback_limit
        ),
    )
