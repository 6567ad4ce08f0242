"""Document endpoints - POST /docs, GET /docs, DELETE /docs/{doc_id}, GET /docs/search."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status
from pydantic import BaseModel

from contract_search.api.auth import get_current_context
from contract_search.api.dependencies import get_store
from contract_search.config import get_settings
from contract_search.db.context import RequestContext
from contract_search.db.repositories import DocumentStore
from contract_search.docs.highlight import excerpt, highlight
from contract_search.docs.ingest import FileIngestOutcome, UploadedFile, ingest_files
from contract_search.docs.library import delete_document, list_documents
from contract_search.docs.retriever import search_documents
from contract_search.errors import DocumentNotFoundError, SearchUnavailableError, StoreError
from contract_search.models.common import DocumentStatus, RiskLevel
from contract_search.models.docs import ContractDocument, HighlightSpan, SearchResult

router = APIRouter(prefix="/docs", tags=["docs"])


class UploadResponse(BaseModel):
    """Response for POST /docs."""

    results: list[FileIngestOutcome]


class DocListResponse(BaseModel):
    """Response for GET /docs."""

    docs: list[ContractDocument]


class DocSearchHit(BaseModel):
    """Single search result with display excerpt and highlight spans."""

    result: SearchResult
    excerpt: str
    highlights: list[HighlightSpan]


class DocSearchResponse(BaseModel):
    """Response for GET /docs/search."""

    matches: list[DocSearchHit]
    query: str


@router.post("", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_docs(
    files: Annotated[list[UploadFile], File(description="Files to ingest")],
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[DocumentStore, Depends(get_store)],
    response: Response,
    risk_score: Annotated[RiskLevel | None, Form()] = None,
) -> UploadResponse:
    """Upload one or more files; each is ingested independently.

    Returns 201 when at least one document was created, 502 when every
    file failed at the store.
    """
    uploads = [
        UploadedFile(
            filename=upload.filename or "untitled",
            data=await upload.read(),
            content_type=upload.content_type,
        )
        for upload in files
    ]

    outcomes = await ingest_files(ctx=ctx, uploads=uploads, store=store, risk_score=risk_score)

    if outcomes and all(outcome.status == "error" for outcome in outcomes):
        response.status_code = status.HTTP_502_BAD_GATEWAY

    return UploadResponse(results=outcomes)


@router.get("", response_model=DocListResponse)
async def list_docs(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[DocumentStore, Depends(get_store)],
    status_filter: Annotated[DocumentStatus | None, Query(alias="status")] = None,
) -> DocListResponse:
    """List the caller's documents, newest first."""
    try:
        docs = await list_documents(ctx=ctx, store=store, status=status_filter)
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e

    return DocListResponse(docs=docs)


@router.delete("/{doc_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_doc(
    doc_id: UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[DocumentStore, Depends(get_store)],
) -> Response:
    """Delete a document and its chunks."""
    try:
        await delete_document(ctx=ctx, doc_id=doc_id, store=store)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/search", response_model=DocSearchResponse)
async def search_docs_endpoint(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[DocumentStore, Depends(get_store)],
    query: Annotated[str, Query(max_length=200)],
) -> DocSearchResponse:
    """Search document names, chunk text and (as fallback) parties/filenames.

    A blank query returns no matches without touching the store.
    """
    settings = get_settings()
    try:
        results = await search_documents(ctx=ctx, query=query, store=store, settings=settings)
    except SearchUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e

    term = query.strip()
    matches = []
    for result in results:
        shown = excerpt(result.content, settings.excerpt_max_chars)
        matches.append(
            DocSearchHit(result=result, excerpt=shown, highlights=highlight(shown, term))
        )

    return DocSearchResponse(matches=matches, query=query)
