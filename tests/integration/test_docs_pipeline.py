"""Integration tests for ingestion and search over the SQL store."""

import uuid

import pytest

from contract_search.config import Settings
from contract_search.db.context import RequestContext
from contract_search.db.repositories import ChunkFilter
from contract_search.db.sql_repositories import SqlDocumentStore
from contract_search.docs.highlight import highlight
from contract_search.docs.ingest import ingest_file
from contract_search.docs.library import delete_document
from contract_search.docs.retriever import search_documents
from contract_search.models.common import ResultType

CONTRACT_TEXT = (
    "This Master Services Agreement is entered into by Acme Corp and Beta LLC. " * 14
    + "The aggregate liability cap of $1M applies to all claims. "
    + "Either party may terminate on ninety days notice. " * 10
)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_ingested_chunks_reconstruct_text(
    ctx: RequestContext, sql_store: SqlDocumentStore, settings: Settings
) -> None:
    """Test that stored chunks concatenate back to the uploaded text."""
    result = await ingest_file(
        ctx=ctx,
        filename="acme_msa.txt",
        data=CONTRACT_TEXT.encode(),
        content_type="text/plain",
        store=sql_store,
        settings=settings,
    )

    chunks = await sql_store.select_chunks(ChunkFilter(user_id=ctx.user_id))
    chunks.sort(key=lambda c: c.chunk_index)

    assert result.chunks_created == len(chunks) == 2
    assert "".join(c.text_chunk for c in chunks) == CONTRACT_TEXT


@pytest.mark.integration
@pytest.mark.asyncio
async def test_search_finds_chunk_text_and_highlights(
    ctx: RequestContext, sql_store: SqlDocumentStore, settings: Settings
) -> None:
    """Test a content query end to end, including highlighting."""
    await ingest_file(
        ctx=ctx,
        filename="acme_msa.txt",
        data=CONTRACT_TEXT.encode(),
        store=sql_store,
        settings=settings,
    )

    results = await search_documents(
        ctx=ctx, query="liability cap", store=sql_store, settings=settings
    )

    assert len(results) == 1
    assert results[0].type == ResultType.chunk
    assert results[0].contract_name == "acme_msa"
    spans = highlight(results[0].content, "LIABILITY CAP")
    assert [s.text for s in spans if s.matched] == ["liability cap"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_small_documents_are_found_by_metadata_only(
    ctx: RequestContext, sql_store: SqlDocumentStore, settings: Settings
) -> None:
    """Test that sub-threshold content is not searchable, but the name is."""
    await ingest_file(
        ctx=ctx,
        filename="Beta NDA.txt",
        data=b"Confidential information stays confidential.",
        store=sql_store,
        settings=settings,
    )

    by_content = await search_documents(
        ctx=ctx, query="confidential", store=sql_store, settings=settings
    )
    by_name = await search_documents(ctx=ctx, query="nda", store=sql_store, settings=settings)

    assert by_content == []
    assert [r.content for r in by_name] == ["Contract: Beta NDA"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_fallback_over_filename(
    ctx: RequestContext, sql_store: SqlDocumentStore, settings: Settings
) -> None:
    """Test the broadened stage against the SQL store."""
    await ingest_file(
        ctx=ctx,
        filename="2024-omega-renewal.txt",
        data=b"short",
        contract_name="Renewal",
        store=sql_store,
        settings=settings,
    )

    results = await search_documents(ctx=ctx, query="omega", store=sql_store, settings=settings)

    assert [r.content for r in results] == ["Found in filename: 2024-omega-renewal.txt"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_deleted_document_no_longer_searchable(
    ctx: RequestContext, sql_store: SqlDocumentStore, settings: Settings
) -> None:
    """Test that deletion removes both name and chunk matches."""
    result = await ingest_file(
        ctx=ctx,
        filename="acme_msa.txt",
        data=CONTRACT_TEXT.encode(),
        store=sql_store,
        settings=settings,
    )

    await delete_document(ctx=ctx, doc_id=result.doc_id, store=sql_store)

    assert await search_documents(ctx=ctx, query="acme", store=sql_store, settings=settings) == []
    assert await sql_store.select_chunks(ChunkFilter(user_id=ctx.user_id)) == []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_search_isolated_between_users(
    ctx: RequestContext, sql_store: SqlDocumentStore, settings: Settings
) -> None:
    """Test that one user's uploads are invisible to another."""
    await ingest_file(
        ctx=ctx,
        filename="acme_msa.txt",
        data=CONTRACT_TEXT.encode(),
        store=sql_store,
        settings=settings,
    )
    stranger = RequestContext(user_id=uuid.uuid4())

    results = await search_documents(
        ctx=stranger, query="acme", store=sql_store, settings=settings
    )

    assert results == []
