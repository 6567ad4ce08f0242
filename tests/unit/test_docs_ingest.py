"""Unit tests for the ingestion pipeline against the in-memory store."""

import pytest

from contract_search.config import Settings
from contract_search.db.context import RequestContext
from contract_search.db.inmemory import InMemoryDocumentStore
from contract_search.db.repositories import ChunkFilter, DocumentFilter
from contract_search.docs.ingest import (
    UploadedFile,
    contract_name_from_filename,
    decode_content,
    ingest_file,
    ingest_files,
)
from contract_search.errors import StoreError
from contract_search.models.common import DocumentStatus, RiskLevel


@pytest.mark.asyncio
async def test_small_document_creates_no_chunks(
    ctx: RequestContext, memory_store: InMemoryDocumentStore, settings: Settings
) -> None:
    """Test that content at the threshold is stored as metadata only."""
    result = await ingest_file(
        ctx=ctx,
        filename="nda.txt",
        data=b"x" * 1000,
        content_type="text/plain",
        store=memory_store,
        settings=settings,
    )

    assert result.chunks_created == 0
    assert result.chunk_error is None
    assert memory_store.calls["insert_document"] == 1
    assert memory_store.calls["insert_chunks"] == 0


@pytest.mark.asyncio
async def test_large_document_chunks_in_one_batch(
    ctx: RequestContext, memory_store: InMemoryDocumentStore, settings: Settings
) -> None:
    """Test that all chunks of a document are written in a single batch."""
    text = "".join(str(i % 10) for i in range(3500))

    result = await ingest_file(
        ctx=ctx, filename="msa.txt", data=text.encode(), store=memory_store, settings=settings
    )

    assert result.chunks_created == 4
    assert memory_store.calls["insert_chunks"] == 1

    chunks = await memory_store.select_chunks(ChunkFilter(user_id=ctx.user_id))
    assert [c.chunk_index for c in chunks] == [0, 1, 2, 3]
    assert "".join(c.text_chunk for c in chunks) == text
    assert all(c.doc_id == result.doc_id for c in chunks)
    assert all(c.user_id == ctx.user_id for c in chunks)


@pytest.mark.asyncio
async def test_document_defaults(
    ctx: RequestContext, memory_store: InMemoryDocumentStore, settings: Settings
) -> None:
    """Test that status defaults to Active and metadata comes from the file."""
    data = b"Master services agreement"

    result = await ingest_file(
        ctx=ctx, filename="Acme MSA.v2.txt", data=data, store=memory_store, settings=settings
    )

    docs = await memory_store.select_documents(DocumentFilter(user_id=ctx.user_id))
    assert len(docs) == 1
    doc = docs[0]
    assert doc.doc_id == result.doc_id
    assert doc.contract_name == "Acme MSA.v2"
    assert doc.filename == "Acme MSA.v2.txt"
    assert doc.status == DocumentStatus.active
    assert doc.risk_score == RiskLevel.low
    assert doc.file_size == len(data)
    assert doc.file_type == "application/octet-stream"


@pytest.mark.asyncio
async def test_risk_score_is_taken_from_caller(
    ctx: RequestContext, memory_store: InMemoryDocumentStore, settings: Settings
) -> None:
    """Test that the caller-assigned risk level is persisted unchanged."""
    await ingest_file(
        ctx=ctx,
        filename="lease.txt",
        data=b"lease",
        risk_score=RiskLevel.high,
        parties="Acme Corp & Beta LLC",
        store=memory_store,
        settings=settings,
    )

    docs = await memory_store.select_documents(DocumentFilter(user_id=ctx.user_id))
    assert docs[0].risk_score == RiskLevel.high
    assert docs[0].parties == "Acme Corp & Beta LLC"


@pytest.mark.asyncio
async def test_undecodable_content_becomes_metadata_only(
    ctx: RequestContext, memory_store: InMemoryDocumentStore, settings: Settings
) -> None:
    """Test that binary content does not abort ingestion."""
    data = b"\xff\xfe\x00\x81" * 600

    result = await ingest_file(
        ctx=ctx, filename="scan.pdf", data=data, store=memory_store, settings=settings
    )

    assert result.content_length == 0
    assert result.chunks_created == 0
    assert memory_store.calls["insert_document"] == 1
    assert memory_store.calls["insert_chunks"] == 0


@pytest.mark.asyncio
async def test_document_insert_failure_is_fatal(
    ctx: RequestContext, settings: Settings
) -> None:
    """Test that a failed document insert raises and no chunks are attempted."""
    store = InMemoryDocumentStore(fail_on={"insert_document"})

    with pytest.raises(StoreError):
        await ingest_file(
            ctx=ctx, filename="big.txt", data="y" * 5000, store=store, settings=settings
        )

    assert store.calls["insert_chunks"] == 0


@pytest.mark.asyncio
async def test_chunk_insert_failure_keeps_document(
    ctx: RequestContext, settings: Settings
) -> None:
    """Test that a failed chunk batch is reported and the document remains."""
    store = InMemoryDocumentStore(fail_on={"insert_chunks"})

    result = await ingest_file(
        ctx=ctx, filename="big.txt", data="y" * 5000, store=store, settings=settings
    )

    assert result.chunks_created == 0
    assert result.chunk_error is not None
    docs = await store.select_documents(DocumentFilter(user_id=ctx.user_id))
    assert [d.doc_id for d in docs] == [result.doc_id]


@pytest.mark.asyncio
async def test_ingest_files_outcomes_are_independent(
    ctx: RequestContext, memory_store: InMemoryDocumentStore, settings: Settings
) -> None:
    """Test that multi-file ingestion reports one outcome per file, in order."""
    uploads = [
        UploadedFile(filename="one.txt", data=b"first"),
        UploadedFile(filename="two.txt", data=("second " * 300).encode()),
        UploadedFile(filename="three.txt", data="third"),
    ]

    outcomes = await ingest_files(ctx=ctx, uploads=uploads, store=memory_store, settings=settings)

    assert [o.filename for o in outcomes] == ["one.txt", "two.txt", "three.txt"]
    assert all(o.status == "success" for o in outcomes)
    assert outcomes[1].result is not None
    assert outcomes[1].result.chunks_created == 3


@pytest.mark.asyncio
async def test_ingest_files_reports_store_failures_per_file(
    ctx: RequestContext, settings: Settings
) -> None:
    """Test that store failures become per-file error outcomes."""
    store = InMemoryDocumentStore(fail_on={"insert_chunks"})
    uploads = [
        UploadedFile(filename="small.txt", data=b"small"),
        UploadedFile(filename="large.txt", data=b"L" * 2500),
    ]

    outcomes = await ingest_files(ctx=ctx, uploads=uploads, store=store, settings=settings)

    assert outcomes[0].status == "success"
    assert outcomes[1].status == "partial"

    failing = InMemoryDocumentStore(fail_on={"insert_document"})
    outcomes = await ingest_files(ctx=ctx, uploads=uploads, store=failing, settings=settings)

    assert [o.status for o in outcomes] == ["error", "error"]
    assert all(o.error for o in outcomes)


def test_decode_content_strips_bom() -> None:
    """Test that a UTF-8 byte order mark is dropped."""
    assert decode_content("\ufeffhello".encode()) == "hello"
    assert decode_content("already text") == "already text"


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("contract.pdf", "contract"),
        ("archive.tar.gz", "archive.tar"),
        ("README", "README"),
        (".env", ".env"),
    ],
)
def test_contract_name_from_filename(filename: str, expected: str) -> None:
    """Test that only the final extension is removed."""
    assert contract_name_from_filename(filename) == expected
