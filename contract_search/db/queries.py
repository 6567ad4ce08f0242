"""User-scoped query helpers."""

from sqlalchemy import Select, or_, select

from contract_search.db.models import Chunk, Document
from contract_search.db.repositories import ChunkFilter, DocumentFilter

LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """Build a LIKE pattern matching term as a literal substring.

    Args:
        term: Raw search term

    Returns:
        Pattern with LIKE wildcards in term escaped
    """
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def query_documents(criteria: DocumentFilter) -> Select[tuple[Document]]:
    """Build a document select from filter criteria, newest first.

    Args:
        criteria: Document filter

    Returns:
        Select statement over the document table
    """
    stmt = select(Document)

    if criteria.user_id is not None:
        stmt = stmt.where(Document.user_id == criteria.user_id)
    if criteria.name_contains is not None:
        stmt = stmt.where(
            Document.contract_name.ilike(contains_pattern(criteria.name_contains), escape=LIKE_ESCAPE)
        )
    if criteria.id_in is not None:
        stmt = stmt.where(Document.doc_id.in_(criteria.id_in))
    if criteria.status is not None:
        stmt = stmt.where(Document.status == criteria.status.value)

    # parties / filename are alternatives of the broadened match
    alternatives = []
    if criteria.parties_contains is not None:
        alternatives.append(
            Document.parties.ilike(contains_pattern(criteria.parties_contains), escape=LIKE_ESCAPE)
        )
    if criteria.filename_contains is not None:
        alternatives.append(
            Document.filename.ilike(
                contains_pattern(criteria.filename_contains), escape=LIKE_ESCAPE
            )
        )
    if alternatives:
        stmt = stmt.where(or_(*alternatives))

    return stmt.order_by(Document.uploaded_on.desc())


def query_chunks(criteria: ChunkFilter) -> Select[tuple[Chunk]]:
    """Build a chunk select scoped to one user.

    Args:
        criteria: Chunk filter (user_id is mandatory)

    Returns:
        Select statement over the chunk table
    """
    stmt = select(Chunk).where(Chunk.user_id == criteria.user_id)

    if criteria.text_contains is not None:
        stmt = stmt.where(
            Chunk.text_chunk.ilike(contains_pattern(criteria.text_contains), escape=LIKE_ESCAPE)
        )

    return stmt.order_by(Chunk.created_at, Chunk.chunk_index)
