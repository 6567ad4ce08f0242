"""Store dependency for route handlers."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from contract_search.db.engine import get_session_factory
from contract_search.db.repositories import DocumentStore
from contract_search.db.sql_repositories import SqlDocumentStore


async def get_store(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> DocumentStore:
    """FastAPI dependency for the document store."""
    return SqlDocumentStore(session_factory)
