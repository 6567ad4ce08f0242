"""Shared pytest fixtures for all test suites."""

import uuid
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from contract_search.config import Settings
from contract_search.db.context import RequestContext
from contract_search.db.engine import create_session_factory, register_unicode_lower
from contract_search.db.inmemory import InMemoryDocumentStore
from contract_search.db.models import Base
from contract_search.db.sql_repositories import SqlDocumentStore


@pytest.fixture
def ctx() -> RequestContext:
    """Request context for a fresh user."""
    return RequestContext(user_id=uuid.uuid4())


@pytest.fixture
def settings() -> Settings:
    """Settings with default chunking and search limits."""
    return Settings(database_url="sqlite+aiosqlite:///:memory:")


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    """Empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def sqlite_path(tmp_path: Path) -> Generator[Path, None, None]:
    """File-backed sqlite database with the schema created.

    Tables are created with a sync engine so that no async connection
    outlives the event loop it was opened on.
    """
    db_path = tmp_path / "contracts.db"
    sync_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    yield db_path


@pytest_asyncio.fixture
async def sqlite_engine(sqlite_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Async engine over the file-backed sqlite database."""
    engine = register_unicode_lower(
        create_async_engine(
            f"sqlite+aiosqlite:///{sqlite_path}",
            poolclass=NullPool,
            echo=False,
        )
    )

    yield engine

    await engine.dispose()


@pytest.fixture
def sql_store(sqlite_engine: AsyncEngine) -> SqlDocumentStore:
    """SQL document store bound to the sqlite engine."""
    return SqlDocumentStore(create_session_factory(sqlite_engine))
