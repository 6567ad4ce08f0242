"""Integration tests for /health, /healthz and /metrics endpoints."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from contract_search.db.engine import get_session
from contract_search.main import app


@pytest.fixture
def client(tmp_path: Path) -> Generator[TestClient, None, None]:
    """Create test client with a throwaway database session."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'health.db'}", poolclass=NullPool)

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with AsyncSession(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealthEndpoint:
    """Test /health and /healthz endpoints."""

    def test_health_always_ok(self, client: TestClient) -> None:
        """Test /health returns 200."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_healthz_checks_database(self, client: TestClient) -> None:
        """Test /healthz returns 200 against a reachable database."""
        response = client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["components"]["db"] == "ok"

    @patch("contract_search.api.routes.health.check_db")
    def test_healthz_returns_503_when_db_fails(
        self, mock_check_db: MagicMock, client: TestClient
    ) -> None:
        """Test /healthz returns 503 when DB check fails."""
        mock_check_db.return_value = (False, "error: OperationalError")

        response = client.get("/healthz")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert data["components"]["db"] == "error: OperationalError"


class TestMetricsEndpoint:
    """Test /metrics endpoint."""

    def test_metrics_exposes_search_and_ingest_metrics(self, client: TestClient) -> None:
        """Test /metrics returns Prometheus text including service metrics."""
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        body = response.text
        assert "search_stage_latency_ms" in body
        assert "search_orphan_chunks_total" in body
        assert "ingest_chunks_total" in body


def test_root(client: TestClient) -> None:
    """Test root endpoint metadata."""
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "Contract Search API"
