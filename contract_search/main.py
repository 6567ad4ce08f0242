"""FastAPI application."""

from fastapi import FastAPI

from contract_search.api.routes.docs import router as docs_router
from contract_search.api.routes.health import router as health_router
from contract_search.api.routes.metrics import router as metrics_router
from contract_search.config import get_settings
from contract_search.utils.logging import configure_logging

configure_logging(get_settings().log_level)

# /docs belongs to the document routes, so the OpenAPI UI lives elsewhere
app = FastAPI(
    title="Contract Search API",
    version="0.1.0",
    docs_url="/api-docs",
    redoc_url="/api-redoc",
)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(docs_router, tags=["docs"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Contract Search API", "version": "0.1.0"}
