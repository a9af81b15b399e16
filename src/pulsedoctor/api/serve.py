"""API server for ``pulsedoctor serve``.

Exposes the audit router under ``/api/v1/`` with CORS for local dashboards.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app):
    yield
    from pulsedoctor.audit.engine import shutdown_audit_engine

    await shutdown_audit_engine()


def create_api_app():
    """Build the FastAPI application."""
    from fastapi import FastAPI
    from fastapi.middleware.cors import CORSMiddleware

    from pulsedoctor import __version__
    from pulsedoctor.api import mount_routers

    app = FastAPI(
        title="pulsedoctor API",
        description="Self-diagnostic audits for the civic platform.",
        version=__version__,
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
        lifespan=_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    mount_routers(app)
    return app


def run_api_server(host: str = "127.0.0.1", port: int = 8890) -> None:
    """Start the API server (blocking)."""
    import uvicorn

    logger.info("Starting pulsedoctor API on http://%s:%d/api/v1/docs", host, port)
    uvicorn.run(create_api_app(), host=host, port=port, log_level="warning")
