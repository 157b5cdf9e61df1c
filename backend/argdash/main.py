"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from argdash import __version__
from argdash.api.routes import api_router
from argdash.config import AppSettings, get_settings
from argdash.core.errors import install_error_handlers
from argdash.core.logging import setup_logging
from argdash.core.telemetry import setup_telemetry
from argdash.providers.http import build_http_client

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[AppSettings] = None,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Build the application around one settings object and one upstream connection pool.

    A caller-supplied ``http_client`` (tests pass one backed by ``httpx.MockTransport``)
    is used as-is and left open on shutdown.
    """

    settings = settings or get_settings()
    setup_logging()
    owns_client = http_client is None
    client = http_client or build_http_client(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting %s with %s", settings.app_name, settings.dict_for_logging())
        try:
            yield
        finally:
            if owns_client:
                await client.aclose()

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.http_client = client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["traceparent", "tracestate", "x-trace-id"],
    )
    install_error_handlers(app)
    setup_telemetry(app, settings)

    @app.get("/health", tags=["health"])
    async def health(request: Request) -> dict[str, str]:
        """Return service readiness metadata."""

        return {
            "status": "ok",
            "timestamp": datetime.now().isoformat(),
            "timezone": request.app.state.settings.timezone,
        }

    app.include_router(api_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
