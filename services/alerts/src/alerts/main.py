"""
Alert service entry point for SecureYou.

Builds the FastAPI application: wires the alert dispatcher and its
channels from settings, registers the SOS and health routers, CORS and
request-logging middleware, and exposes Prometheus metrics.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
import uvicorn
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from sy_common.config import Settings, get_settings
from sy_common.logging import configure_logging

from alerts.dispatcher import AlertDispatcher
from alerts.middleware.cors import add_cors
from alerts.middleware.logging import LoggingMiddleware
from alerts.routers import health, sos

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle for the alerts service."""
    dispatcher: AlertDispatcher = app.state.dispatcher
    logger.info(
        "alerts_service_starting",
        channels={ch.name: ch.configured for ch in dispatcher.channels},
    )
    yield
    await dispatcher.close()
    logger.info("alerts_service_stopping")


def create_app(
    settings: Settings | None = None,
    dispatcher: AlertDispatcher | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        settings: Configuration to use; defaults to :func:`get_settings`.
        dispatcher: Pre-built dispatcher (tests pass one with fake
                    channels); defaults to one built from *settings*.
    """
    settings = settings or get_settings()
    app = FastAPI(title="SecureYou Alerts Service", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.dispatcher = dispatcher or AlertDispatcher.from_settings(settings)

    app.include_router(sos.router)
    app.include_router(health.router)
    app.mount("/metrics", make_asgi_app())

    # ── Middleware (applied outermost-first) ──
    app.add_middleware(LoggingMiddleware)
    add_cors(app)

    return app


def run() -> None:
    """Console entry point: configure logging and serve with uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level, service="alerts")
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )


if __name__ == "__main__":
    run()
