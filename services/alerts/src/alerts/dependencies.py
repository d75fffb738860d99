"""
FastAPI dependency injection providers for the SecureYou alerts service.
"""

from __future__ import annotations

from fastapi import Request

from alerts.dispatcher import AlertDispatcher


async def get_dispatcher(request: Request) -> AlertDispatcher:
    """Return the dispatcher stored on ``app.state`` by :func:`create_app`."""
    return request.app.state.dispatcher
