"""
Health check router for the SecureYou alerts service.

Reports liveness and whether each notification channel has the
credentials it needs.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from alerts.dependencies import get_dispatcher
from alerts.dispatcher import AlertDispatcher

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    channels: dict[str, str]


@router.get("/health", response_model=HealthResponse)
async def health_check(
    dispatcher: AlertDispatcher = Depends(get_dispatcher),
) -> HealthResponse:
    channels = {
        ch.name: "configured" if ch.configured else "not_configured"
        for ch in dispatcher.channels
    }
    return HealthResponse(status="ok", channels=channels)
