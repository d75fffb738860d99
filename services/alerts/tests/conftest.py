"""Shared fixtures for alerts service tests."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest
import structlog

from sy_common.config import Settings
from sy_common.models.alert import AlertKind, AlertRequest, ChannelResult

from alerts.channels.base import NotificationChannel


# ─── Payloads ────────────────────────────────────────────────────

SAMPLE_PAYLOAD: dict[str, Any] = {
    "contactId": "c-001",
    "contactName": "Jane Doe",
    "phoneNumber": "+8801234567890",
    "email": "jane@example.com",
    "userName": "Alex",
    "timestamp": "2025-01-01T12:00:00Z",
    "location": {
        "latitude": 23.81,
        "longitude": 90.41,
        "mapLink": "https://maps.google.com/?q=23.81,90.41",
    },
    "message": "Need help now",
}


class FakeChannel(NotificationChannel):
    """In-memory channel that records calls and can be slowed down."""

    def __init__(
        self,
        name: str,
        result: ChannelResult | None = None,
        *,
        delay: float = 0.0,
        exc: Exception | None = None,
    ) -> None:
        self.name = name
        self.result = result or ChannelResult.delivered()
        self.delay = delay
        self.exc = exc
        self.calls: list[tuple[AlertRequest, AlertKind]] = []
        self.log_contexts: list[dict[str, Any]] = []
        self.closed = False

    async def send(
        self, alert: AlertRequest, kind: AlertKind = AlertKind.SOS,
    ) -> ChannelResult:
        self.calls.append((alert, kind))
        self.log_contexts.append(structlog.contextvars.get_contextvars())
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return self.result

    async def close(self) -> None:
        self.closed = True


def mock_client(*responses: httpx.Response | Exception) -> AsyncMock:
    """An ``httpx.AsyncClient`` stand-in whose ``post`` yields *responses*."""
    client = AsyncMock()
    client.post = AsyncMock(side_effect=list(responses))
    return client


def provider_response(status: int, url: str, **kwargs: Any) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("POST", url), **kwargs)


# ─── Fixtures ────────────────────────────────────────────────────


@pytest.fixture()
def sample_payload() -> dict[str, Any]:
    return {**SAMPLE_PAYLOAD, "location": dict(SAMPLE_PAYLOAD["location"])}


@pytest.fixture()
def sample_alert(sample_payload: dict[str, Any]) -> AlertRequest:
    """A fully-populated alert for the Jane Doe / Alex scenario."""
    return AlertRequest.model_validate(sample_payload)


@pytest.fixture()
def settings() -> Settings:
    """Settings with both providers configured."""
    return Settings(
        twilio_account_sid="AC_test_sid",
        twilio_auth_token="test_token",
        twilio_phone_number="+15005550006",
        sendgrid_api_key="SG.test_key",
        sendgrid_from_email="alerts@secureyou.app",
    )


@pytest.fixture()
def unconfigured_settings() -> Settings:
    """Settings with no provider credentials at all."""
    return Settings(
        twilio_account_sid="",
        twilio_auth_token="",
        twilio_phone_number="",
        sendgrid_api_key="",
        sendgrid_from_email="",
    )


@pytest.fixture()
def fake_channel() -> type[FakeChannel]:
    """The :class:`FakeChannel` class, for building channel doubles."""
    return FakeChannel


@pytest.fixture()
def make_client():
    """Factory for mocked ``httpx.AsyncClient`` instances."""
    return mock_client


@pytest.fixture()
def make_response():
    """Factory for ``httpx.Response`` objects bound to a POST request."""
    return provider_response
