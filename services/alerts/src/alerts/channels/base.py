"""
Abstract base class for notification channels in SecureYou.

Defines the NotificationChannel interface that all channel implementations
must follow, and the shared httpx/tenacity plumbing used by the HTTP
provider channels.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from sy_common.models.alert import AlertKind, AlertRequest, ChannelResult

# Default values, overridable via constructor.
_DEFAULT_MAX_ATTEMPTS = 1
_DEFAULT_TIMEOUT_S = 10.0


def provider_error_code(resp: httpx.Response) -> int | str | None:
    """Return the provider's error ``code`` from a JSON error body, if any.

    Provider error bodies can echo the recipient's phone number or address,
    so only this code is logged; the full body stays in the result.
    """
    try:
        data = resp.json()
    except ValueError:
        return None
    return data.get("code") if isinstance(data, dict) else None


class NotificationChannel(ABC):
    """Base class every notification channel must implement.

    Subclasses override :meth:`send` to deliver an alert to their
    transport (SMS gateway, email API, push, etc.).  ``send`` must not
    raise for provider-side failures; it reports them as a
    ``ChannelResult`` with ``sent=False``.

    Attributes:
        name: Channel key used in the response ``results`` map and in logs.
    """

    name: str = "base"

    @property
    def configured(self) -> bool:
        """``False`` when required credentials are missing (soft-disable)."""
        return True

    @abstractmethod
    async def send(
        self, alert: AlertRequest, kind: AlertKind = AlertKind.SOS,
    ) -> ChannelResult:
        """Deliver *alert* through the channel's provider.

        Args:
            alert: A validated alert request.
            kind: Which notice to render (SOS or cancellation).

        Returns:
            The delivery outcome for this channel.
        """

    async def close(self) -> None:
        """Release any resources held by the channel (override if needed)."""


class HTTPProviderChannel(NotificationChannel):
    """Channel that talks to a third-party HTTP API.

    Owns a lazily created ``httpx.AsyncClient`` and wraps each provider call
    in a :mod:`tenacity` retry that only re-attempts transport errors.  With
    the default of one attempt the provider is called at most once.

    Args:
        max_attempts: Number of delivery attempts (default 1).
        timeout: Per-request timeout in seconds (default 10).
    """

    def __init__(
        self,
        *,
        max_attempts: int = _DEFAULT_MAX_ATTEMPTS,
        timeout: float = _DEFAULT_TIMEOUT_S,
    ) -> None:
        self.max_attempts = max_attempts
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Return (and lazily create) the shared ``httpx.AsyncClient``."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _post(self, url: str, **kwargs: Any) -> httpx.Response:
        """POST to *url*, retrying transport failures up to ``max_attempts``.

        Non-2xx responses are returned, not raised, so callers can read the
        provider's error body.
        """

        @retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        async def _inner() -> httpx.Response:
            client = await self._get_client()
            return await client.post(url, **kwargs)

        return await _inner()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
