"""
Central SOS alert dispatcher for SecureYou.

Receives one alert per emergency contact and fans it out to every
registered notification channel (SMS, email) concurrently.

Flow
----
1. Validate the required fields; reject before touching any channel.
2. Call ``send()`` on every channel with ``asyncio.gather`` so latency is
   that of the slowest provider, not the sum.
3. Collect one ``ChannelResult`` per channel.  Channel failures (not
   configured, provider error, transport error, unexpected exception) are
   reported as data and never fail the request.

There is no retry queue, persistence or deduplication: dispatching the
same alert twice sends two notifications.
"""

from __future__ import annotations

import asyncio

import structlog

from sy_common.config import Settings
from sy_common.metrics import (
    record_channel_outcome,
    sos_alerts_total,
    sos_dispatch_duration_seconds,
)
from sy_common.models.alert import (
    AlertKind,
    AlertRequest,
    BroadcastRequest,
    ChannelResult,
    ContactOutcome,
    DispatchResult,
)

from .channels import NotificationChannel, build_channels

logger = structlog.get_logger()

MISSING_FIELDS_MESSAGE = "Missing required fields"

_CHANNEL_LABELS = {"sms": "SMS", "email": "Email"}


class AlertValidationError(ValueError):
    """Raised when an alert lacks a required field.

    Attributes:
        missing: Wire names of the absent fields.
    """

    def __init__(self, missing: list[str]) -> None:
        super().__init__(MISSING_FIELDS_MESSAGE)
        self.missing = missing


def summarize(result: DispatchResult) -> str:
    """One-line delivery summary, e.g. ``"SMS: Sent, Email: Failed"``."""
    return ", ".join(
        f"{_CHANNEL_LABELS.get(name, name.title())}: {'Sent' if r.sent else 'Failed'}"
        for name, r in result.results.items()
    )


class AlertDispatcher:
    """Validates alerts and fans them out to the configured channels.

    Args:
        channels: Channel implementations, in the order their results
                  should appear in the response.
    """

    def __init__(self, channels: list[NotificationChannel]) -> None:
        self.channels = channels

    @classmethod
    def from_settings(cls, settings: Settings) -> AlertDispatcher:
        """Build a dispatcher with the default SMS and email channels."""
        return cls(build_channels(settings))

    # ── validation ──

    @staticmethod
    def validate(alert: AlertRequest) -> None:
        """Raise :class:`AlertValidationError` if a required field is empty."""
        missing = alert.missing_fields()
        if missing:
            raise AlertValidationError(missing)

    # ── dispatch pipeline ──

    async def _deliver(
        self, channel: NotificationChannel, alert: AlertRequest, kind: AlertKind,
    ) -> ChannelResult:
        """Call one channel, turning any escaped exception into a failed result."""
        try:
            result = await channel.send(alert, kind)
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "channel_send_error",
                channel=channel.name,
                contact_id=alert.contact_id,
                error=str(exc),
            )
            result = ChannelResult.failed(str(exc))
        record_channel_outcome(channel.name, result.sent, channel.configured)
        return result

    async def dispatch(
        self, alert: AlertRequest, kind: AlertKind = AlertKind.SOS,
    ) -> DispatchResult:
        """Validate *alert* and deliver it on every channel concurrently.

        Returns:
            A ``DispatchResult`` with ``success=True`` and one entry per
            channel.

        Raises:
            AlertValidationError: A required field is missing; no channel
                was called.
        """
        log = logger.bind(contact_id=alert.contact_id, kind=kind.value)
        try:
            self.validate(alert)
        except AlertValidationError as exc:
            log.warning("alert_rejected", missing=exc.missing)
            sos_alerts_total.labels(kind=kind.value, outcome="rejected").inc()
            raise

        with sos_dispatch_duration_seconds.time():
            results = await asyncio.gather(
                *(self._deliver(ch, alert, kind) for ch in self.channels)
            )

        result = DispatchResult(
            success=True,
            results={ch.name: r for ch, r in zip(self.channels, results)},
        )
        sos_alerts_total.labels(kind=kind.value, outcome="dispatched").inc()
        log.info("alert_dispatched", delivered_to=result.delivered_to)
        return result

    async def dispatch_cancellation(self, alert: AlertRequest) -> DispatchResult:
        """Tell the contact of *alert* that the SOS was cancelled."""
        return await self.dispatch(alert, AlertKind.SOS_CANCELLED)

    # ── contact broadcast ──

    async def _dispatch_contact(
        self, alert: AlertRequest, kind: AlertKind,
    ) -> ContactOutcome:
        try:
            result = await self.dispatch(alert, kind)
        except AlertValidationError as exc:
            return ContactOutcome(
                contact_id=alert.contact_id,
                contact_name=alert.contact_name,
                success=False,
                error=str(exc),
                summary=f"Failed to send: {exc}",
            )
        return ContactOutcome(
            contact_id=alert.contact_id,
            contact_name=alert.contact_name,
            success=True,
            results=result.results,
            summary=summarize(result),
        )

    async def broadcast(
        self, request: BroadcastRequest, kind: AlertKind = AlertKind.SOS,
    ) -> list[ContactOutcome]:
        """Dispatch one alert per contact in *request*, all concurrently.

        A contact with missing details is reported as unsuccessful without
        affecting the others.

        Returns:
            One ``ContactOutcome`` per contact, in request order.
        """
        alerts = [request.for_contact(contact) for contact in request.contacts]
        outcomes = await asyncio.gather(
            *(self._dispatch_contact(alert, kind) for alert in alerts)
        )
        logger.info(
            "broadcast_complete",
            contacts=len(outcomes),
            reached=sum(1 for o in outcomes if o.success),
        )
        return list(outcomes)

    async def close(self) -> None:
        """Close every channel's HTTP resources."""
        for ch in self.channels:
            await ch.close()
