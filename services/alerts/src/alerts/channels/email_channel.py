"""
SendGrid email channel for SecureYou.

Sends the HTML emergency email through the SendGrid v3 mail-send API
with bearer-token authentication.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from sy_common.config import Settings
from sy_common.models.alert import AlertKind, AlertRequest, ChannelResult

from alerts.templates import render_email

from .base import HTTPProviderChannel, provider_error_code

logger = structlog.get_logger()

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


def build_mail_payload(to: str, from_email: str, subject: str, html: str) -> dict[str, Any]:
    """Build a SendGrid v3 ``mail/send`` request body for a single recipient."""
    return {
        "personalizations": [{"to": [{"email": to}]}],
        "from": {"email": from_email},
        "subject": subject,
        "content": [{"type": "text/html", "value": html}],
    }


class SendGridEmailChannel(HTTPProviderChannel):
    """Deliver alerts as HTML email via SendGrid.

    Args:
        api_key: SendGrid API key.
        from_email: Verified sender address.
        max_attempts: Number of delivery attempts (default 1).
        timeout: Per-request timeout in seconds (default 10).
    """

    name: str = "email"

    def __init__(
        self,
        api_key: str,
        from_email: str,
        *,
        max_attempts: int = 1,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(max_attempts=max_attempts, timeout=timeout)
        self.api_key = api_key
        self.from_email = from_email

    @classmethod
    def from_settings(cls, settings: Settings) -> SendGridEmailChannel:
        return cls(
            settings.sendgrid_api_key,
            settings.sendgrid_from_email,
            max_attempts=settings.provider_max_attempts,
            timeout=settings.provider_timeout_s,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.from_email)

    async def send(
        self, alert: AlertRequest, kind: AlertKind = AlertKind.SOS,
    ) -> ChannelResult:
        """Deliver the email rendered for *alert* to its contact.

        Returns:
            ``sent=True`` on a 2xx response, otherwise ``sent=False``
            carrying the response body or the transport error message.
        """
        log = logger.bind(channel=self.name, contact_id=alert.contact_id, kind=kind.value)
        if not self.configured:
            log.warning("email_not_configured")
            return ChannelResult.failed("SendGrid not configured")

        subject, html = render_email(alert, kind)
        try:
            resp = await self._post(
                SENDGRID_SEND_URL,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=build_mail_payload(alert.email or "", self.from_email, subject, html),
            )
        except httpx.HTTPError as exc:
            log.error("email_send_error", error=str(exc))
            return ChannelResult.failed(str(exc))

        if not resp.is_success:
            log.error(
                "email_provider_error",
                status=resp.status_code,
                code=provider_error_code(resp),
            )
            return ChannelResult.failed(resp.text)

        log.info("email_delivered", status=resp.status_code)
        return ChannelResult.delivered()
