"""
Twilio SMS channel for SecureYou.

Sends the emergency SMS through the Twilio Messages API using a
form-encoded POST authenticated with the account SID and auth token.
"""

from __future__ import annotations

import httpx
import structlog

from sy_common.config import Settings
from sy_common.models.alert import AlertKind, AlertRequest, ChannelResult

from alerts.templates import render_sms

from .base import HTTPProviderChannel, provider_error_code

logger = structlog.get_logger()

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class TwilioSMSChannel(HTTPProviderChannel):
    """Deliver alerts as SMS via Twilio.

    Args:
        account_sid: Twilio account SID.
        auth_token: Twilio auth token.
        from_number: Sender phone number.
        max_attempts: Number of delivery attempts (default 1).
        timeout: Per-request timeout in seconds (default 10).
    """

    name: str = "sms"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        *,
        max_attempts: int = 1,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(max_attempts=max_attempts, timeout=timeout)
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number

    @classmethod
    def from_settings(cls, settings: Settings) -> TwilioSMSChannel:
        return cls(
            settings.twilio_account_sid,
            settings.twilio_auth_token,
            settings.twilio_phone_number,
            max_attempts=settings.provider_max_attempts,
            timeout=settings.provider_timeout_s,
        )

    @property
    def configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    @property
    def url(self) -> str:
        return f"{TWILIO_API_BASE}/Accounts/{self.account_sid}/Messages.json"

    async def send(
        self, alert: AlertRequest, kind: AlertKind = AlertKind.SOS,
    ) -> ChannelResult:
        """Deliver the SMS rendered for *alert* to its contact.

        Returns:
            ``sent=True`` with Twilio's message SID on a 2xx response,
            otherwise ``sent=False`` carrying the response body or the
            transport error message.
        """
        log = logger.bind(channel=self.name, contact_id=alert.contact_id, kind=kind.value)
        if not self.configured:
            log.warning("sms_not_configured")
            return ChannelResult.failed("Twilio not configured")

        try:
            resp = await self._post(
                self.url,
                auth=(self.account_sid, self.auth_token),
                data={
                    "To": alert.phone_number,
                    "From": self.from_number,
                    "Body": render_sms(alert, kind),
                },
            )
            if not resp.is_success:
                log.error(
                    "sms_provider_error",
                    status=resp.status_code,
                    code=provider_error_code(resp),
                )
                return ChannelResult.failed(resp.text)
            sid = resp.json().get("sid")
        except (httpx.HTTPError, ValueError) as exc:
            log.error("sms_send_error", error=str(exc))
            return ChannelResult.failed(str(exc))

        log.info("sms_delivered", sid=sid)
        return ChannelResult.delivered(sid=sid)
