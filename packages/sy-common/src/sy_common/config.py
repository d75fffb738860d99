"""
Environment-based configuration management for SecureYou.

Uses pydantic-settings to load configuration values from environment
variables and .env files. The alerts service receives a ``Settings``
instance at construction time rather than reading the environment on
every request.

All environment variables are prefixed with ``SY_`` to avoid collisions.
The provider credentials also accept their unprefixed names
(``TWILIO_ACCOUNT_SID``, ``SENDGRID_API_KEY``, ...) so existing deployments
keep their channels enabled; the ``SY_`` name wins when both are set.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _credential(name: str) -> AliasChoices:
    """Env names for a provider credential: ``SY_<name>`` first, then ``<name>``."""
    return AliasChoices(f"SY_{name}", name)


class Settings(BaseSettings):
    """Central configuration loaded from ``SY_``-prefixed environment variables.

    Attributes:
        twilio_account_sid: Twilio account SID (SMS channel).
        twilio_auth_token: Twilio auth token (SMS channel).
        twilio_phone_number: Sender number for outbound SMS.
        sendgrid_api_key: SendGrid API key (email channel).
        sendgrid_from_email: Sender address for outbound email.
        provider_timeout_s: Per-request timeout for provider HTTP calls.
        provider_max_attempts: Delivery attempts per provider call
            (1 = no retry).
        api_host: Bind address for the alerts service.
        api_port: Bind port for the alerts service.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    model_config = SettingsConfigDict(
        env_prefix="SY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ── Twilio (SMS) ──
    twilio_account_sid: str = Field(
        default="",
        validation_alias=_credential("TWILIO_ACCOUNT_SID"),
        description="Twilio account SID.",
    )
    twilio_auth_token: str = Field(
        default="",
        validation_alias=_credential("TWILIO_AUTH_TOKEN"),
        description="Twilio auth token.",
    )
    twilio_phone_number: str = Field(
        default="",
        validation_alias=_credential("TWILIO_PHONE_NUMBER"),
        description="Twilio sender number.",
    )

    # ── SendGrid (email) ──
    sendgrid_api_key: str = Field(
        default="",
        validation_alias=_credential("SENDGRID_API_KEY"),
        description="SendGrid API key.",
    )
    sendgrid_from_email: str = Field(
        default="",
        validation_alias=_credential("SENDGRID_FROM_EMAIL"),
        description="SendGrid sender address.",
    )

    # ── Provider calls ──
    provider_timeout_s: float = Field(
        default=10.0,
        gt=0.0,
        description="Per-request timeout for provider HTTP calls.",
    )
    provider_max_attempts: int = Field(
        default=1,
        ge=1,
        le=5,
        description="Delivery attempts per provider call (1 = no retry).",
    )

    # ── API ──
    api_host: str = Field(default="0.0.0.0", description="Alerts service bind address.")
    api_port: int = Field(default=8006, ge=1, le=65535, description="Alerts service bind port.")

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Logging level.")

    @property
    def twilio_configured(self) -> bool:
        """``True`` when every Twilio credential is present."""
        return bool(self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number)

    @property
    def sendgrid_configured(self) -> bool:
        """``True`` when every SendGrid credential is present."""
        return bool(self.sendgrid_api_key and self.sendgrid_from_email)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Returns:
        The global ``Settings`` instance.
    """
    return Settings()
