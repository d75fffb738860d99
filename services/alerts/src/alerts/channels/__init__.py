"""
Notification channel implementations package for SecureYou.

Contains the abstract NotificationChannel base class and concrete
implementations for each supported delivery channel.
"""

from sy_common.config import Settings

from .base import HTTPProviderChannel, NotificationChannel
from .email_channel import SendGridEmailChannel
from .sms_channel import TwilioSMSChannel

__all__ = [
    "HTTPProviderChannel",
    "NotificationChannel",
    "SendGridEmailChannel",
    "TwilioSMSChannel",
    "build_channels",
]


def build_channels(settings: Settings) -> list[NotificationChannel]:
    """Instantiate the default SMS and email channels from *settings*."""
    return [
        TwilioSMSChannel.from_settings(settings),
        SendGridEmailChannel.from_settings(settings),
    ]
