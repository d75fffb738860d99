"""
SecureYou data models package.

Re-exports the alert models so callers can write
``from sy_common.models import AlertRequest``.
"""

from sy_common.models.alert import (
    AlertKind,
    AlertRequest,
    BroadcastRequest,
    ChannelResult,
    ContactOutcome,
    DispatchResult,
    EmergencyContact,
    Location,
    SOSEvent,
    google_maps_link,
)

__all__ = [
    "AlertKind",
    "AlertRequest",
    "BroadcastRequest",
    "ChannelResult",
    "ContactOutcome",
    "DispatchResult",
    "EmergencyContact",
    "Location",
    "SOSEvent",
    "google_maps_link",
]
