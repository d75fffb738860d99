"""
SOS alert data models for SecureYou.

Defines the Pydantic models for an inbound SOS alert (one contact per
request), the per-channel delivery result, and the aggregate dispatch
result returned to the mobile/web client. Wire names are camelCase to
match the client payloads; Python attributes are snake_case.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

# Fields whose absence rejects the request before any channel is touched.
REQUIRED_FIELDS: tuple[str, ...] = ("contact_name", "phone_number", "email", "user_name")


class AlertKind(str, enum.Enum):
    """Which notice a contact receives."""

    SOS = "sos"
    SOS_CANCELLED = "sos_cancelled"


class _WireModel(BaseModel):
    """Base for models exchanged with the client as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def google_maps_link(latitude: float, longitude: float) -> str:
    """Return a Google Maps URL pointing at the given coordinates."""
    return f"https://www.google.com/maps?q={latitude},{longitude}"


class Location(_WireModel):
    """Last known position of the person in distress.

    Attributes:
        latitude: WGS84 latitude.
        longitude: WGS84 longitude.
        map_link: Shareable map URL. Derived from the coordinates when the
                  client leaves it empty.
    """

    latitude: float
    longitude: float
    map_link: str = ""

    @property
    def link(self) -> str:
        return self.map_link or google_maps_link(self.latitude, self.longitude)


class AlertRequest(_WireModel):
    """A single SOS alert addressed to one emergency contact.

    The required fields are declared optional so a missing value can be
    reported as a validation failure rather than a parse error; see
    :meth:`missing_fields`.

    Attributes:
        contact_id: Opaque identifier of the recipient.
        contact_name: Recipient display name.
        phone_number: Recipient phone number (E.164).
        email: Recipient email address.
        user_name: Name of the person who triggered the SOS.
        timestamp: Trigger time, normally ISO-8601.
        location: Last known position, or ``None`` when unavailable.
        message: Free text included in the alert body.
    """

    contact_id: str | None = None
    contact_name: str | None = None
    phone_number: str | None = None
    email: str | None = None
    user_name: str | None = None
    timestamp: str | None = None
    location: Location | None = None
    message: str | None = None

    def missing_fields(self) -> list[str]:
        """Return the wire names of required fields that are absent or empty."""
        return [
            to_camel(name)
            for name in REQUIRED_FIELDS
            if not getattr(self, name)
        ]


class ChannelResult(BaseModel):
    """Outcome of one delivery channel for one alert.

    Attributes:
        sent: ``True`` when the provider accepted the message.
        error: Failure reason, ``None`` on success.
        sid: Provider message id. Only the SMS channel sets it, and only
             on success; it is left out of the serialised form otherwise.
    """

    sent: bool
    error: str | None = None
    sid: str | None = None

    @classmethod
    def delivered(cls, sid: str | None = None) -> ChannelResult:
        return cls(sent=True, error=None, sid=sid)

    @classmethod
    def failed(cls, error: str) -> ChannelResult:
        return cls(sent=False, error=error)

    @model_serializer(mode="wrap")
    def _drop_missing_sid(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if data.get("sid") is None:
            data.pop("sid", None)
        return data


class DispatchResult(BaseModel):
    """Aggregate response for one dispatched alert.

    ``success`` reflects request handling only: a channel that failed or
    was skipped is reported in ``results`` and does not flip it.
    """

    success: bool = True
    results: dict[str, ChannelResult] = Field(default_factory=dict)

    @property
    def delivered_to(self) -> list[str]:
        """Names of the channels that accepted the alert."""
        return [name for name, result in self.results.items() if result.sent]


# ── contact broadcast ──


class EmergencyContact(_WireModel):
    """An emergency contact as stored by the client."""

    id: str | None = None
    name: str | None = None
    phone_number: str | None = None
    email: str | None = None


class SOSEvent(_WireModel):
    """Contact-independent part of an SOS alert."""

    user_name: str | None = None
    timestamp: str | None = None
    location: Location | None = None
    message: str | None = None

    def for_contact(self, contact: EmergencyContact) -> AlertRequest:
        """Address this event to *contact*."""
        return AlertRequest(
            contact_id=contact.id,
            contact_name=contact.name,
            phone_number=contact.phone_number,
            email=contact.email,
            user_name=self.user_name,
            timestamp=self.timestamp,
            location=self.location,
            message=self.message,
        )


class BroadcastRequest(SOSEvent):
    """An SOS event together with every contact that should receive it."""

    contacts: list[EmergencyContact] = Field(default_factory=list)


class ContactOutcome(_WireModel):
    """Per-contact result of a broadcast.

    Attributes:
        contact_id: Contact identifier, echoed from the request.
        contact_name: Contact display name.
        success: ``False`` only when the alert for this contact was rejected.
        results: Channel results when the alert was dispatched.
        error: Rejection reason when ``success`` is ``False``.
        summary: One-line human-readable delivery summary.
    """

    contact_id: str | None = None
    contact_name: str | None = None
    success: bool
    results: dict[str, ChannelResult] = Field(default_factory=dict)
    error: str | None = None
    summary: str = ""
