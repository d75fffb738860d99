"""
Message templates for SecureYou alert notifications.

Renders the SMS body and the HTML email (subject + body) for an SOS alert
and for the follow-up cancellation notice.  User-supplied text is escaped
before it is placed into HTML.
"""

from __future__ import annotations

from datetime import datetime, timezone
from html import escape

from sy_common.models.alert import AlertKind, AlertRequest

LOCATION_UNAVAILABLE = "Not available"

_EMAIL_STYLE = """
      body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
      .container { max-width: 600px; margin: 0 auto; padding: 20px; }
      .header { color: white; padding: 20px; text-align: center; }
      .alert { background: #dc2626; }
      .cancelled { background: #16a34a; }
      .content { background: #f9fafb; padding: 20px; margin-top: 20px; }
      .alert-box { background: #fef2f2; border-left: 4px solid #dc2626; padding: 15px; margin: 20px 0; }
      .button { display: inline-block; background: #2563eb; color: white; padding: 12px 24px; text-decoration: none; border-radius: 5px; margin-top: 20px; }
      .footer { text-align: center; margin-top: 20px; color: #6b7280; font-size: 12px; }
"""


def format_timestamp(value: str | None) -> str:
    """Render an ISO-8601 instant as ``YYYY-MM-DD HH:MM:SS UTC``.

    Naive timestamps are taken to be UTC.  Anything that does not parse
    (older clients send locale-formatted strings) is returned unchanged.
    """
    if not value:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    try:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _map_link(alert: AlertRequest) -> str:
    return alert.location.link if alert.location else LOCATION_UNAVAILABLE


# ── SMS ──


def render_sms(alert: AlertRequest, kind: AlertKind = AlertKind.SOS) -> str:
    """Return the SMS body for *alert*."""
    if kind is AlertKind.SOS_CANCELLED:
        return (
            f"✅ ALERT CANCELLED: {alert.user_name} has cancelled their "
            "emergency alert. They are safe."
        )
    return (
        "🚨 EMERGENCY ALERT 🚨\n\n"
        f"{alert.user_name} needs help!\n\n"
        f"Message: {alert.message or ''}\n\n"
        f"Location: {_map_link(alert)}\n\n"
        f"Time: {format_timestamp(alert.timestamp)}\n\n"
        "This is an automated SOS alert from SecureYou app."
    )


# ── Email ──


def _location_html(alert: AlertRequest) -> str:
    if alert.location is None:
        return f"<p><strong>Location:</strong> {LOCATION_UNAVAILABLE}</p>"
    loc = alert.location
    return (
        "<p><strong>Location:</strong></p>\n"
        f"<p>Latitude: {loc.latitude}, Longitude: {loc.longitude}</p>\n"
        f'<a href="{escape(loc.link)}" class="button">View Location on Map</a>'
    )


def _wrap_html(header_class: str, title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
  <head>
    <style>{_EMAIL_STYLE}    </style>
  </head>
  <body>
    <div class="container">
      <div class="header {header_class}">
        <h1>{title}</h1>
      </div>
      <div class="content">
{body}
      </div>
      <div class="footer">
        <p>This is an automated message. Do not reply to this email.</p>
      </div>
    </div>
  </body>
</html>
"""


def render_email(alert: AlertRequest, kind: AlertKind = AlertKind.SOS) -> tuple[str, str]:
    """Return ``(subject, html_body)`` for *alert*."""
    user = escape(alert.user_name or "")
    if kind is AlertKind.SOS_CANCELLED:
        subject = f"✅ Alert Cancelled: {alert.user_name} is safe"
        body = (
            f"<h2>{user} has cancelled their emergency alert.</h2>\n"
            f"<p><strong>Time:</strong> {escape(format_timestamp(alert.timestamp))}</p>\n"
            "<p>They have confirmed they are safe. No further action is needed.</p>"
        )
        return subject, _wrap_html("cancelled", "✅ ALERT CANCELLED", body)

    subject = f"🚨 Emergency Alert from {alert.user_name}"
    body = (
        '<div class="alert-box">\n'
        f"<h2>{user} needs immediate help!</h2>\n"
        f"<p><strong>Message:</strong> {escape(alert.message or '')}</p>\n"
        f"<p><strong>Time:</strong> {escape(format_timestamp(alert.timestamp))}</p>\n"
        f"{_location_html(alert)}\n"
        "</div>\n"
        "<p>This is an automated SOS alert from the SecureYou safety app. "
        f"Please check on {user} immediately.</p>"
    )
    return subject, _wrap_html("alert", "🚨 EMERGENCY ALERT", body)
