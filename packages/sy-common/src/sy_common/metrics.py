"""
Prometheus metrics helpers for SecureYou.

Shared metric definitions for the alerts service: request-level alert
counters, per-channel delivery counters and a dispatch latency histogram.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

sos_alerts_total = Counter(
    "sos_alerts_total",
    "Total SOS alert requests handled",
    ["kind", "outcome"],
)
sos_channel_deliveries_total = Counter(
    "sos_channel_deliveries_total",
    "Per-channel delivery outcomes",
    ["channel", "outcome"],
)
sos_dispatch_duration_seconds = Histogram(
    "sos_dispatch_duration_seconds",
    "Wall-clock time to fan an alert out to every channel",
)


def record_channel_outcome(channel: str, sent: bool, configured: bool = True) -> None:
    """Increment the delivery counter for one channel result.

    A failure on a channel lacking credentials counts as ``not_configured``.
    """
    if sent:
        outcome = "sent"
    elif not configured:
        outcome = "not_configured"
    else:
        outcome = "failed"
    sos_channel_deliveries_total.labels(channel=channel, outcome=outcome).inc()
