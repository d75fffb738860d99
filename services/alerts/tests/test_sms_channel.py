"""
Tests for the Twilio SMS channel.

Validates the form-encoded Messages API call, soft-disable when
credentials are missing, and error capture for provider and transport
failures.
"""

from __future__ import annotations

from unittest.mock import patch

import httpx
from structlog.testing import capture_logs

from sy_common.models.alert import AlertKind

from alerts.channels.sms_channel import TwilioSMSChannel

_SID = "AC_test_sid"
_URL = f"https://api.twilio.com/2010-04-01/Accounts/{_SID}/Messages.json"


def _channel(**kwargs) -> TwilioSMSChannel:
    return TwilioSMSChannel(_SID, "test_token", "+15005550006", **kwargs)


# ── successful delivery ──


class TestSMSDelivery:
    """Tests for happy-path delivery."""

    async def test_send_returns_sid(self, sample_alert, make_client, make_response) -> None:
        ch = _channel()
        client = make_client(make_response(201, _URL, json={"sid": "SM123", "status": "queued"}))

        with patch.object(ch, "_get_client", return_value=client):
            result = await ch.send(sample_alert)

        assert result.sent is True
        assert result.error is None
        assert result.sid == "SM123"

    async def test_send_posts_form_fields_with_basic_auth(
        self, sample_alert, make_client, make_response
    ) -> None:
        ch = _channel()
        client = make_client(make_response(201, _URL, json={"sid": "SM123"}))

        with patch.object(ch, "_get_client", return_value=client):
            await ch.send(sample_alert)

        client.post.assert_awaited_once()
        args, kwargs = client.post.call_args
        assert args[0] == _URL
        assert kwargs["auth"] == (_SID, "test_token")
        assert kwargs["data"]["To"] == "+8801234567890"
        assert kwargs["data"]["From"] == "+15005550006"
        assert "Alex needs help!" in kwargs["data"]["Body"]

    async def test_cancellation_uses_cancel_text(
        self, sample_alert, make_client, make_response
    ) -> None:
        ch = _channel()
        client = make_client(make_response(201, _URL, json={"sid": "SM9"}))

        with patch.object(ch, "_get_client", return_value=client):
            await ch.send(sample_alert, AlertKind.SOS_CANCELLED)

        body = client.post.call_args.kwargs["data"]["Body"]
        assert body.startswith("✅ ALERT CANCELLED: Alex")


# ── soft-disable ──


class TestSMSNotConfigured:
    """Missing credentials skip the provider entirely."""

    async def test_missing_token_skips_call(self, sample_alert) -> None:
        ch = TwilioSMSChannel(_SID, "", "+15005550006")

        with patch.object(ch, "_get_client") as mock_gc:
            result = await ch.send(sample_alert)

        mock_gc.assert_not_called()
        assert result.sent is False
        assert result.error == "Twilio not configured"
        assert ch.configured is False

    def test_from_settings_reads_credentials(self, settings) -> None:
        ch = TwilioSMSChannel.from_settings(settings)
        assert ch.configured is True
        assert ch.from_number == "+15005550006"
        assert ch.max_attempts == 1
        assert ch.timeout == 10.0

    def test_from_unconfigured_settings(self, unconfigured_settings) -> None:
        assert TwilioSMSChannel.from_settings(unconfigured_settings).configured is False


# ── failures ──


class TestSMSFailures:
    """Provider and transport errors are reported, never raised."""

    async def test_non_2xx_captures_body(self, sample_alert, make_client, make_response) -> None:
        ch = _channel()
        body = '{"code": 21211, "message": "Invalid To number"}'
        client = make_client(make_response(400, _URL, text=body))

        with patch.object(ch, "_get_client", return_value=client):
            result = await ch.send(sample_alert)

        assert result.sent is False
        assert result.error == body
        assert result.sid is None

    async def test_transport_error_captures_message(self, sample_alert, make_client) -> None:
        ch = _channel()
        client = make_client(httpx.ConnectError("connection refused"))

        with patch.object(ch, "_get_client", return_value=client):
            result = await ch.send(sample_alert)

        assert result.sent is False
        assert result.error == "connection refused"

    async def test_single_attempt_by_default(self, sample_alert, make_client, make_response) -> None:
        ch = _channel()
        client = make_client(
            httpx.ConnectError("reset"),
            make_response(201, _URL, json={"sid": "SM1"}),
        )

        with patch.object(ch, "_get_client", return_value=client):
            result = await ch.send(sample_alert)

        assert result.sent is False
        assert client.post.await_count == 1

    async def test_retries_transport_error_when_enabled(
        self, sample_alert, make_client, make_response
    ) -> None:
        ch = _channel(max_attempts=2)
        client = make_client(
            httpx.ConnectError("reset"),
            make_response(201, _URL, json={"sid": "SM1"}),
        )

        with patch.object(ch, "_get_client", return_value=client):
            result = await ch.send(sample_alert)

        assert result.sent is True
        assert result.sid == "SM1"
        assert client.post.await_count == 2

    async def test_provider_error_not_retried(
        self, sample_alert, make_client, make_response
    ) -> None:
        ch = _channel(max_attempts=2)
        body = '{"code": 20500, "message": "Internal Server Error"}'
        client = make_client(
            make_response(500, _URL, text=body),
            make_response(201, _URL, json={"sid": "SM1"}),
        )

        with patch.object(ch, "_get_client", return_value=client):
            result = await ch.send(sample_alert)

        assert result.sent is False
        assert result.error == body
        assert client.post.await_count == 1

    async def test_malformed_success_body(self, sample_alert, make_client, make_response) -> None:
        ch = _channel()
        client = make_client(make_response(201, _URL, text="<html>queued</html>"))

        with patch.object(ch, "_get_client", return_value=client):
            result = await ch.send(sample_alert)

        assert result.sent is False
        assert result.sid is None
        assert "Expecting value" in result.error


# ── logging ──


class TestSMSLogging:
    """Provider error bodies can quote the recipient and stay out of logs."""

    async def test_provider_error_logs_code_not_body(
        self, sample_alert, make_client, make_response
    ) -> None:
        ch = _channel()
        body = (
            '{"code": 21211, "message": "The \'To\' number +8801234567890 '
            'is not a valid phone number."}'
        )
        client = make_client(make_response(400, _URL, text=body))

        with capture_logs() as logs, patch.object(ch, "_get_client", return_value=client):
            result = await ch.send(sample_alert)

        assert result.error == body
        assert not any("+8801234567890" in str(entry) for entry in logs)
        [event] = [e for e in logs if e["event"] == "sms_provider_error"]
        assert event["status"] == 400
        assert event["code"] == 21211

    async def test_non_json_error_logs_no_code(
        self, sample_alert, make_client, make_response
    ) -> None:
        ch = _channel()
        client = make_client(make_response(502, _URL, text="Bad Gateway"))

        with capture_logs() as logs, patch.object(ch, "_get_client", return_value=client):
            await ch.send(sample_alert)

        [event] = [e for e in logs if e["event"] == "sms_provider_error"]
        assert event["code"] is None


# ── close ──


class TestSMSClose:
    """Tests for resource cleanup."""

    async def test_close_closes_client(self) -> None:
        ch = _channel()
        client = await ch._get_client()
        await ch.close()
        assert client.is_closed
        assert ch._client is None

    async def test_close_noop_when_no_client(self) -> None:
        ch = _channel()
        await ch.close()  # should not raise
