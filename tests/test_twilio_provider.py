"""Tests for the Twilio SMS provider."""

import time
from unittest.mock import MagicMock, patch

import pytest
import requests
from twilio.base.exceptions import TwilioRestException

from yup_sms.infrastructure.telephony.base import SmsGatewayError
from yup_sms.infrastructure.telephony.twilio_provider import TwilioSmsProvider


def _provider(**kwargs) -> TwilioSmsProvider:
    with patch("yup_sms.infrastructure.telephony.twilio_provider.TwilioClient"):
        return TwilioSmsProvider(
            account_sid="AC123",
            auth_token="token",
            from_number=kwargs.pop("from_number", "+15550000000"),
            **kwargs,
        )


def test_requires_credentials():
    with patch("yup_sms.infrastructure.telephony.twilio_provider.settings") as mock_settings:
        mock_settings.twilio_account_sid = None
        mock_settings.twilio_auth_token = None
        with pytest.raises(ValueError):
            TwilioSmsProvider()


@pytest.mark.asyncio
async def test_send_sms_success():
    provider = _provider()
    message = MagicMock(sid="SM123", status="queued", to="+15551234567", from_="+15550000000", date_created=None)
    provider.client.messages.create.return_value = message

    result = await provider.send_sms(to="+15551234567", body="Hello")

    provider.client.messages.create.assert_called_once_with(
        to="+15551234567", from_="+15550000000", body="Hello"
    )
    assert result.message_id == "SM123"
    assert result.provider == "twilio"


@pytest.mark.asyncio
async def test_send_sms_wraps_twilio_errors():
    provider = _provider()
    provider.client.messages.create.side_effect = TwilioRestException(400, "https://api.twilio.com", "Invalid 'To'")

    with pytest.raises(SmsGatewayError):
        await provider.send_sms(to="+1", body="Hello")


@pytest.mark.asyncio
async def test_send_sms_times_out():
    provider = _provider(timeout_seconds=0.05)
    provider.client.messages.create.side_effect = lambda **kwargs: time.sleep(0.5)

    with pytest.raises(SmsGatewayError, match="timed out"):
        await provider.send_sms(to="+15551234567", body="Hello")


@pytest.mark.asyncio
async def test_send_sms_without_sender_number():
    provider = _provider(from_number=None)
    provider.from_number = None

    with pytest.raises(SmsGatewayError):
        await provider.send_sms(to="+15551234567", body="Hello")


@pytest.mark.asyncio
async def test_send_sms_wraps_connection_errors():
    provider = _provider()
    provider.client.messages.create.side_effect = requests.exceptions.ConnectionError("connection refused")

    with pytest.raises(SmsGatewayError, match="connection refused"):
        await provider.send_sms(to="+15551234567", body="Hello")
