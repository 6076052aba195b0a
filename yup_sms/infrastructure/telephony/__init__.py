"""Telephony provider infrastructure."""

from yup_sms.infrastructure.telephony.base import (
    SmsGatewayError,
    SmsProviderProtocol,
    SmsResult,
)
from yup_sms.infrastructure.telephony.twilio_provider import TwilioSmsProvider

__all__ = [
    "SmsGatewayError",
    "SmsProviderProtocol",
    "SmsResult",
    "TwilioSmsProvider",
]
