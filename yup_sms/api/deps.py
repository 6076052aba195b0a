"""FastAPI dependencies for external collaborators."""

import logging

from yup_sms.infrastructure.telephony.base import SmsProviderProtocol
from yup_sms.infrastructure.telephony.twilio_provider import TwilioSmsProvider
from yup_sms.settings import settings

logger = logging.getLogger(__name__)


def get_sms_provider() -> SmsProviderProtocol | None:
    """Build the SMS provider for this request.

    Returns:
        Twilio provider, or None when Twilio credentials are not configured
    """
    if not settings.twilio_account_sid or not settings.twilio_auth_token:
        logger.warning("Twilio credentials are not configured (TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN)")
        return None
    return TwilioSmsProvider()
