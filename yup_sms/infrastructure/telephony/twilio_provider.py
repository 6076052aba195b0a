"""Twilio telephony provider implementation."""

import asyncio
import logging
from typing import Any

from requests.exceptions import RequestException
from twilio.base.exceptions import TwilioException
from twilio.request_validator import RequestValidator
from twilio.rest import Client as TwilioClient

from yup_sms.infrastructure.telephony.base import (
    SmsGatewayError,
    SmsProviderProtocol,
    SmsResult,
)
from yup_sms.settings import settings

logger = logging.getLogger(__name__)


class TwilioSmsProvider(SmsProviderProtocol):
    """Twilio SMS provider implementation."""

    def __init__(
        self,
        account_sid: str | None = None,
        auth_token: str | None = None,
        from_number: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """Initialize Twilio client.

        Args:
            account_sid: Twilio account SID (defaults to settings)
            auth_token: Twilio auth token (defaults to settings)
            from_number: Default sender number (defaults to settings)
            timeout_seconds: Upper bound on a single send (defaults to settings)
        """
        self.account_sid = account_sid or settings.twilio_account_sid
        self.auth_token = auth_token or settings.twilio_auth_token
        self.from_number = from_number or settings.twilio_phone_number
        self.timeout_seconds = timeout_seconds or settings.sms_gateway_timeout_seconds

        if not self.account_sid or not self.auth_token:
            raise ValueError("Twilio account SID and auth token must be provided")

        self.client = TwilioClient(self.account_sid, self.auth_token)

    async def send_sms(
        self,
        to: str,
        body: str,
        from_: str | None = None,
    ) -> SmsResult:
        """Send an SMS message via Twilio.

        The SDK call is blocking, so it runs in a worker thread and is
        abandoned after ``timeout_seconds``.

        Args:
            to: Recipient phone number (E.164 format)
            body: Message body
            from_: Sender phone number (E.164 format)

        Returns:
            SmsResult with message SID and status
        """
        sender = from_ or self.from_number
        if not sender:
            raise SmsGatewayError("TWILIO_PHONE_NUMBER is not configured")

        try:
            message = await asyncio.wait_for(
                asyncio.to_thread(
                    self.client.messages.create,
                    to=to,
                    from_=sender,
                    body=body,
                ),
                timeout=self.timeout_seconds,
            )
        except TwilioException as e:
            raise SmsGatewayError(f"Twilio SMS send failed: {str(e)}") from e
        except RequestException as e:
            raise SmsGatewayError(f"Twilio API unreachable: {str(e)}") from e
        except asyncio.TimeoutError as e:
            raise SmsGatewayError(
                f"Twilio SMS send timed out after {self.timeout_seconds}s"
            ) from e

        logger.info(
            "SMS accepted by Twilio",
            extra={"message_sid": message.sid, "to_number": to, "status": message.status},
        )
        return SmsResult(
            message_id=message.sid,
            status=message.status,
            to=message.to,
            from_=message.from_,
            provider="twilio",
            raw_response={
                "sid": message.sid,
                "status": message.status,
                "date_created": message.date_created.isoformat() if message.date_created else None,
            },
        )

    def validate_webhook_signature(
        self,
        url: str,
        params: dict[str, Any],
        signature: str,
    ) -> bool:
        """Validate Twilio webhook signature.

        Args:
            url: The webhook URL
            params: Request parameters
            signature: X-Twilio-Signature header value

        Returns:
            True if signature is valid
        """
        validator = RequestValidator(self.auth_token)
        return validator.validate(url, params, signature)
