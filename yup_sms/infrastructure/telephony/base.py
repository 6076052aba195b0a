"""Base telephony provider interfaces."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class SmsGatewayError(Exception):
    """Raised when the SMS gateway fails to accept a message."""


@dataclass
class SmsResult:
    """Result of SMS send operation."""

    message_id: str
    status: str
    to: str
    from_: str
    provider: str
    raw_response: dict | None = None


class SmsProviderProtocol(ABC):
    """Protocol for SMS provider implementations."""

    @abstractmethod
    async def send_sms(
        self,
        to: str,
        body: str,
        from_: str | None = None,
    ) -> SmsResult:
        """Send an SMS message.

        Args:
            to: Recipient phone number (E.164 format)
            body: Message body
            from_: Sender phone number; the provider's default number if omitted

        Returns:
            SmsResult with message ID and status

        Raises:
            SmsGatewayError: If the gateway rejects or fails the send
        """
        pass

    @abstractmethod
    def validate_webhook_signature(
        self,
        url: str,
        params: dict[str, Any],
        signature: str,
    ) -> bool:
        """Validate incoming webhook signature.

        Args:
            url: The webhook URL
            params: Request parameters
            signature: Signature header value

        Returns:
            True if signature is valid
        """
        pass
