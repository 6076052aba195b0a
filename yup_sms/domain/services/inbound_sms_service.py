"""Inbound SMS processing: keyword classification and opt state changes."""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from yup_sms.core.phone import normalize_phone_e164
from yup_sms.domain.services.compliance_handler import ComplianceAction, ComplianceHandler
from yup_sms.domain.services.opt_status_service import OptStatusService
from yup_sms.infrastructure.telephony.base import SmsGatewayError, SmsProviderProtocol
from yup_sms.persistence.repositories.sms_webhook_log_repository import SmsWebhookLogRepository

logger = logging.getLogger(__name__)


@dataclass
class InboundSmsResult:
    """Result of inbound SMS processing."""

    phone_number: str
    action: ComplianceAction | None
    duplicate: bool = False
    reply_sent: bool = False
    opt_status_changed: bool = False


class InboundSmsService:
    """Service for processing inbound SMS webhooks."""

    def __init__(
        self,
        session: AsyncSession,
        sms_provider: SmsProviderProtocol | None,
        compliance_handler: ComplianceHandler | None = None,
    ) -> None:
        """Initialize inbound SMS service.

        Args:
            session: Database session
            sms_provider: SMS gateway for replies, or None when SMS is not configured
            compliance_handler: Keyword classifier (default instance if omitted)
        """
        self.session = session
        self.sms_provider = sms_provider
        self.compliance_handler = compliance_handler or ComplianceHandler()
        self.opt_status_service = OptStatusService(session)
        self.webhook_log_repo = SmsWebhookLogRepository(session)

    async def process_inbound_sms(
        self,
        from_number: str,
        message_body: str,
        to_number: str | None = None,
        message_sid: str | None = None,
    ) -> InboundSmsResult:
        """Process an inbound SMS message.

        The raw message is logged before classification. A redelivered
        message SID is detected at that point and processing stops.

        Args:
            from_number: Sender phone number as received
            message_body: Message text
            to_number: Our receiving number
            message_sid: Gateway message ID

        Returns:
            InboundSmsResult describing what was done
        """
        phone_number = normalize_phone_e164(from_number)

        stored = await self.webhook_log_repo.record_incoming(
            phone_number=phone_number,
            message_body=message_body,
            message_sid=message_sid,
            to_number=to_number,
        )
        if not stored:
            logger.warning(
                "[DUPLICATE_WEBHOOK] Duplicate inbound SMS webhook ignored",
                extra={
                    "event_type": "duplicate_webhook_blocked",
                    "message_sid": message_sid,
                    "phone_number": phone_number,
                },
            )
            return InboundSmsResult(phone_number=phone_number, action=None, duplicate=True)

        compliance_result = self.compliance_handler.check_compliance(message_body)
        action = compliance_result.action
        status_changed = False

        if action is ComplianceAction.OPT_OUT:
            transition = await self.opt_status_service.opt_out(
                phone_number, keyword=compliance_result.keyword, source="sms"
            )
            status_changed = transition.changed
        elif action is ComplianceAction.OPT_IN:
            transition = await self.opt_status_service.opt_in(
                phone_number, keyword=compliance_result.keyword, source="sms"
            )
            status_changed = transition.changed
        elif action is ComplianceAction.OTHER:
            logger.info(
                f"Unhandled message from {phone_number}",
                extra={"phone_number": phone_number, "message_sid": message_sid},
            )

        reply_sent = await self._send_reply(phone_number, compliance_result.response_message)

        return InboundSmsResult(
            phone_number=phone_number,
            action=action,
            reply_sent=reply_sent,
            opt_status_changed=status_changed,
        )

    async def _send_reply(self, phone_number: str, body: str) -> bool:
        """Send a reply; failures are logged and swallowed."""
        if self.sms_provider is None:
            logger.error(
                f"SMS provider not configured, reply to {phone_number} not sent",
                extra={"phone_number": phone_number},
            )
            return False
        try:
            await self.sms_provider.send_sms(to=phone_number, body=body)
        except SmsGatewayError as e:
            logger.error(
                f"Failed to send reply to {phone_number}: {e}",
                extra={"phone_number": phone_number},
            )
            return False
        return True
