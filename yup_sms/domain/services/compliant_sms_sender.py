"""Compliance-gated outbound SMS sending."""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from yup_sms.domain.services.compliance_footer import ComplianceOptions, format_message_with_compliance
from yup_sms.domain.services.opt_status_service import OptStatusService
from yup_sms.domain.services.sms_templates import SmsTemplate
from yup_sms.infrastructure.telephony.base import SmsGatewayError, SmsProviderProtocol
from yup_sms.persistence.models.compliance_log import ComplianceEventType

logger = logging.getLogger(__name__)


@dataclass
class SendResult:
    """Result of a compliance-gated send."""

    success: bool
    message_sid: str | None = None
    error: str | None = None


class CompliantSmsSender:
    """Sends application SMS only to numbers that have not opted out."""

    def __init__(
        self,
        session: AsyncSession,
        sms_provider: SmsProviderProtocol | None,
        opt_status_service: OptStatusService | None = None,
    ) -> None:
        """Initialize compliant sender.

        Args:
            session: Database session
            sms_provider: SMS gateway, or None when SMS is not configured
            opt_status_service: Compliance gate (built from session if omitted)
        """
        self.session = session
        self.sms_provider = sms_provider
        self.opt_status_service = opt_status_service or OptStatusService(session)

    async def send(
        self,
        phone_number: str,
        message: str,
        options: ComplianceOptions,
    ) -> SendResult:
        """Send a message with its compliance footer.

        Args:
            phone_number: E.164 destination
            message: Message body without footer
            options: Campaign and footer options

        Returns:
            SendResult; blocked sends never reach the gateway
        """
        check = await self.opt_status_service.check_compliance(phone_number, options)
        if not check.can_send:
            logger.info(
                f"SMS blocked for {phone_number}: {check.reason}",
                extra={"phone_number": phone_number, "campaign_type": options.campaign_type.value},
            )
            return SendResult(success=False, error=check.reason)

        body = format_message_with_compliance(message, options)
        campaign_type = options.campaign_type.value

        try:
            if self.sms_provider is None:
                raise SmsGatewayError("SMS provider is not configured")
            result = await self.sms_provider.send_sms(to=phone_number, body=body)
        except SmsGatewayError as e:
            logger.error(
                f"Error sending compliant SMS to {phone_number}: {e}",
                extra={"phone_number": phone_number, "campaign_type": campaign_type},
            )
            await self.opt_status_service.record_compliance_event(
                phone_number,
                ComplianceEventType.MESSAGE_FAILED,
                message_content=message,
                campaign_type=campaign_type,
            )
            return SendResult(success=False, error=str(e))

        await self.opt_status_service.record_compliance_event(
            phone_number,
            ComplianceEventType.MESSAGE_SENT,
            message_content=body,
            campaign_type=campaign_type,
            message_sid=result.message_id,
        )
        return SendResult(success=True, message_sid=result.message_id)

    async def send_template(self, phone_number: str, template: SmsTemplate) -> SendResult:
        """Send a rendered template."""
        return await self.send(phone_number, template.message, template.options)
