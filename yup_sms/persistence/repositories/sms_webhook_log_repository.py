"""Inbound SMS webhook log repository."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from yup_sms.persistence.models.sms_webhook_log import SmsWebhookLog
from yup_sms.persistence.repositories.base import BaseRepository


class SmsWebhookLogRepository(BaseRepository[SmsWebhookLog]):
    """Repository for SmsWebhookLog entities."""

    def __init__(self, session: AsyncSession):
        """Initialize SMS webhook log repository."""
        super().__init__(SmsWebhookLog, session)

    async def record_incoming(
        self,
        phone_number: str,
        message_body: str,
        message_sid: str | None = None,
        to_number: str | None = None,
    ) -> bool:
        """Store an inbound webhook delivery.

        Args:
            phone_number: Normalized sender phone number
            message_body: Message text as received
            message_sid: Gateway message ID
            to_number: Destination number

        Returns:
            True if stored, False if this message SID was already logged
        """
        try:
            await self.create(
                phone_number=phone_number,
                to_number=to_number,
                message_body=message_body,
                message_sid=message_sid or None,
                webhook_type="incoming",
            )
        except IntegrityError:
            await self.session.rollback()
            return False
        return True

    async def get_by_message_sid(self, message_sid: str) -> SmsWebhookLog | None:
        """Get a webhook log entry by gateway message ID."""
        stmt = select(SmsWebhookLog).where(SmsWebhookLog.message_sid == message_sid)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
