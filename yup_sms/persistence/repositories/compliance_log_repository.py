"""Compliance log repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from yup_sms.persistence.models.compliance_log import ComplianceEventType, ComplianceLog
from yup_sms.persistence.repositories.base import BaseRepository


class ComplianceLogRepository(BaseRepository[ComplianceLog]):
    """Repository for the append-only compliance log."""

    def __init__(self, session: AsyncSession):
        """Initialize compliance log repository."""
        super().__init__(ComplianceLog, session)

    async def append(
        self,
        phone_number: str,
        event_type: ComplianceEventType,
        message_content: str | None = None,
        campaign_type: str | None = None,
        message_sid: str | None = None,
    ) -> ComplianceLog:
        """Append a compliance event."""
        return await self.create(
            phone_number=phone_number,
            event_type=event_type.value,
            message_content=message_content,
            campaign_type=campaign_type,
            message_sid=message_sid,
        )

    async def list_by_phone(
        self,
        phone_number: str,
        event_type: ComplianceEventType | None = None,
    ) -> list[ComplianceLog]:
        """List compliance events for a phone number, oldest first.

        Args:
            phone_number: E.164 phone number
            event_type: Optional event type filter

        Returns:
            Matching log entries
        """
        stmt = select(ComplianceLog).where(ComplianceLog.phone_number == phone_number)
        if event_type is not None:
            stmt = stmt.where(ComplianceLog.event_type == event_type.value)
        stmt = stmt.order_by(ComplianceLog.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
