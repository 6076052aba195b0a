"""Phone opt-out status repository."""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from yup_sms.persistence.models.phone_opt_status import PhoneOptStatus
from yup_sms.persistence.repositories.base import BaseRepository


class PhoneOptStatusRepository(BaseRepository[PhoneOptStatus]):
    """Repository for PhoneOptStatus entities."""

    def __init__(self, session: AsyncSession):
        """Initialize phone opt status repository."""
        super().__init__(PhoneOptStatus, session)

    async def get_by_phone(self, phone_number: str) -> PhoneOptStatus | None:
        """Get the status record for a phone number.

        Always re-reads the row so a record already in the session reflects
        concurrent compare-and-set updates.
        """
        stmt = (
            select(PhoneOptStatus)
            .where(PhoneOptStatus.phone_number == phone_number)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert_if_absent(self, phone_number: str, **values) -> PhoneOptStatus | None:
        """Insert a new record.

        Returns:
            The new record, or None if another writer created it first
        """
        try:
            return await self.create(phone_number=phone_number, version=1, **values)
        except IntegrityError:
            await self.session.rollback()
            return None

    async def compare_and_set(
        self,
        phone_number: str,
        expected_version: int,
        **values,
    ) -> bool:
        """Update a record only if its version is unchanged.

        Args:
            phone_number: E.164 phone number
            expected_version: Version the caller read
            **values: Columns to set

        Returns:
            True if the row was updated, False on a version conflict
        """
        stmt = (
            update(PhoneOptStatus)
            .where(
                PhoneOptStatus.phone_number == phone_number,
                PhoneOptStatus.version == expected_version,
            )
            .values(version=expected_version + 1, updated_at=datetime.utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1
