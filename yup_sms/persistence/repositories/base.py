"""Base repository with common operations."""

from typing import Generic, TypeVar, Type
from sqlalchemy.ext.asyncio import AsyncSession

from yup_sms.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with the shared insert path.

    No generic update/delete: compliance records are
    either append-only or mutated through dedicated methods.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """Initialize repository with model and session."""
        self.model = model
        self.session = session

    async def create(self, **data) -> ModelType:
        """Create new entity."""
        instance = self.model(**data)
        self.session.add(instance)
        await self.session.commit()
        await self.session.refresh(instance)
        return instance
