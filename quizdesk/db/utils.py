from typing import Optional, Type, TypeVar, Generic
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError

from quizdesk.db.base import BaseModel
from quizdesk.utils.exceptions import DatabaseError, NotFoundError
from quizdesk.core.logging import get_logger

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def create(self, db: AsyncSession, **kwargs) -> ModelType:
        """Create a new record"""
        try:
            db_obj = self.model(**kwargs)
            db.add(db_obj)
            await db.flush()
            await db.refresh(db_obj)
            return db_obj
        except SQLAlchemyError as e:
            logger.error(f"Database error creating {self.model.__name__}: {e}")
            raise DatabaseError(f"Failed to create {self.model.__name__}") from e

    async def get_by_id(self, db: AsyncSession, id: int) -> Optional[ModelType]:
        """Get record by ID"""
        try:
            result = await db.execute(select(self.model).where(self.model.id == id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error getting {self.model.__name__} by ID {id}: {e}")
            raise DatabaseError(f"Failed to get {self.model.__name__}") from e

    async def get_by_id_or_404(self, db: AsyncSession, id: int) -> ModelType:
        """Get record by ID or raise 404"""
        obj = await self.get_by_id(db, id)
        if not obj:
            raise NotFoundError(f"{self.model.__name__} not found")
        return obj

    async def delete(self, db: AsyncSession, id: int) -> bool:
        """Delete record by ID"""
        try:
            result = await db.execute(delete(self.model).where(self.model.id == id))
            await db.flush()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {self.model.__name__} {id}: {e}")
            raise DatabaseError(f"Failed to delete {self.model.__name__}") from e
