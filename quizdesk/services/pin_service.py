from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError

from quizdesk.models.pin_code import PinCode
from quizdesk.models.learner import Learner
from quizdesk.db.utils import BaseRepository
from quizdesk.schemas.pin_schema import PinCreate, PinResponse
from quizdesk.utils.exceptions import ConflictError, DatabaseError, NotFoundError
from quizdesk.core.logging import get_logger

logger = get_logger(__name__)

ALL_PINS_KEY = "all"


class PinRepository(BaseRepository[PinCode]):
    def __init__(self):
        super().__init__(PinCode)

    async def get_by_code(self, db: AsyncSession, code: str) -> Optional[PinCode]:
        try:
            result = await db.execute(select(PinCode).where(PinCode.code == code))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error getting PIN by code: {e}")
            raise DatabaseError("Failed to get PIN") from e

    async def get_active_by_code(self, db: AsyncSession, code: str) -> Optional[PinCode]:
        pin = await self.get_by_code(db, code)
        return pin if pin is not None and pin.is_active else None

    async def count_learners(self, db: AsyncSession, pin_id: int) -> int:
        result = await db.execute(
            select(func.count(Learner.id)).where(Learner.pin_id == pin_id)
        )
        return result.scalar_one()


class PinService:
    """
    PIN code administration.

    The full admin listing is cached in-process under a single key and
    dropped after every committed PIN write.
    """

    def __init__(self):
        self.pin_repo = PinRepository()
        self._cache: Dict[str, List[PinResponse]] = {}

    def invalidate_cache(self) -> None:
        self._cache.pop(ALL_PINS_KEY, None)

    async def _commit_and_invalidate(self, db: AsyncSession) -> None:
        # The listing is dropped only once the write is visible to other sessions
        try:
            await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error committing PIN change: {e}")
            raise DatabaseError("Failed to save PIN") from e
        self.invalidate_cache()

    async def list_pins(self, db: AsyncSession) -> List[PinResponse]:
        cached = self._cache.get(ALL_PINS_KEY)
        if cached is not None:
            return cached

        stmt = (
            select(PinCode, Learner.name.label("used_by_name"))
            .outerjoin(Learner, Learner.id == PinCode.used_by)
            .order_by(PinCode.id.asc())
        )
        rows = (await db.execute(stmt)).all()
        pins = [
            PinResponse(
                id=pin.id,
                code=pin.code,
                description=pin.description,
                is_active=pin.is_active,
                used_by=pin.used_by,
                used_at=pin.used_at,
                used_by_name=used_by_name,
            )
            for pin, used_by_name in rows
        ]
        self._cache[ALL_PINS_KEY] = pins
        return pins

    async def list_active_pins(self, db: AsyncSession) -> List[PinResponse]:
        result = await db.execute(
            select(PinCode).where(PinCode.is_active.is_(True)).order_by(PinCode.id.asc())
        )
        return [PinResponse.model_validate(pin) for pin in result.scalars().all()]

    async def create_pin(self, db: AsyncSession, data: PinCreate) -> PinCode:
        if await self.pin_repo.get_by_code(db, data.code):
            raise ConflictError("This PIN already exists", resource_type="pin_code")

        pin = await self.pin_repo.create(
            db,
            code=data.code,
            description=data.description or None,
            is_active=True
        )
        await self._commit_and_invalidate(db)
        logger.info(f"Created PIN {pin.id}")
        return pin

    async def set_status(self, db: AsyncSession, pin_id: int, is_active: bool) -> PinCode:
        pin = await self.pin_repo.get_by_id(db, pin_id)
        if pin is None:
            raise NotFoundError("PIN not found")

        pin.is_active = is_active
        await self._commit_and_invalidate(db)
        logger.info(f"PIN {pin_id} {'activated' if is_active else 'deactivated'}")
        return pin

    async def delete_pin(self, db: AsyncSession, pin_id: int) -> None:
        in_use = await self.pin_repo.count_learners(db, pin_id)
        if in_use > 0:
            raise ConflictError(
                f"This PIN is used by {in_use} learner(s). Delete them first.",
                resource_type="pin_code"
            )

        if not await self.pin_repo.delete(db, pin_id):
            raise NotFoundError("PIN not found")
        await self._commit_and_invalidate(db)
        logger.info(f"Deleted PIN {pin_id}")


pin_service = PinService()
