import asyncio
import time
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError

from quizdesk.models.learner import Learner
from quizdesk.models.establishment import Establishment
from quizdesk.models.class_room import ClassRoom
from quizdesk.models.pin_code import PinCode, LearnerPinLog
from quizdesk.models.score import Score
from quizdesk.db.utils import BaseRepository
from quizdesk.schemas.learner_schema import (
    LearnerRegister, LearnerLogin, LearnerProfile, LearnerListItem
)
from quizdesk.services.pin_service import PinRepository
from quizdesk.utils.exceptions import ConflictError, DatabaseError, InvalidInputError, NotFoundError
from quizdesk.core.logging import get_logger

logger = get_logger(__name__)


def generate_identifiant() -> str:
    """'U' followed by the last six digits of the epoch-millisecond clock."""
    return "U" + str(time.time_ns() // 1_000_000)[-6:]


class LearnerRepository(BaseRepository[Learner]):
    def __init__(self):
        super().__init__(Learner)

    async def get_by_identifiant(self, db: AsyncSession, identifiant: str) -> Optional[Learner]:
        try:
            result = await db.execute(
                select(Learner).where(Learner.identifiant == identifiant)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error getting learner by identifiant {identifiant}: {e}")
            raise DatabaseError("Failed to get learner") from e

    async def count_results(self, db: AsyncSession, learner_id: int) -> int:
        result = await db.execute(
            select(func.count(Score.id)).where(Score.user_id == learner_id)
        )
        return result.scalar_one()


class LearnerService:
    """Learner registration with a PIN code, login and administration"""

    def __init__(self):
        self.learner_repo = LearnerRepository()
        self.pin_repo = PinRepository()

    async def _unique_identifiant(self, db: AsyncSession, attempts: int = 5) -> str:
        for _ in range(attempts):
            identifiant = generate_identifiant()
            if await self.learner_repo.get_by_identifiant(db, identifiant) is None:
                return identifiant
            # Same millisecond as an earlier registration
            await asyncio.sleep(0.001)
        raise DatabaseError("Could not allocate a unique identifiant")

    async def register(self, db: AsyncSession, data: LearnerRegister) -> Learner:
        establishment = await db.get(Establishment, data.establishment_id)
        if establishment is None:
            raise InvalidInputError("Invalid establishment", field="establishment_id")

        pin = await self.pin_repo.get_active_by_code(db, data.pin_code)
        if pin is None:
            raise InvalidInputError("PIN invalid or deactivated", field="pin_code")

        learner = await self.learner_repo.create(
            db,
            identifiant=await self._unique_identifiant(db),
            name=data.name,
            establishment_id=data.establishment_id,
            class_id=data.class_id,
            pin_id=pin.id
        )
        db.add(LearnerPinLog(user_id=learner.id, pin_id=pin.id))
        await db.flush()

        logger.info(f"Registered learner {learner.identifiant} with PIN {pin.id}")
        return learner

    async def login(self, db: AsyncSession, data: LearnerLogin) -> LearnerProfile:
        stmt = (
            select(
                Learner.id,
                Learner.name,
                Learner.identifiant,
                Learner.class_id,
                Establishment.name.label("establishment"),
                ClassRoom.name.label("class_name"),
                PinCode.code,
                PinCode.is_active,
            )
            .join(PinCode, PinCode.id == Learner.pin_id)
            .outerjoin(Establishment, Establishment.id == Learner.establishment_id)
            .outerjoin(ClassRoom, ClassRoom.id == Learner.class_id)
            .where(Learner.identifiant == data.identifiant, PinCode.code == data.pin_code)
        )
        row = (await db.execute(stmt)).first()

        if row is None:
            raise InvalidInputError("Identifiant or PIN incorrect")
        if not row.is_active:
            raise InvalidInputError("PIN deactivated, contact an administrator", field="pin_code")

        return LearnerProfile(
            id=row.id,
            name=row.name,
            identifiant=row.identifiant,
            class_id=row.class_id,
            establishment=row.establishment,
            class_name=row.class_name,
            pin_code=row.code,
            is_active=row.is_active,
        )

    async def list_learners(self, db: AsyncSession) -> List[LearnerListItem]:
        stmt = (
            select(
                Learner.id,
                Learner.identifiant,
                Learner.name,
                Establishment.name.label("establishment"),
                ClassRoom.name.label("class_name"),
                PinCode.code,
            )
            .outerjoin(Establishment, Establishment.id == Learner.establishment_id)
            .outerjoin(ClassRoom, ClassRoom.id == Learner.class_id)
            .outerjoin(PinCode, PinCode.id == Learner.pin_id)
            .order_by(Learner.id.desc())
        )
        rows = (await db.execute(stmt)).all()
        return [
            LearnerListItem(
                id=row.id,
                identifiant=row.identifiant,
                name=row.name,
                establishment=row.establishment,
                class_name=row.class_name,
                pin_code=row.code,
            )
            for row in rows
        ]

    async def delete_learner(self, db: AsyncSession, learner_id: int) -> None:
        # Results are append-only and keep their learner
        results = await self.learner_repo.count_results(db, learner_id)
        if results > 0:
            raise ConflictError(
                f"This learner has {results} recorded result(s) and cannot be deleted.",
                resource_type="learner"
            )

        await db.execute(delete(LearnerPinLog).where(LearnerPinLog.user_id == learner_id))
        deleted = await self.learner_repo.delete(db, learner_id)
        if not deleted:
            raise NotFoundError("Learner not found")
        logger.info(f"Deleted learner {learner_id}")


learner_service = LearnerService()
