from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from quizdesk.models.answer_option import AnswerOption
from quizdesk.models.question import Question
from quizdesk.utils.exceptions import DatabaseError
from quizdesk.core.logging import get_logger

logger = get_logger(__name__)


class AnswerKeyStore:
    """
    Read-only view of the canonical answers of stored questions.

    A missing row is a valid outcome (None or an empty ordering). Storage
    failures are raised as DatabaseError so the caller can abort the
    whole submission.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_option(self, question_id: int, choice_index: int) -> Optional[AnswerOption]:
        try:
            result = await self.db.execute(
                select(AnswerOption).where(
                    AnswerOption.question_id == question_id,
                    AnswerOption.choice_index == choice_index
                )
            )
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read option {choice_index} of question {question_id}: {e}")
            raise DatabaseError("Failed to read answer key") from e

    async def get_canonical_text(self, question_id: int) -> Optional[str]:
        try:
            result = await self.db.execute(
                select(Question.canonical_answer).where(Question.id == question_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read canonical answer of question {question_id}: {e}")
            raise DatabaseError("Failed to read answer key") from e

    async def get_ordering(self, question_id: int) -> List[int]:
        """Choice indices of the question's options, ascending by correct_order."""
        try:
            result = await self.db.execute(
                select(AnswerOption.choice_index)
                .where(AnswerOption.question_id == question_id)
                # Unranked options go last; choice_index breaks ties so the order is total
                .order_by(AnswerOption.correct_order.asc().nulls_last(), AnswerOption.choice_index.asc())
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Failed to read ordering of question {question_id}: {e}")
            raise DatabaseError("Failed to read answer key") from e
