from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from quizdesk.models.score import Score
from quizdesk.models.learner import Learner
from quizdesk.models.class_room import ClassRoom
from quizdesk.models.quiz import Quiz
from quizdesk.schemas.result_schema import ResultListItem, RankingEntry
from quizdesk.utils.exceptions import DatabaseError
from quizdesk.core.logging import get_logger

logger = get_logger(__name__)


class ResultLedger:
    """Append-only store of submission results, plus the reporting reads."""

    async def append(
            self,
            db: AsyncSession,
            quiz_id: int,
            user_id: int,
            score: int,
            max_score: int,
            time_taken: int
    ) -> int:
        """
        Add one result row and return its id.

        The row is flushed, not committed: it becomes durable together with
        the caller's unit of work.
        """
        try:
            row = Score(
                quiz_id=quiz_id,
                user_id=user_id,
                score=score,
                max_score=max_score,
                time_taken=time_taken
            )
            db.add(row)
            await db.flush()
            return row.id
        except SQLAlchemyError as e:
            logger.error(f"Failed to append result for quiz {quiz_id}, user {user_id}: {e}")
            raise DatabaseError("Failed to record result") from e

    async def list_results(self, db: AsyncSession) -> List[ResultListItem]:
        """All results, newest first."""
        stmt = (
            select(
                Score.id,
                Learner.name,
                Learner.identifiant,
                ClassRoom.name.label("class_name"),
                Quiz.title,
                Score.score,
                Score.max_score,
                Score.time_taken,
                Score.date_played,
            )
            .join(Learner, Learner.id == Score.user_id)
            .outerjoin(ClassRoom, ClassRoom.id == Learner.class_id)
            .outerjoin(Quiz, Quiz.id == Score.quiz_id)
            .order_by(Score.date_played.desc(), Score.id.desc())
        )
        try:
            rows = (await db.execute(stmt)).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list results: {e}")
            raise DatabaseError("Failed to list results") from e

        return [
            ResultListItem(
                id=row.id,
                learner_name=row.name,
                identifiant=row.identifiant,
                class_name=row.class_name,
                quiz_title=row.title,
                score=row.score,
                max_score=row.max_score,
                time_taken=row.time_taken,
                date_played=row.date_played,
            )
            for row in rows
        ]

    async def ranking(self, db: AsyncSession, class_id: int) -> List[RankingEntry]:
        """Results of a class: best score first, fastest first among equal scores."""
        stmt = (
            select(
                Score.score,
                Score.max_score,
                Score.time_taken,
                Score.date_played,
                Learner.name,
                Learner.identifiant,
            )
            .join(Learner, Learner.id == Score.user_id)
            .where(Learner.class_id == class_id)
            .order_by(Score.score.desc(), Score.time_taken.asc())
        )
        try:
            rows = (await db.execute(stmt)).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to rank results for class {class_id}: {e}")
            raise DatabaseError("Failed to rank results") from e

        return [
            RankingEntry(
                score=row.score,
                max_score=row.max_score,
                time_taken=row.time_taken,
                date_played=row.date_played,
                learner_name=row.name,
                identifiant=row.identifiant,
            )
            for row in rows
        ]
