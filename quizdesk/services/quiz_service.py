from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from quizdesk.models.quiz import Quiz
from quizdesk.db.utils import BaseRepository
from quizdesk.schemas.quiz_schema import QuizCreate, QuizUpdate, QuizResponse
from quizdesk.utils.exceptions import DatabaseError, NotFoundError
from quizdesk.core.logging import get_logger

logger = get_logger(__name__)


class QuizRepository(BaseRepository[Quiz]):
    def __init__(self):
        super().__init__(Quiz)

    async def list_filtered(
            self,
            db: AsyncSession,
            class_id: Optional[int] = None,
            subject_id: Optional[int] = None,
            is_active: Optional[bool] = None
    ) -> List[Quiz]:
        query = select(Quiz)
        if class_id is not None:
            query = query.where(Quiz.class_id == class_id)
        if subject_id is not None:
            query = query.where(Quiz.subject_id == subject_id)
        if is_active is not None:
            query = query.where(Quiz.is_active == is_active)
        query = query.order_by(Quiz.id.desc())

        try:
            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing quizzes: {e}")
            raise DatabaseError("Failed to list quizzes") from e


class QuizService:
    """Quiz authoring and lookup"""

    def __init__(self):
        self.quiz_repo = QuizRepository()

    async def list_quizzes(
            self,
            db: AsyncSession,
            class_id: Optional[int] = None,
            subject_id: Optional[int] = None,
            is_active: Optional[bool] = None
    ) -> List[QuizResponse]:
        quizzes = await self.quiz_repo.list_filtered(db, class_id, subject_id, is_active)
        return [QuizResponse.model_validate(q) for q in quizzes]

    async def create_quiz(self, db: AsyncSession, quiz_data: QuizCreate) -> Quiz:
        quiz = await self.quiz_repo.create(
            db,
            class_id=quiz_data.class_id,
            subject_id=quiz_data.subject_id,
            title=quiz_data.title,
            description=quiz_data.description or None,
            type=quiz_data.type or "choice",
            created_by=quiz_data.created_by,
            is_active=True
        )
        logger.info(f"Created quiz {quiz.id} for class {quiz.class_id}")
        return quiz

    async def update_quiz(self, db: AsyncSession, quiz_id: int, quiz_data: QuizUpdate) -> Quiz:
        quiz = await self.quiz_repo.get_by_id_or_404(db, quiz_id)

        quiz.title = quiz_data.title
        quiz.description = quiz_data.description or None
        quiz.type = quiz_data.type or "choice"
        # Omitting is_active reopens the quiz
        quiz.is_active = True if quiz_data.is_active is None else quiz_data.is_active

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error updating quiz {quiz_id}: {e}")
            raise DatabaseError("Failed to update quiz") from e

        logger.info(f"Updated quiz {quiz_id} (active={quiz.is_active})")
        return quiz

    async def delete_quiz(self, db: AsyncSession, quiz_id: int) -> None:
        quiz = await self.quiz_repo.get_by_id_or_404(db, quiz_id)
        try:
            # ORM delete so questions and their options cascade
            await db.delete(quiz)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error deleting quiz {quiz_id}: {e}")
            raise DatabaseError("Failed to delete quiz") from e
        logger.info(f"Deleted quiz {quiz_id}")

    async def get_quiz(self, db: AsyncSession, quiz_id: int) -> Quiz:
        quiz = await self.quiz_repo.get_by_id(db, quiz_id)
        if not quiz:
            raise NotFoundError(f"Quiz {quiz_id} not found")
        return quiz


quiz_service = QuizService()
