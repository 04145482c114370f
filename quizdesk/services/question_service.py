from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import SQLAlchemyError

from quizdesk.core.config import settings
from quizdesk.models.question import Question, QuestionType, OPTION_BASED_TYPES
from quizdesk.models.answer_option import AnswerOption
from quizdesk.db.utils import BaseRepository
from quizdesk.schemas.question_schema import (
    QuestionBase, QuestionCreate, QuestionUpdate, QuestionResponse, AnswerOptionResponse
)
from quizdesk.services.quiz_service import quiz_service
from quizdesk.utils.exceptions import DatabaseError, InvalidInputError, NotFoundError
from quizdesk.core.logging import get_logger

logger = get_logger(__name__)

OPTION_COUNT = 4
TRUE_FALSE_LABELS = ("True", "False")


class QuestionRepository(BaseRepository[Question]):
    def __init__(self):
        super().__init__(Question)

    async def list_active_for_quiz(self, db: AsyncSession, quiz_id: int) -> List[Question]:
        try:
            result = await db.execute(
                select(Question)
                .options(selectinload(Question.options))
                .where(Question.quiz_id == quiz_id, Question.status == "active")
                .order_by(Question.display_order, Question.id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing questions of quiz {quiz_id}: {e}")
            raise DatabaseError("Failed to list questions") from e

    async def get_option_texts(self, db: AsyncSession, question_id: int) -> List[str]:
        result = await db.execute(
            select(AnswerOption.option_text)
            .where(AnswerOption.question_id == question_id)
            .order_by(AnswerOption.choice_index)
        )
        return list(result.scalars().all())

    async def replace_options(self, db: AsyncSession, question_id: int, options: List[AnswerOption]) -> None:
        try:
            await db.execute(delete(AnswerOption).where(AnswerOption.question_id == question_id))
            for option in options:
                option.question_id = question_id
            db.add_all(options)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error replacing options of question {question_id}: {e}")
            raise DatabaseError("Failed to save answer options") from e


def build_options(
        question_type: QuestionType,
        texts: Optional[List[str]],
        correct_choice: Optional[int],
        correct_order: Optional[List[int]]
) -> List[AnswerOption]:
    """
    Answer options for an option-based question.

    True/false questions always get the two fixed labels. Choice and ordering
    questions need exactly four non-blank texts; correct_order ranks them for
    ordering questions.
    """
    if question_type == QuestionType.TRUE_FALSE:
        return [
            AnswerOption(choice_index=index, option_text=label, is_correct=correct_choice == index)
            for index, label in enumerate(TRUE_FALSE_LABELS, start=1)
        ]

    if not texts or len(texts) != OPTION_COUNT or not all(t and t.strip() for t in texts):
        raise InvalidInputError(
            f"{OPTION_COUNT} answer options are required for {question_type.value} questions",
            field="options"
        )

    ranks: List[Optional[int]] = [None] * OPTION_COUNT
    if question_type == QuestionType.ORDERING:
        ranks = list(correct_order or settings.DEFAULT_CORRECT_ORDER)
        if len(ranks) != OPTION_COUNT or len(set(ranks)) != OPTION_COUNT:
            raise InvalidInputError(
                f"correct_order must rank the {OPTION_COUNT} options with distinct values",
                field="correct_order"
            )

    return [
        AnswerOption(
            choice_index=index,
            option_text=text.strip(),
            is_correct=correct_choice == index,
            correct_order=rank
        )
        for index, (text, rank) in enumerate(zip(texts, ranks), start=1)
    ]


def to_response(question: Question) -> QuestionResponse:
    question_type = QuestionType(question.type)
    options = [AnswerOptionResponse.model_validate(o) for o in question.options]

    # Legacy true/false rows stored without options
    if question_type == QuestionType.TRUE_FALSE and not options:
        options = [
            AnswerOptionResponse(choice_index=index, option_text=label, is_correct=False)
            for index, label in enumerate(TRUE_FALSE_LABELS, start=1)
        ]

    return QuestionResponse(
        id=question.id,
        question_text=question.question_text,
        type=question_type,
        time_limit=question.time_limit,
        display_order=question.display_order,
        image_url=question.image_url,
        options=options,
        canonical_answer=question.canonical_answer if question_type == QuestionType.FREE_TEXT else None,
    )


class QuestionService:
    """Question authoring; feeds the answer key read by the scoring engine"""

    def __init__(self):
        self.question_repo = QuestionRepository()

    @staticmethod
    def _canonical_answer(data: QuestionBase) -> Optional[str]:
        if data.type != QuestionType.FREE_TEXT:
            return None
        return data.canonical_answer or None

    async def list_for_quiz(self, db: AsyncSession, quiz_id: int) -> List[QuestionResponse]:
        questions = await self.question_repo.list_active_for_quiz(db, quiz_id)
        return [to_response(q) for q in questions]

    async def create_question(self, db: AsyncSession, data: QuestionCreate) -> Question:
        quiz = await quiz_service.get_quiz(db, data.quiz_id)

        options: List[AnswerOption] = []
        if data.type in OPTION_BASED_TYPES:
            options = build_options(data.type, data.options, data.correct_choice, data.correct_order)

        question = await self.question_repo.create(
            db,
            quiz_id=quiz.id,
            subject_id=quiz.subject_id,
            question_text=data.question_text,
            type=data.type.value,
            time_limit=data.time_limit,
            display_order=data.display_order,
            image_url=data.image_url or None,
            canonical_answer=self._canonical_answer(data),
            status="active"
        )
        if options:
            await self.question_repo.replace_options(db, question.id, options)

        logger.info(f"Created {data.type.value} question {question.id} in quiz {quiz.id}")
        return question

    async def update_question(self, db: AsyncSession, question_id: int, data: QuestionUpdate) -> Question:
        question = await self.question_repo.get_by_id(db, question_id)
        if question is None or question.status != "active":
            raise NotFoundError(f"Question {question_id} not found")

        options: List[AnswerOption] = []
        if data.type in OPTION_BASED_TYPES:
            texts = data.options
            if data.type != QuestionType.TRUE_FALSE and not texts:
                # Keep the previous texts, only correctness and ranks change
                texts = await self.question_repo.get_option_texts(db, question_id)
                if len(texts) != OPTION_COUNT:
                    raise InvalidInputError("Previous answer options are missing", field="options")
            options = build_options(data.type, texts, data.correct_choice, data.correct_order)

        question.question_text = data.question_text
        question.type = data.type.value
        question.time_limit = data.time_limit
        question.display_order = data.display_order
        question.image_url = data.image_url or None
        question.canonical_answer = self._canonical_answer(data)

        await self.question_repo.replace_options(db, question_id, options)

        logger.info(f"Updated question {question_id}")
        return question

    async def delete_question(self, db: AsyncSession, question_id: int) -> None:
        await self.question_repo.replace_options(db, question_id, [])
        if not await self.question_repo.delete(db, question_id):
            raise NotFoundError(f"Question {question_id} not found")
        logger.info(f"Deleted question {question_id}")


question_service = QuestionService()
