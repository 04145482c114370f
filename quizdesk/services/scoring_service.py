import asyncio
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence, Tuple, Union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from quizdesk.core.config import settings
from quizdesk.core.logging import get_logger, get_performance_logger
from quizdesk.schemas.submission_schema import SubmissionAnswerIn
from quizdesk.services.answer_key_store import AnswerKeyStore
from quizdesk.services.learner_service import LearnerRepository
from quizdesk.services.quiz_service import QuizRepository
from quizdesk.services.result_ledger import ResultLedger
from quizdesk.utils.exceptions import (
    DatabaseError, InvalidInputError, NotFoundError, QuizUnavailableError, RequestTimeoutError
)

logger = get_logger(__name__)
performance_logger = get_performance_logger(__name__)


def normalize_text(value: str) -> str:
    return value.strip().casefold()


@dataclass(frozen=True)
class ChoiceAnswer:
    question_id: int
    choice_index: int

    async def is_correct(self, key_store: AnswerKeyStore) -> bool:
        option = await key_store.get_option(self.question_id, self.choice_index)
        return bool(option is not None and option.is_correct)


@dataclass(frozen=True)
class FreeTextAnswer:
    question_id: int
    text: str

    async def is_correct(self, key_store: AnswerKeyStore) -> bool:
        canonical = await key_store.get_canonical_text(self.question_id)
        if not canonical:
            return False
        return normalize_text(canonical) == normalize_text(self.text)


@dataclass(frozen=True)
class OrderingAnswer:
    question_id: int
    order: Tuple[int, ...]

    async def is_correct(self, key_store: AnswerKeyStore) -> bool:
        expected = await key_store.get_ordering(self.question_id)
        return list(self.order) == expected


SubmissionAnswer = Union[ChoiceAnswer, FreeTextAnswer, OrderingAnswer]


def classify_answer(raw: SubmissionAnswerIn) -> Optional[SubmissionAnswer]:
    """
    Pick the answer variant from the fields present on the payload.

    choice_index wins over text_answer, which wins over puzzle_order.
    Returns None for a payload matching none of the shapes.
    """
    if raw.question_id is None:
        return None
    if raw.choice_index is not None:
        return ChoiceAnswer(raw.question_id, raw.choice_index)
    if raw.text_answer is not None:
        return FreeTextAnswer(raw.question_id, raw.text_answer)
    if raw.puzzle_order is not None:
        return OrderingAnswer(raw.question_id, tuple(raw.puzzle_order))
    return None


def compute_percentage(score: int, max_score: int) -> int:
    """score / max_score as a whole percentage, midpoints rounded away from zero."""
    ratio = Decimal(score) * 100 / Decimal(max_score)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class ScoreOutcome:
    score: int
    max_score: int
    percentage: int
    time_taken: int
    result_id: int


class ScoringEngine:
    """Validates a quiz submission, scores it and records the result."""

    def __init__(
            self,
            ledger: Optional[ResultLedger] = None,
            timeout_seconds: Optional[float] = None
    ):
        self.ledger = ledger or ResultLedger()
        self.learner_repo = LearnerRepository()
        self.quiz_repo = QuizRepository()
        self.timeout_seconds = timeout_seconds or settings.SUBMISSION_TIMEOUT_SECONDS

    async def score(
            self,
            db: AsyncSession,
            quiz_id: Optional[int],
            identifiant: Optional[str],
            answers: Optional[Sequence[SubmissionAnswerIn]],
            time_taken: int = 0
    ) -> ScoreOutcome:
        """
        Score a submission and append exactly one result row.

        Gate checks run in order and each fails without side effects:
        unknown learner (NotFoundError), empty answers (InvalidInputError),
        unknown or inactive quiz (QuizUnavailableError). The result row is
        written only after every answer has been evaluated; any storage
        failure or a timeout aborts before that point. The outcome is
        returned only once the row is committed.
        """
        try:
            with performance_logger.measure_time("score_submission", quiz_id=quiz_id):
                outcome = await asyncio.wait_for(
                    self._score(db, quiz_id, identifiant, answers, time_taken),
                    timeout=self.timeout_seconds
                )
        except asyncio.TimeoutError:
            logger.error(
                f"Submission for quiz {quiz_id} timed out after {self.timeout_seconds}s",
                extra={"quiz_id": quiz_id}
            )
            raise RequestTimeoutError(
                "Submission scoring timed out",
                timeout_seconds=self.timeout_seconds
            )

        try:
            await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to commit result of quiz {quiz_id}: {e}", extra={"quiz_id": quiz_id})
            raise DatabaseError("Failed to record result") from e

        return outcome

    async def _score(
            self,
            db: AsyncSession,
            quiz_id: Optional[int],
            identifiant: Optional[str],
            answers: Optional[Sequence[SubmissionAnswerIn]],
            time_taken: int
    ) -> ScoreOutcome:
        if not identifiant or not identifiant.strip():
            raise InvalidInputError("identifiant is required", field="identifiant")

        learner = await self.learner_repo.get_by_identifiant(db, identifiant)
        if learner is None:
            raise NotFoundError(f"Learner {identifiant} not found")

        if not answers:
            raise InvalidInputError("answers must be a non-empty list", field="answers")

        # Read once; a quiz closed after this point still accepts this submission
        quiz = await self.quiz_repo.get_by_id(db, quiz_id) if quiz_id is not None else None
        if quiz is None or not quiz.is_active:
            raise QuizUnavailableError(quiz_id)

        key_store = AnswerKeyStore(db)
        score = 0
        for raw in answers:
            answer = classify_answer(raw)
            if answer is None:
                # Known quirk: an unrecognized answer never scores but still
                # counts toward max_score below.
                continue
            if await answer.is_correct(key_store):
                score += 1

        max_score = len(answers)
        percentage = compute_percentage(score, max_score)

        result_id = await self.ledger.append(
            db,
            quiz_id=quiz.id,
            user_id=learner.id,
            score=score,
            max_score=max_score,
            time_taken=time_taken
        )

        logger.info(
            f"Quiz {quiz.id} submitted by {learner.identifiant}: {score}/{max_score}",
            extra={"quiz_id": quiz.id, "learner_id": learner.id}
        )

        return ScoreOutcome(
            score=score,
            max_score=max_score,
            percentage=percentage,
            time_taken=time_taken,
            result_id=result_id
        )
