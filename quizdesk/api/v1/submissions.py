from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.db.session import get_db
from quizdesk.dependencies import get_scoring_engine
from quizdesk.schemas.submission_schema import QuizSubmission, QuizSubmissionResult
from quizdesk.services.scoring_service import ScoringEngine

router = APIRouter()


@router.post("/submit", response_model=QuizSubmissionResult, status_code=201)
async def submit_quiz(
        submission: QuizSubmission,
        db: AsyncSession = Depends(get_db),
        engine: ScoringEngine = Depends(get_scoring_engine)
):
    """
    Score a learner's answers for an open quiz and record the result

    Each answer carries question_id and one of choice_index, text_answer
    or puzzle_order. max_score is the number of submitted answers.
    """
    outcome = await engine.score(
        db,
        quiz_id=submission.quiz_id,
        identifiant=submission.identifiant,
        answers=submission.answers,
        time_taken=submission.time_taken
    )

    return QuizSubmissionResult(
        score=outcome.score,
        max_score=outcome.max_score,
        pourcentage=outcome.percentage,
        time_taken=outcome.time_taken
    )
