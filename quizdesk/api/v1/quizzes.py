from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.db.session import get_db
from quizdesk.core.logging import get_logger
from quizdesk.schemas.common_schema import MessageResponse
from quizdesk.schemas.quiz_schema import QuizCreate, QuizUpdate, QuizResponse
from quizdesk.schemas.question_schema import QuestionResponse
from quizdesk.services.quiz_service import quiz_service
from quizdesk.services.question_service import question_service

logger = get_logger(__name__)
router = APIRouter()


@router.get("", response_model=List[QuizResponse])
async def list_quizzes(
        db: AsyncSession = Depends(get_db),
        class_id: Optional[int] = Query(None),
        subject_id: Optional[int] = Query(None),
        is_active: Optional[bool] = Query(None)
):
    """
    List quizzes, newest first

    Args:
        class_id: Only quizzes of this class
        subject_id: Only quizzes of this subject
        is_active: Only open (true) or closed (false) quizzes
    """
    return await quiz_service.list_quizzes(db, class_id, subject_id, is_active)


@router.post("", response_model=MessageResponse, status_code=201)
async def create_quiz(quiz_data: QuizCreate, db: AsyncSession = Depends(get_db)):
    quiz = await quiz_service.create_quiz(db, quiz_data)
    return MessageResponse(message="Quiz created", id=quiz.id)


@router.put("/{quiz_id}", response_model=MessageResponse)
async def update_quiz(quiz_id: int, quiz_data: QuizUpdate, db: AsyncSession = Depends(get_db)):
    """Update a quiz; is_active defaults to true when omitted"""
    await quiz_service.update_quiz(db, quiz_id, quiz_data)
    return MessageResponse(message="Quiz updated", id=quiz_id)


@router.delete("/{quiz_id}", response_model=MessageResponse)
async def delete_quiz(quiz_id: int, db: AsyncSession = Depends(get_db)):
    await quiz_service.delete_quiz(db, quiz_id)
    return MessageResponse(message="Quiz deleted", id=quiz_id)


@router.get("/{quiz_id}/questions", response_model=List[QuestionResponse])
async def list_quiz_questions(quiz_id: int, db: AsyncSession = Depends(get_db)):
    """Active questions of a quiz with their answer options, in display order"""
    questions = await question_service.list_for_quiz(db, quiz_id)
    logger.info(f"Retrieved {len(questions)} questions for quiz {quiz_id}")
    return questions
