from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.db.session import get_db
from quizdesk.schemas.common_schema import MessageResponse
from quizdesk.schemas.question_schema import QuestionCreate, QuestionUpdate
from quizdesk.services.question_service import question_service

router = APIRouter()


@router.post("", response_model=MessageResponse, status_code=201)
async def create_question(data: QuestionCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a question and its answer options

    Choice and ordering questions take four option texts; true/false
    questions get fixed options; free_text questions take canonical_answer.
    """
    question = await question_service.create_question(db, data)
    return MessageResponse(message="Question created", id=question.id)


@router.put("/{question_id}", response_model=MessageResponse)
async def update_question(question_id: int, data: QuestionUpdate, db: AsyncSession = Depends(get_db)):
    """Update a question; omitted option texts keep their previous values"""
    await question_service.update_question(db, question_id, data)
    return MessageResponse(message="Question updated", id=question_id)


@router.delete("/{question_id}", response_model=MessageResponse)
async def delete_question(question_id: int, db: AsyncSession = Depends(get_db)):
    await question_service.delete_question(db, question_id)
    return MessageResponse(message="Question deleted", id=question_id)
