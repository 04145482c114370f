from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.db.session import get_db
from quizdesk.schemas.common_schema import MessageResponse
from quizdesk.schemas.learner_schema import (
    LearnerRegister, LearnerRegistered, LearnerLogin, LearnerProfile, LearnerListItem
)
from quizdesk.services.learner_service import learner_service

router = APIRouter()


@router.post("/register", response_model=LearnerRegistered, status_code=201)
async def register_learner(data: LearnerRegister, db: AsyncSession = Depends(get_db)):
    """Register a learner with an active PIN code and return the generated identifiant"""
    learner = await learner_service.register(db, data)
    return LearnerRegistered(identifiant=learner.identifiant)


@router.post("/login", response_model=LearnerProfile)
async def login_learner(data: LearnerLogin, db: AsyncSession = Depends(get_db)):
    return await learner_service.login(db, data)


@router.get("", response_model=List[LearnerListItem])
async def list_learners(db: AsyncSession = Depends(get_db)):
    return await learner_service.list_learners(db)


@router.delete("/{learner_id}", response_model=MessageResponse)
async def delete_learner(learner_id: int, db: AsyncSession = Depends(get_db)):
    await learner_service.delete_learner(db, learner_id)
    return MessageResponse(message="Learner deleted", id=learner_id)
