from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.db.session import get_db
from quizdesk.schemas.common_schema import MessageResponse
from quizdesk.schemas.pin_schema import PinCreate, PinStatusUpdate, PinResponse
from quizdesk.services.pin_service import pin_service

router = APIRouter()


@router.get("", response_model=List[PinResponse])
async def list_pins(db: AsyncSession = Depends(get_db)):
    """All PIN codes, active and deactivated"""
    return await pin_service.list_pins(db)


@router.get("/active", response_model=List[PinResponse])
async def list_active_pins(db: AsyncSession = Depends(get_db)):
    return await pin_service.list_active_pins(db)


@router.post("", response_model=MessageResponse, status_code=201)
async def create_pin(data: PinCreate, db: AsyncSession = Depends(get_db)):
    pin = await pin_service.create_pin(db, data)
    return MessageResponse(message="PIN created", id=pin.id)


@router.put("/{pin_id}/status", response_model=MessageResponse)
async def update_pin_status(pin_id: int, data: PinStatusUpdate, db: AsyncSession = Depends(get_db)):
    await pin_service.set_status(db, pin_id, data.is_active)
    return MessageResponse(message="PIN activated" if data.is_active else "PIN deactivated", id=pin_id)


@router.delete("/{pin_id}", response_model=MessageResponse)
async def delete_pin(pin_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a PIN code no learner references"""
    await pin_service.delete_pin(db, pin_id)
    return MessageResponse(message="PIN deleted", id=pin_id)
