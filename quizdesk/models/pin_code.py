from typing import Optional
from datetime import datetime
from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column
from quizdesk.db.base import BaseModel


class PinCode(BaseModel):
    __tablename__ = "pin_codes"

    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    used_by: Mapped[Optional[int]] = mapped_column(Integer)
    used_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class LearnerPinLog(BaseModel):
    __tablename__ = "user_pin_logs"

    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    pin_id: Mapped[int] = mapped_column(Integer, ForeignKey("pin_codes.id"), nullable=False)
    logged_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
