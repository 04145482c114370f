from typing import Optional
from datetime import datetime
from sqlalchemy import Integer, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column
from quizdesk.db.base import BaseModel


class Score(BaseModel):
    """One row per submission attempt. Written once, never updated."""
    __tablename__ = "scores"

    quiz_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("quizzes.id", ondelete="SET NULL"), index=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    max_score: Mapped[int] = mapped_column(Integer, nullable=False)
    time_taken: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    date_played: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
