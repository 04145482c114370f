from typing import Optional
from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from quizdesk.db.base import BaseModel


class Learner(BaseModel):
    __tablename__ = "users"

    identifiant: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    establishment_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("establishments.id"))
    class_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("classes.id"), index=True)
    pin_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("pin_codes.id"))
