from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from quizdesk.db.base import BaseModel


class ClassRoom(BaseModel):
    __tablename__ = "classes"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
