from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from quizdesk.db.base import BaseModel


class Establishment(BaseModel):
    __tablename__ = "establishments"

    name: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
