from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, Integer, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from quizdesk.db.base import BaseModel
if TYPE_CHECKING:
    from quizdesk.models.question import Question


class AnswerOption(BaseModel):
    __tablename__ = "answer_options"
    __table_args__ = (
        UniqueConstraint("question_id", "choice_index", name="uq_answer_options_question_choice"),
    )

    question_id: Mapped[int] = mapped_column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    choice_index: Mapped[int] = mapped_column(Integer, nullable=False)
    option_text: Mapped[str] = mapped_column(String(500), nullable=False)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Rank in the expected permutation of an ordering question
    correct_order: Mapped[Optional[int]] = mapped_column(Integer)

    question: Mapped["Question"] = relationship("Question", back_populates="options")
