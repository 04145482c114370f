import enum
from typing import Optional, List, TYPE_CHECKING
from sqlalchemy import String, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship, Mapped, mapped_column
from quizdesk.db.base import BaseModel
if TYPE_CHECKING:
    from quizdesk.models.quiz import Quiz
    from quizdesk.models.answer_option import AnswerOption


class QuestionType(str, enum.Enum):
    CHOICE = "choice"
    TRUE_FALSE = "true_false"
    ORDERING = "ordering"
    FREE_TEXT = "free_text"


# Question types whose answers live in answer_options
OPTION_BASED_TYPES = (QuestionType.CHOICE, QuestionType.TRUE_FALSE, QuestionType.ORDERING)


class Question(BaseModel):
    __tablename__ = "questions"

    quiz_id: Mapped[int] = mapped_column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("subjects.id"))
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default=QuestionType.CHOICE.value)
    time_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    image_url: Mapped[Optional[str]] = mapped_column(String(500))
    # Only meaningful for free_text questions
    canonical_answer: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    # Relationships
    quiz: Mapped["Quiz"] = relationship("Quiz", back_populates="questions")
    options: Mapped[List["AnswerOption"]] = relationship(
        "AnswerOption",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="AnswerOption.choice_index",
    )
