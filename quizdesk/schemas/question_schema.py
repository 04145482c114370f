from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from quizdesk.models.question import QuestionType


class QuestionBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    question_text: str = Field(..., min_length=1)
    type: QuestionType = QuestionType.CHOICE
    time_limit: int = Field(30, ge=1, description="Seconds allowed for the question")
    display_order: int = 0
    image_url: Optional[str] = None
    options: Optional[List[str]] = Field(None, description="Option texts for choice and ordering questions")
    correct_choice: Optional[int] = Field(None, ge=1, description="Choice index of the correct option")
    correct_order: Optional[List[int]] = Field(None, description="Rank of each option in the expected order")
    canonical_answer: Optional[str] = Field(None, description="Accepted answer for free_text questions")


class QuestionCreate(QuestionBase):
    quiz_id: int = Field(..., gt=0)


class QuestionUpdate(QuestionBase):
    pass


class AnswerOptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    choice_index: int
    option_text: str
    is_correct: bool
    correct_order: Optional[int] = None


class QuestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    question_text: str
    type: QuestionType
    time_limit: int
    display_order: int
    image_url: Optional[str]
    options: List[AnswerOptionResponse]
    canonical_answer: Optional[str] = None
