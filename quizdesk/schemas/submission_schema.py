from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict


class SubmissionAnswerIn(BaseModel):
    """
    One submitted answer. Exactly one of choice_index, text_answer or
    puzzle_order is expected; anything else is accepted and scored as a miss.
    """
    model_config = ConfigDict(extra="ignore")

    question_id: Optional[int] = None
    choice_index: Optional[int] = None
    text_answer: Optional[str] = None
    puzzle_order: Optional[List[int]] = None


class QuizSubmission(BaseModel):
    quiz_id: Optional[int] = None
    identifiant: Optional[str] = None
    answers: Optional[List[SubmissionAnswerIn]] = None
    time_taken: int = Field(0, ge=0, description="Time taken in seconds")


class QuizSubmissionResult(BaseModel):
    score: int = Field(..., ge=0)
    max_score: int = Field(..., ge=1)
    pourcentage: int = Field(..., ge=0, le=100)
    time_taken: int
