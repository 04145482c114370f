from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class QuizBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    type: str = Field("choice", max_length=30)


class QuizCreate(QuizBase):
    class_id: int = Field(..., gt=0)
    subject_id: Optional[int] = None
    created_by: Optional[int] = None


class QuizUpdate(QuizBase):
    is_active: Optional[bool] = None


class QuizResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    class_id: int
    subject_id: Optional[int]
    title: str
    description: Optional[str]
    type: str
    is_active: bool
    created_by: Optional[int]
    created_at: Optional[datetime] = None
