from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class PinCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    code: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=255)


class PinStatusUpdate(BaseModel):
    is_active: bool


class PinResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    description: Optional[str]
    is_active: bool
    used_by: Optional[int] = None
    used_at: Optional[datetime] = None
    used_by_name: Optional[str] = None
