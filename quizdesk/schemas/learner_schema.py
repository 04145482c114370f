from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class LearnerRegister(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=150)
    establishment_id: int = Field(..., gt=0)
    class_id: int = Field(..., gt=0)
    pin_code: str = Field(..., min_length=1)


class LearnerLogin(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    identifiant: str = Field(..., min_length=1)
    pin_code: str = Field(..., min_length=1)


class LearnerRegistered(BaseModel):
    identifiant: str


class LearnerProfile(BaseModel):
    id: int
    name: str
    identifiant: str
    class_id: Optional[int]
    establishment: Optional[str]
    class_name: Optional[str]
    pin_code: Optional[str]
    is_active: bool


class LearnerListItem(BaseModel):
    id: int
    identifiant: str
    name: str
    establishment: Optional[str]
    class_name: Optional[str]
    pin_code: Optional[str]
