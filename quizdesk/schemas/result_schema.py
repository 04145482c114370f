from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class ResultListItem(BaseModel):
    id: int
    learner_name: str
    identifiant: str
    class_name: Optional[str]
    quiz_title: Optional[str]
    score: int
    max_score: int
    time_taken: int
    date_played: Optional[datetime]


class RankingEntry(BaseModel):
    score: int
    max_score: int
    time_taken: int
    date_played: Optional[datetime]
    learner_name: str
    identifiant: str
