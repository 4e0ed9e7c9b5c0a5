from typing import List, Optional
from datetime import datetime

from pydantic import field_validator

from app.schemas.base import CamelModel, require_min_length
from app.schemas.user import UserWithProfileOut

ANSWER_MIN_LENGTH = 20


class AIInsights(CamelModel):
    key_takeaways: List[str]
    action_steps: List[str]


class AnswerCreate(CamelModel):
    question_id: str
    text: str

    @field_validator('text')
    def validate_text(cls, v: str):
        return require_min_length(
            v, ANSWER_MIN_LENGTH, f"Answer must be at least {ANSWER_MIN_LENGTH} characters"
        )


class AnswerHelpfulUpdate(CamelModel):
    is_helpful: bool


class AnswerOut(CamelModel):
    id: str
    question_id: str
    mentor_id: str
    text: str
    ai_insights: Optional[AIInsights] = None
    is_helpful: Optional[bool] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class AnswerWithMentorOut(AnswerOut):
    mentor: Optional[UserWithProfileOut] = None
