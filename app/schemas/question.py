from typing import Any, Dict, List, Optional
from datetime import datetime

from pydantic import field_validator

from app.models.question import QuestionCategory, QuestionStatus
from app.schemas.answer import AnswerWithMentorOut
from app.schemas.base import CamelModel, require_min_length
from app.schemas.user import UserOut

QUESTION_MIN_LENGTH = 10


class QuestionCreate(CamelModel):
    text: str
    category: QuestionCategory
    is_public: bool = False
    # free-form background the mentee wants the mentor to see
    mentee_profile: Optional[Dict[str, Any]] = None

    @field_validator('text')
    def validate_text(cls, v: str):
        return require_min_length(
            v, QUESTION_MIN_LENGTH, f"Question must be at least {QUESTION_MIN_LENGTH} characters"
        )


class QuestionOut(CamelModel):
    id: str
    mentee_id: str
    text: str
    category: QuestionCategory
    is_public: bool
    status: QuestionStatus
    mentee_profile: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class QuestionWithAnswersOut(QuestionOut):
    answers: List[AnswerWithMentorOut] = []
    mentee: Optional[UserOut] = None
