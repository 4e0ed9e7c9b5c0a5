from app.models.user import User, UserRole
from app.models.mentor_profile import MentorProfile
from app.models.question import Question, QuestionCategory, QuestionStatus
from app.models.answer import Answer
from app.models.mentor_application import (
    MentorApplication,
    ApplicationStatus,
    BackgroundCheckStatus,
)

__all__ = [
    "User",
    "UserRole",
    "MentorProfile",
    "Question",
    "QuestionCategory",
    "QuestionStatus",
    "Answer",
    "MentorApplication",
    "ApplicationStatus",
    "BackgroundCheckStatus",
]
