from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, JSON, Enum
from sqlalchemy.orm import relationship
import enum
import uuid

from app.db import Base
from app.utils.datetime import naive_utc_now


class QuestionCategory(str, enum.Enum):
    career = "career"
    confidence = "confidence"
    leadership = "leadership"
    technical = "technical"
    personal = "personal"


class QuestionStatus(str, enum.Enum):
    pending = "pending"
    matched = "matched"
    answered = "answered"
    closed = "closed"


class Question(Base):
    __tablename__ = "questions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    mentee_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    category = Column(Enum(QuestionCategory), nullable=False)
    is_public = Column(Boolean, nullable=False, default=False)
    status = Column(Enum(QuestionStatus), nullable=False, default=QuestionStatus.pending, index=True)
    # optional background the mentee shares for context
    mentee_profile = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=naive_utc_now)
    updated_at = Column(DateTime, nullable=False, default=naive_utc_now, onupdate=naive_utc_now)

    mentee = relationship("User", back_populates="questions")
    answers = relationship("Answer", back_populates="question", order_by="Answer.created_at")
