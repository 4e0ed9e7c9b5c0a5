from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
import uuid

from app.db import Base
from app.utils.datetime import naive_utc_now


class Answer(Base):
    __tablename__ = "answers"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    question_id = Column(String, ForeignKey("questions.id"), nullable=False, index=True)
    mentor_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    # {"keyTakeaways": [...], "actionSteps": [...]} once enrichment has run
    ai_insights = Column(JSON, nullable=True)
    # mentee feedback; None until the mentee rates the answer
    is_helpful = Column(Boolean, nullable=True)
    created_at = Column(DateTime, nullable=False, default=naive_utc_now)
    updated_at = Column(DateTime, nullable=False, default=naive_utc_now, onupdate=naive_utc_now)

    question = relationship("Question", back_populates="answers")
    mentor = relationship("User", back_populates="answers")
