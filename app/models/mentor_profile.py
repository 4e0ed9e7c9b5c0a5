from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Integer, Boolean, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid

from app.db import Base
from app.utils.datetime import naive_utc_now


class MentorProfile(Base):
    __tablename__ = "mentor_profiles"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True, unique=True)

    title = Column(String, nullable=True)
    company = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    # list of expertise tags, e.g. ["career", "technical"]
    expertise = Column(JSON, nullable=True, default=list)
    weekly_capacity = Column(Integer, nullable=False, default=5)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, default=naive_utc_now)
    updated_at = Column(DateTime, nullable=False, default=naive_utc_now, onupdate=naive_utc_now)

    user = relationship("User", back_populates="mentor_profile")

    __table_args__ = (
        UniqueConstraint('user_id', name='uq_mentor_profile_user_id'),
    )
