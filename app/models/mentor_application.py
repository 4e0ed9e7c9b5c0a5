from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, JSON, Enum
from sqlalchemy.orm import relationship
import enum
import uuid

from app.db import Base
from app.utils.datetime import naive_utc_now


class ApplicationStatus(str, enum.Enum):
    pending = "pending"
    under_review = "under_review"
    approved = "approved"
    rejected = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in (ApplicationStatus.approved, ApplicationStatus.rejected)


class BackgroundCheckStatus(str, enum.Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    failed = "failed"


class MentorApplication(Base):
    __tablename__ = "mentor_applications"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    # one per user, enforced by the submit route rather than a constraint
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(Enum(ApplicationStatus), nullable=False, default=ApplicationStatus.pending)

    # Professional information
    current_title = Column(String, nullable=False)
    current_company = Column(String, nullable=False)
    work_email = Column(String, nullable=False)
    linkedin_profile = Column(String, nullable=True)
    years_experience = Column(Integer, nullable=False)
    expertise = Column(JSON, nullable=False, default=list)
    industries = Column(JSON, nullable=False, default=list)

    # Background
    education = Column(JSON, nullable=False)
    work_history = Column(JSON, nullable=False)
    certifications = Column(JSON, nullable=True)

    # Mentoring
    bio = Column(Text, nullable=False)
    mentoring_experience = Column(Text, nullable=True)
    mentoring_motivation = Column(Text, nullable=False)
    availability_hours = Column(Integer, nullable=False)
    preferred_categories = Column(JSON, nullable=False, default=list)

    references = Column(JSON, nullable=False)

    # Verification
    work_email_verified = Column(Boolean, default=False)
    linkedin_verified = Column(Boolean, default=False)
    background_check_status = Column(Enum(BackgroundCheckStatus), default=BackgroundCheckStatus.pending)
    references_contacted = Column(Boolean, default=False)

    # Review
    admin_notes = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    reviewed_by = Column(String, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=naive_utc_now)
    updated_at = Column(DateTime, nullable=False, default=naive_utc_now, onupdate=naive_utc_now)

    user = relationship("User", foreign_keys=[user_id])
    reviewer = relationship("User", foreign_keys=[reviewed_by])
