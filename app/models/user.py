from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.orm import relationship
import enum
from app.db import Base
from app.utils.datetime import naive_utc_now
import uuid


class UserRole(str, enum.Enum):
    mentee = "mentee"
    mentor = "mentor"
    both = "both"


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    email = Column(String, unique=True, index=True, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.mentee)
    created_at = Column(DateTime, default=naive_utc_now)
    updated_at = Column(DateTime, default=naive_utc_now, onupdate=naive_utc_now)

    # One-to-one extension for users who mentor
    mentor_profile = relationship("MentorProfile", back_populates="user", uselist=False)
    # Questions asked (as mentee) and answers given (as mentor)
    questions = relationship("Question", back_populates="mentee")
    answers = relationship("Answer", back_populates="mentor")

    @property
    def display_name(self) -> str:
        name = " ".join(p for p in (self.first_name, self.last_name) if p)
        if name:
            return name
        if self.email:
            return self.email.split("@")[0].title()
        return "there"
