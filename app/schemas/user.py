from typing import Optional
from datetime import datetime

from pydantic import field_validator

from app.models.user import UserRole
from app.schemas.base import CamelModel
from app.schemas.mentor_profile import MentorProfileOut


class UserOut(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: UserRole
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserWithProfileOut(UserOut):
    mentor_profile: Optional[MentorProfileOut] = None


class UserUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: Optional[UserRole] = None

    @field_validator('profile_image_url')
    def validate_url(cls, v: str | None):
        if v is None or v.strip() == "":
            return None
        if not (v.startswith('http://') or v.startswith('https://')):
            raise ValueError('profileImageUrl must start with http(s)://')
        return v
