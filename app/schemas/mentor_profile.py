from typing import List, Optional
from datetime import datetime

from pydantic import Field, field_validator

from app.schemas.base import CamelModel


def _clean_expertise(v: list[str] | None) -> list[str] | None:
    if v is None:
        return None
    # drop blanks and duplicates, keep order
    seen: list[str] = []
    for item in v:
        item = item.strip()
        if item and item not in seen:
            seen.append(item)
    return seen


class MentorProfileIn(CamelModel):
    title: Optional[str] = None
    company: Optional[str] = None
    bio: Optional[str] = None
    expertise: List[str] = []
    weekly_capacity: int = Field(default=5, ge=0, le=100)
    is_active: bool = True

    @field_validator('expertise')
    def clean_expertise(cls, v: list[str]):
        return _clean_expertise(v)


class MentorProfileUpdate(CamelModel):
    title: Optional[str] = None
    company: Optional[str] = None
    bio: Optional[str] = None
    expertise: Optional[List[str]] = None
    weekly_capacity: Optional[int] = Field(default=None, ge=0, le=100)
    is_active: Optional[bool] = None

    @field_validator('expertise')
    def clean_expertise(cls, v: list[str] | None):
        return _clean_expertise(v)


class MentorProfileOut(CamelModel):
    id: str
    user_id: str
    title: Optional[str] = None
    company: Optional[str] = None
    bio: Optional[str] = None
    expertise: List[str] = []
    weekly_capacity: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('expertise', mode='before')
    def none_as_empty(cls, v):
        return v or []
