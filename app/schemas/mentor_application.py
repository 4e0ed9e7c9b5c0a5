from typing import Any, List, Optional
from datetime import datetime

from pydantic import AliasChoices, EmailStr, Field, field_validator

from app.models.mentor_application import ApplicationStatus, BackgroundCheckStatus
from app.models.question import QuestionCategory
from app.schemas.base import CamelModel, require_min_length
from app.utils.datetime import utc_now

BIO_MIN_LENGTH = 50
MOTIVATION_MIN_LENGTH = 30
MIN_REFERENCES = 2
MIN_AVAILABILITY_HOURS = 1
MAX_AVAILABILITY_HOURS = 20
EARLIEST_GRADUATION_YEAR = 1980


class Education(CamelModel):
    degree: str = Field(min_length=2)
    institution: str = Field(min_length=2)
    year: int
    field: str = Field(min_length=2)

    @field_validator('year')
    def validate_year(cls, v: int):
        if v < EARLIEST_GRADUATION_YEAR or v > utc_now().year:
            raise ValueError(
                f"Graduation year must be between {EARLIEST_GRADUATION_YEAR} and {utc_now().year}"
            )
        return v


class WorkHistoryItem(CamelModel):
    title: str = Field(min_length=2)
    company: str = Field(min_length=2)
    years: str = Field(min_length=2)
    description: str = Field(min_length=10)


class Certification(CamelModel):
    name: str
    issuer: str
    year: int
    credential_id: Optional[str] = None


class Reference(CamelModel):
    name: str = Field(min_length=2)
    title: str = Field(min_length=2)
    company: str = Field(min_length=2)
    email: EmailStr
    relationship: str = Field(min_length=2)


class MentorApplicationCreate(CamelModel):
    # Professional information
    current_title: str
    current_company: str
    work_email: EmailStr
    linkedin_profile: Optional[str] = None
    years_experience: int
    expertise: List[str] = Field(min_length=1)
    industries: List[str] = Field(min_length=1)

    # Background
    education: Education
    work_history: List[WorkHistoryItem] = Field(min_length=1)
    certifications: Optional[List[Certification]] = None

    # Mentoring
    bio: str
    mentoring_experience: Optional[str] = None
    mentoring_motivation: str
    availability_hours: int
    preferred_categories: List[QuestionCategory] = Field(min_length=1)

    references: List[Reference]

    @field_validator('current_title')
    def validate_title(cls, v: str):
        return require_min_length(v, 2, "Current title is required")

    @field_validator('current_company')
    def validate_company(cls, v: str):
        return require_min_length(v, 2, "Current company is required")

    @field_validator('linkedin_profile')
    def validate_linkedin(cls, v: str | None):
        if v is None or v.strip() == "":
            return None
        if not (v.startswith('http://') or v.startswith('https://')):
            raise ValueError("Valid LinkedIn URL is required")
        return v.strip()

    @field_validator('years_experience')
    def validate_years(cls, v: int):
        if v < 1:
            raise ValueError("Minimum 1 year of experience required")
        return v

    @field_validator('bio')
    def validate_bio(cls, v: str):
        return require_min_length(v, BIO_MIN_LENGTH, f"Bio must be at least {BIO_MIN_LENGTH} characters")

    @field_validator('mentoring_motivation')
    def validate_motivation(cls, v: str):
        return require_min_length(v, MOTIVATION_MIN_LENGTH, "Please explain your motivation")

    @field_validator('availability_hours')
    def validate_availability(cls, v: int):
        if v < MIN_AVAILABILITY_HOURS or v > MAX_AVAILABILITY_HOURS:
            raise ValueError(
                f"Availability must be between {MIN_AVAILABILITY_HOURS}-{MAX_AVAILABILITY_HOURS} hours per week"
            )
        return v

    @field_validator('references')
    def validate_references(cls, v: list):
        if len(v) < MIN_REFERENCES:
            raise ValueError(f"Please provide at least {MIN_REFERENCES} references")
        return v


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus
    admin_notes: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("adminNotes", "admin_notes", "notes"),
    )
    rejection_reason: Optional[str] = None


class MentorApplicationOut(CamelModel):
    id: str
    user_id: str
    status: ApplicationStatus

    current_title: str
    current_company: str
    work_email: str
    linkedin_profile: Optional[str] = None
    years_experience: int
    expertise: List[str]
    industries: List[str]

    education: dict[str, Any]
    work_history: List[dict[str, Any]]
    certifications: Optional[List[dict[str, Any]]] = None

    bio: str
    mentoring_experience: Optional[str] = None
    mentoring_motivation: str
    availability_hours: int
    preferred_categories: List[str]

    references: List[dict[str, Any]]

    work_email_verified: Optional[bool] = False
    linkedin_verified: Optional[bool] = False
    background_check_status: Optional[BackgroundCheckStatus] = BackgroundCheckStatus.pending
    references_contacted: Optional[bool] = False

    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None

    created_at: datetime
    updated_at: Optional[datetime] = None
