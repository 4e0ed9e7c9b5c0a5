from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.exceptions import NotFoundException
from app.models.user import User
from app.schemas.mentor_application import (
    ApplicationStatusUpdate,
    MentorApplicationCreate,
    MentorApplicationOut,
)
from app.schemas.mentor_profile import MentorProfileIn, MentorProfileOut, MentorProfileUpdate
from app.schemas.user import UserWithProfileOut
from app.services import audit
from app.services.applications import submit_application, update_application_status
from app.services.auth import get_current_user, require_reviewer
from app.services.storage import Storage, get_storage

router = APIRouter(prefix="/api/mentors", tags=["Mentors"])


@router.get("", response_model=list[UserWithProfileOut])
@router.get("/active", response_model=list[UserWithProfileOut])
def list_active_mentors(
    expertise: Optional[str] = Query(None, description="Only mentors listing this expertise"),
    storage: Storage = Depends(get_storage),
):
    return [UserWithProfileOut.model_validate(m) for m in storage.get_active_mentors(expertise)]


# ---- profile ----

@router.post("/profile", response_model=MentorProfileOut, status_code=status.HTTP_201_CREATED)
def save_mentor_profile(
    payload: MentorProfileIn,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    existing = storage.get_mentor_profile(current_user.id)
    profile = storage.upsert_mentor_profile(current_user.id, **payload.model_dump())
    audit.log_mentor_profile_saved(current_user.id, created=existing is None)
    return MentorProfileOut.model_validate(profile)


@router.get("/profile", response_model=MentorProfileOut)
def get_mentor_profile(
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    profile = storage.get_mentor_profile(current_user.id)
    if not profile:
        raise NotFoundException("Mentor profile not found")
    return MentorProfileOut.model_validate(profile)


@router.patch("/profile", response_model=MentorProfileOut)
def update_mentor_profile(
    payload: MentorProfileUpdate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    profile = storage.update_mentor_profile(current_user.id, **payload.model_dump(exclude_unset=True))
    if not profile:
        raise NotFoundException("Mentor profile not found")
    audit.log_mentor_profile_saved(current_user.id, created=False)
    return MentorProfileOut.model_validate(profile)


# ---- applications ----

@router.post("/apply", response_model=MentorApplicationOut, status_code=status.HTTP_201_CREATED)
def apply_to_mentor(
    payload: MentorApplicationCreate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    application = submit_application(storage, current_user, payload)
    return MentorApplicationOut.model_validate(application)


@router.get("/application", response_model=Optional[MentorApplicationOut])
def get_my_application(
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    application = storage.get_mentor_application(current_user.id)
    if not application:
        return None
    return MentorApplicationOut.model_validate(application)


@router.patch("/application/{application_id}/status", response_model=MentorApplicationOut)
def set_application_status(
    application_id: str,
    payload: ApplicationStatusUpdate,
    reviewer: User = Depends(require_reviewer),
    storage: Storage = Depends(get_storage),
):
    """Move an application through review.

    Approved and rejected are final: changing either to another status
    (including back to pending) returns 409. Re-sending the same status is
    accepted so admin notes can be amended.
    """
    application = update_application_status(storage, application_id, payload, reviewer)
    return MentorApplicationOut.model_validate(application)
