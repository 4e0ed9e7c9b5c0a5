"""Mentor application review workflow.

    pending -> under_review -> approved | rejected

Approved and rejected are terminal: once there, only a repeat of the same
status (e.g. to refresh admin notes) is accepted. Approving an application
also gives the applicant an active mentor profile built from it.
"""
import logging

from app.exceptions import ConflictException, NotFoundException, ValidationException
from app.models.mentor_application import ApplicationStatus, MentorApplication
from app.models.user import User, UserRole
from app.schemas.mentor_application import ApplicationStatusUpdate, MentorApplicationCreate
from app.services import audit
from app.services.storage import Storage

logger = logging.getLogger("app.applications")


def can_transition(current: ApplicationStatus, new: ApplicationStatus) -> bool:
    return not current.is_terminal or new == current


def submit_application(storage: Storage, user: User, payload: MentorApplicationCreate) -> MentorApplication:
    # read-then-write; two concurrent submits can still both get through
    if storage.get_mentor_application(user.id):
        raise ValidationException("You have already submitted a mentor application")

    data = payload.model_dump(mode="json", by_alias=False)
    application = storage.create_mentor_application(user.id, data)
    audit.log_application_submit(user.id, application.id)
    return application


def _provision_mentor(storage: Storage, application: MentorApplication) -> None:
    """Create or reactivate the applicant's mentor profile from the application."""
    storage.upsert_mentor_profile(
        application.user_id,
        commit=False,
        title=application.current_title,
        company=application.current_company,
        bio=application.bio,
        expertise=list(application.expertise or []),
        weekly_capacity=application.availability_hours,
        is_active=True,
    )
    applicant = storage.get_user(application.user_id)
    if applicant and applicant.role == UserRole.mentee:
        applicant.role = UserRole.both
    logger.info(f"Provisioned mentor profile for approved applicant {application.user_id}")


def update_application_status(
    storage: Storage,
    application_id: str,
    update: ApplicationStatusUpdate,
    reviewer: User,
) -> MentorApplication:
    application = storage.get_mentor_application_by_id(application_id)
    if not application:
        raise NotFoundException("Mentor application not found")

    old_status = application.status
    if not can_transition(old_status, update.status):
        raise ConflictException(
            f"Cannot change application status from {old_status.value} to {update.status.value}"
        )

    application = storage.update_mentor_application_status(
        application_id,
        update.status,
        admin_notes=update.admin_notes,
        reviewed_by=reviewer.id,
        rejection_reason=update.rejection_reason,
        commit=False,
    )
    if update.status == ApplicationStatus.approved and old_status != ApplicationStatus.approved:
        _provision_mentor(storage, application)

    storage.commit()
    storage.refresh(application)
    audit.log_application_status(reviewer.id, application.id, old_status.value, update.status.value)
    return application
