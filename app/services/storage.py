"""Typed CRUD over the relational store.

Routes talk to the database only through :class:`Storage`, one instance per
request session (see :func:`get_storage`). Methods commit their own writes
unless ``commit=False`` is passed, which lets a caller group several writes
into a single transaction.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import Depends
from sqlalchemy.orm import Session, selectinload

from app.db import get_db
from app.models.answer import Answer
from app.models.mentor_application import ApplicationStatus, MentorApplication
from app.models.mentor_profile import MentorProfile
from app.models.question import Question, QuestionStatus
from app.models.user import User
from app.utils.datetime import naive_utc_now

logger = logging.getLogger("app.storage")

USER_FIELDS = ("email", "first_name", "last_name", "profile_image_url", "role")
PROFILE_FIELDS = ("title", "company", "bio", "expertise", "weekly_capacity", "is_active")
PROFILE_DEFAULTS = {
    "title": None,
    "company": None,
    "bio": None,
    "expertise": [],
    "weekly_capacity": 5,
    "is_active": True,
}


def _question_load_options():
    # answers -> mentor -> mentor_profile, plus the mentee, in a fixed number of queries
    return (
        selectinload(Question.mentee),
        selectinload(Question.answers)
        .selectinload(Answer.mentor)
        .selectinload(User.mentor_profile),
    )


class Storage:
    def __init__(self, db: Session):
        self.db = db

    def _save(self, obj, commit: bool = True):
        self.db.add(obj)
        if commit:
            self.db.commit()
            self.db.refresh(obj)
        else:
            self.db.flush()
        return obj

    def commit(self) -> None:
        self.db.commit()

    def refresh(self, obj):
        self.db.refresh(obj)
        return obj

    # ---- users ----

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create_user(self, user_id: str | None = None, **fields: Any) -> User:
        user = User(**{k: v for k, v in fields.items() if k in USER_FIELDS})
        if user_id:
            user.id = user_id
        return self._save(user)

    def update_user(self, user_id: str, **fields: Any) -> Optional[User]:
        user = self.get_user(user_id)
        if not user:
            return None
        for key, value in fields.items():
            if key in USER_FIELDS and value is not None:
                setattr(user, key, value)
        user.updated_at = naive_utc_now()
        return self._save(user)

    def upsert_user(self, user_id: str, **fields: Any) -> User:
        """Insert the user, or refresh identity fields on an existing row.

        ``role`` only applies on insert so a role chosen in-app is not
        overwritten by later logins.
        """
        user = self.get_user(user_id)
        if not user:
            return self.create_user(user_id=user_id, **fields)
        fields.pop("role", None)
        return self.update_user(user_id, **fields)

    # ---- mentor profiles ----

    def get_mentor_profile(self, user_id: str) -> Optional[MentorProfile]:
        return self.db.query(MentorProfile).filter_by(user_id=user_id).first()

    def create_mentor_profile(self, user_id: str, commit: bool = True, **fields: Any) -> MentorProfile:
        profile = MentorProfile(
            user_id=user_id,
            **{k: v for k, v in fields.items() if k in PROFILE_FIELDS},
        )
        return self._save(profile, commit=commit)

    def update_mentor_profile(
        self, user_id: str, commit: bool = True, partial: bool = True, **fields: Any
    ) -> Optional[MentorProfile]:
        """Apply ``fields`` to the profile. With ``partial=False`` every profile
        field is overwritten and omitted ones are cleared to their defaults."""
        profile = self.get_mentor_profile(user_id)
        if not profile:
            return None
        if not partial:
            fields = {**PROFILE_DEFAULTS, **fields}
        for key, value in fields.items():
            if key in PROFILE_FIELDS and (value is not None or not partial):
                setattr(profile, key, value)
        profile.updated_at = naive_utc_now()
        return self._save(profile, commit=commit)

    def upsert_mentor_profile(self, user_id: str, commit: bool = True, **fields: Any) -> MentorProfile:
        if self.get_mentor_profile(user_id):
            return self.update_mentor_profile(user_id, commit=commit, partial=False, **fields)
        return self.create_mentor_profile(user_id, commit=commit, **fields)

    def get_active_mentors(self, expertise: Optional[str] = None) -> list[User]:
        mentors = (
            self.db.query(User)
            .join(MentorProfile, MentorProfile.user_id == User.id)
            .filter(MentorProfile.is_active.is_(True))
            .options(selectinload(User.mentor_profile))
            .order_by(MentorProfile.created_at.asc())
            .all()
        )
        if expertise:
            # expertise is a JSON list, so filter here rather than in SQL
            wanted = expertise.strip().lower()
            mentors = [
                m for m in mentors
                if any(str(e).lower() == wanted for e in (m.mentor_profile.expertise or []))
            ]
        return mentors

    # ---- questions ----

    def create_question(self, mentee_id: str, **fields: Any) -> Question:
        question = Question(mentee_id=mentee_id, status=QuestionStatus.pending, **fields)
        return self._save(question)

    def get_question(self, question_id: str) -> Optional[Question]:
        return self.db.query(Question).filter(Question.id == question_id).first()

    def get_questions_by_mentee(self, mentee_id: str) -> list[Question]:
        return (
            self.db.query(Question)
            .filter(Question.mentee_id == mentee_id)
            .options(*_question_load_options())
            .order_by(Question.created_at.desc())
            .all()
        )

    def get_pending_questions(self) -> list[Question]:
        return (
            self.db.query(Question)
            .filter(Question.status == QuestionStatus.pending)
            .options(*_question_load_options())
            .order_by(Question.created_at.desc())
            .all()
        )

    def update_question_status(self, question_id: str, status: QuestionStatus, commit: bool = True) -> Optional[Question]:
        question = self.get_question(question_id)
        if not question:
            return None
        question.status = status
        question.updated_at = naive_utc_now()
        return self._save(question, commit=commit)

    # ---- answers ----

    def create_answer(self, question_id: str, mentor_id: str, text: str, commit: bool = True) -> Answer:
        answer = Answer(question_id=question_id, mentor_id=mentor_id, text=text)
        return self._save(answer, commit=commit)

    def get_answer(self, answer_id: str) -> Optional[Answer]:
        return self.db.query(Answer).filter(Answer.id == answer_id).first()

    def update_answer_insights(self, answer_id: str, insights: dict) -> Optional[Answer]:
        answer = self.get_answer(answer_id)
        if not answer:
            return None
        answer.ai_insights = insights
        answer.updated_at = naive_utc_now()
        return self._save(answer)

    def set_answer_helpful(self, answer_id: str, is_helpful: bool) -> Optional[Answer]:
        answer = self.get_answer(answer_id)
        if not answer:
            return None
        answer.is_helpful = is_helpful
        answer.updated_at = naive_utc_now()
        return self._save(answer)

    def get_answers_by_mentor(self, mentor_id: str) -> list[Answer]:
        return (
            self.db.query(Answer)
            .filter(Answer.mentor_id == mentor_id)
            .order_by(Answer.created_at.desc())
            .all()
        )

    # ---- mentor applications ----

    def get_mentor_application(self, user_id: str) -> Optional[MentorApplication]:
        return (
            self.db.query(MentorApplication)
            .filter(MentorApplication.user_id == user_id)
            .order_by(MentorApplication.created_at.desc())
            .first()
        )

    def get_mentor_application_by_id(self, application_id: str) -> Optional[MentorApplication]:
        return self.db.query(MentorApplication).filter(MentorApplication.id == application_id).first()

    def get_all_mentor_applications(self) -> list[MentorApplication]:
        return (
            self.db.query(MentorApplication)
            .order_by(MentorApplication.created_at.desc())
            .all()
        )

    def create_mentor_application(self, user_id: str, data: dict[str, Any]) -> MentorApplication:
        application = MentorApplication(user_id=user_id, status=ApplicationStatus.pending, **data)
        return self._save(application)

    def update_mentor_application_status(
        self,
        application_id: str,
        status: ApplicationStatus,
        admin_notes: Optional[str] = None,
        reviewed_by: Optional[str] = None,
        rejection_reason: Optional[str] = None,
        commit: bool = True,
    ) -> Optional[MentorApplication]:
        application = self.get_mentor_application_by_id(application_id)
        if not application:
            return None
        now = naive_utc_now()
        application.status = status
        application.updated_at = now
        if admin_notes:
            application.admin_notes = admin_notes
        if rejection_reason:
            application.rejection_reason = rejection_reason
        if reviewed_by:
            application.reviewed_by = reviewed_by
        if status in (ApplicationStatus.approved, ApplicationStatus.rejected):
            application.reviewed_at = now
        return self._save(application, commit=commit)


def get_storage(db: Session = Depends(get_db)) -> Storage:
    return Storage(db)
