"""Audit logging helper functions for key domain events.

Standard single-line logs so they are easy to index.
"""
from __future__ import annotations
import logging
from typing import Optional, Any

from app.utils.datetime import utc_now

_logger = logging.getLogger("app.audit")


def _emit(event: str, user_id: Optional[str] = None, **data: Any):
    payload = {"ts": utc_now().isoformat(), "event": event}
    if user_id:
        payload["user_id"] = user_id
    payload.update(data)
    parts = [f"{k}={repr(v)}" for k, v in payload.items()]
    _logger.info("AUDIT " + " ".join(parts))

# Public convenience wrappers

def log_user_created(user_id: str, role: str, auth_mode: str):
    _emit("user.create", user_id=user_id, role=role, auth_mode=auth_mode)

def log_question_submit(user_id: str, question_id: str, category: str, is_public: bool):
    _emit("question.submit", user_id=user_id, question_id=question_id, category=category, is_public=is_public)

def log_answer_submit(user_id: str, answer_id: str, question_id: str):
    _emit("answer.submit", user_id=user_id, answer_id=answer_id, question_id=question_id)

def log_insights_attached(answer_id: str, source: str):
    _emit("answer.insights", answer_id=answer_id, source=source)

def log_mentor_profile_saved(user_id: str, created: bool):
    _emit("mentor_profile.save", user_id=user_id, created=created)

def log_application_submit(user_id: str, application_id: str):
    _emit("application.submit", user_id=user_id, application_id=application_id)

def log_application_status(user_id: str, application_id: str, old_status: str, new_status: str):
    _emit(
        "application.status",
        user_id=user_id,
        application_id=application_id,
        old_status=old_status,
        new_status=new_status,
    )
