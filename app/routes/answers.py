import logging

from fastapi import APIRouter, Depends, status

from app.exceptions import ForbiddenException, NotFoundException
from app.models.question import QuestionStatus
from app.models.user import User
from app.schemas.answer import AnswerCreate, AnswerHelpfulUpdate, AnswerOut
from app.services import audit
from app.services.auth import get_current_user
from app.services.insights import InsightService, get_insight_service
from app.services.storage import Storage, get_storage

logger = logging.getLogger("app.answers")
router = APIRouter(prefix="/api/answers", tags=["Answers"])


@router.post("", response_model=AnswerOut, status_code=status.HTTP_201_CREATED)
def submit_answer(
    payload: AnswerCreate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    insight_service: InsightService = Depends(get_insight_service),
):
    question = storage.get_question(payload.question_id)
    if not question:
        raise NotFoundException("Question not found")

    # answer row and question status land in the same commit
    answer = storage.create_answer(question.id, current_user.id, payload.text, commit=False)
    storage.update_question_status(question.id, QuestionStatus.answered, commit=False)
    storage.commit()
    storage.refresh(answer)
    audit.log_answer_submit(current_user.id, answer.id, question.id)

    result = insight_service.generate_insights(question.text, answer.text)
    updated = storage.update_answer_insights(answer.id, result.insights)
    if updated:
        answer = updated
    audit.log_insights_attached(answer.id, result.source)

    return AnswerOut.model_validate(answer)


@router.get("/mentor", response_model=list[AnswerOut])
def list_my_answers(
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return [AnswerOut.model_validate(a) for a in storage.get_answers_by_mentor(current_user.id)]


@router.patch("/{answer_id}/helpful", response_model=AnswerOut)
def mark_answer_helpful(
    answer_id: str,
    payload: AnswerHelpfulUpdate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    answer = storage.get_answer(answer_id)
    if not answer:
        raise NotFoundException("Answer not found")
    if answer.question.mentee_id != current_user.id:
        raise ForbiddenException("Only the mentee who asked can rate this answer")

    answer = storage.set_answer_helpful(answer_id, payload.is_helpful)
    return AnswerOut.model_validate(answer)
