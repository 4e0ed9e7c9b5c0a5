from fastapi import APIRouter, Depends, status

from app.models.user import User
from app.schemas.question import QuestionCreate, QuestionOut, QuestionWithAnswersOut
from app.services import audit
from app.services.auth import get_current_user
from app.services.storage import Storage, get_storage

router = APIRouter(prefix="/api/questions", tags=["Questions"])


@router.post("", response_model=QuestionOut, status_code=status.HTTP_201_CREATED)
def create_question(
    payload: QuestionCreate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    question = storage.create_question(
        current_user.id,
        text=payload.text,
        category=payload.category,
        is_public=payload.is_public,
        mentee_profile=payload.mentee_profile,
    )
    audit.log_question_submit(current_user.id, question.id, question.category.value, question.is_public)
    return QuestionOut.model_validate(question)


@router.get("/mentee", response_model=list[QuestionWithAnswersOut])
def list_my_questions(
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    questions = storage.get_questions_by_mentee(current_user.id)
    return [QuestionWithAnswersOut.model_validate(q) for q in questions]


@router.get("/pending", response_model=list[QuestionWithAnswersOut])
def list_pending_questions(
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    questions = storage.get_pending_questions()
    return [QuestionWithAnswersOut.model_validate(q) for q in questions]
