from fastapi import APIRouter, Depends

from app.models.user import User
from app.schemas.mentor_application import MentorApplicationOut
from app.services.auth import require_reviewer
from app.services.storage import Storage, get_storage

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/applications", response_model=list[MentorApplicationOut])
def list_applications(
    reviewer: User = Depends(require_reviewer),
    storage: Storage = Depends(get_storage),
):
    return [MentorApplicationOut.model_validate(a) for a in storage.get_all_mentor_applications()]
