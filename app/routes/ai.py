from fastapi import APIRouter, Depends

from app.models.user import User
from app.schemas.ai import WelcomeOut, WelcomeRequest
from app.services.auth import get_current_user
from app.services.insights import InsightService, get_insight_service

router = APIRouter(prefix="/api/ai", tags=["AI"])


@router.post("/welcome", response_model=WelcomeOut)
def welcome_message(
    payload: WelcomeRequest,
    current_user: User = Depends(get_current_user),
    insight_service: InsightService = Depends(get_insight_service),
):
    interests = [i.strip() for i in payload.interests if i.strip()]
    message = insight_service.generate_welcome_message(current_user.display_name, interests)
    return WelcomeOut(message=message)
