from typing import List

from app.schemas.base import CamelModel


class WelcomeRequest(CamelModel):
    interests: List[str] = []


class WelcomeOut(CamelModel):
    message: str
