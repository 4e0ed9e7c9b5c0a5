"""AI enrichment for mentor answers.

Given a mentee question and a mentor answer, produce a few key takeaways and
concrete next steps. When no LLM is configured, or the call fails in any way,
a canned fallback is returned instead. There is no retry beyond what the
provider layer already does, and no caching.
"""
import copy
import logging
from dataclasses import dataclass
from typing import List, Optional

from fastapi import Request
from pydantic import BaseModel, ValidationError, field_validator

from app.services.llm import LLMConfig, LLMService

logger = logging.getLogger("app.insights")

MIN_TAKEAWAYS, MAX_TAKEAWAYS = 3, 4
MIN_ACTION_STEPS, MAX_ACTION_STEPS = 3, 5

FALLBACK_INSIGHTS = {
    "keyTakeaways": [
        "Focus on building skills through consistent practice",
        "Leverage your unique perspective as a competitive advantage",
        "Build relationships with people who have walked similar paths",
    ],
    "actionSteps": [
        "Schedule 30 minutes this week to practice your pitch",
        "Research 3-5 role models in your target industry",
        "Reach out to 2 professionals for informational interviews",
        "Document your progress and reflect weekly",
        "Join a relevant professional community or group",
    ],
}

INSIGHTS_SYSTEM_PROMPT = (
    "You are an expert mentor coach who helps mentees extract maximum value from "
    "mentorship. You provide clear, actionable insights."
)

INSIGHTS_USER_PROMPT = """You are an expert mentor coach analyzing a mentorship interaction.

Question from mentee: "{question}"

Mentor's answer: "{answer}"

Based on this mentorship interaction, provide:
1. 3-4 key takeaways that capture the most important insights from the mentor's answer
2. 3-5 specific, actionable steps the mentee should take next

Format your response as JSON with this structure:
{{
  "keyTakeaways": ["takeaway 1", "takeaway 2", "takeaway 3"],
  "actionSteps": ["action 1", "action 2", "action 3", "action 4", "action 5"]
}}

Make the takeaways insightful and the action steps specific, measurable, and realistic."""

WELCOME_SYSTEM_PROMPT = (
    "You are a warm, encouraging mentor coordinator welcoming new mentees. "
    "Keep messages brief (2-3 sentences) and motivating."
)


class _InsightsPayload(BaseModel):
    keyTakeaways: List[str]
    actionSteps: List[str]

    @field_validator("keyTakeaways", "actionSteps")
    def strip_blank(cls, v: list[str]):
        return [item.strip() for item in v if item and item.strip()]


@dataclass
class InsightResult:
    insights: dict
    source: str  # "llm" or "fallback"

    @classmethod
    def fallback(cls) -> "InsightResult":
        return cls(fallback_insights(), "fallback")


def fallback_insights() -> dict:
    """Fresh copy of the canned insights so callers can't mutate the constant."""
    return copy.deepcopy(FALLBACK_INSIGHTS)


def fallback_welcome(name: str, interests: list[str]) -> str:
    if interests:
        return f"Welcome to MicroMentor, {name}! We're excited to help you grow in {', '.join(interests)}."
    return f"Welcome to MicroMentor, {name}!"


class InsightService:
    def __init__(self, llm: Optional[LLMService] = None, config: Optional[LLMConfig] = None):
        self.llm = llm
        self.config = config or LLMConfig()

    @property
    def enabled(self) -> bool:
        return self.llm is not None and self.llm.is_available()

    def generate_insights(self, question: str, answer: str) -> InsightResult:
        """Insights for an answer plus where they came from; never raises.

        ``source`` is "llm" only when the model output passed validation.
        """
        if not self.enabled:
            logger.info("[insights] LLM not configured - using fallback insights")
            return InsightResult.fallback()

        response = self.llm.generate(
            system_prompt=INSIGHTS_SYSTEM_PROMPT,
            user_content=INSIGHTS_USER_PROMPT.format(question=question, answer=answer),
            config=self.config,
        )
        if not response.success:
            logger.warning(f"[insights] generation failed ({response.error}) - using fallback insights")
            return InsightResult.fallback()

        try:
            payload = _InsightsPayload.model_validate(response.content)
        except ValidationError as e:
            logger.warning(f"[insights] invalid response format from {response.provider}: {e}")
            return InsightResult.fallback()

        if len(payload.keyTakeaways) < MIN_TAKEAWAYS or len(payload.actionSteps) < MIN_ACTION_STEPS:
            logger.warning(
                f"[insights] too few items from {response.provider} "
                f"(takeaways={len(payload.keyTakeaways)}, steps={len(payload.actionSteps)})"
            )
            return InsightResult.fallback()

        insights = {
            "keyTakeaways": payload.keyTakeaways[:MAX_TAKEAWAYS],
            "actionSteps": payload.actionSteps[:MAX_ACTION_STEPS],
        }
        return InsightResult(insights, "llm")

    def generate_welcome_message(self, name: str, interests: list[str]) -> str:
        if not self.enabled:
            return fallback_welcome(name, interests)

        config = LLMConfig(
            temperature=0.8,
            max_tokens=150,
            json_mode=False,
            timeout_seconds=self.config.timeout_seconds,
            max_retries=self.config.max_retries,
            retry_base_delay=self.config.retry_base_delay,
        )
        topics = ", ".join(interests) if interests else "personal and professional growth"
        response = self.llm.generate(
            system_prompt=WELCOME_SYSTEM_PROMPT,
            user_content=f"Write a welcoming message for {name} who is interested in: {topics}",
            config=config,
        )
        if not response.success:
            logger.warning(f"[insights] welcome message failed ({response.error}) - using fallback")
            return f"Welcome to MicroMentor, {name}!"
        return (response.content.get("text") or "").strip() or f"Welcome {name}!"


def get_insight_service(request: Request) -> InsightService:
    return request.app.state.insight_service
