"""
LLM Provider Factory

Creates LLM provider instances from application settings and wraps them in
an ``LLMService`` that can fall back from the primary provider to the other
one. The service is built once at startup and handed to the insight service;
there is no module-level client.
"""

import logging
from typing import Optional, Dict, Type
from enum import Enum

from app.core.settings import Settings
from .base import LLMProvider, LLMResponse, LLMConfig
from .openai_provider import OpenAIProvider
from .gemini_provider import GeminiProvider

logger = logging.getLogger(__name__)


class LLMProviderType(str, Enum):
    """Supported LLM providers."""
    OPENAI = "openai"
    GEMINI = "gemini"


PROVIDER_REGISTRY: Dict[LLMProviderType, Type[LLMProvider]] = {
    LLMProviderType.OPENAI: OpenAIProvider,
    LLMProviderType.GEMINI: GeminiProvider,
}


class LLMService:
    """Primary provider with an optional fallback to the other provider.

    Usage:
        service = LLMService(primary=OpenAIProvider(api_key=...))
        response = service.generate(
            system_prompt="You are a helpful assistant.",
            user_content="Analyze this text...",
        )
        if response.success:
            print(response.content)
    """

    def __init__(self, primary: LLMProvider, fallback: Optional[LLMProvider] = None):
        self.primary_provider = primary
        self.fallback_provider = fallback
        logger.info(
            f"[llm_service] initialized: primary={primary.PROVIDER_NAME} "
            f"model={primary.model} fallback={fallback.PROVIDER_NAME if fallback else 'none'}"
        )

    def generate(
        self,
        system_prompt: str,
        user_content: str,
        config: Optional[LLMConfig] = None,
    ) -> LLMResponse:
        response = self.primary_provider.generate(
            system_prompt=system_prompt,
            user_content=user_content,
            config=config,
        )
        if response.success:
            return response

        logger.warning(f"[llm_service] primary provider failed: {response.error}")

        if self.fallback_provider and self.fallback_provider.is_available():
            logger.info(f"[llm_service] attempting fallback to {self.fallback_provider.PROVIDER_NAME}")
            fallback_response = self.fallback_provider.generate(
                system_prompt=system_prompt,
                user_content=user_content,
                config=config,
            )
            if fallback_response.success:
                logger.info(f"[llm_service] fallback succeeded via {fallback_response.provider}")
                return fallback_response
            logger.error(f"[llm_service] fallback also failed: {fallback_response.error}")

        return response

    def is_available(self) -> bool:
        """Check if at least one provider is configured."""
        if self.primary_provider.is_available():
            return True
        return bool(self.fallback_provider and self.fallback_provider.is_available())

    def describe(self) -> Dict[str, object]:
        return {
            "primary_provider": self.primary_provider.PROVIDER_NAME,
            "primary_model": self.primary_provider.model,
            "primary_available": self.primary_provider.is_available(),
            "fallback_provider": self.fallback_provider.PROVIDER_NAME if self.fallback_provider else None,
        }


def _make_provider(provider_type: LLMProviderType, settings: Settings, model: Optional[str] = None) -> LLMProvider:
    provider_class = PROVIDER_REGISTRY[provider_type]
    if provider_type == LLMProviderType.OPENAI:
        return provider_class(model=model, api_key=settings.ai_api_key)
    return provider_class(model=model)


def build_llm_service(settings: Settings) -> Optional[LLMService]:
    """Build the LLM service from settings, or None when no provider is configured."""
    if not settings.ai_configured:
        logger.warning("No LLM credentials configured - AI insights will use fallback content")
        return None

    primary_type = LLMProviderType(settings.llm_provider)
    primary = _make_provider(primary_type, settings, model=settings.llm_model)

    fallback = None
    if settings.llm_fallback_enabled:
        fallback_type = (
            LLMProviderType.GEMINI if primary_type == LLMProviderType.OPENAI else LLMProviderType.OPENAI
        )
        fallback = _make_provider(fallback_type, settings)

    return LLMService(primary=primary, fallback=fallback)
