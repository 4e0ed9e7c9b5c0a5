"""
LLM Service Module

Unified interface over the OpenAI and Gemini providers with optional
fallback from one to the other.

Configuration (see app.core.settings):
- OPENAI_API_KEY: OpenAI API key (missing or placeholder disables AI)
- LLM_PROVIDER: Primary provider ('openai' or 'gemini', default: 'openai')
- LLM_MODEL: Specific model to use (optional, uses provider default)
- LLM_FALLBACK_ENABLED: Fall back to the other provider (default: 'false')
- GOOGLE_CLOUD_PROJECT / GOOGLE_CLOUD_LOCATION: Vertex AI settings for Gemini

Usage:
    from app.services.llm import build_llm_service, LLMConfig

    service = build_llm_service(settings)  # None when nothing is configured
    response = service.generate(
        system_prompt="You are a helpful assistant.",
        user_content="Analyze this text...",
        config=LLMConfig(max_tokens=500),
    )
    if response.success:
        print(response.content)  # Parsed JSON
"""

from .base import LLMProvider, LLMResponse, LLMConfig
from .openai_provider import OpenAIProvider
from .gemini_provider import GeminiProvider
from .factory import (
    LLMService,
    LLMProviderType,
    build_llm_service,
    PROVIDER_REGISTRY,
)

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LLMConfig",
    "OpenAIProvider",
    "GeminiProvider",
    "LLMService",
    "LLMProviderType",
    "build_llm_service",
    "PROVIDER_REGISTRY",
]
