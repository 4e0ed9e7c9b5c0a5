"""
OpenAI LLM Provider

Implements the LLMProvider interface for OpenAI chat models.
"""

import os
import logging
from typing import Dict, List, Optional

from .base import LLMProvider, LLMConfig

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI GPT model provider."""

    PROVIDER_NAME = "openai"
    DEFAULT_MODEL = "gpt-4o-mini"  # Fast and cost-effective

    INPUT_PRICE_PER_1M = 0.15
    OUTPUT_PRICE_PER_1M = 0.60

    MODEL_PRICING = {
        "gpt-4o-mini": {"input": 0.15, "output": 0.60},
        "gpt-4o": {"input": 2.50, "output": 10.00},
        "gpt-4-turbo": {"input": 10.00, "output": 30.00},
    }

    def _init_client(self, api_key: Optional[str] = None, **kwargs) -> None:
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        self._client = None

    def _get_client(self, timeout: float | None = None):
        """Lazy load OpenAI client."""
        if self._client is None:
            if not self.is_available():
                raise ValueError("OpenAI API key not configured")

            from openai import OpenAI
            self._client = OpenAI(api_key=self._api_key, timeout=timeout)

        return self._client

    def _call_api(
        self,
        messages: List[Dict[str, str]],
        config: LLMConfig
    ) -> tuple[str, int, int]:
        client = self._get_client(timeout=config.timeout_seconds)

        kwargs = {
            "model": self.model,
            "messages": messages,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
        }
        if config.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = client.chat.completions.create(**kwargs)

        raw_text = (response.choices[0].message.content or "").strip()
        if not raw_text:
            raise ValueError("No response from OpenAI")

        usage = response.usage
        prompt_tokens = usage.prompt_tokens if usage else 0
        completion_tokens = usage.completion_tokens if usage else 0

        return raw_text, prompt_tokens, completion_tokens

    def is_available(self) -> bool:
        key = (self._api_key or "").strip()
        return bool(key) and not key.startswith(("your_", "your-"))
