"""
Google Gemini LLM Provider

Implements the LLMProvider interface for Gemini models via Vertex AI,
using the google-genai SDK. Used as the optional fallback provider.
"""

import os
import logging
from typing import Dict, List, Optional

from .base import LLMProvider, LLMConfig

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """Google Gemini model provider via Vertex AI."""

    PROVIDER_NAME = "gemini"
    DEFAULT_MODEL = "gemini-2.5-flash"

    INPUT_PRICE_PER_1M = 0.30
    OUTPUT_PRICE_PER_1M = 2.50

    MODEL_PRICING = {
        "gemini-2.5-flash": {"input": 0.30, "output": 2.50},
        "gemini-2.5-flash-lite": {"input": 0.10, "output": 0.40},
        "gemini-2.5-pro": {"input": 1.25, "output": 10.00},
    }

    def _init_client(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        **kwargs
    ) -> None:
        self._project_id = project_id or os.getenv("GOOGLE_CLOUD_PROJECT")
        self._location = location or os.getenv("GOOGLE_CLOUD_LOCATION", "us-central1")
        self._client = None
        self._types = None

    def _get_client(self):
        """Lazy load Gemini client."""
        if self._client is None:
            if not self._project_id:
                raise ValueError("GOOGLE_CLOUD_PROJECT not configured")
            from google import genai
            from google.genai import types

            self._client = genai.Client(
                vertexai=True,
                project=self._project_id,
                location=self._location,
            )
            self._types = types
        return self._client

    def _call_api(
        self,
        messages: List[Dict[str, str]],
        config: LLMConfig
    ) -> tuple[str, int, int]:
        client = self._get_client()

        # Gemini takes the system prompt separately from the contents
        system_content = "\n".join(m["content"] for m in messages if m["role"] == "system")
        user_content = "\n".join(m["content"] for m in messages if m["role"] != "system")

        gen_config = self._types.GenerateContentConfig(
            temperature=config.temperature,
            max_output_tokens=config.max_tokens,
            system_instruction=system_content or None,
        )
        if config.json_mode:
            gen_config.response_mime_type = "application/json"

        response = client.models.generate_content(
            model=self.model,
            contents=user_content,
            config=gen_config,
        )

        if response.candidates:
            finish_reason = str(getattr(response.candidates[0], "finish_reason", "") or "").upper()
            if "MAX_TOKENS" in finish_reason:
                raise ValueError(f"Response truncated due to max_tokens limit (finish_reason={finish_reason})")

        raw_text = response.text or ""
        prompt_tokens = 0
        completion_tokens = 0
        if response.usage_metadata:
            prompt_tokens = response.usage_metadata.prompt_token_count or 0
            completion_tokens = response.usage_metadata.candidates_token_count or 0

        return raw_text, prompt_tokens, completion_tokens

    def is_available(self) -> bool:
        return bool(self._project_id)
