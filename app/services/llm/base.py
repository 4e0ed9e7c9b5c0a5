"""
LLM Provider Base Interface

Abstract base class defining the contract for LLM providers.
All providers (OpenAI, Gemini) implement ``_call_api``; retries, JSON
parsing, cost estimation and metrics logging live here.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Any, Optional
import json
import logging
import re
import time

logger = logging.getLogger(__name__)

RETRYABLE_MARKERS = ("rate limit", "429", "quota", "timeout", "timed out", "503", "502")


@dataclass
class LLMResponse:
    """Standardized response from any LLM provider."""
    success: bool
    content: Dict[str, Any]  # Parsed JSON response
    raw_response: str  # Raw text from LLM

    # Metrics
    latency_ms: int
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    estimated_cost_usd: float

    # Provider info
    provider: str
    model: str

    error: Optional[str] = None

    @classmethod
    def failure(cls, provider: str, model: str, error: str, latency_ms: int = 0) -> "LLMResponse":
        return cls(
            success=False,
            content={},
            raw_response="",
            latency_ms=latency_ms,
            prompt_tokens=0,
            completion_tokens=0,
            total_tokens=0,
            estimated_cost_usd=0.0,
            provider=provider,
            model=model,
            error=error,
        )


@dataclass
class LLMConfig:
    """Configuration for LLM calls."""
    temperature: float = 0.7
    max_tokens: int = 500
    json_mode: bool = True  # Request JSON response format
    timeout_seconds: int = 30
    max_retries: int = 2
    retry_base_delay: float = 0.6


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    PROVIDER_NAME: str = "base"
    DEFAULT_MODEL: str = "unknown"

    # Pricing per 1M tokens (subclasses override)
    INPUT_PRICE_PER_1M: float = 0.0
    OUTPUT_PRICE_PER_1M: float = 0.0
    MODEL_PRICING: Dict[str, Dict[str, float]] = {}

    def __init__(self, model: Optional[str] = None, **kwargs):
        self.model = model or self.DEFAULT_MODEL
        pricing = self.MODEL_PRICING.get(self.model)
        if pricing:
            self.INPUT_PRICE_PER_1M = pricing["input"]
            self.OUTPUT_PRICE_PER_1M = pricing["output"]
        self._init_client(**kwargs)

    @abstractmethod
    def _init_client(self, **kwargs) -> None:
        """Store provider configuration. Clients are created lazily."""

    @abstractmethod
    def _call_api(
        self,
        messages: List[Dict[str, str]],
        config: LLMConfig
    ) -> tuple[str, int, int]:
        """Make the actual API call.

        Returns:
            Tuple of (raw_response_text, prompt_tokens, completion_tokens)
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is properly configured."""

    def generate(
        self,
        system_prompt: str,
        user_content: str,
        config: Optional[LLMConfig] = None
    ) -> LLMResponse:
        """Generate a JSON response. Never raises; failures come back with success=False."""
        config = config or LLMConfig()
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ]
        start_time = time.time()

        try:
            raw_response, prompt_tokens, completion_tokens = self._call_with_retry(messages, config)
            content = self._parse_json(raw_response) if config.json_mode else {"text": raw_response}
        except Exception as e:
            latency_ms = int((time.time() - start_time) * 1000)
            logger.error(f"[llm] provider={self.PROVIDER_NAME} model={self.model} error={e}")
            return LLMResponse.failure(self.PROVIDER_NAME, self.model, str(e), latency_ms)

        latency_ms = int((time.time() - start_time) * 1000)
        total_tokens = prompt_tokens + completion_tokens
        cost_usd = self._calculate_cost(prompt_tokens, completion_tokens)
        logger.info(
            f"[llm] provider={self.PROVIDER_NAME} model={self.model} "
            f"latency_ms={latency_ms} tokens={total_tokens} "
            f"(prompt={prompt_tokens}, completion={completion_tokens}) "
            f"cost_usd={cost_usd:.6f}"
        )
        return LLMResponse(
            success=True,
            content=content,
            raw_response=raw_response,
            latency_ms=latency_ms,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens,
            estimated_cost_usd=cost_usd,
            provider=self.PROVIDER_NAME,
            model=self.model,
        )

    def _call_with_retry(
        self,
        messages: List[Dict[str, str]],
        config: LLMConfig
    ) -> tuple[str, int, int]:
        """Call API, backing off exponentially on rate limits and transient errors."""
        delay = config.retry_base_delay
        attempts = max(1, config.max_retries)

        for attempt in range(attempts):
            try:
                if attempt > 0:
                    logger.info(f"[llm] retry attempt {attempt + 1}/{attempts}")
                return self._call_api(messages, config)
            except Exception as e:
                error_msg = str(e).lower()
                retryable = any(marker in error_msg for marker in RETRYABLE_MARKERS)
                if not retryable or attempt == attempts - 1:
                    raise
                time.sleep(delay)
                delay *= 2

        raise RuntimeError("LLM call failed after retries")

    def _calculate_cost(self, prompt_tokens: int, completion_tokens: int) -> float:
        """Calculate estimated cost in USD."""
        return (
            prompt_tokens * self.INPUT_PRICE_PER_1M +
            completion_tokens * self.OUTPUT_PRICE_PER_1M
        ) / 1_000_000

    def _parse_json(self, content: str) -> Dict[str, Any]:
        """Parse JSON from LLM response with fallback strategies."""
        if not content:
            raise ValueError("Empty response from LLM")

        text = content.strip()
        if text.startswith("```"):
            text = re.sub(r"^```[a-zA-Z0-9_-]*\n?", "", text)
            text = re.sub(r"\n?```\s*$", "", text)

        try:
            return json.loads(text)
        except json.JSONDecodeError:
            pass

        # Largest {...} block, e.g. when the model wraps JSON in prose
        start, end = text.find('{'), text.rfind('}')
        if start != -1 and end > start:
            candidate = text[start:end + 1]
            for attempt in (candidate, re.sub(r",\s*([}\]])", r"\1", candidate)):
                try:
                    return json.loads(attempt)
                except json.JSONDecodeError:
                    continue

        truncated = text[:300] + "..." if len(text) > 300 else text
        logger.error(f"All JSON parse strategies failed. Content preview: {truncated}")
        raise ValueError("Could not parse JSON from LLM response")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model})"
