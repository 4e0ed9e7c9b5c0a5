import pytest

from app.core.settings import Settings
from app.services.llm import (
    LLMConfig,
    LLMProvider,
    LLMService,
    OpenAIProvider,
    build_llm_service,
)

FAST = LLMConfig(max_retries=3, retry_base_delay=0)


class FlakyProvider(LLMProvider):
    PROVIDER_NAME = "flaky"
    DEFAULT_MODEL = "flaky-1"
    MODEL_PRICING = {"flaky-1": {"input": 1.0, "output": 2.0}}

    def _init_client(self, errors=(), reply='{"ok": true}', available=True, **kwargs):
        self.errors = list(errors)
        self.reply = reply
        self.available = available
        self.calls = 0

    def _call_api(self, messages, config):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.reply, 1000, 500

    def is_available(self) -> bool:
        return self.available


@pytest.fixture
def provider():
    return FlakyProvider()


@pytest.mark.parametrize(
    "raw",
    [
        '{"a": 1}',
        '```json\n{"a": 1}\n```',
        'Sure! Here you go: {"a": 1} Hope that helps.',
        '{"a": 1,}',
    ],
)
def test_parse_json_strategies(provider, raw):
    assert provider._parse_json(raw) == {"a": 1}


def test_parse_json_gives_up(provider):
    with pytest.raises(ValueError):
        provider._parse_json("no json here")
    with pytest.raises(ValueError):
        provider._parse_json("")


def test_generate_success_reports_usage():
    response = FlakyProvider().generate("sys", "user", FAST)
    assert response.success
    assert response.content == {"ok": True}
    assert response.total_tokens == 1500
    assert response.estimated_cost_usd == pytest.approx((1000 * 1.0 + 500 * 2.0) / 1_000_000)
    assert response.provider == "flaky"


def test_retries_rate_limits():
    provider = FlakyProvider(errors=[RuntimeError("429 rate limit"), RuntimeError("timed out")])
    response = provider.generate("sys", "user", FAST)
    assert response.success
    assert provider.calls == 3


def test_non_retryable_error_fails_fast():
    provider = FlakyProvider(errors=[RuntimeError("invalid api key")])
    response = provider.generate("sys", "user", FAST)
    assert not response.success
    assert response.error == "invalid api key"
    assert provider.calls == 1


def test_retries_are_bounded():
    provider = FlakyProvider(errors=[RuntimeError("503")] * 5)
    response = provider.generate("sys", "user", FAST)
    assert not response.success
    assert provider.calls == 3


def test_plain_text_mode():
    provider = FlakyProvider(reply="Hello there")
    response = provider.generate("sys", "user", LLMConfig(json_mode=False, retry_base_delay=0))
    assert response.content == {"text": "Hello there"}


def test_service_falls_back_to_secondary():
    primary = FlakyProvider(errors=[RuntimeError("invalid request")])
    fallback = FlakyProvider(reply='{"from": "fallback"}')
    service = LLMService(primary=primary, fallback=fallback)
    response = service.generate("sys", "user", FAST)
    assert response.success
    assert response.content == {"from": "fallback"}


def test_service_returns_primary_error_when_fallback_unavailable():
    primary = FlakyProvider(errors=[RuntimeError("invalid request")])
    fallback = FlakyProvider(available=False)
    response = LLMService(primary=primary, fallback=fallback).generate("sys", "user", FAST)
    assert not response.success
    assert response.error == "invalid request"
    assert fallback.calls == 0


def test_service_availability():
    assert LLMService(primary=FlakyProvider()).is_available()
    assert not LLMService(primary=FlakyProvider(available=False)).is_available()
    assert LLMService(
        primary=FlakyProvider(available=False), fallback=FlakyProvider()
    ).is_available()


def test_build_llm_service_without_key(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "")
    assert build_llm_service(Settings()) is None

    monkeypatch.setenv("OPENAI_API_KEY", "your_openai_key_here")
    assert build_llm_service(Settings()) is None


def test_build_llm_service_with_key(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("LLM_FALLBACK_ENABLED", "false")
    monkeypatch.delenv("LLM_MODEL", raising=False)

    service = build_llm_service(Settings())
    assert isinstance(service.primary_provider, OpenAIProvider)
    assert service.primary_provider.model == "gpt-4o-mini"
    assert service.fallback_provider is None
    assert service.is_available()
