"""Provider adapters against mocked HTTP transports: request shape and error normalization."""
from __future__ import annotations

import json

import httpx
import pytest

from backend.app.llm.errors import (
    AuthError,
    ContentFiltered,
    ContextLengthExceeded,
    EmptyResponse,
    GenerationError,
    RateLimitError,
)
from backend.app.llm.providers import create_provider
from backend.app.llm.providers.base import parse_retry_after
from backend.app.llm.types import GenerationOptions
from backend.tests.fakes import make_config

KEYS = {
    "GOOGLE_API_KEY": "g-key",
    "OPENAI_API_KEY": "o-key",
    "ANTHROPIC_API_KEY": "a-key",
    "GROQ_API_KEY": "q-key",
    "GROK_API_KEY": "x-key",
}


def _adapter(name: str, handler, extra: dict[str, str] | None = None):
    config = make_config(name, default=name, extra={**KEYS, **(extra or {})})
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return create_provider(name, config, client=client)


def _replying(status: int, body, seen: list | None = None, headers: dict | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if isinstance(body, str):
            return httpx.Response(status, text=body, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    return handler


OPENAI_OK = {
    "choices": [{"message": {"content": '{"name": "Grom"}'}, "finish_reason": "stop"}],
    "usage": {"total_tokens": 321},
}


# ---------------------------------------------------------------------------
# OpenAI-compatible (openai, groq, grok)
# ---------------------------------------------------------------------------


def test_openai_request_and_response():
    seen: list[httpx.Request] = []
    adapter = _adapter("openai", _replying(200, OPENAI_OK, seen))
    response = adapter.generate("make an npc", GenerationOptions(max_tokens=64))

    request = seen[0]
    assert str(request.url) == "https://api.openai.com/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer o-key"
    payload = json.loads(request.content)
    assert payload["model"] == "gpt-4o-mini"
    assert payload["messages"] == [{"role": "user", "content": "make an npc"}]
    assert payload["max_tokens"] == 64
    assert payload["temperature"] == 0.7

    assert response.content == '{"name": "Grom"}'
    assert response.provider == "openai"
    assert response.tokens_used == 321
    assert response.cost_estimate == pytest.approx(0.321 * 0.15)


def test_zero_temperature_is_sent_as_zero():
    seen: list[httpx.Request] = []
    adapter = _adapter("groq", _replying(200, OPENAI_OK, seen))
    adapter.generate("x", GenerationOptions(temperature=0.0))
    assert json.loads(seen[0].content)["temperature"] == 0.0
    assert str(seen[0].url) == "https://api.groq.com/openai/v1/chat/completions"


def test_base_url_override():
    seen: list[httpx.Request] = []
    adapter = _adapter("grok", _replying(200, OPENAI_OK, seen), {"REALMSMITH_GROK_BASE_URL": "http://proxy.local/"})
    adapter.generate("x")
    assert str(seen[0].url) == "http://proxy.local/v1/chat/completions"


@pytest.mark.parametrize(
    "name,status,body,expected",
    [
        ("openai", 401, {"error": {"message": "bad key"}}, AuthError),
        ("openai", 429, {"error": {}}, RateLimitError),
        ("openai", 400, {"error": {"code": "context_length_exceeded"}}, ContextLengthExceeded),
        ("openai", 400, {"error": {"code": "content_policy_violation"}}, ContentFiltered),
        ("openai", 500, {"error": {}}, GenerationError),
        ("groq", 400, {"error": {"message": "context_length too long"}}, ContextLengthExceeded),
        ("grok", 401, {}, AuthError),
    ],
)
def test_openai_compatible_error_table(name, status, body, expected):
    adapter = _adapter(name, _replying(status, body))
    with pytest.raises(expected) as exc_info:
        adapter.generate("x")
    assert exc_info.value.provider == name


def test_groq_503_is_retryable_service_unavailable():
    adapter = _adapter("groq", _replying(503, {}))
    with pytest.raises(GenerationError) as exc_info:
        adapter.generate("x")
    assert exc_info.value.code == "SERVICE_UNAVAILABLE"
    assert exc_info.value.retryable is True


def test_rate_limit_carries_retry_after():
    adapter = _adapter("openai", _replying(429, {}, headers={"retry-after": "12"}))
    with pytest.raises(RateLimitError) as exc_info:
        adapter.generate("x")
    assert exc_info.value.retry_after == 12.0
    assert exc_info.value.retryable is True


def test_content_filter_finish_reason():
    body = {"choices": [{"message": {"content": ""}, "finish_reason": "content_filter"}]}
    with pytest.raises(ContentFiltered):
        _adapter("openai", _replying(200, body)).generate("x")


def test_no_choices_is_empty_response():
    with pytest.raises(EmptyResponse):
        _adapter("openai", _replying(200, {"choices": []})).generate("x")


def test_timeout_becomes_generation_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(GenerationError) as exc_info:
        _adapter("openai", handler).generate("x", GenerationOptions(timeout_ms=250))
    assert exc_info.value.code == "TIMEOUT"
    assert "250ms" in str(exc_info.value)


def test_connect_error_becomes_network_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(GenerationError) as exc_info:
        _adapter("groq", handler).generate("x")
    assert exc_info.value.code == "NETWORK_ERROR"


def test_non_json_body_is_invalid_response():
    with pytest.raises(GenerationError) as exc_info:
        _adapter("openai", _replying(200, "<html>oops</html>")).generate("x")
    assert exc_info.value.code == "INVALID_RESPONSE"


def test_undecodable_body_is_invalid_response():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b'{"choices": "\xff\xfe"}', headers={"content-type": "application/json"})

    with pytest.raises(GenerationError) as exc_info:
        _adapter("openai", handler).generate("x")
    assert exc_info.value.code == "INVALID_RESPONSE"


def test_reported_zero_tokens_is_not_replaced_by_estimate():
    body = {**OPENAI_OK, "usage": {"total_tokens": 0}}
    response = _adapter("openai", _replying(200, body)).generate("x" * 800)
    assert response.tokens_used == 0


def test_missing_api_key_is_unavailable_and_raises_auth():
    config = make_config("openai", default="openai")
    adapter = create_provider("openai", config, client=httpx.Client(transport=httpx.MockTransport(_replying(200, OPENAI_OK))))
    assert adapter.is_available() is False
    with pytest.raises(AuthError):
        adapter.generate("x")


def test_unknown_provider_name():
    with pytest.raises(NotImplementedError):
        create_provider("mistral", make_config())


# ---------------------------------------------------------------------------
# Claude
# ---------------------------------------------------------------------------


CLAUDE_OK = {
    "content": [{"type": "text", "text": '{"name": "Grom"}'}],
    "stop_reason": "end_turn",
    "usage": {"input_tokens": 100, "output_tokens": 50},
}


def test_claude_request_and_token_sum():
    seen: list[httpx.Request] = []
    response = _adapter("claude", _replying(200, CLAUDE_OK, seen)).generate("x")
    request = seen[0]
    assert str(request.url) == "https://api.anthropic.com/v1/messages"
    assert request.headers["x-api-key"] == "a-key"
    assert request.headers["anthropic-version"] == "2023-06-01"
    assert response.tokens_used == 150


def test_claude_non_text_block_is_invalid_format():
    body = {"content": [{"type": "tool_use", "id": "t1"}], "usage": {}}
    with pytest.raises(GenerationError) as exc_info:
        _adapter("claude", _replying(200, body)).generate("x")
    assert exc_info.value.code == "INVALID_RESPONSE_FORMAT"


def test_claude_refusal_is_content_filtered():
    body = {"content": [], "stop_reason": "refusal"}
    with pytest.raises(ContentFiltered):
        _adapter("claude", _replying(200, body)).generate("x")


@pytest.mark.parametrize(
    "status,body,expected",
    [
        (401, {"error": {"type": "authentication_error"}}, AuthError),
        (429, {"error": {"type": "rate_limit_error"}}, RateLimitError),
        (400, {"error": {"message": "prompt is too long: 250000 tokens"}}, ContextLengthExceeded),
        (400, {"error": {"message": "max_tokens: 999999 > 4096"}}, ContextLengthExceeded),
        (403, {"error": {"type": "content_filtered"}}, ContentFiltered),
    ],
)
def test_claude_error_table(status, body, expected):
    with pytest.raises(expected):
        _adapter("claude", _replying(status, body)).generate("x")


def test_claude_overloaded_is_unavailable():
    with pytest.raises(GenerationError) as exc_info:
        _adapter("claude", _replying(529, {"error": {"type": "overloaded_error"}})).generate("x")
    assert exc_info.value.code == "SERVICE_UNAVAILABLE"


# ---------------------------------------------------------------------------
# Gemini
# ---------------------------------------------------------------------------


GEMINI_OK = {
    "candidates": [{"content": {"parts": [{"text": '{"name": '}, {"text": '"Grom"}'}]}, "finishReason": "STOP"}],
    "usageMetadata": {"totalTokenCount": 77},
}


def test_gemini_request_and_joined_parts():
    seen: list[httpx.Request] = []
    response = _adapter("gemini", _replying(200, GEMINI_OK, seen)).generate("x", GenerationOptions(max_tokens=99))
    request = seen[0]
    assert str(request.url) == (
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash:generateContent"
    )
    assert request.headers["x-goog-api-key"] == "g-key"
    config = json.loads(request.content)["generationConfig"]
    assert config["maxOutputTokens"] == 99
    assert config["topK"] == 1
    assert response.content == '{"name": "Grom"}'
    assert response.tokens_used == 77


def test_gemini_block_reason_is_content_filtered():
    body = {"promptFeedback": {"blockReason": "SAFETY"}}
    with pytest.raises(ContentFiltered, match="SAFETY"):
        _adapter("gemini", _replying(200, body)).generate("x")


def test_gemini_safety_finish_without_text():
    body = {"candidates": [{"content": {"parts": []}, "finishReason": "SAFETY"}]}
    with pytest.raises(ContentFiltered):
        _adapter("gemini", _replying(200, body)).generate("x")


def test_gemini_no_candidates_is_empty():
    with pytest.raises(EmptyResponse):
        _adapter("gemini", _replying(200, {"candidates": []})).generate("x")


def test_gemini_estimates_tokens_when_usage_missing():
    body = {"candidates": [{"content": {"parts": [{"text": "abcd"}]}}]}
    response = _adapter("gemini", _replying(200, body)).generate("efgh")
    assert response.tokens_used == 2


@pytest.mark.parametrize(
    "status,body,expected",
    [
        (400, {"error": {"status": "INVALID_ARGUMENT", "details": [{"reason": "API_KEY_INVALID"}]}}, AuthError),
        (403, {"error": {"status": "PERMISSION_DENIED"}}, AuthError),
        (429, {"error": {"status": "RESOURCE_EXHAUSTED"}}, RateLimitError),
        (400, {"error": {"message": "input exceeds the maximum number of tokens"}}, ContextLengthExceeded),
        (400, {"error": {"message": "blocked: SAFETY"}}, ContentFiltered),
    ],
)
def test_gemini_error_table(status, body, expected):
    with pytest.raises(expected):
        _adapter("gemini", _replying(status, body)).generate("x")


def test_parse_retry_after():
    assert parse_retry_after("3.5") == 3.5
    assert parse_retry_after(None) is None
    assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") is None
