import json
from dataclasses import replace
import httpx
import pytest
from src.errors import UpstreamRequestError
from src.llm_client import LLMClient


def _gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _client(settings, handler):
    return LLMClient(settings, session=httpx.Client(transport=httpx.MockTransport(handler)))


def test_gemini_request_shape(settings):
    seen = {}

    def handler(request):
        seen["url"] = request.url
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_gemini_body('{"category": "Books"}'))

    c = _client(settings, handler)
    assert c.provider == "gemini"
    assert c.complete_text("hello") == '{"category": "Books"}'
    assert seen["url"].path.endswith(f"/{settings.gemini_model}:generateContent")
    assert seen["url"].params["key"] == "test-key"
    assert seen["body"] == {"contents": [{"parts": [{"text": "hello"}]}]}


def test_non_success_status_raises(settings):
    c = _client(settings, lambda request: httpx.Response(503, json={"error": "overloaded"}))
    with pytest.raises(UpstreamRequestError) as exc:
        c.complete_text("hello")
    assert exc.value.status_code == 503


def test_transport_error_raises(settings):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamRequestError) as exc:
        _client(settings, handler).complete_text("hello")
    assert exc.value.status_code is None


def test_timeout_raises(settings):
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(UpstreamRequestError, match="timed out"):
        _client(settings, handler).complete_text("hello")


def test_non_json_body_raises(settings):
    c = _client(settings, lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(UpstreamRequestError):
        c.complete_text("hello")


def test_missing_candidates_yields_empty_text(settings):
    c = _client(settings, lambda request: httpx.Response(200, json={"candidates": []}))
    assert c.complete_text("hello") == ""


def test_transport_errors_retried_when_configured(settings):
    calls = []

    def handler(request):
        calls.append(1)
        if len(calls) == 1:
            raise httpx.ConnectError("flaky", request=request)
        return httpx.Response(200, json=_gemini_body("ok"))

    c = _client(replace(settings, llm_max_attempts=2), handler)
    assert c.complete_text("hello") == "ok"
    assert len(calls) == 2


def test_single_attempt_by_default(settings):
    calls = []

    def handler(request):
        calls.append(1)
        raise httpx.ConnectError("down", request=request)

    with pytest.raises(UpstreamRequestError):
        _client(settings, handler).complete_text("hello")
    assert len(calls) == 1


def test_openai_provider(settings):
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": "{}"}}]})

    s = replace(settings, llm_provider="openai", openai_api_key="sk-test")
    assert _client(s, handler).complete_text("hello") == "{}"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["messages"] == [{"role": "user", "content": "hello"}]


def test_unknown_provider_rejected(settings):
    with pytest.raises(ValueError):
        LLMClient(replace(settings, llm_provider="hf"))


def test_cache_avoids_second_call(settings):
    calls = []

    def handler(request):
        calls.append(1)
        return httpx.Response(200, json=_gemini_body("cached text"))

    c = _client(replace(settings, cache_enabled=True), handler)
    assert c.complete_text("same prompt") == "cached text"
    assert c.complete_text("same prompt") == "cached text"
    assert len(calls) == 1
