"""Vendor adapter tests against a fake aiohttp session."""
import asyncio

import aiohttp
import pytest

from article_ai.models.generation import FailureKind, GenerationRequest
from article_ai.providers.gemini_adapter import GeminiAdapter
from article_ai.providers.openai_adapter import OpenAIAdapter
from article_ai.providers.registry import ProviderClient

from conftest import FakeResponse, FakeSession


REQUEST = GenerationRequest(prompt="Explain AI in 1 sentence.", max_output_tokens=50)


def gemini(session, api_key="g-key"):
    return GeminiAdapter(api_key, session=session)


def gemini_error(code, status, message="boom"):
    return {"error": {"code": code, "status": status, "message": message}}


@pytest.mark.asyncio
async def test_gemini_success_joins_parts():
    session = FakeSession([FakeResponse(200, {
        "candidates": [{"content": {"parts": [{"text": "AI is "}, {"text": "software."}]}}]
    })])

    outcome = await gemini(session).invoke("gemini-2.0-flash", REQUEST)

    assert outcome.ok
    assert outcome.text == "AI is software."
    sent = session.requests[0]
    assert sent["url"].endswith("/models/gemini-2.0-flash:generateContent")
    assert sent["headers"]["x-goog-api-key"] == "g-key"
    assert sent["json"]["contents"][0]["parts"][0]["text"] == REQUEST.prompt
    assert sent["json"]["generationConfig"] == {"maxOutputTokens": 50}


@pytest.mark.asyncio
@pytest.mark.parametrize("status,body,kind,retryable", [
    (429, gemini_error(429, "RESOURCE_EXHAUSTED"), FailureKind.RATE_LIMITED, True),
    (404, gemini_error(404, "NOT_FOUND", "models/gemini-pro is not found"), FailureKind.INVALID_REQUEST, False),
    (400, gemini_error(400, "INVALID_ARGUMENT"), FailureKind.INVALID_REQUEST, False),
    (403, gemini_error(403, "PERMISSION_DENIED"), FailureKind.UNAUTHORIZED, False),
    (503, gemini_error(503, "UNAVAILABLE"), FailureKind.SERVER_ERROR, False),
    (502, "<html>Bad Gateway</html>", FailureKind.SERVER_ERROR, False),
    (429, {}, FailureKind.RATE_LIMITED, True),
])
async def test_gemini_error_classification(status, body, kind, retryable):
    outcome = await gemini(FakeSession([FakeResponse(status, body)])).invoke("m", REQUEST)

    assert outcome.kind is kind
    assert outcome.retryable is retryable
    assert outcome.status_code == status


@pytest.mark.asyncio
async def test_gemini_error_message_comes_from_payload():
    body = gemini_error(404, "NOT_FOUND", "models/gemini-pro is not found for API version v1beta")
    outcome = await gemini(FakeSession([FakeResponse(404, body)])).invoke("gemini-pro", REQUEST)
    assert "gemini-pro is not found" in outcome.message


@pytest.mark.asyncio
async def test_gemini_blocked_prompt_is_empty_response():
    body = {"promptFeedback": {"blockReason": "SAFETY"}}
    outcome = await gemini(FakeSession([FakeResponse(200, body)])).invoke("m", REQUEST)

    assert outcome.kind is FailureKind.EMPTY_RESPONSE
    assert "SAFETY" in outcome.message
    assert not outcome.retryable


@pytest.mark.asyncio
async def test_gemini_candidate_without_parts_reports_finish_reason():
    body = {"candidates": [{"finishReason": "MAX_TOKENS"}]}
    outcome = await gemini(FakeSession([FakeResponse(200, body)])).invoke("m", REQUEST)

    assert outcome.kind is FailureKind.EMPTY_RESPONSE
    assert "finishReason=MAX_TOKENS" in outcome.message
    assert outcome.status_code == 200


@pytest.mark.asyncio
async def test_undecodable_error_page_is_server_error():
    session = FakeSession([FakeResponse(502, b"\xff\xfe bad gateway \xc3\x28")])
    outcome = await gemini(session).invoke("m", REQUEST)

    assert outcome.kind is FailureKind.SERVER_ERROR
    assert outcome.status_code == 502
    assert not outcome.retryable


@pytest.mark.asyncio
async def test_undecodable_success_body_is_empty_response():
    session = FakeSession([FakeResponse(200, b"\x80\x81 not json")])
    outcome = await gemini(session).invoke("m", REQUEST)

    assert outcome.kind is FailureKind.EMPTY_RESPONSE


@pytest.mark.asyncio
async def test_missing_key_fails_without_network_call():
    session = FakeSession()
    outcome = await gemini(session, api_key=None).invoke("m", REQUEST)

    assert outcome.kind is FailureKind.UNAUTHORIZED
    assert session.requests == []


@pytest.mark.asyncio
async def test_connection_error_is_network_error():
    session = FakeSession(error=aiohttp.ClientConnectionError("connection reset"))
    outcome = await gemini(session).invoke("m", REQUEST)

    assert outcome.kind is FailureKind.NETWORK_ERROR
    assert not outcome.retryable


@pytest.mark.asyncio
async def test_timeout_is_network_error_and_uses_request_timeout():
    session = FakeSession(error=asyncio.TimeoutError())
    outcome = await gemini(session).invoke("m", GenerationRequest(prompt="p", timeout=5))

    assert outcome.kind is FailureKind.NETWORK_ERROR
    assert "timed out after 5s" in outcome.message
    assert session.requests[0]["timeout"].total == 5


@pytest.mark.asyncio
async def test_openai_success():
    session = FakeSession([FakeResponse(200, {"choices": [{"message": {"content": "Hello there"}}]})])
    adapter = OpenAIAdapter("o-key", organization_id="org-1", session=session)

    outcome = await adapter.invoke("gpt-4o-mini", REQUEST)

    assert outcome.text == "Hello there"
    sent = session.requests[0]
    assert sent["url"] == "https://api.openai.com/v1/chat/completions"
    assert sent["headers"]["Authorization"] == "Bearer o-key"
    assert sent["headers"]["OpenAI-Organization"] == "org-1"
    assert sent["json"]["max_tokens"] == 50


@pytest.mark.asyncio
@pytest.mark.parametrize("status,body,kind,retryable", [
    (429, {"error": {"code": "rate_limit_exceeded", "message": "slow down"}}, FailureKind.RATE_LIMITED, True),
    (429, {"error": {"code": "insufficient_quota", "message": "quota"}}, FailureKind.RATE_LIMITED, False),
    (401, {"error": {"code": "invalid_api_key", "message": "bad key"}}, FailureKind.UNAUTHORIZED, False),
    (404, {"error": {"code": "model_not_found", "message": "no model"}}, FailureKind.INVALID_REQUEST, False),
    (500, {"error": {"message": "server"}}, FailureKind.SERVER_ERROR, False),
])
async def test_openai_error_classification(status, body, kind, retryable):
    adapter = OpenAIAdapter("o-key", session=FakeSession([FakeResponse(status, body)]))
    outcome = await adapter.invoke("gpt-4o-mini", REQUEST)

    assert outcome.kind is kind
    assert outcome.retryable is retryable


@pytest.mark.asyncio
async def test_openai_empty_content():
    session = FakeSession([FakeResponse(200, {"choices": [{"message": {"content": None}}]})])
    outcome = await OpenAIAdapter("o-key", session=session).invoke("gpt-4o-mini", REQUEST)
    assert outcome.kind is FailureKind.EMPTY_RESPONSE


@pytest.mark.asyncio
async def test_registry_dispatches_by_provider_name():
    session = FakeSession([FakeResponse(200, {"choices": [{"message": {"content": "routed"}}]})])
    client = ProviderClient([gemini(FakeSession()), OpenAIAdapter("o-key", session=session)])

    outcome = await client.invoke("openai", "gpt-4o-mini", REQUEST)

    assert outcome.text == "routed"
    assert client.provider_names == ["gemini", "openai"]


@pytest.mark.asyncio
async def test_registry_unknown_provider_is_invalid_request():
    client = ProviderClient([gemini(FakeSession())])
    outcome = await client.invoke("mistral", "large", REQUEST)
    assert outcome.kind is FailureKind.INVALID_REQUEST


def test_registry_rejects_duplicate_adapters():
    with pytest.raises(ValueError):
        ProviderClient([gemini(FakeSession()), gemini(FakeSession())])


@pytest.mark.asyncio
async def test_injected_session_is_not_closed_by_adapter():
    session = FakeSession()
    async with ProviderClient([gemini(session)]):
        pass
    assert session.closed is False
