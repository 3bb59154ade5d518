"""
Tests for CompletionClient and the completion response helpers.

Tests cover:
- Request payload and attribution headers
- HTTP status classification (401/402/429/5xx/4xx)
- Malformed envelopes
- Transport failures and timeouts
"""

import dataclasses

import httpx
import pytest

from app.services.ai.client import CompletionClient, build_headers, build_payload
from app.services.ai.constants import SYSTEM_PROMPT, USER_PROMPT_PREFIX
from app.services.ai.exceptions import AIServiceError, ErrorKind
from app.services.ai.helpers import extract_content, handle_error_response
from app.services.ai.types import AIConfig
from tests.helpers.completion import TEST_BASE_URL, CompletionStub, error_status, ok


class TestBuildRequest:
    """Tests for build_payload() and build_headers()."""

    def test_payload_shape(self, ai_config: AIConfig) -> None:
        payload = build_payload("print('hi')", ai_config)

        assert payload["model"] == "test/model"
        assert payload["temperature"] == 0.2
        assert payload["max_tokens"] == 8000
        system, user = payload["messages"]
        assert system["role"] == "system"
        assert system["content"].startswith(SYSTEM_PROMPT)
        assert user == {"role": "user", "content": f"{USER_PROMPT_PREFIX}print('hi')"}

    def test_headers_carry_key_and_attribution(self, ai_config: AIConfig) -> None:
        headers = build_headers(ai_config)

        assert headers["Authorization"] == "Bearer sk-test-key"
        assert headers["HTTP-Referer"] == "http://test"
        assert headers["X-Title"] == "ARCHITECT"

    def test_config_repr_hides_key(self, ai_config: AIConfig) -> None:
        assert "sk-test-key" not in repr(ai_config)


class TestComplete:
    """Tests for CompletionClient.complete()."""

    @pytest.mark.asyncio
    async def test_returns_first_choice_content(self, ai_config: AIConfig) -> None:
        stub = CompletionStub(ok('{"overall_score": 7}'))
        client = CompletionClient(ai_config, stub.client())

        content = await client.complete("some code to analyze")

        assert content == '{"overall_score": 7}'
        assert stub.call_count == 1
        request = stub.requests[0]
        assert str(request.url) == TEST_BASE_URL
        assert request.headers["authorization"] == "Bearer sk-test-key"
        assert stub.sent_json()["model"] == "test/model"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("timeout_seconds", [5.0, 90.0])
    async def test_request_timeout_follows_config(
        self, ai_config: AIConfig, timeout_seconds: float
    ) -> None:
        stub = CompletionStub(ok('{"overall_score": 7}'))
        config = dataclasses.replace(ai_config, timeout_seconds=timeout_seconds)

        await CompletionClient(config, stub.client()).complete("some code to analyze")

        timeout = stub.requests[0].extensions["timeout"]
        assert timeout["read"] == timeout_seconds
        assert timeout["connect"] == 10.0

    @pytest.mark.asyncio
    async def test_shared_client_does_not_pin_timeout(self, ai_config: AIConfig) -> None:
        """Two calls on one client each carry their own config's timeout."""
        stub = CompletionStub(ok('{"overall_score": 7}'))
        http_client = stub.client()

        for seconds in (60.0, 5.0):
            config = dataclasses.replace(ai_config, timeout_seconds=seconds)
            await CompletionClient(config, http_client).complete("some code to analyze")

        assert [r.extensions["timeout"]["read"] for r in stub.requests] == [60.0, 5.0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("code", "kind", "retryable"),
        [
            (401, ErrorKind.INVALID_CREDENTIAL, False),
            (402, ErrorKind.NO_CREDITS, False),
            (429, ErrorKind.RATE_LIMITED, True),
            (502, ErrorKind.UPSTREAM_UNAVAILABLE, True),
            (503, ErrorKind.UPSTREAM_UNAVAILABLE, True),
            (500, ErrorKind.UPSTREAM_ERROR, True),
            (504, ErrorKind.UPSTREAM_ERROR, True),
            (400, ErrorKind.UPSTREAM_ERROR, False),
            (404, ErrorKind.UPSTREAM_ERROR, False),
        ],
    )
    async def test_status_classification(
        self, ai_config: AIConfig, code: int, kind: ErrorKind, retryable: bool
    ) -> None:
        stub = CompletionStub(error_status(code))
        client = CompletionClient(ai_config, stub.client())

        with pytest.raises(AIServiceError) as exc_info:
            await client.complete("some code to analyze")

        assert exc_info.value.kind == kind
        assert exc_info.value.retryable is retryable
        assert exc_info.value.status_code == code
        assert stub.call_count == 1

    @pytest.mark.asyncio
    async def test_invalid_key_message_is_actionable(self, ai_config: AIConfig) -> None:
        client = CompletionClient(ai_config, CompletionStub(error_status(401)).client())

        with pytest.raises(AIServiceError) as exc_info:
            await client.complete("some code to analyze")

        assert "openrouter.ai/keys" in exc_info.value.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "envelope",
        [
            {},
            {"choices": []},
            {"choices": [{}]},
            {"choices": [{"message": {"role": "assistant"}}]},
            {"choices": [{"message": {"content": None}}]},
        ],
    )
    async def test_missing_content_is_retryable(self, ai_config: AIConfig, envelope: dict) -> None:
        stub = CompletionStub(httpx.Response(200, json=envelope))
        client = CompletionClient(ai_config, stub.client())

        with pytest.raises(AIServiceError) as exc_info:
            await client.complete("some code to analyze")

        assert exc_info.value.kind == ErrorKind.MALFORMED_ENVELOPE
        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    async def test_non_json_body_is_retryable(self, ai_config: AIConfig) -> None:
        stub = CompletionStub(httpx.Response(200, text="<html>gateway</html>"))
        client = CompletionClient(ai_config, stub.client())

        with pytest.raises(AIServiceError) as exc_info:
            await client.complete("some code to analyze")

        assert exc_info.value.kind == ErrorKind.MALFORMED_ENVELOPE
        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    async def test_transport_error_is_retryable(self, ai_config: AIConfig) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
        client = CompletionClient(ai_config, http_client)

        with pytest.raises(AIServiceError) as exc_info:
            await client.complete("some code to analyze")

        assert exc_info.value.kind == ErrorKind.TRANSPORT
        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    async def test_timeout_is_retryable(self, ai_config: AIConfig) -> None:
        def stall(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = CompletionClient(ai_config, httpx.AsyncClient(transport=httpx.MockTransport(stall)))

        with pytest.raises(AIServiceError) as exc_info:
            await client.complete("some code to analyze")

        assert exc_info.value.kind == ErrorKind.TRANSPORT
        assert exc_info.value.retryable is True


class TestHelpers:
    """Tests for handle_error_response() and extract_content()."""

    def test_error_detail_is_truncated_body(self) -> None:
        response = httpx.Response(500, text="e" * 1000)

        with pytest.raises(AIServiceError) as exc_info:
            handle_error_response(response)

        assert exc_info.value.detail == "e" * 200
        assert "e" * 200 not in exc_info.value.message

    def test_extract_content_ignores_later_choices(self) -> None:
        envelope = {
            "choices": [
                {"message": {"content": "first"}},
                {"message": {"content": "second"}},
            ]
        }
        assert extract_content(envelope) == "first"
