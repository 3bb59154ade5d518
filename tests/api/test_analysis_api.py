"""Analysis API endpoint tests.

The completion endpoint is replaced by overriding get_ai_service with a
service whose HTTP client is a CompletionStub. Retry attempts are capped at
one so failing requests return without backoff.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Annotated

import pytest
from fastapi import Depends
from httpx import AsyncClient

from app.api.deps import get_ai_config, get_ai_service
from app.core.exceptions import EXHAUSTED_RETRY_MESSAGE
from app.main import app
from app.services.ai import AIAnalysisService, AIConfig
from tests.helpers.completion import CompletionStub, error_status, ok, valid_analysis_json

SAMPLE_CODE = "import os\n\ndef main():\n    print(os.getcwd())\n"


def use_stub(stub: CompletionStub, config: AIConfig) -> None:
    """Route /analyze through the stub with a single attempt per request."""
    single_attempt = dataclasses.replace(config, max_attempts=1)
    app.dependency_overrides[get_ai_service] = lambda: AIAnalysisService(
        single_attempt, stub.client()
    )


# ─────────────────────────────────────────────────────────────────────────────
# POST /analyze
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_analyze_returns_result(api_client: AsyncClient, ai_config: AIConfig):
    """POST /api/v1/analyze returns the normalized analysis."""
    stub = CompletionStub(ok(f"```json\n{valid_analysis_json(overall_score=42)}\n```"))
    use_stub(stub, ai_config)

    resp = await api_client.post("/api/v1/analyze", json={"input": SAMPLE_CODE})

    assert resp.status_code == 200
    data = resp.json()
    assert data["overall_score"] == 10
    assert data["language"] == "Python"
    assert data["scores"]["code_quality"] == 8
    assert data["security_concerns"][0]["risk_level"] == "critical"
    assert stub.call_count == 1


@pytest.mark.asyncio
async def test_analyze_short_input_returns_400(api_client: AsyncClient, ai_config: AIConfig):
    """Input below the minimum length is rejected without calling upstream."""
    stub = CompletionStub(ok(valid_analysis_json()))
    use_stub(stub, ai_config)

    resp = await api_client.post("/api/v1/analyze", json={"input": "hi"})

    assert resp.status_code == 400
    data = resp.json()
    assert data["retryable"] is False
    assert data["kind"] == "invalid_input"
    assert "too short" in data["detail"]
    assert stub.call_count == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("upstream", "expected", "kind"),
    [(401, 401, "invalid_credential"), (402, 402, "no_credits"), (404, 502, "upstream_error")],
)
async def test_analyze_fatal_upstream_errors(
    api_client: AsyncClient, ai_config: AIConfig, upstream: int, expected: int, kind: str
):
    """Fatal upstream statuses map to their own HTTP status and are not retried."""
    stub = CompletionStub(error_status(upstream, "upstream-diagnostic-body"))
    use_stub(stub, ai_config)

    resp = await api_client.post("/api/v1/analyze", json={"input": SAMPLE_CODE})

    assert resp.status_code == expected
    data = resp.json()
    assert data["retryable"] is False
    assert data["kind"] == kind
    assert "upstream-diagnostic-body" not in resp.text


@pytest.mark.asyncio
async def test_analyze_exhausted_retries_returns_503(api_client: AsyncClient, ai_config: AIConfig):
    """Transient failures that outlast retries get a generic try-later message."""
    stub = CompletionStub(ok('{"overall_score": 7, "scores": {"secur'))
    use_stub(stub, ai_config)

    resp = await api_client.post("/api/v1/analyze", json={"input": SAMPLE_CODE})

    assert resp.status_code == 503
    data = resp.json()
    assert data == {"detail": EXHAUSTED_RETRY_MESSAGE, "retryable": True, "kind": "invalid_json"}
    assert "secur" not in data["detail"]


@pytest.mark.asyncio
async def test_analyze_uses_session_key_and_model(api_client: AsyncClient):
    """X-OpenRouter-Key and X-AI-Model headers override the default config."""
    stub = CompletionStub(ok(valid_analysis_json()))

    def stub_service(config: Annotated[AIConfig, Depends(get_ai_config)]) -> AIAnalysisService:
        return AIAnalysisService(config, stub.client())

    app.dependency_overrides[get_ai_service] = stub_service

    resp = await api_client.post(
        "/api/v1/analyze",
        json={"input": SAMPLE_CODE},
        headers={"X-OpenRouter-Key": "sk-session-key", "X-AI-Model": "qwen/qwen-2.5-72b-instruct"},
    )

    assert resp.status_code == 200
    assert stub.requests[0].headers["authorization"] == "Bearer sk-session-key"
    assert stub.sent_json()["model"] == "qwen/qwen-2.5-72b-instruct"


@pytest.mark.asyncio
async def test_analyze_missing_body_returns_422(api_client: AsyncClient):
    """POST /api/v1/analyze without an input field fails validation."""
    resp = await api_client.post("/api/v1/analyze", json={})
    assert resp.status_code == 422


# ─────────────────────────────────────────────────────────────────────────────
# Secret scan, models, health
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_scan_secrets_flags_key(api_client: AsyncClient):
    """POST /api/v1/secrets/scan reports matching categories."""
    resp = await api_client.post(
        "/api/v1/secrets/scan", json={"input": 'API_KEY="sk-abcdEFGH12345678"'}
    )

    assert resp.status_code == 200
    data = resp.json()
    assert data["has_secrets"] is True
    assert "OpenAI/OpenRouter key" in data["secrets"]


@pytest.mark.asyncio
async def test_scan_secrets_clean_input(api_client: AsyncClient):
    """Ordinary prose yields no findings."""
    resp = await api_client.post("/api/v1/secrets/scan", json={"input": "Just a README."})

    assert resp.status_code == 200
    assert resp.json() == {"secrets": [], "has_secrets": False}


@pytest.mark.asyncio
async def test_list_models(api_client: AsyncClient):
    """GET /api/v1/models returns the default model and catalog."""
    from app.config import settings

    resp = await api_client.get("/api/v1/models")

    assert resp.status_code == 200
    data = resp.json()
    assert data["default_model"] == settings.ai_model
    ids = [m["model_id"] for m in data["models"]]
    assert "mistralai/mistral-7b-instruct" in ids
    assert any(m["free"] is False for m in data["models"])


@pytest.mark.asyncio
async def test_health(api_client: AsyncClient):
    """GET /health responds without touching the AI service."""
    resp = await api_client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_api_calls_logged_with_timing(api_client: AsyncClient, caplog: pytest.LogCaptureFixture):
    """API calls are logged with status and elapsed time; health checks are not."""
    with caplog.at_level(logging.INFO, logger="app.main"):
        await api_client.get("/api/v1/models")
        await api_client.get("/health")

    messages = [r.getMessage() for r in caplog.records if r.name == "app.main"]
    assert len(messages) == 1
    assert messages[0].startswith("GET /api/v1/models -> 200 (")
    assert messages[0].endswith("ms)")
