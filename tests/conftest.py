"""Root conftest: test infrastructure for all backend tests.

Provides:
- AIConfig fixture pointing at a fake completion endpoint
- Sleep mock so retry backoff never actually waits
- API client wired to the FastAPI app through ASGITransport

Completion endpoint fakes live in tests/helpers/completion.py.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from app.services.ai.types import AIConfig
from tests.helpers.completion import TEST_BASE_URL


# ─────────────────────────────────────────────────────────────────────────────
# Config & Retry Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def ai_config() -> AIConfig:
    """AIConfig with the default retry policy and a fake endpoint."""
    return AIConfig(
        api_key="sk-test-key",
        model="test/model",
        base_url=TEST_BASE_URL,
        app_url="http://test",
        app_title="ARCHITECT",
    )


@pytest.fixture
def mock_sleep():
    """Replace the retry backoff sleep so tests run instantly.

    The mock records the requested durations (in seconds).
    """
    with patch("app.services.ai.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


# ─────────────────────────────────────────────────────────────────────────────
# API Client
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
async def api_client():
    """HTTP client for the FastAPI app, running in-process.

    Tests override get_ai_service to inject a stubbed completion endpoint.
    """
    from app.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
