"""
Shared HTTP client for completion API calls.

One pooled AsyncClient serves every analysis. It holds connection limits
only: the credential and the read timeout come from each call's AIConfig
(see CompletionClient.complete), so analyses with different keys or
timeouts can share sockets without sharing settings.
"""

import logging

import httpx

logger = logging.getLogger(__name__)

# Connection setup is short regardless of how long generation may take
CONNECT_TIMEOUT_SECONDS = 10.0

_client: httpx.AsyncClient | None = None


def request_timeout(timeout_seconds: float) -> httpx.Timeout:
    """Per-request timeout: the configured read budget plus a fixed connect limit."""
    return httpx.Timeout(timeout_seconds, connect=CONNECT_TIMEOUT_SECONDS)


def get_ai_client() -> httpx.AsyncClient:
    """Get or create the pooled completion client."""
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
        )
        logger.debug("Created pooled completion HTTP client")
    return _client


async def close_ai_client() -> None:
    """Close the pooled client on application shutdown."""
    global _client
    if _client is not None and not _client.is_closed:
        await _client.aclose()
        logger.debug("Closed pooled completion HTTP client")
    _client = None
