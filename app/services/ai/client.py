"""
Completion client for OpenRouter-compatible chat completion endpoints.

Sends exactly one request per call and classifies every failure, so the
retry loop above it only has to look at `retryable`.
"""

import logging
from typing import Any

import httpx

from app.services.ai.constants import JSON_ONLY_SUFFIX, SYSTEM_PROMPT, USER_PROMPT_PREFIX
from app.services.ai.exceptions import AIServiceError, ErrorKind
from app.services.ai.helpers import extract_content, handle_error_response, parse_envelope
from app.services.ai.http_client import get_ai_client, request_timeout
from app.services.ai.types import AIConfig

logger = logging.getLogger(__name__)


def build_payload(text: str, config: AIConfig) -> dict[str, Any]:
    """Build the chat completion request body for already-bounded input."""
    return {
        "model": config.model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT + JSON_ONLY_SUFFIX},
            {"role": "user", "content": f"{USER_PROMPT_PREFIX}{text}"},
        ],
        "temperature": config.temperature,
        "max_tokens": config.max_tokens,
    }


def build_headers(config: AIConfig) -> dict[str, str]:
    """Per-request headers: bearer credential plus OpenRouter attribution."""
    return {
        "Authorization": f"Bearer {config.api_key}",
        "Content-Type": "application/json",
        "HTTP-Referer": config.app_url,
        "X-Title": config.app_title,
    }


class CompletionClient:
    """Sends one analysis prompt to the completion endpoint."""

    def __init__(self, config: AIConfig, http_client: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self._http_client = http_client

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            return get_ai_client()
        return self._http_client

    async def complete(self, text: str) -> str:
        """
        Request a completion for the given input and return the reply text.

        Args:
            text: Bounded user input (see truncate_input)

        Returns:
            Raw content of the first choice

        Raises:
            AIServiceError: Classified by status code, transport failure, or envelope shape
        """
        logger.info(f"Sending completion request: model={self.config.model}, chars={len(text)}")

        try:
            response = await self.http_client.post(
                self.config.base_url,
                json=build_payload(text, self.config),
                headers=build_headers(self.config),
                timeout=request_timeout(self.config.timeout_seconds),
            )
        except httpx.TimeoutException as e:
            raise AIServiceError(
                "The AI provider took too long to respond. Retrying...",
                retryable=True,
                kind=ErrorKind.TRANSPORT,
                detail=repr(e),
            ) from e
        except httpx.TransportError as e:
            raise AIServiceError(
                "Could not reach the AI provider. Retrying...",
                retryable=True,
                kind=ErrorKind.TRANSPORT,
                detail=repr(e),
            ) from e

        if not response.is_success:
            logger.warning(f"Completion endpoint returned HTTP {response.status_code}")
            handle_error_response(response)

        content = extract_content(parse_envelope(response))
        logger.debug(f"Completion content length: {len(content)} chars")
        return content
