"""
Completion API helper utilities.

Maps HTTP failures to classified AIServiceErrors and unwraps the chat
completion envelope.
"""

import json
import logging
from typing import Any

import httpx

from app.services.ai.constants import (
    ERROR_BODY_EXCERPT_CHARS,
    OPENROUTER_CREDITS_URL,
    OPENROUTER_KEYS_URL,
)
from app.services.ai.exceptions import AIServiceError, ErrorKind

logger = logging.getLogger(__name__)


def handle_error_response(response: httpx.Response) -> None:
    """
    Raise a classified error for a non-2xx completion response.

    Args:
        response: The HTTP response from the completion endpoint

    Raises:
        AIServiceError: Always, for any non-success status
    """
    status = response.status_code
    body = response.text[:ERROR_BODY_EXCERPT_CHARS]

    if status == 401:
        raise AIServiceError(
            f"Invalid API key. Get one at {OPENROUTER_KEYS_URL}",
            retryable=False,
            kind=ErrorKind.INVALID_CREDENTIAL,
            status_code=status,
            detail=body,
        )
    elif status == 402:
        raise AIServiceError(
            "No credits remaining. Free models are available - check the model name, "
            f"or add credits at {OPENROUTER_CREDITS_URL}",
            retryable=False,
            kind=ErrorKind.NO_CREDITS,
            status_code=status,
            detail=body,
        )
    elif status == 429:
        raise AIServiceError(
            "Rate limit reached - retrying automatically...",
            retryable=True,
            kind=ErrorKind.RATE_LIMITED,
            status_code=status,
            detail=body,
        )
    elif status in (502, 503):
        raise AIServiceError(
            f"The AI provider is temporarily unavailable ({status}). Retrying...",
            retryable=True,
            kind=ErrorKind.UPSTREAM_UNAVAILABLE,
            status_code=status,
            detail=body,
        )
    else:
        raise AIServiceError(
            f"AI provider error {status}",
            retryable=status >= 500,
            kind=ErrorKind.UPSTREAM_ERROR,
            status_code=status,
            detail=body,
        )


def parse_envelope(response: httpx.Response) -> dict[str, Any]:
    """
    Decode a 2xx response body as the chat completion envelope.

    Raises:
        AIServiceError: Retryable MALFORMED_ENVELOPE if the body is not a JSON object
    """
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise AIServiceError(
            "AI provider returned an unreadable response",
            retryable=True,
            kind=ErrorKind.MALFORMED_ENVELOPE,
            status_code=response.status_code,
            detail=f"{e}: {response.text[:ERROR_BODY_EXCERPT_CHARS]}",
        ) from e

    if not isinstance(data, dict):
        raise AIServiceError(
            "AI provider returned an unexpected format",
            retryable=True,
            kind=ErrorKind.MALFORMED_ENVELOPE,
            status_code=response.status_code,
            detail=json.dumps(data)[:ERROR_BODY_EXCERPT_CHARS],
        )
    return data


def extract_content(envelope: dict[str, Any]) -> str:
    """
    Pull choices[0].message.content out of a completion envelope.

    A missing choice or content is treated as a transient generation glitch.

    Raises:
        AIServiceError: Retryable MALFORMED_ENVELOPE
    """
    choices = envelope.get("choices")
    first = choices[0] if isinstance(choices, list) and choices else None
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None

    if not isinstance(content, str):
        raise AIServiceError(
            "AI provider returned an unexpected format",
            retryable=True,
            kind=ErrorKind.MALFORMED_ENVELOPE,
            detail=json.dumps(envelope, default=str)[:ERROR_BODY_EXCERPT_CHARS],
        )
    return content
