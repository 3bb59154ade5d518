"""
Completion response parsing.

Recovers a single JSON object from the model's free-text reply. Models wrap
JSON in markdown fences and add prose around it despite instructions, so
parsing is deliberately forgiving about everything outside the braces.
"""

import json
import logging
import re
from typing import Any

from app.services.ai.constants import JSON_DEBUG_EXCERPT_CHARS
from app.services.ai.exceptions import AIServiceError, ErrorKind

logger = logging.getLogger(__name__)

# Opening fences with an optional language tag (```json, ```JSON, ```)
_OPENING_FENCE_RE = re.compile(r"```[A-Za-z0-9_+-]*[ \t]*\n?")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers wherever they appear."""
    return _OPENING_FENCE_RE.sub("", text).strip()


def _reject_constant(name: str) -> Any:
    """Refuse the non-standard NaN / Infinity literals json.loads accepts by default."""
    raise ValueError(f"Non-standard JSON constant {name!r}")


def extract_json_object(raw: str) -> dict[str, Any]:
    """
    Parse the JSON object embedded in a model reply.

    Handles various response formats including:
    - Raw JSON objects
    - JSON in markdown code blocks
    - JSON with leading or trailing prose

    Args:
        raw: Content of the model's chosen reply

    Returns:
        The parsed object

    Raises:
        AIServiceError: Retryable INVALID_JSON when no object can be parsed
    """
    content = strip_code_fences(raw.strip())

    # Outermost object: first "{" through last "}"
    start = content.find("{")
    end = content.rfind("}")
    if start != -1 and end > start:
        content = content[start : end + 1]

    try:
        parsed = json.loads(content, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        excerpt = content[:JSON_DEBUG_EXCERPT_CHARS]
        logger.error(f"JSON parse failed: {e}")
        logger.error(f"First {JSON_DEBUG_EXCERPT_CHARS} chars: {excerpt}")
        # Truncated JSON is almost always a max_tokens issue, so worth retrying
        raise AIServiceError(
            f"Invalid JSON from AI: {e}",
            retryable=True,
            kind=ErrorKind.INVALID_JSON,
            detail=excerpt,
        ) from e

    if not isinstance(parsed, dict):
        logger.error(f"Expected a JSON object from AI, got {type(parsed).__name__}")
        raise AIServiceError(
            f"Invalid JSON from AI: expected an object, got {type(parsed).__name__}",
            retryable=True,
            kind=ErrorKind.INVALID_JSON,
            detail=content[:JSON_DEBUG_EXCERPT_CHARS],
        )

    return parsed
