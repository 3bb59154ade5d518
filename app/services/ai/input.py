"""
Input bounding for analysis requests.

Keeps user-submitted text within the model's context budget and rejects
input too short to analyze, before any network call is made.
"""

import re

from app.services.ai.constants import MAX_INPUT_CHARS, MIN_INPUT_CHARS
from app.services.ai.exceptions import AIServiceError, ErrorKind

GITHUB_URL_RE = re.compile(r"^https?://(www\.)?github\.com/[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+")
_GITHUB_REPO_NAME_RE = re.compile(r"github\.com/[^/]+/([^/\s]+)")
_MARKDOWN_H1_RE = re.compile(r"^# (.+)$", re.MULTILINE)

DEFAULT_PROJECT_NAME = "Code Analysis"


def truncate_input(text: str, max_chars: int = MAX_INPUT_CHARS) -> str:
    """
    Truncate text to max_chars, appending a notice when anything was cut.

    The notice tells the model it is looking at a partial view, so it is
    mandatory whenever truncation happens.
    """
    if len(text) <= max_chars:
        return text

    return (
        text[:max_chars]
        + "\n\n[NOTE: Input was truncated to fit within the model's context window. "
        + f"Original length: {len(text):,} chars, showing first {max_chars:,}.]\n"
    )


def ensure_min_length(text: str, min_chars: int = MIN_INPUT_CHARS) -> None:
    """
    Reject input that is too short for a meaningful analysis.

    Raises:
        AIServiceError: Non-retryable INVALID_INPUT error
    """
    if len(text.strip()) < min_chars:
        raise AIServiceError(
            "Input is too short for a meaningful analysis. "
            "Paste more code or provide a GitHub URL.",
            retryable=False,
            kind=ErrorKind.INVALID_INPUT,
        )


def is_valid_github_url(url: str) -> bool:
    """Basic check that the string looks like a GitHub repository URL."""
    return bool(GITHUB_URL_RE.match(url.strip()))


def derive_project_name(text: str) -> str:
    """
    Guess a display name for the analyzed project.

    Prefers the repository name from a GitHub URL, then the first markdown
    H1 heading, then a generic default.
    """
    if "github.com" in text:
        match = _GITHUB_REPO_NAME_RE.search(text)
        if match:
            return match.group(1).removesuffix(".git")

    match = _MARKDOWN_H1_RE.search(text)
    if match:
        return match.group(1).strip()[:200]

    return DEFAULT_PROJECT_NAME
