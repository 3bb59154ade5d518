"""Exceptions for the AI analysis service."""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Where an AI service failure came from."""

    # Fatal
    INVALID_INPUT = "invalid_input"
    INVALID_CREDENTIAL = "invalid_credential"
    NO_CREDITS = "no_credits"
    # Transient (UPSTREAM_ERROR is fatal below 500)
    RATE_LIMITED = "rate_limited"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    UPSTREAM_ERROR = "upstream_error"
    MALFORMED_ENVELOPE = "malformed_envelope"
    INVALID_JSON = "invalid_json"
    TRANSPORT = "transport"


class AIServiceError(Exception):
    """Classified failure from the analysis pipeline.

    `retryable` decides whether call_with_retry may try again. `message` is
    safe to show to users; `detail` holds diagnostics (response excerpts,
    truncated JSON) and is only ever logged.
    """

    def __init__(
        self,
        message: str,
        *,
        retryable: bool,
        kind: ErrorKind,
        status_code: int | None = None,
        detail: str | None = None,
    ):
        self.message = message
        self.retryable = retryable
        self.kind = kind
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"AIServiceError(kind={self.kind.value!r}, retryable={self.retryable}, "
            f"status_code={self.status_code}, message={self.message!r})"
        )
