import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.services.ai.exceptions import AIServiceError, ErrorKind

logger = logging.getLogger(__name__)

# Fatal kinds keep their own status; everything transient becomes 503
_FATAL_STATUS: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_CREDENTIAL: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NO_CREDITS: status.HTTP_402_PAYMENT_REQUIRED,
}

EXHAUSTED_RETRY_MESSAGE = (
    "The analysis service is under heavy load and could not complete your request "
    "after several attempts. Please try again in a few minutes."
)


def error_status(error: AIServiceError) -> int:
    """HTTP status to report for a failed analysis."""
    if error.retryable:
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if error.kind in _FATAL_STATUS:
        return _FATAL_STATUS[error.kind]
    return status.HTTP_502_BAD_GATEWAY


def user_message(error: AIServiceError) -> str:
    """
    Text safe to show the end user.

    Fatal errors explain cause and fix. Retryable errors reaching the user
    have already exhausted automatic retries, so they get a generic
    "try later" message instead of the per-attempt text.
    """
    if error.retryable:
        return EXHAUSTED_RETRY_MESSAGE
    if error.kind == ErrorKind.UPSTREAM_ERROR:
        return "The AI provider rejected the request. Check the selected model and try again."
    return error.message


async def ai_service_error_handler(_request: Request, exc: AIServiceError) -> JSONResponse:
    """Convert an AIServiceError into a JSON error response."""
    # Diagnostics go to the log only, never into the response
    logger.warning(
        f"Analysis failed: kind={exc.kind.value}, retryable={exc.retryable}, "
        f"status={exc.status_code}, message={exc.message}, detail={exc.detail!r}"
    )
    return JSONResponse(
        status_code=error_status(exc),
        content={
            "detail": user_message(exc),
            "retryable": exc.retryable,
            "kind": exc.kind.value,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach domain exception handlers to the application."""
    app.add_exception_handler(AIServiceError, ai_service_error_handler)
