"""Data types for the AI analysis service."""

from dataclasses import dataclass

from app.services.ai.constants import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    MAX_INPUT_CHARS,
    MIN_INPUT_CHARS,
    OPENROUTER_BASE_URL,
)


@dataclass(frozen=True)
class AIConfig:
    """Resolved configuration for one analysis call.

    Built once per request (see resolve_ai_config) and never mutated, so
    concurrent analyses cannot observe each other's key or model.
    """

    api_key: str
    model: str
    base_url: str = OPENROUTER_BASE_URL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    max_input_chars: int = MAX_INPUT_CHARS
    min_input_chars: int = MIN_INPUT_CHARS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS
    timeout_seconds: float = 60.0
    app_url: str = "http://localhost:3000"
    app_title: str = "ARCHITECT"
    uses_custom_key: bool = False  # True when the key came from the caller's session

    def __repr__(self) -> str:
        # Never leak the key into logs or tracebacks
        return (
            f"AIConfig(model={self.model!r}, base_url={self.base_url!r}, "
            f"uses_custom_key={self.uses_custom_key}, has_key={bool(self.api_key)})"
        )
