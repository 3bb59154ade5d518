from pydantic_settings import BaseSettings, SettingsConfigDict

from app.config.models import DEFAULT_MODEL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]
    # Sent to OpenRouter as HTTP-Referer / X-Title for request attribution
    app_url: str = "http://localhost:3000"
    app_title: str = "ARCHITECT"

    # AI / OpenRouter
    # Empty string = no default key; requests fail with 401 unless the
    # caller supplies its own key per session
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1/chat/completions"
    ai_model: str = DEFAULT_MODEL

    # Lower temperature = more consistent JSON output
    ai_temperature: float = 0.2
    # Must be large enough to hold the full JSON analysis
    ai_max_tokens: int = 8000
    # ~29K tokens of input context at ~4 chars per token
    ai_max_input_chars: int = 100_000
    ai_min_input_chars: int = 20

    # Retry policy for transient failures (429, 5xx, truncated JSON)
    ai_max_retry_attempts: int = 3
    ai_base_retry_delay_ms: int = 1500
    ai_request_timeout_seconds: float = 60.0

    @property
    def openrouter_enabled(self) -> bool:
        """Check if a process-wide OpenRouter key is configured."""
        return bool(self.openrouter_api_key)


settings = Settings()
