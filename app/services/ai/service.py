"""
AIAnalysisService - single entry point for AI code analysis.

Takes raw user text and returns a validated AnalysisResult, or raises a
classified AIServiceError. The pipeline per call:

1. Trim and reject input that is too short (fatal, no network call)
2. Truncate oversized input with a visible notice
3. Retry loop around one attempt = completion -> JSON extraction -> normalization
4. Return the normalized result

Malformed or truncated JSON is raised inside the attempt, so it is retried
like any other transient failure.
"""

import logging

import httpx

from app.config.settings import Settings
from app.schemas.analysis import AnalysisResult
from app.services.ai.client import CompletionClient
from app.services.ai.input import derive_project_name, ensure_min_length, truncate_input
from app.services.ai.normalizer import normalize_analysis
from app.services.ai.parser import extract_json_object
from app.services.ai.retry import call_with_retry
from app.services.ai.types import AIConfig

logger = logging.getLogger(__name__)


def resolve_ai_config(
    settings: Settings,
    api_key_override: str | None = None,
    model_override: str | None = None,
) -> AIConfig:
    """
    Build the per-call configuration.

    A key or model supplied with the caller's session takes priority over
    the process-wide default. A missing key is not an error here; the
    first request surfaces it as an invalid-credential failure.
    """
    custom_key = (api_key_override or "").strip()
    custom_model = (model_override or "").strip()
    api_key = custom_key or settings.openrouter_api_key

    if not api_key:
        logger.warning("OpenRouter API key missing. Get one at https://openrouter.ai/keys")

    return AIConfig(
        api_key=api_key,
        model=custom_model or settings.ai_model,
        base_url=settings.openrouter_base_url,
        temperature=settings.ai_temperature,
        max_tokens=settings.ai_max_tokens,
        max_input_chars=settings.ai_max_input_chars,
        min_input_chars=settings.ai_min_input_chars,
        max_attempts=settings.ai_max_retry_attempts,
        base_delay_ms=settings.ai_base_retry_delay_ms,
        timeout_seconds=settings.ai_request_timeout_seconds,
        app_url=settings.app_url,
        app_title=settings.app_title,
        uses_custom_key=bool(custom_key),
    )


class AIAnalysisService:
    """Analyzes codebases through an OpenRouter-compatible completion API."""

    def __init__(self, config: AIConfig, http_client: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self.client = CompletionClient(config, http_client)

        key_source = "custom" if config.uses_custom_key else "default"
        logger.debug(f"AIAnalysisService ready: model={config.model}, key={key_source}")

    async def analyze_codebase(self, raw_input: str) -> AnalysisResult:
        """
        Analyze a codebase string.

        Retries automatically on transient failures (rate limits, server
        errors, truncated JSON).

        Args:
            raw_input: Source code, repository metadata, or a GitHub URL

        Returns:
            Normalized AnalysisResult

        Raises:
            AIServiceError: Fatal errors immediately, transient ones once retries run out
        """
        text = raw_input.strip()
        ensure_min_length(text, self.config.min_input_chars)

        bounded = truncate_input(text, self.config.max_input_chars)
        if len(bounded) != len(text):
            logger.info(
                f"Input truncated from {len(text)} to {self.config.max_input_chars} chars"
            )

        fallback_name = derive_project_name(text)

        async def attempt() -> AnalysisResult:
            content = await self.client.complete(bounded)
            payload = extract_json_object(content)
            return normalize_analysis(payload, fallback_name=fallback_name)

        logger.info(f"Starting analysis: model={self.config.model}")
        result = await call_with_retry(
            attempt,
            max_attempts=self.config.max_attempts,
            base_delay_ms=self.config.base_delay_ms,
            operation_name="Codebase analysis",
        )
        logger.info(f"Analysis complete: overall_score={result.overall_score}")
        return result
