"""AI service dependencies - per-request config resolution."""

from typing import Annotated

from fastapi import Depends, Header

from app.config import settings
from app.services.ai import AIAnalysisService, AIConfig, resolve_ai_config


async def get_ai_config(
    x_openrouter_key: Annotated[str | None, Header()] = None,
    x_ai_model: Annotated[str | None, Header()] = None,
) -> AIConfig:
    """
    Resolve the key and model for this request.

    X-OpenRouter-Key / X-AI-Model carry a user's own key and model choice
    for their session; both fall back to the process-wide settings.
    """
    return resolve_ai_config(
        settings,
        api_key_override=x_openrouter_key,
        model_override=x_ai_model,
    )


async def get_ai_service(
    config: Annotated[AIConfig, Depends(get_ai_config)],
) -> AIAnalysisService:
    """Build an analysis service bound to this request's config."""
    return AIAnalysisService(config)


AIService = Annotated[AIAnalysisService, Depends(get_ai_service)]
