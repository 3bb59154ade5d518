"""Codebase analysis: AI-powered code review and secret scanning."""

import logging

from fastapi import APIRouter

from app.api.deps import AIService
from app.config import AI_MODELS, settings
from app.schemas.analysis import (
    AnalysisErrorResponse,
    AnalysisResult,
    AnalyzeRequest,
    ModelInfo,
    ModelsResponse,
    SecretScanRequest,
    SecretScanResponse,
)
from app.services.ai import scan_for_secrets

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])

_ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": AnalysisErrorResponse, "description": "Input too short"},
    401: {"model": AnalysisErrorResponse, "description": "Invalid API key"},
    402: {"model": AnalysisErrorResponse, "description": "No credits remaining"},
    503: {"model": AnalysisErrorResponse, "description": "Retries exhausted"},
}


@router.post("/analyze", response_model=AnalysisResult, responses=_ERROR_RESPONSES)
async def analyze_codebase(body: AnalyzeRequest, service: AIService) -> AnalysisResult:
    """
    Analyze submitted code and return scores, strengths, and concerns.

    Transient provider failures are retried server-side before responding.
    AIServiceError is turned into an error response by the app's
    exception handler (see app.core.exceptions).
    """
    return await service.analyze_codebase(body.input)


@router.post("/secrets/scan", response_model=SecretScanResponse)
async def scan_secrets(body: SecretScanRequest) -> SecretScanResponse:
    """
    Check input for hardcoded credentials before it is submitted.

    Informational only: the frontend asks for confirmation, /analyze never
    blocks on this.
    """
    secrets = scan_for_secrets(body.input)
    if secrets:
        logger.info(f"Secret scan flagged {len(secrets)} categories: {', '.join(secrets)}")
    return SecretScanResponse(secrets=secrets, has_secrets=bool(secrets))


@router.get("/models", response_model=ModelsResponse)
async def list_models() -> ModelsResponse:
    """List the configured default model and the known model catalog."""
    return ModelsResponse(
        default_model=settings.ai_model,
        models=[
            ModelInfo(model_id=m.model_id, display_name=m.display_name, free=m.free)
            for m in AI_MODELS.values()
        ],
    )
