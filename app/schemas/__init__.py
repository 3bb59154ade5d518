"""Pydantic schemas for API request/response validation."""

from app.schemas.analysis import (
    AnalysisErrorResponse,
    AnalysisResult,
    AnalysisScores,
    AnalyzeRequest,
    ImprovementItem,
    ModelInfo,
    ModelsResponse,
    SecretScanRequest,
    SecretScanResponse,
    SecurityConcern,
    StrengthItem,
)

__all__ = [
    "AnalysisErrorResponse",
    "AnalysisResult",
    "AnalysisScores",
    "AnalyzeRequest",
    "ImprovementItem",
    "ModelInfo",
    "ModelsResponse",
    "SecretScanRequest",
    "SecretScanResponse",
    "SecurityConcern",
    "StrengthItem",
]
