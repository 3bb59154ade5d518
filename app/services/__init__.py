# Services package

from app.services.ai import AIAnalysisService, AIServiceError, resolve_ai_config

__all__ = [
    # Analysis services
    "AIAnalysisService",
    "AIServiceError",
    "resolve_ai_config",
]
