"""Configuration package."""

from app.config.models import AI_MODELS, DEFAULT_MODEL, ModelConfig, get_model
from app.config.settings import Settings, settings

__all__ = [
    "AI_MODELS",
    "DEFAULT_MODEL",
    "ModelConfig",
    "get_model",
    "Settings",
    "settings",
]
