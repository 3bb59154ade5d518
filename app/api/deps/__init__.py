"""API dependencies - re-exports from submodules."""

from .ai import AIService, get_ai_config, get_ai_service

__all__ = [
    "AIService",
    "get_ai_config",
    "get_ai_service",
]
