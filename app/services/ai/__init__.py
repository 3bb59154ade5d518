"""
AI analysis service package.

Usage: `from app.services.ai import AIAnalysisService, resolve_ai_config`

Module structure:
- service.py: AIAnalysisService facade and config resolution
- client.py: Completion client (one request per call)
- retry.py: Bounded exponential-backoff retry
- parser.py: JSON extraction from model replies
- normalizer.py: Alias merging, score clamping, markup stripping
- input.py: Input bounding and GitHub URL helpers
- secrets.py: Hardcoded secret detection
- helpers.py: HTTP status classification and envelope unwrapping
- http_client.py: Shared pooled HTTP client
- exceptions.py: AIServiceError and ErrorKind
- types.py: AIConfig
- constants.py: Endpoint, prompt, and limit constants
"""

from app.services.ai.client import CompletionClient
from app.services.ai.exceptions import AIServiceError, ErrorKind
from app.services.ai.http_client import close_ai_client
from app.services.ai.input import is_valid_github_url, truncate_input
from app.services.ai.normalizer import normalize_analysis
from app.services.ai.parser import extract_json_object
from app.services.ai.retry import call_with_retry
from app.services.ai.secrets import scan_for_secrets
from app.services.ai.service import AIAnalysisService, resolve_ai_config
from app.services.ai.types import AIConfig

__all__ = [
    # Service (main entry point)
    "AIAnalysisService",
    "resolve_ai_config",
    "AIConfig",
    # Pipeline stages
    "CompletionClient",
    "call_with_retry",
    "extract_json_object",
    "normalize_analysis",
    "truncate_input",
    # Input helpers
    "is_valid_github_url",
    "scan_for_secrets",
    # HTTP client lifecycle
    "close_ai_client",
    # Exceptions
    "AIServiceError",
    "ErrorKind",
]
