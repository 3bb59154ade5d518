"""Run a codebase analysis on a local file from the command line.

Useful for checking a model or key without going through the API.

Usage:
    python -m scripts.analyze_file path/to/code.py
    python -m scripts.analyze_file bundle.txt --model qwen/qwen-2.5-72b-instruct

Reads OPENROUTER_API_KEY (and the other AI_* settings) from the environment
or .env, warns about hardcoded secrets, then prints the normalized result
as JSON. Exits non-zero on failure.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


async def analyze_file(path: Path, model: str | None, api_key: str | None) -> int:
    """Analyze one file and print the result. Returns a process exit code."""
    from app.config.settings import settings
    from app.services.ai import (
        AIAnalysisService,
        AIServiceError,
        close_ai_client,
        resolve_ai_config,
        scan_for_secrets,
    )

    text = path.read_text(encoding="utf-8", errors="replace")

    secrets = scan_for_secrets(text)
    if secrets:
        logger.warning(f"Possible secrets in {path}: {', '.join(secrets)}")

    config = resolve_ai_config(settings, api_key_override=api_key, model_override=model)
    service = AIAnalysisService(config)

    try:
        result = await service.analyze_codebase(text)
    except AIServiceError as e:
        logger.error(f"Analysis failed ({e.kind.value}, retryable={e.retryable}): {e.message}")
        if e.detail:
            logger.debug(f"Detail: {e.detail}")
        return 1
    finally:
        await close_ai_client()

    print(result.model_dump_json(indent=2))
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Analyze a source file with the AI reviewer")
    parser.add_argument("path", type=Path, help="File to analyze")
    parser.add_argument("--model", help="OpenRouter model id (default: AI_MODEL setting)")
    parser.add_argument("--api-key", help="OpenRouter key (default: OPENROUTER_API_KEY)")
    args = parser.parse_args()

    if not args.path.is_file():
        logger.error(f"Not a file: {args.path}")
        return 2

    return asyncio.run(analyze_file(args.path, args.model, args.api_key))


if __name__ == "__main__":
    sys.exit(main())
