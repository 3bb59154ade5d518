"""
Normalization of untrusted model output into AnalysisResult.

The model's adherence to the requested JSON shape is not guaranteed: keys
come back under different spellings, scores as words or out of range, lists
as single objects, and strings may echo markup from the submitted code.
Everything here degrades gracefully (default, wrap, strip) instead of
rejecting, so the caller always gets something safe to render.
"""

import json
import logging
import math
import re
from typing import Any

from app.schemas.analysis import AnalysisResult
from app.services.ai.input import DEFAULT_PROJECT_NAME

logger = logging.getLogger(__name__)

_MARKUP_RE = re.compile(r"<[^>]*>")

DEFAULT_SCORE = 5
MIN_SCORE = 1
MAX_SCORE = 10

# Deeper containers are flattened to text during sanitizing
MAX_NESTING_DEPTH = 32

# ---------------------------------------------------------------------------
# Key aliases: the one place that decides which spellings mean the same field.
# Each tuple maps a target field to the keys a model may use for it.
# ---------------------------------------------------------------------------
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "overall_score": ("overall_score", "overallScore", "score"),
    "language": ("language", "primary_language", "primaryLanguage"),
    "repository_name": ("repository_name", "projectName", "project_name", "repositoryName"),
    "scores": ("scores", "category_scores", "categoryScores"),
    "whats_great": ("whats_great", "what_works_well", "whatsGreat", "working_well", "strengths"),
    "needs_improvement": (
        "needs_improvement",
        "what_needs_improvement",
        "needsImprovement",
        "improvements",
        "weaknesses",
    ),
    "security_concerns": (
        "security_concerns",
        "security_issues",
        "securityConcerns",
        "securityIssues",
    ),
    "documentation_files": ("documentation_files", "documentation", "docs", "documentationFiles"),
    "diagrams": ("diagrams",),
}

_SCORE_ALIASES: dict[str, tuple[str, ...]] = {
    "code_quality": ("code_quality", "codeQuality", "quality"),
    "security": ("security",),
    "performance": ("performance",),
    "documentation": ("documentation", "docs"),
}

_ITEM_ALIASES: dict[str, dict[str, tuple[str, ...]]] = {
    "whats_great": {
        "description": ("description", "strength", "what", "title", "point", "text"),
        "reason": ("reason", "why", "explanation", "impact"),
    },
    "needs_improvement": {
        "issue": ("issue", "problem", "description", "what", "title", "text"),
        "how_to_fix": (
            "how_to_fix",
            "howToFix",
            "fix",
            "suggestion",
            "recommendation",
            "solution",
        ),
    },
    "security_concerns": {
        "problem": ("problem", "vulnerability", "issue", "description", "title", "text"),
        "risk_level": ("risk_level", "riskLevel", "severity", "risk", "level"),
        "fix": ("fix", "remediation", "how_to_fix", "recommendation", "solution"),
    },
}

# Field that receives a bare (non-object) list element
_PRIMARY_ITEM_FIELD = {
    "whats_great": "description",
    "needs_improvement": "issue",
    "security_concerns": "problem",
}

_CRITICAL_LEVELS = {"critical", "high", "severe", "blocker"}
_MINOR_LEVELS = {"minor", "low", "info", "informational", "trivial"}


# ---------------------------------------------------------------------------
# Primitive coercions
# ---------------------------------------------------------------------------


def strip_markup(value: str) -> str:
    """Remove anything that looks like a markup tag."""
    return _MARKUP_RE.sub("", value)


def _leaf_text(value: Any) -> str:
    """Join the scalar leaves of a JSON value into one string, without recursion."""
    parts: list[str] = []
    stack = [value]
    while stack:
        current = stack.pop()
        if isinstance(current, dict):
            stack.extend(reversed(list(current.values())))
        elif isinstance(current, list):
            stack.extend(reversed(current))
        elif current is not None:
            parts.append(str(current))
    return " ".join(parts)


def sanitize(value: Any, _depth: int = 0) -> Any:
    """
    Recursively strip markup from every string in a JSON value.

    Containers nested deeper than MAX_NESTING_DEPTH collapse into the text of
    their leaves, so later rendering never recurses past that depth.
    """
    if isinstance(value, str):
        return strip_markup(value)
    if isinstance(value, list | dict) and _depth >= MAX_NESTING_DEPTH:
        return strip_markup(_leaf_text(value))
    if isinstance(value, list):
        return [sanitize(v, _depth + 1) for v in value]
    if isinstance(value, dict):
        return {strip_markup(str(k)): sanitize(v, _depth + 1) for k, v in value.items()}
    return value


def clamp_score(value: Any) -> int:
    """
    Coerce a model-supplied score into an integer in [1, 10].

    Non-numeric, non-finite, and missing values become DEFAULT_SCORE.
    Rounds half up.
    """
    if isinstance(value, bool) or value is None:
        return DEFAULT_SCORE

    if isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            # Integer beyond float range
            return MAX_SCORE if value > 0 else MIN_SCORE
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return DEFAULT_SCORE
    else:
        return DEFAULT_SCORE

    if not math.isfinite(number):
        return DEFAULT_SCORE

    return max(MIN_SCORE, min(MAX_SCORE, math.floor(number + 0.5)))


def _text(value: Any) -> str:
    """Render any JSON value as display text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return strip_markup(value)
    if isinstance(value, dict | list):
        # Re-strip: joining sanitized strings can form new "<...>" spans
        return strip_markup(json.dumps(value, ensure_ascii=False))
    return str(value)


def _get_field(item: dict[str, Any], aliases: tuple[str, ...]) -> Any | None:
    """
    Look up the first alias present in *item* with a non-None value.

    Tries exact matches first, then case-insensitive ones.
    """
    lower_map: dict[str, str] = {k.lower(): k for k in item}

    for alias in aliases:
        if alias in item and item[alias] is not None:
            return item[alias]
        original_key = lower_map.get(alias.lower())
        if original_key is not None and item[original_key] is not None:
            return item[original_key]
    return None


def _as_list(value: Any, field: str) -> list[Any]:
    """Ensure a list-shaped field is an actual list."""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    logger.warning(f"Expected list for {field}, got {type(value).__name__}. Wrapping.")
    return [value]


def _risk_level(value: Any) -> str:
    level = _text(value).strip().lower()
    if level in _CRITICAL_LEVELS:
        return "critical"
    if level in _MINOR_LEVELS:
        return "minor"
    return "important"


def _string_map(value: Any) -> dict[str, str]:
    """Keep only a name -> text mapping; anything else is dropped."""
    if not isinstance(value, dict):
        return {}
    return {
        strip_markup(str(key)): _text(content)
        for key, content in value.items()
        if content is not None
    }


# ---------------------------------------------------------------------------
# Structural steps
# ---------------------------------------------------------------------------


def flatten_analysis(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Merge a nested "analysis" object into the top level.

    Models sometimes nest their answer one level deeper than instructed.
    Top-level keys win over nested ones.
    """
    flat = dict(payload)
    nested = payload.get("analysis")
    if isinstance(nested, dict):
        for key, value in nested.items():
            if key not in flat:
                flat[key] = value
    return flat


def _normalize_item(value: Any, section: str) -> dict[str, str]:
    aliases = _ITEM_ALIASES[section]

    if not isinstance(value, dict):
        item = {field: "" for field in aliases}
        item[_PRIMARY_ITEM_FIELD[section]] = _text(value)
    else:
        item = {field: _text(_get_field(value, field_aliases)) for field, field_aliases in aliases.items()}

    if section == "security_concerns":
        item["risk_level"] = _risk_level(item["risk_level"])
    return item


def _normalize_scores(value: Any) -> dict[str, int]:
    if not isinstance(value, dict):
        return {}

    scores = {field: clamp_score(_get_field(value, aliases)) for field, aliases in _SCORE_ALIASES.items()}

    # Extra categories the model volunteered
    known = {alias.lower() for aliases in _SCORE_ALIASES.values() for alias in aliases}
    for key, raw in value.items():
        if key.lower() not in known:
            scores[key] = clamp_score(raw)
    return scores


def normalize_analysis(
    payload: dict[str, Any],
    *,
    fallback_name: str = DEFAULT_PROJECT_NAME,
) -> AnalysisResult:
    """
    Reshape a parsed model reply into a validated AnalysisResult.

    Args:
        payload: JSON object extracted from the model reply (untrusted)
        fallback_name: repository_name to use when the model gives none

    Returns:
        AnalysisResult satisfying every schema constraint
    """
    data = sanitize(flatten_analysis(payload))

    language = _text(_get_field(data, _FIELD_ALIASES["language"])).strip()
    repository_name = _text(_get_field(data, _FIELD_ALIASES["repository_name"])).strip()

    lists = {
        section: [
            _normalize_item(item, section)
            for item in _as_list(_get_field(data, _FIELD_ALIASES[section]), section)
        ]
        for section in ("whats_great", "needs_improvement", "security_concerns")
    }

    result = AnalysisResult(
        overall_score=clamp_score(_get_field(data, _FIELD_ALIASES["overall_score"])),
        language=language or "Unknown",
        repository_name=repository_name or strip_markup(fallback_name) or DEFAULT_PROJECT_NAME,
        scores=_normalize_scores(_get_field(data, _FIELD_ALIASES["scores"])),
        whats_great=lists["whats_great"],
        needs_improvement=lists["needs_improvement"],
        security_concerns=lists["security_concerns"],
        documentation_files=_string_map(_get_field(data, _FIELD_ALIASES["documentation_files"])),
        diagrams=_string_map(_get_field(data, _FIELD_ALIASES["diagrams"])),
    )

    logger.info(
        f"Normalized analysis: score={result.overall_score}, "
        f"whats_great={len(result.whats_great)}, "
        f"needs_improvement={len(result.needs_improvement)}, "
        f"security={len(result.security_concerns)}"
    )
    return result
