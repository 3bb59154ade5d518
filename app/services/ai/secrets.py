"""
Hardcoded secret detection for submitted code.

Best-effort heuristic used to warn users before their code is sent to a
third-party model. It is informational only: the analysis pipeline never
blocks on its result.
"""

import re

# (pattern, label) pairs, checked independently in this order
SENSITIVE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"""(?:api[_-]?key|apikey)\s*[:=]\s*['"][^'"]{8,}""", re.IGNORECASE), "API key"),
    (
        re.compile(r"""(?:secret|password|passwd|pwd)\s*[:=]\s*['"][^'"]{4,}""", re.IGNORECASE),
        "password/secret",
    ),
    (
        re.compile(r"""(?:access[_-]?token|auth[_-]?token)\s*[:=]\s*['"][^'"]{8,}""", re.IGNORECASE),
        "access token",
    ),
    (re.compile(r"""(?:private[_-]?key)\s*[:=]\s*['"][^'"]{8,}""", re.IGNORECASE), "private key"),
    (re.compile(r"-----BEGIN (?:RSA |EC |DSA )?PRIVATE KEY-----"), "PEM private key"),
    (re.compile(r"sk-[a-zA-Z0-9]{16,}"), "OpenAI/OpenRouter key"),
    (re.compile(r"ghp_[a-zA-Z0-9]{36,}"), "GitHub personal access token"),
    (re.compile(r"eyJ[a-zA-Z0-9_-]{20,}\.[a-zA-Z0-9_-]{20,}"), "JWT token"),
]


def scan_for_secrets(text: str) -> list[str]:
    """
    Scan text for patterns that look like hardcoded secrets.

    Args:
        text: Raw user input (any length, any content)

    Returns:
        Distinct human-readable labels, one per matching category, in
        pattern order. Empty when nothing matches.
    """
    if text is None:
        return []
    if not isinstance(text, str):
        text = str(text)

    found: list[str] = []
    for pattern, label in SENSITIVE_PATTERNS:
        if label not in found and pattern.search(text):
            found.append(label)
    return found
