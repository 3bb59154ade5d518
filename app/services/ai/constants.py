"""Constants for the AI analysis service."""

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1/chat/completions"
OPENROUTER_KEYS_URL = "https://openrouter.ai/keys"
OPENROUTER_CREDITS_URL = "https://openrouter.ai/credits"

# Input bounds
MIN_INPUT_CHARS = 20
MAX_INPUT_CHARS = 100_000

# Request shaping
DEFAULT_TEMPERATURE = 0.2
DEFAULT_MAX_TOKENS = 8000
USER_PROMPT_PREFIX = "Analyze this codebase:\n\n"

# Retry policy (1.5s -> 3s, plus jitter)
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_MS = 1500
MAX_JITTER_MS = 500

# Diagnostics
ERROR_BODY_EXCERPT_CHARS = 200
JSON_DEBUG_EXCERPT_CHARS = 500

SYSTEM_PROMPT = """You are a code analyzer. Analyze the code and respond with ONLY a JSON object in this EXACT format (no other text):

{
  "overall_score": <number 1-10>,
  "language": "<primary language>",
  "scores": {
    "code_quality": <number 1-10>,
    "security": <number 1-10>,
    "performance": <number 1-10>,
    "documentation": <number 1-10>
  },
  "whats_great": [
    { "description": "<what works well>", "reason": "<why it matters>" }
  ],
  "needs_improvement": [
    { "issue": "<the problem>", "how_to_fix": "<suggestion>" }
  ],
  "security_concerns": [
    { "problem": "<the vulnerability>", "risk_level": "<critical|important|minor>", "fix": "<how to fix>" }
  ]
}

Rules:
- Explain in plain English, no jargon. Write like you're talking to a friend.
- Be honest. If code is messy, say so. If it's great, say that too. Always explain WHY.
- Include 3-8 items in whats_great and needs_improvement, 1-5 in security_concerns.
- If there are no security issues, use an empty array.
- Return ONLY valid JSON. No markdown, no backticks, no extra text."""

JSON_ONLY_SUFFIX = "\n\nRespond with valid JSON only. No markdown, no explanations."
