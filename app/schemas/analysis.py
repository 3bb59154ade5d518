"""Pydantic schemas for AI code analysis results and the analysis API.

AnalysisResult is the only shape that leaves the AI pipeline. It serves as:
1. Validation - scores are integers in [1, 10], list fields are lists
2. Type safety - the frontend knows exactly what to expect
3. Documentation - self-documenting API contract

Field naming uses snake_case, matching the JSON the model is asked for.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RiskLevel = Literal["critical", "important", "minor"]

# ─────────────────────────────────────────────────────────────
# Analysis Result Sub-Models
# ─────────────────────────────────────────────────────────────


class AnalysisScores(BaseModel):
    """Per-category quality scores.

    Models sometimes add categories of their own (e.g. "complexity"); those
    are kept as extra fields and clamped like the declared ones.
    """

    model_config = ConfigDict(extra="allow")

    code_quality: int = Field(default=5, ge=1, le=10)
    security: int = Field(default=5, ge=1, le=10)
    performance: int = Field(default=5, ge=1, le=10)
    documentation: int = Field(default=5, ge=1, le=10)


class StrengthItem(BaseModel):
    """Something the codebase does well."""

    description: str = Field(default="", description="What works well")
    reason: str = Field(default="", description="Why it matters")


class ImprovementItem(BaseModel):
    """A suggested improvement."""

    issue: str = Field(default="", description="The problem")
    how_to_fix: str = Field(default="", description="Suggested fix")


class SecurityConcern(BaseModel):
    """A security finding with its severity."""

    problem: str = Field(default="", description="The vulnerability")
    risk_level: RiskLevel = Field(default="important")
    fix: str = Field(default="", description="How to fix it")


# ─────────────────────────────────────────────────────────────
# Main Result Model
# ─────────────────────────────────────────────────────────────


class AnalysisResult(BaseModel):
    """Normalized, sanitized analysis of a submitted codebase."""

    overall_score: int = Field(default=5, ge=1, le=10)
    language: str = Field(default="Unknown", description="Primary language")
    repository_name: str = Field(default="Code Analysis")
    scores: AnalysisScores = Field(default_factory=AnalysisScores)

    whats_great: list[StrengthItem] = Field(default_factory=list)
    needs_improvement: list[ImprovementItem] = Field(default_factory=list)
    security_concerns: list[SecurityConcern] = Field(default_factory=list)

    # Optional generated docs, keyed by file name (e.g. "README.md")
    documentation_files: dict[str, str] = Field(default_factory=dict)
    # Optional diagram sources (mermaid), keyed by diagram name
    diagrams: dict[str, str] = Field(default_factory=dict)


# ─────────────────────────────────────────────────────────────
# API Request/Response Models
# ─────────────────────────────────────────────────────────────


class AnalyzeRequest(BaseModel):
    """Request body for POST /analyze."""

    input: str = Field(description="Source code or repository description to analyze")


class AnalysisErrorResponse(BaseModel):
    """Error body returned when an analysis fails."""

    detail: str
    retryable: bool
    kind: str


class SecretScanRequest(BaseModel):
    """Request body for POST /secrets/scan."""

    input: str


class SecretScanResponse(BaseModel):
    """Secret categories detected in submitted text."""

    secrets: list[str]
    has_secrets: bool


class ModelInfo(BaseModel):
    """A completion model available to the analyzer."""

    model_id: str
    display_name: str
    free: bool


class ModelsResponse(BaseModel):
    """Configured default model plus the known catalog."""

    default_model: str
    models: list[ModelInfo]
