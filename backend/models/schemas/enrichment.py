"""Contracts for the sequential enrichment pipeline."""

from typing import Any, Literal

from pydantic import ConfigDict, Field

from models.schemas.base import SchemaModel
from models.schemas.candidate import CandidateProfile

Tone = Literal["professional", "consulting", "technical", "creative"]
TargetAudience = Literal["hr", "technical", "executive", "client"]
TargetLanguage = Literal["french", "german", "spanish"]


class EnrichmentOptions(SchemaModel):
    job_description: str | None = None
    client_name: str | None = None
    industry_focus: str | None = None
    tone: Tone = "professional"
    target_audience: TargetAudience = "hr"
    enable_translation: bool = False
    target_language: TargetLanguage = "french"


class EnrichmentContext(SchemaModel):
    """Immutable per-stage view: the current profile snapshot plus run options.

    Rebuilt with `with_candidate` after every stage so the next prompt sees
    the merged data.
    """
    model_config = ConfigDict(frozen=True)

    candidate: CandidateProfile
    job_description: str | None = None
    client_name: str | None = None
    industry_focus: str | None = None
    tone: Tone = "professional"
    target_audience: TargetAudience = "hr"
    target_language: TargetLanguage = "french"

    @classmethod
    def from_options(cls, candidate: CandidateProfile, options: EnrichmentOptions) -> "EnrichmentContext":
        return cls(
            candidate=candidate,
            job_description=options.job_description,
            client_name=options.client_name,
            industry_focus=options.industry_focus,
            tone=options.tone,
            target_audience=options.target_audience,
            target_language=options.target_language,
        )

    def with_candidate(self, candidate: CandidateProfile) -> "EnrichmentContext":
        return self.model_copy(update={"candidate": candidate})


class StageMetrics(SchemaModel):
    tokens_used: int = 0
    processing_time: int = 0  # ms
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class StageResult(SchemaModel):
    """Outcome of one pipeline stage. Failures are recorded here, not raised."""
    stage: int
    name: str
    prompt: str  # PromptKind value
    original_data: CandidateProfile
    enhanced_data: dict[str, Any] | None = None  # raw patch, None on failure
    metrics: StageMetrics = StageMetrics()
    errors: list[str] | None = None


class PipelineResult(SchemaModel):
    success: bool
    final_data: CandidateProfile
    stages: list[StageResult] = []
    total_tokens: int = 0
    total_time: int = 0  # ms
    errors: list[str] = []
