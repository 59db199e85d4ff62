"""Pydantic contracts shared by the enrichment, section and rendering layers."""

from models.schemas.candidate import CandidateProfile, ExperienceEntry, ProfilePatch
from models.schemas.enrichment import (
    EnrichmentContext,
    EnrichmentOptions,
    PipelineResult,
    StageResult,
)
from models.schemas.generation import (
    GenerationOptions,
    GenerationOutcome,
    GenerationSession,
    JobContext,
    SectionResult,
    SectionTask,
)

__all__ = [
    "CandidateProfile",
    "ExperienceEntry",
    "ProfilePatch",
    "EnrichmentContext",
    "EnrichmentOptions",
    "PipelineResult",
    "StageResult",
    "GenerationOptions",
    "GenerationOutcome",
    "GenerationSession",
    "JobContext",
    "SectionResult",
    "SectionTask",
]
