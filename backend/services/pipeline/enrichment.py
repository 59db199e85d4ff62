"""Enrichment pipeline: dependent AI stages run strictly in sequence.

Flow:
    profile
      ├─ Stage 1: DATA_CLEANING
      ├─ Stage 2: ATS_SUMMARY             (reads the cleaned profile)
      ├─ Stage 3: SOFT_SKILLS
      │           INDUSTRY_OPTIMIZATION   (only with industry_focus)
      │           TONE_ADJUSTMENT         (only with tone != professional)
      └─ Stage 4: TRANSLATION             (only with enable_translation)
                       ↓
         validate_enriched_profile()  → PipelineResult

Each stage merges its patch into the running profile before the next one
builds its prompt. A failed stage is recorded and skipped; it never aborts
the run.
"""

import logging
import time
from dataclasses import dataclass

from config import settings
from models.schemas.candidate import CandidateProfile, ProfilePatch
from models.schemas.enrichment import (
    EnrichmentContext,
    EnrichmentOptions,
    PipelineResult,
    StageMetrics,
    StageResult,
)
from services.gemini_client import AIResponse, GeminiClient
from services.pipeline.merge import apply_patch
from services.pipeline.validation import validate_enriched_profile
from services.prompt_registry import PromptKind, get_prompt

logger = logging.getLogger(__name__)

# Confidence tiers; cutoffs are tunable
CONFIDENCE_HIGH = 0.9
CONFIDENCE_MEDIUM = 0.7
CONFIDENCE_LOW = 0.3
MIN_CONFIDENT_CONTENT = 50  # characters


@dataclass(frozen=True)
class PlannedStage:
    ordinal: int
    kind: PromptKind
    name: str


def plan_stages(options: EnrichmentOptions) -> list[PlannedStage]:
    """Ordered stage list for one run: 2 fixed + conditional tail + optional translation."""
    stages = [
        PlannedStage(1, PromptKind.DATA_CLEANING, "Data Cleaning & Structuring"),
        PlannedStage(2, PromptKind.ATS_SUMMARY, "ATS Optimization & Enhancement"),
    ]

    tail = [PromptKind.SOFT_SKILLS]
    if options.industry_focus:
        tail.append(PromptKind.INDUSTRY_OPTIMIZATION)
    if options.tone != "professional":
        tail.append(PromptKind.TONE_ADJUSTMENT)
    for kind in tail:
        stages.append(PlannedStage(3, kind, f"Final Optimization: {get_prompt(kind).name}"))

    if options.enable_translation:
        stages.append(PlannedStage(4, PromptKind.TRANSLATION, "Translation"))
    return stages


def compute_confidence(response: AIResponse) -> float:
    """Three-tier heuristic from reply completeness."""
    reason = (response.finish_reason or "").upper()
    if reason == "STOP" and len(response.text) > MIN_CONFIDENT_CONTENT:
        return CONFIDENCE_HIGH
    if reason in ("MAX_TOKENS", "LENGTH"):
        return CONFIDENCE_MEDIUM
    return CONFIDENCE_LOW


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)


class EnrichmentPipeline:
    def __init__(self, client: GeminiClient, min_summary_length: int | None = None) -> None:
        self.client = client
        self.min_summary_length = (
            settings.min_summary_length if min_summary_length is None else min_summary_length
        )

    async def process_candidate(
        self,
        profile: CandidateProfile,
        options: EnrichmentOptions | None = None,
    ) -> PipelineResult:
        """Run every planned stage over the profile. Never raises."""
        options = options or EnrichmentOptions()
        start = time.perf_counter()
        current = profile.model_copy(deep=True)
        context = EnrichmentContext.from_options(current, options)

        stages: list[StageResult] = []
        errors: list[str] = []
        total_tokens = 0

        for planned in plan_stages(options):
            logger.info("Stage %d: %s (candidate %s)", planned.ordinal, planned.name, profile.id)
            result, patch = await self._execute_stage(planned, context)
            stages.append(result)
            total_tokens += result.metrics.tokens_used

            if result.errors:
                errors.extend(f"Stage {planned.ordinal} ({planned.name}): {e}" for e in result.errors)
            if patch is not None:
                current = apply_patch(current, patch)
                context = context.with_candidate(current)

        violations = validate_enriched_profile(current, self.min_summary_length)
        if violations:
            logger.warning("Enriched profile %s failed validation: %s", profile.id, violations)
            errors.extend(violations)

        total_time = _elapsed_ms(start)
        logger.info(
            "Pipeline finished for %s: %d stages, %d tokens, %dms, %d errors",
            profile.id, len(stages), total_tokens, total_time, len(errors),
        )
        return PipelineResult(
            success=not errors,
            final_data=current,
            stages=stages,
            total_tokens=total_tokens,
            total_time=total_time,
            errors=errors,
        )

    async def _execute_stage(
        self,
        planned: PlannedStage,
        context: EnrichmentContext,
    ) -> tuple[StageResult, ProfilePatch | None]:
        spec = get_prompt(planned.kind)
        snapshot = context.candidate.model_copy(deep=True)
        start = time.perf_counter()

        try:
            response = await self.client.generate_json(
                spec.system_prompt,
                spec.user_prompt(context),
                max_tokens=spec.max_tokens,
                temperature=spec.temperature,
            )
            patch = ProfilePatch.from_ai_data(response.data)
        except Exception as e:
            logger.error("Stage %d (%s) failed: %s", planned.ordinal, planned.name, e)
            return StageResult(
                stage=planned.ordinal,
                name=planned.name,
                prompt=planned.kind.value,
                original_data=snapshot,
                enhanced_data=None,
                metrics=StageMetrics(processing_time=_elapsed_ms(start)),
                errors=[str(e) or type(e).__name__],
            ), None

        return StageResult(
            stage=planned.ordinal,
            name=planned.name,
            prompt=planned.kind.value,
            original_data=snapshot,
            enhanced_data=response.data,
            metrics=StageMetrics(
                tokens_used=response.tokens_used,
                processing_time=_elapsed_ms(start),
                confidence=compute_confidence(response),
            ),
        ), patch

    async def quick_enhance(self, text: str, kind: PromptKind, **context) -> tuple[str, int]:
        """Single-shot enhancement for inline suggestions.

        Returns (enhanced_text, tokens_used); on any failure returns the
        original text and zero tokens.
        """
        try:
            placeholder = CandidateProfile(
                id="temp",
                full_name="Candidate",
                current_title="Professional",
                summary=text,
            )
            ctx = EnrichmentContext(candidate=placeholder, **context)
            spec = get_prompt(kind)
            response = await self.client.generate_json(
                spec.system_prompt,
                spec.user_prompt(ctx),
                max_tokens=spec.max_tokens,
                temperature=spec.temperature,
            )
        except Exception as e:
            logger.error("Quick enhance (%s) failed: %s", kind, e)
            return text, 0

        enhanced = response.data.get("summary") or response.data.get("content")
        if not isinstance(enhanced, str) or not enhanced.strip():
            return text, response.tokens_used
        return enhanced.strip(), response.tokens_used
