"""Document generation with ordered rendering fallback.

Flow:
    validate_for_generation ──(violations)──→ failed outcome, nothing else runs
            │
            ├─ EnrichmentPipeline.process_candidate   (only with enrichment options;
            │                                          rendered only when successful)
            ├─ SectionQueue.generate                  (only with a queue and no session;
            │                                          nothing generated → failed outcome)
            ├─ resolve_sections                       (visible, ordered, non-empty)
            └─ for each strategy: render → store.save
                   first success wins → GenerationOutcome(generation_method=name)
"""

import logging
import re
import time
from datetime import date

from models.schemas.candidate import CandidateProfile
from models.schemas.enrichment import EnrichmentOptions
from models.schemas.generation import (
    EnrichmentSummary,
    GenerationOptions,
    GenerationOutcome,
    GenerationProgress,
    GenerationSession,
    JobContext,
    ProgressCallback,
    ProgressStage,
    RenderAttempt,
    ResolvedSection,
    SectionConfig,
    SessionStatus,
)
from services.generation.storage import ArtifactStore, LocalArtifactStore
from services.pipeline.enrichment import EnrichmentPipeline
from services.pipeline.section_queue import SectionQueue
from services.pipeline.validation import ProfileValidationError, validate_for_generation
from services.rendering.base import BaseRenderer
from services.rendering.layout import has_section_data
from services.rendering.registry import strategies_for

logger = logging.getLogger(__name__)

# Document section key -> generated section key
_GENERATED_KEYS = {
    "summary": "summary",
    "skills": "technical_skills",
    "soft_skills": "functional_skills",
    "education": "education",
    "certifications": "certifications",
    "languages": "languages",
}
_EXPERIENCE_KEY_RE = re.compile(r"^experience_\d+$")


def build_file_name(profile: CandidateProfile, extension: str, today: date | None = None) -> str:
    """<Full_Name>_Competence_File_<YYYY-MM-DD>.<ext>"""
    today = today or date.today()
    name = re.sub(r"\s+", "_", profile.full_name.strip())
    name = re.sub(r"[^\w\-]", "", name) or "Candidate"
    return f"{name}_Competence_File_{today.isoformat()}.{extension}"


def session_content(session: GenerationSession | None, key: str) -> str | None:
    """Generated text for a document section, if the session produced any."""
    if session is None:
        return None
    if key == "experience":
        parts = [
            s.content for s in session.sections
            if s.success and _EXPERIENCE_KEY_RE.match(s.key) and s.content.strip()
        ]
        return "\n\n".join(parts) or None
    generated_key = _GENERATED_KEYS.get(key)
    for section in session.sections:
        if section.key == generated_key and section.success and section.content.strip():
            return section.content
    return None


def resolve_sections(
    profile: CandidateProfile,
    configs: list[SectionConfig],
    session: GenerationSession | None = None,
) -> list[ResolvedSection]:
    """Visible sections sorted by order, dropping those with nothing to show."""
    resolved = []
    for config in sorted((c for c in configs if c.show), key=lambda c: c.order):
        content = session_content(session, config.key)
        if content or has_section_data(profile, config.key):
            resolved.append(ResolvedSection(
                key=config.key, label=config.label, order=config.order, content=content,
            ))
    return resolved


class _ProgressReporter:
    """Clamps percentages so callers only ever see them rise."""

    def __init__(self, callback: ProgressCallback | None) -> None:
        self.callback = callback
        self.last = 0

    def __call__(self, stage: ProgressStage, progress: int, message: str = "") -> None:
        if self.callback is None:
            return
        self.last = max(self.last, min(progress, 100))
        try:
            self.callback(GenerationProgress(stage=stage, progress=self.last, message=message))
        except Exception as e:
            logger.warning("Progress callback failed: %s", e)


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)


def _outcome_metrics(session: GenerationSession | None, enrichment: EnrichmentSummary | None) -> dict:
    """Session and enrichment fields shared by every post-validation outcome."""
    metrics: dict = {
        "enrichment": enrichment,
        "total_tokens": enrichment.total_tokens if enrichment else 0,
    }
    if session is not None:
        metrics.update(
            session_id=session.session_id,
            status=session.status,
            sections=session.sections,
            total_time=session.total_time,
            errors=list(session.errors),
        )
        metrics["total_tokens"] += session.total_tokens
    return metrics


class DocumentGenerator:
    def __init__(
        self,
        strategies: list[BaseRenderer] | None = None,
        store: ArtifactStore | None = None,
        pipeline: EnrichmentPipeline | None = None,
        queue: SectionQueue | None = None,
    ) -> None:
        self.strategies = strategies
        self.store = store or LocalArtifactStore()
        self.pipeline = pipeline
        self.queue = queue

    async def generate_document(
        self,
        profile: CandidateProfile,
        options: GenerationOptions | None = None,
        on_progress: ProgressCallback | None = None,
        *,
        enrichment: EnrichmentOptions | None = None,
        session: GenerationSession | None = None,
        job_context: JobContext | None = None,
    ) -> GenerationOutcome:
        """Render the profile with the first strategy that succeeds. Never raises.

        With a queue and no ready-made session, sections are generated first
        using `options.max_retries`; a partial session still renders, with
        `success=False` and `status=partial`.
        """
        options = options or GenerationOptions()
        start = time.perf_counter()
        report = _ProgressReporter(on_progress)
        report(ProgressStage.INITIALIZATION, 0, "Validating candidate data")

        try:
            validate_for_generation(profile)
        except ProfileValidationError as e:
            logger.warning("Document generation rejected: %s", e)
            return GenerationOutcome(
                success=False,
                error=str(e),
                validation_errors=e.errors,
                processing_time=_elapsed_ms(start),
            )

        summary: EnrichmentSummary | None = None
        if enrichment is not None and self.pipeline is not None:
            report(ProgressStage.ENRICHMENT, 10, "Enriching candidate data")
            result = await self.pipeline.process_candidate(profile, enrichment)
            summary = EnrichmentSummary(
                success=result.success,
                total_tokens=result.total_tokens,
                errors=result.errors,
            )
            if result.success:
                profile = result.final_data
            else:
                logger.warning(
                    "Enrichment finished with %d errors, rendering the original profile",
                    len(result.errors),
                )

        if session is None and self.queue is not None:
            report(ProgressStage.GENERATION, 15, "Generating sections")
            session = await self.queue.generate(
                profile,
                job_context,
                max_retries=options.max_retries,
                on_progress=lambda event: report(
                    ProgressStage.GENERATION, 15 + event.progress // 4, event.message
                ),
            )

        metrics = _outcome_metrics(session, summary)
        if session is not None and session.status in (SessionStatus.FAILED, SessionStatus.REJECTED):
            logger.error("No sections generated for session %s", session.session_id)
            return GenerationOutcome(
                success=False,
                error="No sections were generated",
                processing_time=_elapsed_ms(start),
                **metrics,
            )

        sections = resolve_sections(profile, options.sections, session)
        strategies = self.strategies if self.strategies is not None else strategies_for(options.format)
        attempts: list[RenderAttempt] = []
        last_error: str | None = None

        for i, strategy in enumerate(strategies):
            report(
                ProgressStage.RENDERING,
                40 + 40 * i // len(strategies),
                f"Rendering {options.format.upper()} with {strategy.name}",
            )
            file_name = build_file_name(profile, strategy.extension)
            try:
                data = strategy.render(profile, sections, options.styling)
                report(ProgressStage.UPLOADING, 85, "Uploading document")
                artifact = await self.store.save(file_name, data)
            except Exception as e:
                last_error = str(e) or type(e).__name__
                attempts.append(RenderAttempt(method=strategy.name, success=False, error=last_error))
                logger.warning("Rendering strategy %s failed: %s", strategy.name, last_error)
                continue

            attempts.append(RenderAttempt(method=strategy.name, success=True))
            report(ProgressStage.COMPLETE, 100, "Document ready")
            logger.info(
                "Generated %s with %s (%d bytes, %d sections)",
                file_name, strategy.name, artifact.size, len(sections),
            )
            return GenerationOutcome(
                success=session is None or session.success,
                generation_method=strategy.name,
                file_url=artifact.url,
                file_name=file_name,
                file_size=artifact.size,
                processing_time=_elapsed_ms(start),
                attempts=attempts,
                document_sections=sections,
                **metrics,
            )

        logger.error("All %d rendering strategies failed: %s", len(strategies), last_error)
        return GenerationOutcome(
            success=False,
            error=last_error or "No rendering strategies available",
            processing_time=_elapsed_ms(start),
            attempts=attempts,
            document_sections=sections,
            **metrics,
        )
