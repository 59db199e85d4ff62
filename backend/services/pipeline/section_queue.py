"""Concurrent competence-file section generation.

Sections are independent: each one is planned from a snapshot of the
profile, generated under a shared concurrency ceiling, retried on its own,
and written into a pre-allocated slot. The session is reassembled by
section order, never by completion order.
"""

import asyncio
import logging
import time
import uuid

from config import settings
from models.schemas.candidate import CandidateProfile
from models.schemas.generation import (
    GenerationProgress,
    GenerationSession,
    JobContext,
    ProgressCallback,
    ProgressStage,
    SectionResult,
    SectionTask,
    SessionStatus,
)
from services.gemini_client import AIClientError, GeminiClient
from services.pipeline.sections import clean_section_content, extract_content, plan_sections
from services.pipeline.validation import ProfileValidationError, validate_for_generation

logger = logging.getLogger(__name__)


class SectionContentError(AIClientError):
    """The reply parsed but held no usable section text."""


def new_session_id() -> str:
    return f"cf-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)


class SectionQueue:
    """Bounded worker pool over section tasks.

    The semaphore guards each AI call, not each section, so a section
    waiting to retry does not hold a slot.
    """

    def __init__(
        self,
        client: GeminiClient,
        concurrency: int | None = None,
        retry_delay: float | None = None,
        max_experiences: int | None = None,
    ) -> None:
        self.client = client
        self.concurrency = max(1, concurrency or settings.section_concurrency)
        self.retry_delay = settings.section_retry_delay_seconds if retry_delay is None else retry_delay
        self.max_experiences = (
            settings.max_experience_sections if max_experiences is None else max_experiences
        )

    async def generate(
        self,
        profile: CandidateProfile,
        job_context: JobContext | None = None,
        max_retries: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationSession:
        """Generate every planned section. Never raises for per-section failures."""
        session_id = new_session_id()
        start = time.perf_counter()
        max_retries = settings.section_max_retries if max_retries is None else max(0, max_retries)

        try:
            validate_for_generation(profile)
        except ProfileValidationError as e:
            logger.warning("Session %s rejected: %s", session_id, e)
            return GenerationSession(
                session_id=session_id,
                errors=e.errors,
                status=SessionStatus.REJECTED,
            )

        tasks = plan_sections(profile.model_copy(deep=True), job_context, self.max_experiences)
        logger.info(
            "Session %s: %d sections, concurrency %d, max retries %d",
            session_id, len(tasks), self.concurrency, max_retries,
        )

        slots: list[SectionResult | None] = [None] * len(tasks)
        semaphore = asyncio.Semaphore(self.concurrency)
        done = 0

        async def run(index: int, task: SectionTask) -> None:
            nonlocal done
            slots[index] = await self._generate_section(task, max_retries, semaphore)
            done += 1
            self._report(on_progress, done, len(tasks))

        await asyncio.gather(*(run(i, task) for i, task in enumerate(tasks)))

        sections = sorted((s for s in slots if s is not None), key=lambda s: s.order)
        errors = [f"{s.title}: {s.error}" for s in sections if not s.success]
        succeeded = len(sections) - len(errors)

        if sections and not errors:
            status = SessionStatus.COMPLETED
        elif succeeded:
            status = SessionStatus.PARTIAL
        else:
            status = SessionStatus.FAILED

        session = GenerationSession(
            session_id=session_id,
            sections=sections,
            total_tokens=sum(s.tokens_used for s in sections),
            total_time=sum(s.processing_time for s in sections),
            wall_time=_elapsed_ms(start),
            errors=errors,
            success=status == SessionStatus.COMPLETED,
            status=status,
        )
        logger.info(
            "Session %s %s: %s sections, %d tokens, %dms",
            session_id, status.value, session.completion_rate, session.total_tokens, session.wall_time,
        )
        return session

    async def _generate_section(
        self,
        task: SectionTask,
        max_retries: int,
        semaphore: asyncio.Semaphore,
    ) -> SectionResult:
        attempts = max_retries + 1
        tokens = 0
        elapsed = 0
        last_error = ""

        for attempt in range(1, attempts + 1):
            error: Exception | None = None
            async with semaphore:
                start = time.perf_counter()
                try:
                    response = await self.client.generate_json(
                        task.system_prompt,
                        task.user_prompt,
                        max_tokens=task.max_tokens,
                        temperature=task.temperature,
                    )
                except Exception as e:
                    error = e
                elapsed += _elapsed_ms(start)

            if error is None:
                tokens += response.tokens_used
                content = clean_section_content(extract_content(response.data), task.title)
                if content:
                    return SectionResult(
                        order=task.order,
                        key=task.key,
                        title=task.title,
                        content=content,
                        success=True,
                        attempts=attempt,
                        tokens_used=tokens,
                        processing_time=elapsed,
                    )
                error = SectionContentError("Generated content is empty", tokens_used=response.tokens_used)
            else:
                tokens += getattr(error, "tokens_used", 0)

            last_error = str(error) or type(error).__name__
            if attempt < attempts:
                logger.warning(
                    "Section %s attempt %d/%d failed: %s",
                    task.title, attempt, attempts, last_error,
                )
                if self.retry_delay > 0:
                    await asyncio.sleep(self.retry_delay)

        logger.error("Section %s failed after %d attempts: %s", task.title, attempts, last_error)
        return SectionResult(
            order=task.order,
            key=task.key,
            title=task.title,
            success=False,
            attempts=attempts,
            tokens_used=tokens,
            processing_time=elapsed,
            error=last_error,
        )

    @staticmethod
    def _report(on_progress: ProgressCallback | None, done: int, total: int) -> None:
        if on_progress is None:
            return
        try:
            on_progress(GenerationProgress(
                stage=ProgressStage.GENERATION,
                progress=round(done / total * 100) if total else 100,
                message=f"Completed {done}/{total} sections",
            ))
        except Exception as e:
            logger.warning("Progress callback failed: %s", e)
