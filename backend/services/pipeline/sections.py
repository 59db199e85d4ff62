"""Competence-file section planning and generated-content cleanup."""

import re
from typing import Callable

from models.schemas.candidate import CandidateProfile
from models.schemas.generation import JobContext, SectionTask
from services import section_prompts as sp

# (title, key, has_data predicate) in document order; experiences follow
_FIXED_SECTIONS: list[tuple[str, str, Callable[[CandidateProfile], bool]]] = [
    (sp.HEADER, "header", lambda c: True),
    (sp.PROFESSIONAL_SUMMARY, "summary", lambda c: True),
    (sp.FUNCTIONAL_SKILLS, "functional_skills", lambda c: True),
    (sp.TECHNICAL_SKILLS, "technical_skills", lambda c: bool(c.skills)),
    (sp.LANGUAGES, "languages", lambda c: True),
    (sp.AREAS_OF_EXPERTISE, "areas_of_expertise", lambda c: True),
    (sp.EDUCATION, "education", lambda c: bool(c.education)),
    (sp.CERTIFICATIONS, "certifications", lambda c: bool(c.certifications)),
    (sp.EXPERIENCES_SUMMARY, "experience_summary", lambda c: bool(c.experience)),
]

# Sections whose prompt ignores the target role
_JOB_AGNOSTIC = {"languages", "education"}

_PREAMBLES = [
    re.compile(r"^Certainly![^:\n]*[:.]\s*", re.IGNORECASE),
    re.compile(r"^(Here's|Here is|Here are|Below is|Below are|The following)[^:\n]*:\s*", re.IGNORECASE),
    re.compile(r"^(I'll|Let me|Based on)[^:\n]*:\s*", re.IGNORECASE),
]
_PLACEHOLDERS = [
    re.compile(r"\((Add|Relevant)[^)]*\)", re.IGNORECASE),
    re.compile(r"\[[^\]]*\]"),
]
_CONCLUSIONS = [
    re.compile(r"^(Feel free to|Replace `?\[|This structure).*$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^\s*---\s*$", re.MULTILINE),
]


def plan_sections(
    profile: CandidateProfile,
    job: JobContext | None = None,
    max_experiences: int = 5,
) -> list[SectionTask]:
    """Ordered section tasks for one profile.

    Prompts are rendered here from the given snapshot, so a task never reads
    the live profile. Sections without source data are not planned.
    """
    language = sp.language_name(job.language if job else None)
    tasks: list[SectionTask] = []

    def add(title: str, key: str, user_prompt: str, experience_index: int | None = None) -> None:
        tasks.append(SectionTask(
            key=key,
            title=title,
            order=len(tasks),
            system_prompt=sp.SECTION_SYSTEM_PROMPT,
            user_prompt=user_prompt,
            include_job_context=job is not None and key not in _JOB_AGNOSTIC,
            experience_index=experience_index,
        ))

    for title, key, has_data in _FIXED_SECTIONS:
        if has_data(profile):
            add(title, key, sp.SECTION_PROMPTS[title](profile, job, language))

    for i in range(min(len(profile.experience), max_experiences)):
        add(
            f"{sp.EXPERIENCE} {i + 1}",
            f"experience_{i + 1}",
            sp.build_experience_prompt(profile, job, i, language),
            experience_index=i,
        )
    return tasks


def extract_content(data: dict) -> str:
    content = data.get("content", "")
    if isinstance(content, list):
        return "\n".join(str(line) for line in content)
    return content if isinstance(content, str) else ""


def clean_section_content(content: str, title: str = "") -> str:
    """Strip assistant preambles, placeholders and trailing instructions."""
    cleaned = content.strip()
    if title and cleaned.upper().startswith(f"## {title}"):
        cleaned = cleaned[len(title) + 3:]

    for pattern in _PREAMBLES:
        cleaned = pattern.sub("", cleaned.lstrip(), count=1)
    for pattern in _PLACEHOLDERS + _CONCLUSIONS:
        cleaned = pattern.sub("", cleaned)

    cleaned = "\n".join(line.rstrip() for line in cleaned.splitlines())
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    return cleaned.strip()
