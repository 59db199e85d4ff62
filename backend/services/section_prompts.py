"""Prompt templates for competence-file sections."""

import json
from typing import Callable

from models.schemas.candidate import CandidateProfile
from models.schemas.generation import JobContext

HEADER = "HEADER"
PROFESSIONAL_SUMMARY = "PROFESSIONAL SUMMARY"
FUNCTIONAL_SKILLS = "FUNCTIONAL SKILLS"
TECHNICAL_SKILLS = "TECHNICAL SKILLS"
LANGUAGES = "LANGUAGES"
AREAS_OF_EXPERTISE = "AREAS OF EXPERTISE"
EDUCATION = "EDUCATION"
CERTIFICATIONS = "CERTIFICATIONS"
EXPERIENCES_SUMMARY = "PROFESSIONAL EXPERIENCES SUMMARY"
EXPERIENCE = "PROFESSIONAL EXPERIENCE"

SECTION_SYSTEM_PROMPT = """You are an expert resume writer producing one section of a candidate competence file.

STRICT GENERATION RULES:
- Use ONLY information present in the candidate data and (if provided) the target role
- DO NOT invent companies, degrees, certifications, metrics or percentages
- No introductions ("Here is..."), no explanations, no placeholders
- If the input does not support the section, return an empty string as content

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{"content": "<the formatted section text>"}"""

_LANGUAGE_CODES = {"fr": "French", "de": "German", "nl": "Dutch", "en": "English", "es": "Spanish"}


def language_name(lang: str | None) -> str:
    """Map short language codes to readable names."""
    if not lang:
        return "English"
    return _LANGUAGE_CODES.get(lang.lower(), lang)


def job_context_summary(job: JobContext | None) -> str:
    """One-line digest of the target role."""
    if job is None:
        return "Not specified"

    parts = []
    if job.title:
        parts.append(f"Position: {job.title}")
    if job.company:
        parts.append(f"Company: {job.company}")
    if job.responsibilities:
        parts.append(f"Key Responsibilities: {', '.join(job.responsibilities[:3])}")
    if job.requirements:
        parts.append(f"Requirements: {', '.join(job.requirements[:3])}")
    if job.skills:
        parts.append(f"Key Skills: {', '.join(job.skills[:5])}")
    if not parts and job.text:
        parts.append(job.text[:200] + ("..." if len(job.text) > 200 else ""))
    return " | ".join(parts) if parts else "Not specified"


def _roles(candidate: CandidateProfile) -> str:
    return " | ".join(f"{e.title} at {e.company}" for e in candidate.experience) or "Not provided"


def _target(job: JobContext | None, label: str = "TARGET ROLE") -> str:
    return f"{label}: {job_context_summary(job)}" if job else ""


def _header(c: CandidateProfile, job: JobContext | None, language: str) -> str:
    return f"""OUTPUT LANGUAGE: {language}

CANDIDATE DATA: {json.dumps(c.model_dump(exclude={"experience"}), indent=2)}

Create a professional header starting immediately with the candidate's full name:
- Full Name (as main heading)
- Current Title/Position (translated to {language})
- Years of Experience (if available)

{_target(job)}"""


def _summary(c: CandidateProfile, job: JobContext | None, language: str) -> str:
    return f"""OUTPUT LANGUAGE: {language}
- Write in third person about the candidate
- 4-6 tightly-written sentences (no bullet points)
- Tailor to the target role when provided

CANDIDATE PROFILE: {c.current_title} with {c.years_of_experience or 'extensive'} years experience
BACKGROUND: {c.summary or 'Professional background'}
SKILLS: {', '.join(c.skills)}
ACTUAL EXPERIENCE: {_roles(c)}

{_target(job)}"""


def _functional_skills(c: CandidateProfile, job: JobContext | None, language: str) -> str:
    return f"""OUTPUT LANGUAGE: {language}
Organize functional skills into 3-6 categories derived from the input, 2-5 bullets each.
FORMAT EXACTLY LIKE THIS:

**Category Name**
• Skill or capability with brief evidence

CANDIDATE CONTEXT:
Title: {c.current_title}
Skills: {', '.join(c.skills)}
Soft skills: {', '.join(c.soft_skills) or 'Not provided'}
Experience: {_roles(c)}

{_target(job, "TARGET ROLE CONTEXT")}"""


def _technical_skills(c: CandidateProfile, job: JobContext | None, language: str) -> str:
    job_tech = f"JOB TECHNOLOGIES: {', '.join(job.skills)}" if job and job.skills else ""
    return f"""OUTPUT LANGUAGE: {language}
Organize real technologies into 4-8 logical categories (e.g. Programming Languages, Frameworks, Cloud).
FORMAT EXACTLY LIKE THIS:

**Category Name**
• Technology/Tool 1
• Technology/Tool 2

CANDIDATE TECHNOLOGIES: {', '.join(c.skills)}
{job_tech}"""


def _languages(c: CandidateProfile, job: JobContext | None, language: str) -> str:
    return f"""OUTPUT LANGUAGE: {language}
CANDIDATE LANGUAGES: {', '.join(c.languages) or 'English (Native)'}

Format each language as:
• **Language Name** - Proficiency Level

Use these proficiency levels: Native, Professional, Conversational, Basic"""


def _areas_of_expertise(c: CandidateProfile, job: JobContext | None, language: str) -> str:
    return f"""OUTPUT LANGUAGE: {language}
CANDIDATE SNAPSHOT:
Title: {c.current_title}
Years: {c.years_of_experience or ''}
Skills: {', '.join(c.skills)}
Experience: {_roles(c)}
{_target(job, "JOB CONTEXT")}

Format as (omit any header the input cannot support):
**Industry Expertise:** domains clearly evident from experience
**Functional Skills:** capabilities clearly evident from experience
**Technical Proficiency:** technologies clearly evident from skills/experience"""


def _education(c: CandidateProfile, job: JobContext | None, language: str) -> str:
    return f"""OUTPUT LANGUAGE: {language}
CANDIDATE EDUCATION: {', '.join(c.education)}

Format as bullet points, without certifications:
• **Degree** - Institution (Year if available)"""


def _certifications(c: CandidateProfile, job: JobContext | None, language: str) -> str:
    return f"""OUTPUT LANGUAGE: {language}
CANDIDATE CERTIFICATIONS: {', '.join(c.certifications)}
CANDIDATE BACKGROUND: {c.current_title}

{_target(job, "TARGET ROLE REQUIREMENTS")}

Format as bullet points:
• **Certification Name** - Year if available"""


def _experiences_summary(c: CandidateProfile, job: JobContext | None, language: str) -> str:
    experiences = json.dumps([e.model_dump() for e in c.experience], indent=2)
    return f"""OUTPUT LANGUAGE: {language}
CANDIDATE EXPERIENCES: {experiences}

Create a crisp chronological listing in reverse chronological order (latest first):
**Company Name** - Role Title
Start Date - End Date

{_target(job, "TARGET ROLE CONTEXT")}"""


SECTION_PROMPTS: dict[str, Callable[[CandidateProfile, JobContext | None, str], str]] = {
    HEADER: _header,
    PROFESSIONAL_SUMMARY: _summary,
    FUNCTIONAL_SKILLS: _functional_skills,
    TECHNICAL_SKILLS: _technical_skills,
    LANGUAGES: _languages,
    AREAS_OF_EXPERTISE: _areas_of_expertise,
    EDUCATION: _education,
    CERTIFICATIONS: _certifications,
    EXPERIENCES_SUMMARY: _experiences_summary,
}


def build_experience_prompt(
    c: CandidateProfile, job: JobContext | None, index: int, language: str
) -> str:
    """Prompt for the PROFESSIONAL EXPERIENCE entry at `index`."""
    target = json.dumps(c.experience[index].model_dump(), indent=2)
    return f"""OUTPUT LANGUAGE: {language}
- Transform responsibilities into action-oriented statements
- Highlight achievements using power verbs, without fake metrics

TARGET EXPERIENCE: {target}

{_target(job, "TARGET ROLE CONTEXT")}

Format exactly as:

**Company Name** - Role Title
Start Date - End Date

**Key Responsibilities:**
• Enhanced responsibility based on actual data

**Achievements & Impact:**
• Real achievement presented compellingly

**Technical Environment:**
• Actual technology/tool from experience"""
