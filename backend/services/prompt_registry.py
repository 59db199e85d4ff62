"""Catalog of enrichment transformations.

Each PromptKind maps to one PromptSpec: system prompt, user-prompt builder
and token/temperature budget. Pure data, no I/O.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from models.schemas.enrichment import EnrichmentContext


class PromptKind(str, Enum):
    DATA_CLEANING = "data_cleaning"
    ATS_SUMMARY = "ats_summary"
    SOFT_SKILLS = "soft_skills"
    INDUSTRY_OPTIMIZATION = "industry_optimization"
    TONE_ADJUSTMENT = "tone_adjustment"
    TRANSLATION = "translation"


@dataclass(frozen=True)
class PromptSpec:
    kind: PromptKind
    name: str
    description: str
    system_prompt: str
    user_prompt: Callable[[EnrichmentContext], str]
    max_tokens: int = 800
    temperature: float = 0.3


_JSON_RULES = """
Respond with ONLY valid JSON (no markdown, no code fences).
Include only the fields you changed; omit everything else."""


def _experience_json(ctx: EnrichmentContext, limit: int | None = None) -> str:
    entries = ctx.candidate.experience if limit is None else ctx.candidate.experience[:limit]
    return json.dumps([e.model_dump() for e in entries], indent=2)


def _data_cleaning(ctx: EnrichmentContext) -> str:
    c = ctx.candidate
    return f"""Please clean and structure this candidate data:

Name: {c.full_name}
Title: {c.current_title}
Summary: {c.summary or 'Not provided'}
Skills: {', '.join(c.skills)}
Experience: {_experience_json(ctx)}
Education: {', '.join(c.education)}
Certifications: {', '.join(c.certifications)}
Languages: {', '.join(c.languages)}

Return the cleaned data in the same structure, fixing any grammar, spelling, or formatting issues.
{_JSON_RULES}
{{
  "full_name": "<string>",
  "current_title": "<string>",
  "summary": "<string>",
  "skills": [<deduplicated strings>],
  "experience": [{{"company": "", "title": "", "start_date": "", "end_date": "", "responsibilities": ""}}],
  "education": [<strings>],
  "certifications": [<strings>],
  "languages": [<strings>]
}}"""


def _ats_summary(ctx: EnrichmentContext) -> str:
    c = ctx.candidate
    job_section = f"\nJob Requirements: {ctx.job_description}\n" if ctx.job_description else ""
    return f"""Optimize this professional summary for ATS systems:

Current Summary: {c.summary or 'Not provided'}
Skills: {', '.join(c.skills[:10])}
Industry Focus: {ctx.industry_focus or 'General'}
Target Role: {c.current_title}
{job_section}
Create an ATS-friendly summary that incorporates relevant keywords and showcases achievements.
The new summary must keep every fact of the current one and must not be shorter.
{_JSON_RULES}
{{
  "summary": "<optimized summary, 3-5 sentences>",
  "skills": [<existing skills, reordered by relevance; add none>]
}}"""


def _soft_skills(ctx: EnrichmentContext) -> str:
    return f"""Analyze this work experience and enhance the soft skills presentation:

Experience: {_experience_json(ctx)}
Current Role: {ctx.candidate.current_title}

Identify and articulate the soft skills demonstrated through their work experience.
Return enhanced descriptions that showcase these skills naturally, one entry per role, in the same order.
{_JSON_RULES}
{{
  "soft_skills": [<5-8 soft skills evidenced by the experience>],
  "experience": [{{"responsibilities": "<enhanced description>"}}]
}}"""


def _industry_optimization(ctx: EnrichmentContext) -> str:
    c = ctx.candidate
    first = c.experience[0].responsibilities if c.experience else "Not provided"
    return f"""Optimize this candidate profile for the {ctx.industry_focus} industry:

Summary: {c.summary or 'Not provided'}
Skills: {', '.join(c.skills)}
Experience: {first}

Enhance the content with industry-specific terminology, highlight relevant experience, and ensure alignment with {ctx.industry_focus} sector expectations.
{_JSON_RULES}
{{
  "summary": "<industry-aligned summary>",
  "skills": [<existing skills using {ctx.industry_focus} terminology>]
}}"""


def _tone_adjustment(ctx: EnrichmentContext) -> str:
    c = ctx.candidate
    client = f" at {ctx.client_name}" if ctx.client_name else ""
    return f"""Adjust this content for a {ctx.tone} tone targeting {ctx.target_audience}{client}:

Original Summary: {c.summary or 'Not provided'}
Key Skills: {', '.join(c.skills[:8])}

Rewrite to match the {ctx.tone} tone while maintaining factual accuracy and professionalism.
{_JSON_RULES}
{{
  "summary": "<rewritten summary>"
}}"""


def _translation(ctx: EnrichmentContext) -> str:
    c = ctx.candidate
    language = ctx.target_language.title()
    return f"""Translate this candidate profile to {language}, maintaining professional quality:

Title: {c.current_title}
Summary: {c.summary or 'Not provided'}
Experience: {_experience_json(ctx)}

Ensure technical terms are accurately translated and the professional tone is maintained.
Keep company names, product names and dates unchanged.
{_JSON_RULES}
{{
  "current_title": "<translated title>",
  "summary": "<translated summary>",
  "experience": [{{"title": "<translated>", "responsibilities": "<translated>"}}]
}}"""


REGISTRY: dict[PromptKind, PromptSpec] = {
    PromptKind.DATA_CLEANING: PromptSpec(
        kind=PromptKind.DATA_CLEANING,
        name="Data Cleaning",
        description="Clean and structure raw candidate data",
        max_tokens=1000,
        temperature=0.1,
        system_prompt="""You are a professional data processor specializing in candidate profiles. Your task is to:
1. Fix grammar and spelling errors
2. Remove duplicate information
3. Standardize formatting
4. Ensure consistency in dates, locations, and job titles
5. Return clean, structured data without adding new information""",
        user_prompt=_data_cleaning,
    ),
    PromptKind.ATS_SUMMARY: PromptSpec(
        kind=PromptKind.ATS_SUMMARY,
        name="ATS Optimization",
        description="Optimize content for Applicant Tracking Systems",
        max_tokens=800,
        temperature=0.3,
        system_prompt="""You are an ATS optimization expert. Transform candidate summaries to be:
1. Keyword-rich with relevant industry terms
2. Action-oriented with strong verbs
3. Quantified with metrics where the source provides them
4. Formatted for ATS parsing
5. Professional and impactful""",
        user_prompt=_ats_summary,
    ),
    PromptKind.SOFT_SKILLS: PromptSpec(
        kind=PromptKind.SOFT_SKILLS,
        name="Soft Skills Enhancement",
        description="Enhance and articulate soft skills from experience",
        max_tokens=600,
        temperature=0.4,
        system_prompt="""You are a career coach specializing in soft skills identification. From work experience, extract and articulate:
1. Leadership capabilities
2. Communication skills
3. Problem-solving abilities
4. Team collaboration
5. Adaptability and learning agility
6. Customer focus
7. Strategic thinking

Present these naturally within the context of their achievements.""",
        user_prompt=_soft_skills,
    ),
    PromptKind.INDUSTRY_OPTIMIZATION: PromptSpec(
        kind=PromptKind.INDUSTRY_OPTIMIZATION,
        name="Industry Optimization",
        description="Optimize content for specific industry requirements",
        max_tokens=800,
        temperature=0.3,
        system_prompt="You are an industry specialist who understands the unique requirements, terminology, and expectations of different sectors. Optimize candidate profiles to align with industry standards and expectations.",
        user_prompt=_industry_optimization,
    ),
    PromptKind.TONE_ADJUSTMENT: PromptSpec(
        kind=PromptKind.TONE_ADJUSTMENT,
        name="Tone Adjustment",
        description="Adjust content tone for specific audiences",
        max_tokens=600,
        temperature=0.4,
        system_prompt="You are a communications expert who adapts content tone for different professional audiences. Adjust the language, style, and emphasis to match the target audience's expectations and preferences.",
        user_prompt=_tone_adjustment,
    ),
    PromptKind.TRANSLATION: PromptSpec(
        kind=PromptKind.TRANSLATION,
        name="Translation",
        description="Translate content while maintaining professional tone",
        max_tokens=1200,
        temperature=0.2,
        system_prompt="""You are a professional translator specializing in career documents. Translate content while:
1. Maintaining professional terminology
2. Preserving technical accuracy
3. Adapting cultural context appropriately
4. Keeping the same structure and formatting""",
        user_prompt=_translation,
    ),
}


def get_prompt(kind: PromptKind) -> PromptSpec:
    return REGISTRY[kind]
