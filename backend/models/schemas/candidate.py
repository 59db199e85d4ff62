"""Candidate profile and the partial patches AI stages produce for it."""

import logging
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_camel, to_snake

from models.schemas.base import SchemaModel

# Keys the AI sometimes wraps the whole profile in
_WRAPPER_KEYS = ("candidate", "profile", "data", "cleaned_data", "cleanedData")

_LIST_FIELDS = ("skills", "soft_skills", "certifications", "education", "languages")

logger = logging.getLogger(__name__)


class ExperienceEntry(SchemaModel):
    """A single prior role."""
    company: str = ""
    title: str = ""
    start_date: str = ""
    end_date: str = ""
    responsibilities: str = ""


class CandidateProfile(SchemaModel):
    """Semi-structured candidate data that flows through every stage.

    id, full_name and current_title are required for generation; they default
    to empty here so malformed input reaches the structural validators and is
    reported as a validation error instead of a parse error.
    """
    id: str = ""
    full_name: str = ""
    current_title: str = ""
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    summary: str | None = None
    years_of_experience: float | None = None
    skills: list[str] = []
    soft_skills: list[str] = []
    certifications: list[str] = []
    experience: list[ExperienceEntry] = []
    education: list[str] = []
    languages: list[str] = []


class ExperiencePatch(SchemaModel):
    company: str | None = None
    title: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    responsibilities: str | None = None


class ProfilePatch(SchemaModel):
    """Partial update returned by one enrichment stage.

    Every field is optional; None means "leave the profile value alone".
    The id is deliberately absent: stages may not re-key a candidate.
    """
    full_name: str | None = None
    current_title: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    summary: str | None = None
    years_of_experience: float | None = None
    skills: list[str] | None = None
    soft_skills: list[str] | None = None
    certifications: list[str] | None = None
    experience: list[ExperiencePatch] | None = None
    education: list[str] | None = None
    languages: list[str] | None = None

    @classmethod
    def from_ai_data(cls, data: dict[str, Any]) -> "ProfilePatch":
        """Build a patch from a raw AI JSON reply, tolerating common shape drift."""
        for key in _WRAPPER_KEYS:
            inner = data.get(key)
            if isinstance(inner, dict) and len(data) == 1:
                data = inner
                break

        cleaned: dict[str, Any] = dict(data)
        for name in _LIST_FIELDS:
            for key in (name, to_camel(name)):
                if isinstance(cleaned.get(key), str):
                    cleaned[key] = [s.strip() for s in cleaned[key].split(",") if s.strip()]

        experience = cleaned.get("experience")
        if experience is not None and not isinstance(experience, list):
            cleaned.pop("experience")
        elif isinstance(experience, list):
            cleaned["experience"] = [e for e in experience if isinstance(e, dict)]

        cleaned.pop("id", None)
        while True:
            try:
                return cls.model_validate(cleaned)
            except ValidationError as e:
                invalid = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
                dropped = [
                    key for name in invalid
                    for key in {name, to_camel(name), to_snake(name)}
                    if cleaned.pop(key, None) is not None
                ]
                if not dropped:
                    raise
                logger.warning("Dropped malformed patch fields: %s", ", ".join(sorted(dropped)))

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)
