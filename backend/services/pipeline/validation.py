"""Structural checks on candidate profiles.

Two levels:
    - validate_for_generation: pre-flight gate, raised before any AI call
    - validate_enriched_profile: post-pipeline schema, reported as strings
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError, ValidationInfo, field_validator

from models.schemas.candidate import CandidateProfile

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
MIN_RESPONSIBILITIES_LENGTH = 10


class ProfileValidationError(ValueError):
    """Malformed input profile. Carries one message per violation."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


class _EnrichedExperience(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    company: str
    title: str
    start_date: str
    end_date: str
    responsibilities: str = Field(min_length=MIN_RESPONSIBILITIES_LENGTH)


class EnrichedProfileSchema(BaseModel):
    """Shape a profile must have after enrichment."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(min_length=1)
    full_name: str = Field(min_length=1)
    current_title: str = Field(min_length=1)
    email: Annotated[str, StringConstraints(pattern=_EMAIL_PATTERN)] | None = None
    phone: str | None = None
    location: str | None = None
    years_of_experience: float | None = None
    summary: str | None = None
    skills: list[str] = Field(min_length=1)
    soft_skills: list[str] = []
    certifications: list[str]
    experience: list[_EnrichedExperience]
    education: list[str]
    languages: list[str]

    @field_validator("summary")
    @classmethod
    def _summary_length(cls, value: str | None, info: ValidationInfo) -> str | None:
        minimum = (info.context or {}).get("min_summary_length", 50)
        if value is not None and len(value) < minimum:
            raise ValueError(f"summary should have at least {minimum} characters")
        return value


def _format_errors(error: ValidationError) -> list[str]:
    messages = []
    for err in error.errors():
        path = ".".join(str(p) for p in err["loc"])
        messages.append(f"{path}: {err['msg']}")
    return messages


def validate_enriched_profile(profile: CandidateProfile, min_summary_length: int = 50) -> list[str]:
    """Return schema violations as "<path>: <message>" strings (empty when valid)."""
    try:
        EnrichedProfileSchema.model_validate(
            profile.model_dump(),
            context={"min_summary_length": min_summary_length},
        )
    except ValidationError as e:
        return _format_errors(e)
    return []


def validate_for_generation(profile: CandidateProfile) -> None:
    """Reject profiles that cannot produce a document. Raises ProfileValidationError."""
    errors = []
    if not profile.id.strip():
        errors.append("id: required")
    if not profile.full_name.strip():
        errors.append("full_name: required")
    if not profile.current_title.strip():
        errors.append("current_title: required")
    if not [s for s in profile.skills if s.strip()]:
        errors.append("skills: candidate must have at least one skill listed")
    if errors:
        raise ProfileValidationError(errors)
