"""Contracts for section generation and document rendering."""

from enum import Enum
from typing import Callable, Literal

from pydantic import Field, computed_field, field_validator

from models.schemas.base import SchemaModel


class JobContext(SchemaModel):
    """Optional target-role context used to bias section prompts."""
    title: str | None = None
    company: str | None = None
    requirements: list[str] = []
    skills: list[str] = []
    responsibilities: list[str] = []
    text: str | None = None
    language: str | None = None  # "fr", "de", "nl", "en" or a language name

    @field_validator("requirements", "responsibilities", "skills", mode="before")
    @classmethod
    def _split_text(cls, value):
        if isinstance(value, str):
            return [line.strip() for line in value.splitlines() if line.strip()]
        return value


class SectionTask(SchemaModel):
    """One independent unit of the competence file."""
    key: str
    title: str
    order: int
    system_prompt: str
    user_prompt: str
    include_job_context: bool = False
    experience_index: int | None = None
    max_tokens: int = 1200
    temperature: float = 0.4


class SectionResult(SchemaModel):
    order: int
    key: str
    title: str
    content: str = ""
    success: bool = False
    attempts: int = 0
    tokens_used: int = 0  # summed over all attempts
    processing_time: int = 0  # ms, summed over all attempts
    error: str | None = None  # last error when every attempt failed


class SessionStatus(str, Enum):
    COMPLETED = "completed"
    PARTIAL = "partial"  # some but not all sections generated
    FAILED = "failed"
    REJECTED = "rejected"  # pre-flight validation, no AI calls made


class GenerationSession(SchemaModel):
    session_id: str
    sections: list[SectionResult] = []
    total_tokens: int = 0
    total_time: int = 0  # ms, summed over every attempt
    wall_time: int = 0  # ms, elapsed for the whole session
    errors: list[str] = []
    success: bool = False
    status: SessionStatus = SessionStatus.FAILED

    @computed_field
    @property
    def successful_sections(self) -> int:
        return sum(1 for s in self.sections if s.success)

    @computed_field
    @property
    def failed_sections(self) -> int:
        return len(self.sections) - self.successful_sections

    @computed_field
    @property
    def completion_rate(self) -> str:
        return f"{self.successful_sections}/{len(self.sections)}"


class SectionConfig(SchemaModel):
    key: str
    label: str
    show: bool = True
    order: int = 0


def default_sections() -> list[SectionConfig]:
    return [
        SectionConfig(key="summary", label="Professional Summary", order=1),
        SectionConfig(key="skills", label="Technical Skills", order=2),
        SectionConfig(key="soft_skills", label="Functional Skills", order=3),
        SectionConfig(key="experience", label="Professional Experience", order=4),
        SectionConfig(key="education", label="Education", order=5),
        SectionConfig(key="certifications", label="Certifications", order=6),
        SectionConfig(key="languages", label="Languages", order=7),
    ]


class StyleTheme(SchemaModel):
    font: str = "Helvetica"
    color_hex: str = Field(default="#007bff", pattern=r"^#[0-9a-fA-F]{6}$")
    spacing: float = Field(default=1.4, gt=0, le=3)  # line-height multiplier
    footer_text: str | None = None


class GenerationMetadata(SchemaModel):
    client_name: str | None = None
    job_title: str | None = None
    generated_by: str | None = None


class GenerationOptions(SchemaModel):
    format: Literal["pdf", "docx"] = "pdf"
    max_retries: int = Field(default=2, ge=0, le=5)
    sections: list[SectionConfig] = Field(default_factory=default_sections)
    styling: StyleTheme = StyleTheme()
    metadata: GenerationMetadata = GenerationMetadata()


class ProgressStage(str, Enum):
    INITIALIZATION = "initialization"
    ENRICHMENT = "enrichment"
    GENERATION = "generation"
    RENDERING = "rendering"
    UPLOADING = "uploading"
    COMPLETE = "complete"


class GenerationProgress(SchemaModel):
    stage: ProgressStage
    progress: int = Field(ge=0, le=100)
    message: str = ""


ProgressCallback = Callable[[GenerationProgress], None]


class ResolvedSection(SchemaModel):
    """A visible section after filtering, ordering and data checks."""
    key: str
    label: str
    order: int
    content: str | None = None  # generated text that replaces raw profile data


class RenderAttempt(SchemaModel):
    method: str
    success: bool
    error: str | None = None




class EnrichmentSummary(SchemaModel):
    """Enrichment run behind a document. Its data is rendered only on success."""
    success: bool
    total_tokens: int = 0
    errors: list[str] = []


class GenerationOutcome(SchemaModel):
    success: bool  # rendered, and every generated section succeeded
    generation_method: str | None = None
    file_url: str | None = None
    file_name: str | None = None
    file_size: int = 0
    processing_time: int = 0  # ms
    error: str | None = None
    attempts: list[RenderAttempt] = []
    validation_errors: list[str] = []
    document_sections: list[ResolvedSection] = []
    session_id: str | None = None
    status: SessionStatus | None = None  # only when sections were generated
    sections: list[SectionResult] = []
    total_tokens: int = 0  # enrichment plus section generation
    total_time: int = 0  # ms, summed over every section attempt
    errors: list[str] = []
    enrichment: EnrichmentSummary | None = None

    @computed_field
    @property
    def completion_rate(self) -> str | None:
        if self.status is None:
            return None
        return f"{sum(1 for s in self.sections if s.success)}/{len(self.sections)}"
