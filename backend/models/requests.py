from pydantic import Field

from models.schemas.base import SchemaModel
from models.schemas.candidate import CandidateProfile
from models.schemas.enrichment import EnrichmentOptions, TargetAudience, TargetLanguage, Tone
from models.schemas.generation import GenerationOptions, JobContext
from services.prompt_registry import PromptKind


class EnrichRequest(SchemaModel):
    candidate: CandidateProfile
    options: EnrichmentOptions = EnrichmentOptions()


class QuickEnhanceRequest(SchemaModel):
    text: str = Field(..., min_length=1, max_length=10000, description="Text to enhance")
    kind: PromptKind = PromptKind.ATS_SUMMARY
    job_description: str | None = Field(default=None, max_length=10000)
    client_name: str | None = None
    industry_focus: str | None = None
    tone: Tone = "professional"
    target_audience: TargetAudience = "hr"
    target_language: TargetLanguage = "french"

    def context(self) -> dict:
        return self.model_dump(exclude={"text", "kind"})


class CompetenceFileOptions(SchemaModel):
    max_retries: int = Field(default=2, ge=0, le=5)


class CompetenceFileRequest(SchemaModel):
    candidate_data: CandidateProfile
    job_description: JobContext | None = None
    options: CompetenceFileOptions = CompetenceFileOptions()


class DocumentRequest(SchemaModel):
    candidate: CandidateProfile
    options: GenerationOptions = GenerationOptions()
    enrichment: EnrichmentOptions | None = None


class CompetenceDocumentRequest(SchemaModel):
    candidate_data: CandidateProfile
    job_description: JobContext | None = None
    options: GenerationOptions = GenerationOptions()
    enrichment: EnrichmentOptions | None = None
