from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_ai_client, get_artifact_store
from config import settings
from models.requests import (
    CompetenceDocumentRequest,
    CompetenceFileRequest,
    DocumentRequest,
    EnrichRequest,
    QuickEnhanceRequest,
)
from models.responses import HealthResponse, QuickEnhanceResponse
from models.schemas.enrichment import PipelineResult
from models.schemas.generation import GenerationOutcome, SessionStatus
from services.gemini_client import GeminiClient
from services.generation.document_generator import DocumentGenerator
from services.generation.storage import ArtifactStore
from services.pipeline.enrichment import EnrichmentPipeline
from services.pipeline.section_queue import SectionQueue

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)

_SESSION_STATUS_CODES = {
    SessionStatus.COMPLETED: 200,
    SessionStatus.PARTIAL: 207,
    SessionStatus.REJECTED: 400,
    SessionStatus.FAILED: 500,
}


def _outcome_status_code(outcome: GenerationOutcome) -> int:
    if outcome.validation_errors:
        return 400
    if outcome.file_url is None:
        return 500
    if outcome.status == SessionStatus.PARTIAL:
        return 207
    return 200


@router.get("/health", response_model=HealthResponse)
async def health(client: GeminiClient = Depends(get_ai_client)):
    return HealthResponse(status="ok", gemini_configured=client.configured)


@router.post("/enrich", response_model=PipelineResult)
@limiter.limit(settings.rate_limit)
async def enrich(
    request: Request,
    body: EnrichRequest,
    client: GeminiClient = Depends(get_ai_client),
):
    return await EnrichmentPipeline(client).process_candidate(body.candidate, body.options)


@router.post("/enrich/quick", response_model=QuickEnhanceResponse)
@limiter.limit(settings.rate_limit)
async def enrich_quick(
    request: Request,
    body: QuickEnhanceRequest,
    client: GeminiClient = Depends(get_ai_client),
):
    enhanced, tokens = await EnrichmentPipeline(client).quick_enhance(
        body.text, body.kind, **body.context()
    )
    return QuickEnhanceResponse(enhanced=enhanced, tokens_used=tokens)


@router.post("/competence-files/generate")
@limiter.limit(settings.rate_limit)
async def generate_competence_file(
    request: Request,
    body: CompetenceFileRequest,
    client: GeminiClient = Depends(get_ai_client),
):
    session = await SectionQueue(client).generate(
        body.candidate_data,
        body.job_description,
        max_retries=body.options.max_retries,
    )
    return JSONResponse(
        status_code=_SESSION_STATUS_CODES[session.status],
        content=session.model_dump(mode="json", by_alias=True),
    )


@router.post("/documents/generate")
@limiter.limit(settings.rate_limit)
async def generate_document(
    request: Request,
    body: DocumentRequest,
    client: GeminiClient = Depends(get_ai_client),
    store: ArtifactStore = Depends(get_artifact_store),
):
    pipeline = EnrichmentPipeline(client) if body.enrichment is not None else None
    generator = DocumentGenerator(store=store, pipeline=pipeline)
    outcome = await generator.generate_document(
        body.candidate, body.options, enrichment=body.enrichment
    )
    return JSONResponse(
        status_code=_outcome_status_code(outcome),
        content=outcome.model_dump(mode="json", by_alias=True),
    )


@router.post("/competence-files/document")
@limiter.limit(settings.rate_limit)
async def generate_competence_document(
    request: Request,
    body: CompetenceDocumentRequest,
    client: GeminiClient = Depends(get_ai_client),
    store: ArtifactStore = Depends(get_artifact_store),
):
    pipeline = EnrichmentPipeline(client) if body.enrichment is not None else None
    generator = DocumentGenerator(store=store, pipeline=pipeline, queue=SectionQueue(client))
    outcome = await generator.generate_document(
        body.candidate_data,
        body.options,
        enrichment=body.enrichment,
        job_context=body.job_description,
    )
    return JSONResponse(
        status_code=_outcome_status_code(outcome),
        content=outcome.model_dump(mode="json", by_alias=True),
    )
