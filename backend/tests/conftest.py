"""Shared fixtures: sample profiles and a scripted AI client."""

import asyncio
import json

import pytest

from models.schemas.candidate import CandidateProfile, ExperienceEntry
from services.gemini_client import AIResponse
from services.prompt_registry import REGISTRY


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "rendering: writes and reads back real PDF/DOCX artifacts"
    )


class FakeAIClient:
    """Stand-in for GeminiClient.

    `responder(system_prompt, user_prompt)` returns a dict (wrapped in an
    AIResponse), an AIResponse, or an Exception to raise. `delay` may be a
    number or a callable of the user prompt. Tracks every call and the peak
    number of calls in flight.
    """

    def __init__(self, responder=None, delay=0.0, tokens=100, configured=True):
        self.responder = responder or (lambda system, user: {"content": "Generated content"})
        self.delay = delay
        self.tokens = tokens
        self.configured = configured
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def generate_json(self, system_prompt, user_prompt, *, max_tokens=800, temperature=0.3):
        self.calls.append((system_prompt, user_prompt))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delay(user_prompt) if callable(self.delay) else self.delay
            await asyncio.sleep(delay)
            result = self.responder(system_prompt, user_prompt)
        finally:
            self.in_flight -= 1

        if isinstance(result, Exception):
            raise result
        if isinstance(result, AIResponse):
            return result
        text = json.dumps(result)
        return AIResponse(data=result, tokens_used=self.tokens, finish_reason="STOP", text=text)


# system prompt -> PromptKind, for responders that branch on the stage
STAGE_BY_SYSTEM_PROMPT = {spec.system_prompt: kind for kind, spec in REGISTRY.items()}


def make_profile(**overrides) -> CandidateProfile:
    data = dict(
        id="cand-001",
        full_name="Jane Doe",
        current_title="Senior Data Engineer",
        email="jane.doe@example.com",
        phone="+32 470 12 34 56",
        location="Brussels, Belgium",
        summary="Data engineer with eight years of experience building batch and streaming platforms.",
        years_of_experience=8,
        skills=["Python", "SQL", "Apache Spark", "Airflow"],
        soft_skills=["Mentoring"],
        certifications=["AWS Certified Data Analytics"],
        experience=[
            ExperienceEntry(
                company="Acme Corp",
                title="Senior Data Engineer",
                start_date="2020-01",
                end_date="Present",
                responsibilities="Led the migration of nightly ETL jobs to Spark on EMR.",
            ),
            ExperienceEntry(
                company="Globex",
                title="Data Engineer",
                start_date="2016-03",
                end_date="2019-12",
                responsibilities="Built Airflow pipelines feeding the finance data warehouse.",
            ),
        ],
        education=["MSc Computer Science - KU Leuven"],
        languages=["English", "French"],
    )
    data.update(overrides)
    return CandidateProfile(**data)


@pytest.fixture
def profile() -> CandidateProfile:
    return make_profile()


@pytest.fixture
def fake_client() -> FakeAIClient:
    return FakeAIClient()
