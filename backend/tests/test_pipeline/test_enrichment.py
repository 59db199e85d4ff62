"""Tests for the sequential enrichment pipeline."""

import pytest

from conftest import STAGE_BY_SYSTEM_PROMPT, FakeAIClient, make_profile
from models.schemas.enrichment import EnrichmentOptions
from services.gemini_client import AIClientError, AIResponse, GeminiClient
from services.pipeline.enrichment import (
    CONFIDENCE_HIGH,
    CONFIDENCE_LOW,
    CONFIDENCE_MEDIUM,
    EnrichmentPipeline,
    compute_confidence,
    plan_stages,
)
from services.prompt_registry import PromptKind

ENRICHED_SUMMARY = (
    "Senior data engineer with eight years of experience designing batch and "
    "streaming platforms on Spark and Airflow for finance and retail teams."
)

DEFAULT_REPLIES = {
    PromptKind.DATA_CLEANING: {"current_title": "Lead Data Engineer", "skills": ["Python", "python", "SQL", "Apache Spark"]},
    PromptKind.ATS_SUMMARY: {"summary": ENRICHED_SUMMARY},
    PromptKind.SOFT_SKILLS: {
        "soft_skills": ["Leadership", "Communication"],
        "experience": [{"responsibilities": "Led five engineers through the Spark migration on EMR."}],
    },
    PromptKind.INDUSTRY_OPTIMIZATION: {"summary": ENRICHED_SUMMARY + " Banking domain focus."},
    PromptKind.TONE_ADJUSTMENT: {"summary": ENRICHED_SUMMARY + " Advises executive stakeholders."},
    PromptKind.TRANSLATION: {"current_title": "Ingenieure de donnees principale"},
}


def stage_responder(replies=None, fail=()):
    replies = {**DEFAULT_REPLIES, **(replies or {})}

    def respond(system, user):
        kind = STAGE_BY_SYSTEM_PROMPT[system]
        if kind in fail:
            return AIClientError(f"{kind.value} unavailable")
        return replies[kind]

    return respond


class TestPlanStages:
    def test_defaults(self):
        stages = plan_stages(EnrichmentOptions())
        assert [s.kind for s in stages] == [
            PromptKind.DATA_CLEANING, PromptKind.ATS_SUMMARY, PromptKind.SOFT_SKILLS,
        ]
        assert [s.ordinal for s in stages] == [1, 2, 3]

    @pytest.mark.parametrize("options,expected", [
        (dict(industry_focus="banking"), 4),
        (dict(tone="technical"), 4),
        (dict(enable_translation=True), 4),
        (dict(industry_focus="banking", tone="creative", enable_translation=True), 6),
    ])
    def test_stage_count(self, options, expected):
        assert len(plan_stages(EnrichmentOptions(**options))) == expected

    def test_all_options_ordinals(self):
        stages = plan_stages(EnrichmentOptions(industry_focus="banking", tone="creative", enable_translation=True))
        assert [s.ordinal for s in stages] == [1, 2, 3, 3, 3, 4]
        assert stages[-1].kind == PromptKind.TRANSLATION
        assert stages[3].name == "Final Optimization: Industry Optimization"


class TestConfidence:
    def test_complete_reply_is_high(self):
        response = AIResponse(data={}, finish_reason="STOP", text="x" * 51)
        assert compute_confidence(response) == CONFIDENCE_HIGH

    def test_short_reply_is_low(self):
        response = AIResponse(data={}, finish_reason="STOP", text="{}")
        assert compute_confidence(response) == CONFIDENCE_LOW

    def test_truncated_reply_is_medium(self):
        response = AIResponse(data={}, finish_reason="MAX_TOKENS", text="x" * 200)
        assert compute_confidence(response) == CONFIDENCE_MEDIUM

    def test_unknown_reason_is_low(self):
        assert compute_confidence(AIResponse(data={})) == CONFIDENCE_LOW


class TestProcessCandidate:
    @pytest.mark.asyncio
    async def test_default_run(self, profile):
        client = FakeAIClient(stage_responder())
        result = await EnrichmentPipeline(client).process_candidate(profile)

        assert result.success is True
        assert result.errors == []
        assert [s.stage for s in result.stages] == [1, 2, 3]
        assert len(client.calls) == 3
        assert result.total_tokens == 300
        assert result.final_data.summary == ENRICHED_SUMMARY
        assert result.final_data.skills == ["Python", "SQL", "Apache Spark"]
        assert result.final_data.soft_skills == ["Leadership", "Communication"]
        assert result.final_data.experience[0].responsibilities.startswith("Led five engineers")
        # Second role untouched: the patch only had one entry
        assert result.final_data.experience[1] == profile.experience[1]

    @pytest.mark.asyncio
    async def test_confidence_in_bounds(self, profile):
        client = FakeAIClient(stage_responder(fail={PromptKind.SOFT_SKILLS}))
        result = await EnrichmentPipeline(client).process_candidate(
            profile, EnrichmentOptions(industry_focus="banking", tone="technical", enable_translation=True)
        )
        assert len(result.stages) == 6
        for stage in result.stages:
            assert 0.0 <= stage.metrics.confidence <= 1.0

    @pytest.mark.asyncio
    async def test_each_stage_sees_previous_merge(self, profile):
        client = FakeAIClient(stage_responder())
        result = await EnrichmentPipeline(client).process_candidate(profile)

        soft_skills_prompt = client.calls[2][1]
        assert "Current Role: Lead Data Engineer" in soft_skills_prompt
        assert result.stages[1].original_data.current_title == "Lead Data Engineer"
        assert result.stages[0].original_data.current_title == "Senior Data Engineer"

    @pytest.mark.asyncio
    async def test_failed_stage_is_recorded_and_skipped(self, profile):
        client = FakeAIClient(stage_responder(fail={PromptKind.ATS_SUMMARY}))
        result = await EnrichmentPipeline(client).process_candidate(profile)

        failed = result.stages[1]
        assert failed.enhanced_data is None
        assert failed.metrics.tokens_used == 0
        assert failed.metrics.confidence == 0.0
        assert failed.errors == ["ats_summary unavailable"]
        # Stage 3 still ran, on a profile the failed stage did not touch
        assert len(result.stages) == 3
        assert result.stages[2].original_data.summary == profile.summary
        assert result.success is False
        assert result.errors == ["Stage 2 (ATS Optimization & Enhancement): ats_summary unavailable"]
        assert result.total_tokens == 200

    @pytest.mark.asyncio
    async def test_malformed_field_keeps_rest_of_stage(self, profile):
        replies = {PromptKind.ATS_SUMMARY: {"summary": ENRICHED_SUMMARY, "yearsOfExperience": "8+"}}
        client = FakeAIClient(stage_responder(replies=replies))
        result = await EnrichmentPipeline(client).process_candidate(profile)

        assert result.stages[1].errors is None
        assert result.final_data.summary == ENRICHED_SUMMARY
        assert result.final_data.years_of_experience == 8

    @pytest.mark.asyncio
    async def test_short_summary_scenario(self):
        original = make_profile(summary="Builds data systems.")
        assert len(original.summary) == 20
        client = FakeAIClient(stage_responder())
        result = await EnrichmentPipeline(client).process_candidate(original)

        final = result.final_data
        assert len(final.summary) >= len(original.summary)
        assert final.id == original.id
        assert final.full_name == original.full_name
        assert final.current_title
        assert final.skills
        assert len(final.experience) == len(original.experience)
        assert result.success is True

    @pytest.mark.asyncio
    async def test_validation_errors_reported(self):
        original = make_profile(summary="Builds data systems.")
        client = FakeAIClient(stage_responder(replies={PromptKind.ATS_SUMMARY: {"skills": ["SQL"]}}))
        result = await EnrichmentPipeline(client).process_candidate(original)

        assert result.success is False
        assert any(e.startswith("summary:") for e in result.errors)

    @pytest.mark.asyncio
    async def test_input_profile_not_mutated(self, profile):
        before = profile.model_copy(deep=True)
        await EnrichmentPipeline(FakeAIClient(stage_responder())).process_candidate(profile)
        assert profile == before

    @pytest.mark.asyncio
    async def test_unconfigured_client_never_raises(self, profile):
        result = await EnrichmentPipeline(GeminiClient(api_key="")).process_candidate(profile)
        assert result.success is False
        assert len(result.errors) == 3
        assert all(s.enhanced_data is None for s in result.stages)
        assert result.final_data == profile

    @pytest.mark.asyncio
    async def test_translation_runs_last(self, profile):
        client = FakeAIClient(stage_responder())
        result = await EnrichmentPipeline(client).process_candidate(
            profile, EnrichmentOptions(enable_translation=True, target_language="german")
        )
        assert result.stages[-1].name == "Translation"
        assert result.stages[-1].stage == 4
        assert result.final_data.current_title == "Ingenieure de donnees principale"


class TestQuickEnhance:
    @pytest.mark.asyncio
    async def test_returns_enhanced_text(self):
        client = FakeAIClient(lambda s, u: {"summary": "A sharper summary."}, tokens=55)
        text, tokens = await EnrichmentPipeline(client).quick_enhance(
            "Old summary", PromptKind.ATS_SUMMARY, job_description="Data lead"
        )
        assert text == "A sharper summary."
        assert tokens == 55
        assert "Current Summary: Old summary" in client.calls[0][1]

    @pytest.mark.asyncio
    async def test_failure_returns_original(self):
        client = FakeAIClient(lambda s, u: AIClientError("down"))
        text, tokens = await EnrichmentPipeline(client).quick_enhance("Old summary", PromptKind.TONE_ADJUSTMENT)
        assert (text, tokens) == ("Old summary", 0)
