"""Tests for patch parsing and field-by-field merging."""

from conftest import make_profile
from models.schemas.candidate import ExperienceEntry, ExperiencePatch, ProfilePatch
from services.pipeline.merge import apply_patch, merge_experience


class TestFromAiData:
    def test_unwraps_single_wrapper_key(self):
        patch = ProfilePatch.from_ai_data({"candidate": {"summary": "Wrapped"}})
        assert patch.summary == "Wrapped"

    def test_keeps_data_with_extra_keys(self):
        patch = ProfilePatch.from_ai_data({"data": {"summary": "x"}, "summary": "Top level"})
        assert patch.summary == "Top level"

    def test_splits_comma_separated_lists(self):
        patch = ProfilePatch.from_ai_data({"skills": "Python, SQL , ", "softSkills": "Leadership"})
        assert patch.skills == ["Python", "SQL"]
        assert patch.soft_skills == ["Leadership"]

    def test_drops_id_and_bad_experience(self):
        patch = ProfilePatch.from_ai_data({"id": "other", "experience": ["not a dict", {"title": "Lead"}]})
        assert not hasattr(patch, "id")
        assert len(patch.experience) == 1
        assert patch.experience[0].title == "Lead"

    def test_non_list_experience_ignored(self):
        patch = ProfilePatch.from_ai_data({"experience": "Acme 2020-2023"})
        assert patch.experience is None

    def test_empty(self):
        assert ProfilePatch.from_ai_data({}).is_empty()
        assert not ProfilePatch.from_ai_data({"summary": "x"}).is_empty()

    def test_malformed_fields_dropped_rest_kept(self):
        patch = ProfilePatch.from_ai_data({
            "summary": "Good summary",
            "yearsOfExperience": "8+",
            "skills": [{"name": "Python"}],
        })
        assert patch.summary == "Good summary"
        assert patch.years_of_experience is None
        assert patch.skills is None


class TestApplyPatch:
    def test_unset_values_never_clobber(self):
        profile = make_profile()
        patch = ProfilePatch(summary="   ", email=None, skills=[], certifications=["  "])
        merged = apply_patch(profile, patch)
        assert merged == profile

    def test_scalars_overwrite_and_strip(self):
        merged = apply_patch(make_profile(), ProfilePatch(current_title="  Lead Data Engineer "))
        assert merged.current_title == "Lead Data Engineer"

    def test_lists_deduped_case_insensitively(self):
        merged = apply_patch(make_profile(), ProfilePatch(skills=["Python", "PYTHON", " sql", "SQL"]))
        assert merged.skills == ["Python", "sql"]

    def test_negative_years_ignored(self):
        merged = apply_patch(make_profile(), ProfilePatch(years_of_experience=-1))
        assert merged.years_of_experience == 8

    def test_id_preserved(self):
        merged = apply_patch(make_profile(), ProfilePatch.from_ai_data({"id": "x", "full_name": "Jane A. Doe"}))
        assert merged.id == "cand-001"
        assert merged.full_name == "Jane A. Doe"

    def test_input_not_mutated(self):
        profile = make_profile()
        apply_patch(profile, ProfilePatch(
            summary="A new summary that replaces the old one entirely.",
            experience=[ExperiencePatch(title="Principal Engineer")],
        ))
        assert profile.summary.startswith("Data engineer with eight years")
        assert profile.experience[0].title == "Senior Data Engineer"


class TestMergeExperience:
    def test_merges_by_position(self):
        current = make_profile().experience
        merged = merge_experience(current, [
            ExperiencePatch(responsibilities="Rewritten responsibilities for the first role."),
            ExperiencePatch(company=""),
        ])
        assert merged[0].responsibilities == "Rewritten responsibilities for the first role."
        assert merged[0].company == "Acme Corp"
        assert merged[1] == current[1]

    def test_extra_patches_ignored(self):
        current = [ExperienceEntry(company="Acme", title="Engineer")]
        merged = merge_experience(current, [ExperiencePatch(), ExperiencePatch(company="Invented Inc")])
        assert len(merged) == 1
        assert merged[0].company == "Acme"

    def test_fewer_patches_keep_tail(self):
        current = make_profile().experience
        merged = merge_experience(current, [])
        assert merged == current
