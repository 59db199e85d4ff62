"""Field-by-field merge of AI patches into a candidate profile.

Only values that carry content overwrite the profile: None, blank strings
and empty lists are treated as "not set" so a stage can never wipe data it
did not return.
"""

from models.schemas.candidate import CandidateProfile, ExperienceEntry, ExperiencePatch, ProfilePatch

_SCALAR_FIELDS = ("full_name", "current_title", "email", "phone", "location", "summary")
_LIST_FIELDS = ("skills", "soft_skills", "certifications", "education", "languages")
_EXPERIENCE_FIELDS = ("company", "title", "start_date", "end_date", "responsibilities")


def _clean_list(values: list[str]) -> list[str]:
    """Strip, drop blanks and dedupe case-insensitively, keeping first order."""
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        item = str(value).strip()
        if item and item.lower() not in seen:
            seen.add(item.lower())
            out.append(item)
    return out


def _merge_entry(entry: ExperienceEntry, patch: ExperiencePatch) -> ExperienceEntry:
    updates = {}
    for name in _EXPERIENCE_FIELDS:
        value = getattr(patch, name)
        if value is not None and value.strip():
            updates[name] = value.strip()
    return entry.model_copy(update=updates)


def merge_experience(
    current: list[ExperienceEntry], patches: list[ExperiencePatch]
) -> list[ExperienceEntry]:
    """Merge by position. Extra patch entries are ignored: stages may not add roles."""
    merged = []
    for i, entry in enumerate(current):
        merged.append(_merge_entry(entry, patches[i]) if i < len(patches) else entry.model_copy())
    return merged


def apply_patch(profile: CandidateProfile, patch: ProfilePatch) -> CandidateProfile:
    """Return a new profile with the patch applied; the input is not modified."""
    updates: dict = {}

    for name in _SCALAR_FIELDS:
        value = getattr(patch, name)
        if value is not None and value.strip():
            updates[name] = value.strip()

    if patch.years_of_experience is not None and patch.years_of_experience >= 0:
        updates["years_of_experience"] = patch.years_of_experience

    for name in _LIST_FIELDS:
        value = getattr(patch, name)
        if value:
            cleaned = _clean_list(value)
            if cleaned:
                updates[name] = cleaned

    if patch.experience:
        updates["experience"] = merge_experience(profile.experience, patch.experience)

    return profile.model_copy(update=updates, deep=True)
