"""Tests for the shared document layout."""

from conftest import make_profile
from models.schemas.candidate import ExperienceEntry
from models.schemas.generation import ResolvedSection
from services.rendering.layout import (
    PLACEHOLDER,
    Block,
    BlockKind,
    build_document,
    has_section_data,
    parse_content,
    plain_lines,
    split_bold,
)


def _section(key, label=None, content=None, order=1):
    return ResolvedSection(key=key, label=label or key.title(), order=order, content=content)


class TestBuildDocument:
    def test_header(self):
        layout = build_document(make_profile(), [])
        assert layout.name == "Jane Doe"
        assert layout.title == "Senior Data Engineer"
        assert layout.contact == "Email: jane.doe@example.com | Phone: +32 470 12 34 56 | Location: Brussels, Belgium"

    def test_missing_contact_uses_placeholder(self):
        layout = build_document(make_profile(email=None, phone=" ", location=None), [])
        assert layout.contact == f"Email: {PLACEHOLDER} | Phone: {PLACEHOLDER} | Location: {PLACEHOLDER}"

    def test_experience_placeholders(self):
        profile = make_profile(experience=[ExperienceEntry(title="Consultant", responsibilities="- Audits\n- Reviews")])
        layout = build_document(profile, [_section("experience")])
        assert layout.sections[0].blocks == [
            Block(BlockKind.SUBHEADING, f"Consultant - {PLACEHOLDER}"),
            Block(BlockKind.PARAGRAPH, f"{PLACEHOLDER} - {PLACEHOLDER}"),
            Block(BlockKind.BULLET, "Audits"),
            Block(BlockKind.BULLET, "Reviews"),
        ]

    def test_sections_keep_given_order(self):
        layout = build_document(make_profile(), [_section("languages"), _section("skills")])
        assert [s.key for s in layout.sections] == ["languages", "skills"]
        assert layout.sections[1].blocks[0] == Block(BlockKind.BULLET, "Python")

    def test_generated_content_replaces_profile_data(self):
        section = _section("summary", content="**Profile**\n• Leads data teams")
        layout = build_document(make_profile(), [section])
        assert layout.sections[0].blocks == [
            Block(BlockKind.SUBHEADING, "Profile"),
            Block(BlockKind.BULLET, "Leads data teams"),
        ]

    def test_footer(self):
        assert build_document(make_profile(), [], footer="Confidential").footer == "Confidential"


class TestParseContent:
    def test_block_kinds(self):
        blocks = parse_content("### Cloud\n- AWS\n* GCP\n• Azure\n\nPlain sentence with **bold**.")
        assert [b.kind for b in blocks] == [
            BlockKind.SUBHEADING, BlockKind.BULLET, BlockKind.BULLET, BlockKind.BULLET, BlockKind.PARAGRAPH,
        ]
        assert [b.text for b in blocks[1:4]] == ["AWS", "GCP", "Azure"]

    def test_bold_led_line_is_not_a_heading(self):
        blocks = parse_content("**Acme Corp** - Engineer")
        assert blocks == [Block(BlockKind.PARAGRAPH, "**Acme Corp** - Engineer")]


class TestHelpers:
    def test_split_bold(self):
        assert split_bold("Led **Spark** migration") == [("Led ", False), ("Spark", True), (" migration", False)]
        assert split_bold("plain") == [("plain", False)]

    def test_has_section_data(self):
        profile = make_profile(certifications=[], summary=None)
        assert has_section_data(profile, "skills")
        assert not has_section_data(profile, "certifications")
        assert not has_section_data(profile, "summary")
        assert not has_section_data(profile, "unknown")

    def test_plain_lines(self):
        layout = build_document(make_profile(), [_section("skills", "Technical Skills")], footer="Confidential")
        lines = plain_lines(layout)
        assert lines[:3] == [layout.name, layout.title, layout.contact]
        assert "TECHNICAL SKILLS" in lines
        assert "  • Python" in lines
        assert lines[-1] == "Confidential"
