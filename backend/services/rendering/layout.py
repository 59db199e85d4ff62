"""Format-independent document layout shared by every renderer.

build_document() turns a profile plus the resolved section list into plain
blocks; renderers only decide how each block kind looks.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from models.schemas.candidate import CandidateProfile
from models.schemas.generation import ResolvedSection

PLACEHOLDER = "Not specified"

_BULLET_RE = re.compile(r"^\s*(?:[•▪‣◦]|[-*](?=\s))\s*")
_SUBHEADING_RE = re.compile(r"^\*\*([^*]+)\*\*:?$")
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")


class BlockKind(str, Enum):
    SUBHEADING = "subheading"
    PARAGRAPH = "paragraph"
    BULLET = "bullet"


@dataclass(frozen=True)
class Block:
    kind: BlockKind
    text: str


@dataclass
class LayoutSection:
    key: str
    label: str
    blocks: list[Block] = field(default_factory=list)


@dataclass
class DocumentLayout:
    name: str
    title: str
    contact: str
    sections: list[LayoutSection] = field(default_factory=list)
    footer: str | None = None


def _or_placeholder(value: str | None) -> str:
    return value.strip() if value and value.strip() else PLACEHOLDER


def split_bold(text: str) -> list[tuple[str, bool]]:
    """Split markdown **bold** spans into (segment, is_bold) pairs."""
    segments = []
    pos = 0
    for match in _BOLD_RE.finditer(text):
        if match.start() > pos:
            segments.append((text[pos:match.start()], False))
        segments.append((match.group(1), True))
        pos = match.end()
    if pos < len(text):
        segments.append((text[pos:], False))
    return segments


def strip_markup(text: str) -> str:
    return _BOLD_RE.sub(r"\1", text)


def parse_content(text: str) -> list[Block]:
    """Turn generated section text into blocks, one per non-empty line."""
    blocks = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        heading = _SUBHEADING_RE.match(line)
        if heading:
            blocks.append(Block(BlockKind.SUBHEADING, heading.group(1).strip()))
        elif line.startswith("#"):
            blocks.append(Block(BlockKind.SUBHEADING, line.lstrip("#").strip()))
        elif _BULLET_RE.match(line):
            blocks.append(Block(BlockKind.BULLET, _BULLET_RE.sub("", line, count=1)))
        else:
            blocks.append(Block(BlockKind.PARAGRAPH, line))
    return blocks


def _experience_blocks(profile: CandidateProfile) -> list[Block]:
    blocks = []
    for entry in profile.experience:
        blocks.append(Block(
            BlockKind.SUBHEADING,
            f"{_or_placeholder(entry.title)} - {_or_placeholder(entry.company)}",
        ))
        blocks.append(Block(
            BlockKind.PARAGRAPH,
            f"{_or_placeholder(entry.start_date)} - {_or_placeholder(entry.end_date)}",
        ))
        for line in entry.responsibilities.splitlines():
            line = _BULLET_RE.sub("", line.strip(), count=1)
            if line:
                blocks.append(Block(BlockKind.BULLET, line))
    return blocks


def _bullets(values: list[str]) -> list[Block]:
    return [Block(BlockKind.BULLET, v.strip()) for v in values if v.strip()]


def profile_blocks(profile: CandidateProfile, key: str) -> list[Block]:
    """Blocks built from raw profile data for a section key (empty if none)."""
    if key == "summary":
        text = (profile.summary or "").strip()
        return [Block(BlockKind.PARAGRAPH, text)] if text else []
    if key == "skills":
        return _bullets(profile.skills)
    if key == "soft_skills":
        return _bullets(profile.soft_skills)
    if key == "experience":
        return _experience_blocks(profile)
    if key in ("education", "certifications", "languages"):
        return _bullets(getattr(profile, key))
    return []


def has_section_data(profile: CandidateProfile, key: str) -> bool:
    return bool(profile_blocks(profile, key))


def contact_line(profile: CandidateProfile) -> str:
    return " | ".join([
        f"Email: {_or_placeholder(profile.email)}",
        f"Phone: {_or_placeholder(profile.phone)}",
        f"Location: {_or_placeholder(profile.location)}",
    ])


def build_document(
    profile: CandidateProfile,
    sections: list[ResolvedSection],
    footer: str | None = None,
) -> DocumentLayout:
    """Header plus one LayoutSection per resolved section, in the given order."""
    layout = DocumentLayout(
        name=_or_placeholder(profile.full_name),
        title=_or_placeholder(profile.current_title),
        contact=contact_line(profile),
        footer=footer,
    )
    for section in sections:
        if section.content and section.content.strip():
            blocks = parse_content(section.content)
        else:
            blocks = profile_blocks(profile, section.key)
        layout.sections.append(LayoutSection(section.key, section.label, blocks))
    return layout


def plain_lines(layout: DocumentLayout) -> list[str]:
    """Unstyled text rendition of a layout, one entry per output line."""
    lines = [layout.name, layout.title, layout.contact]
    for section in layout.sections:
        lines.append("")
        lines.append(section.label.upper())
        for block in section.blocks:
            text = strip_markup(block.text)
            lines.append(f"  • {text}" if block.kind == BlockKind.BULLET else text)
    if layout.footer:
        lines.extend(["", layout.footer])
    return lines
