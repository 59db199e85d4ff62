"""python-docx renderer."""

import io

from docx import Document
from docx.shared import Pt, RGBColor

from models.schemas.candidate import CandidateProfile
from models.schemas.generation import ResolvedSection, StyleTheme
from services.rendering.base import BaseRenderer
from services.rendering.layout import BlockKind, build_document, split_bold


def _tight(p, before: int = 0, after: int = 2) -> None:
    p.paragraph_format.space_before = Pt(before)
    p.paragraph_format.space_after = Pt(after)


def _add_runs(paragraph, text: str, font: str, size: float, bold: bool = False) -> None:
    for segment, seg_bold in split_bold(text):
        run = paragraph.add_run(segment)
        run.font.name = font
        run.font.size = Pt(size)
        run.bold = bold or seg_bold


class DocxRenderer(BaseRenderer):
    name = "python-docx"
    formats = ("docx",)

    def _render(
        self,
        profile: CandidateProfile,
        sections: list[ResolvedSection],
        theme: StyleTheme,
    ) -> bytes:
        layout = build_document(profile, sections, theme.footer_text)
        accent = RGBColor.from_string(theme.color_hex.lstrip("#").upper())
        font = theme.font

        doc = Document()
        normal = doc.styles["Normal"]
        normal.font.name = font
        normal.font.size = Pt(10.5)
        normal.paragraph_format.line_spacing = theme.spacing
        doc.core_properties.title = f"{layout.name} - Competence File"
        doc.core_properties.author = layout.name

        name = doc.add_paragraph()
        _add_runs(name, layout.name, font, 20, bold=True)
        name.runs[0].font.color.rgb = accent
        _tight(name)
        _tight(doc.add_paragraph(layout.title))
        contact = doc.add_paragraph()
        _add_runs(contact, layout.contact, font, 9)
        _tight(contact, after=8)

        for section in layout.sections:
            heading = doc.add_heading(level=1)
            run = heading.add_run(section.label.upper())
            run.font.name = font
            run.font.color.rgb = accent
            _tight(heading, before=10, after=4)

            for block in section.blocks:
                if block.kind == BlockKind.SUBHEADING:
                    p = doc.add_paragraph()
                    _add_runs(p, block.text, font, 10.5, bold=True)
                    _tight(p, before=4)
                elif block.kind == BlockKind.BULLET:
                    p = doc.add_paragraph(style="List Bullet")
                    _add_runs(p, block.text, font, 10.5)
                    _tight(p, after=0)
                else:
                    p = doc.add_paragraph()
                    _add_runs(p, block.text, font, 10.5)
                    _tight(p)

        if layout.footer:
            doc.sections[0].footer.paragraphs[0].text = layout.footer

        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()
