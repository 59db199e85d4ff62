"""Theme-less last-resort renderer for both formats."""

import io
import textwrap

from docx import Document
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas

from models.schemas.candidate import CandidateProfile
from models.schemas.generation import ResolvedSection, StyleTheme
from services.rendering.base import BaseRenderer
from services.rendering.layout import build_document, plain_lines

FONT = "Helvetica"
FONT_SIZE = 10
LINE_HEIGHT = 13
WRAP_WIDTH = 95  # characters per line at 10pt on A4


class FallbackRenderer(BaseRenderer):
    """Single-column plain text; ignores the theme except for the footer."""

    name = "fallback"
    formats = ("pdf", "docx")

    def _render(
        self,
        profile: CandidateProfile,
        sections: list[ResolvedSection],
        theme: StyleTheme,
    ) -> bytes:
        lines = plain_lines(build_document(profile, sections, theme.footer_text))
        if self.format == "docx":
            return self._docx(lines)
        return self._pdf(lines)

    @staticmethod
    def _pdf(lines: list[str]) -> bytes:
        buffer = io.BytesIO()
        width, height = A4
        margin = 0.75 * inch
        c = canvas.Canvas(buffer, pagesize=A4, invariant=1)
        c.setFont(FONT, FONT_SIZE)
        y = height - margin

        for line in lines:
            for chunk in textwrap.wrap(line, WRAP_WIDTH) or [""]:
                if y < margin:
                    c.showPage()
                    c.setFont(FONT, FONT_SIZE)
                    y = height - margin
                c.drawString(margin, y, chunk)
                y -= LINE_HEIGHT

        c.save()
        return buffer.getvalue()

    @staticmethod
    def _docx(lines: list[str]) -> bytes:
        doc = Document()
        for line in lines:
            doc.add_paragraph(line)
        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()
