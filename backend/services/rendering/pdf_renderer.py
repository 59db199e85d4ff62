"""ReportLab (platypus) PDF renderer."""

import io
from xml.sax.saxutils import escape

from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer
from reportlab.platypus.flowables import HRFlowable

from models.schemas.candidate import CandidateProfile
from models.schemas.generation import ResolvedSection, StyleTheme
from services.rendering.base import BaseRenderer
from services.rendering.layout import BlockKind, build_document, split_bold

# Theme font family -> (regular, bold) built-in PDF fonts
_FONT_FAMILIES = {
    "helvetica": ("Helvetica", "Helvetica-Bold"),
    "arial": ("Helvetica", "Helvetica-Bold"),
    "calibri": ("Helvetica", "Helvetica-Bold"),
    "times": ("Times-Roman", "Times-Bold"),
    "times new roman": ("Times-Roman", "Times-Bold"),
    "georgia": ("Times-Roman", "Times-Bold"),
    "cambria": ("Times-Roman", "Times-Bold"),
    "courier": ("Courier", "Courier-Bold"),
    "courier new": ("Courier", "Courier-Bold"),
}

BODY_SIZE = 10


def pdf_fonts(font: str) -> tuple[str, str]:
    """Map a theme font name onto a standard PDF font pair."""
    return _FONT_FAMILIES.get(font.strip().lower(), _FONT_FAMILIES["helvetica"])


def _markup(text: str) -> str:
    """Escape for platypus and turn **bold** spans into <b> tags."""
    return "".join(
        f"<b>{escape(seg)}</b>" if bold else escape(seg)
        for seg, bold in split_bold(text)
    )


def _styles(theme: StyleTheme) -> dict[str, ParagraphStyle]:
    regular, bold = pdf_fonts(theme.font)
    accent = HexColor(theme.color_hex)
    leading = BODY_SIZE * theme.spacing

    return {
        "Name": ParagraphStyle(
            name="Name", fontName=bold, fontSize=20, leading=24,
            textColor=accent, alignment=TA_LEFT, spaceAfter=2,
        ),
        "Title": ParagraphStyle(
            name="Title", fontName=regular, fontSize=12, leading=12 * theme.spacing,
            alignment=TA_LEFT, spaceAfter=2,
        ),
        "Contact": ParagraphStyle(
            name="Contact", fontName=regular, fontSize=9, leading=9 * theme.spacing,
            alignment=TA_LEFT,
        ),
        "SectionTitle": ParagraphStyle(
            name="SectionTitle", fontName=bold, fontSize=13, leading=16,
            textColor=accent, spaceBefore=10, spaceAfter=2,
        ),
        "Subheading": ParagraphStyle(
            name="Subheading", fontName=bold, fontSize=BODY_SIZE, leading=leading,
            spaceBefore=4,
        ),
        "Body": ParagraphStyle(
            name="Body", fontName=regular, fontSize=BODY_SIZE, leading=leading,
        ),
        "Bullet": ParagraphStyle(
            name="Bullet", fontName=regular, fontSize=BODY_SIZE, leading=leading,
            leftIndent=15, bulletIndent=5,
        ),
        "Footer": ParagraphStyle(
            name="Footer", fontName=regular, fontSize=8, leading=10,
        ),
    }


class ReportLabPdfRenderer(BaseRenderer):
    name = "reportlab"
    formats = ("pdf",)

    def _render(
        self,
        profile: CandidateProfile,
        sections: list[ResolvedSection],
        theme: StyleTheme,
    ) -> bytes:
        layout = build_document(profile, sections, theme.footer_text)
        styles = _styles(theme)
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer, pagesize=A4,
            rightMargin=0.6 * inch, leftMargin=0.6 * inch,
            topMargin=0.6 * inch, bottomMargin=0.6 * inch,
            title=f"{layout.name} - Competence File",
            author=layout.name,
            invariant=1,
        )

        flowables = [
            Paragraph(escape(layout.name), styles["Name"]),
            Paragraph(escape(layout.title), styles["Title"]),
            Paragraph(escape(layout.contact), styles["Contact"]),
            Spacer(1, 6),
        ]
        for section in layout.sections:
            flowables.append(Paragraph(escape(section.label.upper()), styles["SectionTitle"]))
            flowables.append(HRFlowable(width="100%", thickness=0.8, color=HexColor(theme.color_hex)))
            flowables.append(Spacer(1, 4))
            for block in section.blocks:
                if block.kind == BlockKind.SUBHEADING:
                    flowables.append(Paragraph(escape(block.text), styles["Subheading"]))
                elif block.kind == BlockKind.BULLET:
                    flowables.append(Paragraph(_markup(block.text), styles["Bullet"], bulletText="•"))
                else:
                    flowables.append(Paragraph(_markup(block.text), styles["Body"]))

        if layout.footer:
            flowables.append(Spacer(1, 12))
            flowables.append(Paragraph(escape(layout.footer), styles["Footer"]))

        doc.build(flowables)
        return buffer.getvalue()
