"""
PDF export of generated reports.

Reports arrive as markdown-like text. Headings (``#`` lines), ``-`` bullet
lists and paragraphs are laid out with reportlab's platypus; every page carries a
"Page i of N" footer, which needs the total page count and is therefore
drawn once the whole document has been built.
"""

import re
from datetime import datetime
from io import BytesIO
from typing import List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas
from reportlab.platypus import Flowable, ListFlowable, ListItem, Paragraph, SimpleDocTemplate, Spacer

from housing_dashboard.core.logging_config import get_logger

logger = get_logger(__name__)

FOOTER_LABEL = "Housing Authority Dashboard"

_HEADING = re.compile(r"^(#{1,6})\s+(.*)$")
_BULLET = re.compile(r"^[-*\u2022]\s+(.*)$")
_BOLD = re.compile(r"\*\*(.+?)\*\*")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


class NumberedCanvas(canvas.Canvas):
    """Canvas that defers page output so each footer can show the page count."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states: List[dict] = []
        self.footer_year = datetime.now().year

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        width, _ = self._pagesize
        self.saveState()
        self.setFont("Helvetica", 8)
        self.setFillColor(colors.grey)
        self.drawCentredString(
            width / 2.0,
            0.5 * inch,
            f"Page {self._pageNumber} of {total} | {FOOTER_LABEL} | {self.footer_year}",
        )
        self.restoreState()


def pdf_filename(title: str) -> str:
    """Download name for a report: non-alphanumerics become ``_``, lowercased."""
    return f"{_NON_ALNUM.sub('_', title).lower()}.pdf"


def _inline(text: str) -> str:
    return _BOLD.sub(r"<b>\1</b>", escape(text)).replace("\n", "<br/>")


def content_flowables(content: str) -> List[Flowable]:
    """Turn report text into headings, paragraphs and bulleted lists."""
    styles = getSampleStyleSheet()
    body = ParagraphStyle("ReportBody", parent=styles["BodyText"], fontSize=10, leading=14, spaceAfter=6)
    headings = {
        1: ParagraphStyle("ReportH1", parent=styles["Heading1"], fontSize=16, spaceBefore=10, spaceAfter=6),
        2: ParagraphStyle("ReportH2", parent=styles["Heading2"], fontSize=13, spaceBefore=8, spaceAfter=4),
        3: ParagraphStyle("ReportH3", parent=styles["Heading3"], fontSize=11, spaceBefore=6, spaceAfter=4),
    }

    flowables: List[Flowable] = []
    paragraph: List[str] = []
    bullets: List[str] = []

    def flush() -> None:
        if paragraph:
            flowables.append(Paragraph(_inline("\n".join(paragraph)), body))
            paragraph.clear()
        if bullets:
            items = [ListItem(Paragraph(_inline(text), body), leftIndent=12) for text in bullets]
            flowables.append(ListFlowable(items, bulletType="bullet", start="\u2022", leftIndent=12))
            bullets.clear()

    for line in content.splitlines():
        match = _HEADING.match(line.strip())
        bullet = _BULLET.match(line.strip())
        if bullet:
            if paragraph:
                flush()
            bullets.append(bullet.group(1))
        elif match:
            flush()
            level = min(len(match.group(1)), 3)
            flowables.append(Paragraph(_inline(match.group(2)), headings[level]))
        elif not line.strip():
            flush()
        else:
            if bullets:
                flush()
            paragraph.append(line.rstrip())
    flush()
    return flowables


def render_report_pdf(content: str, title: str, generated_on: Optional[datetime] = None) -> bytes:
    """
    Render a report as a PDF document.

    Args:
        content: Report text (markdown headings and paragraphs)
        title: Document title, shown centered at the top and stored in the metadata
        generated_on: Generation timestamp; defaults to now

    Returns:
        The PDF bytes
    """
    generated_on = generated_on or datetime.now()
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("ReportTitle", parent=styles["Title"], fontSize=20, alignment=TA_CENTER, spaceAfter=6)
    meta_style = ParagraphStyle(
        "ReportMeta", parent=styles["BodyText"], fontSize=9, alignment=TA_CENTER, textColor=colors.grey
    )

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=letter,
        leftMargin=inch,
        rightMargin=inch,
        topMargin=inch,
        bottomMargin=inch,
        title=title,
        author=FOOTER_LABEL,
        subject="AI Generated Report",
        creator=FOOTER_LABEL,
    )

    story: List[Flowable] = [
        Paragraph(escape(title), title_style),
        Paragraph(f"Generated on {generated_on.strftime('%B %d, %Y')}", meta_style),
        Spacer(1, 0.3 * inch),
    ]
    story.extend(content_flowables(content))
    doc.build(story, canvasmaker=NumberedCanvas)

    pdf = buffer.getvalue()
    logger.info(f"Rendered report PDF {title!r} ({len(pdf)} bytes)")
    return pdf
