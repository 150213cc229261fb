"""Unit tests for the report PDF renderer."""

import io
from datetime import datetime

import pdfplumber

from housing_dashboard.server.services.pdf_export import content_flowables, pdf_filename, render_report_pdf


def read_pages(pdf: bytes):
    with pdfplumber.open(io.BytesIO(pdf)) as document:
        return [page.extract_text() or "" for page in document.pages], document.metadata


def test_filename():
    assert pdf_filename("AI Generated Report") == "ai_generated_report.pdf"
    assert pdf_filename("Q1: HAP/VASH") == "q1__hap_vash.pdf"


def test_flowables_split_headings_and_paragraphs():
    flowables = content_flowables("# Title\nline one\nline two\n\n## Section\nbody")

    assert len(flowables) == 4
    assert flowables[0].style.name == "ReportH1"
    assert flowables[2].style.name == "ReportH2"


def test_bullet_lines_become_a_list():
    flowables = content_flowables("## Concerns\nIntro text\n- **HUD-VASH** lagging\n* Mainstream stalled\nClosing note")

    kinds = [type(flowable).__name__ for flowable in flowables]
    assert kinds == ["Paragraph", "Paragraph", "ListFlowable", "Paragraph"]
    assert len(flowables[2]._flowables) == 2


def test_bullets_render_in_pdf():
    pdf = render_report_pdf("- First point\n- Second point", "Bullets")

    pages, _ = read_pages(pdf)
    assert "First point" in pages[0]
    assert "Second point" in pages[0]
    assert "- First point" not in pages[0]


def test_render_title_date_and_footer():
    pdf = render_report_pdf("## Overview\nAll good.", "Utilization Review", generated_on=datetime(2025, 3, 5))

    assert pdf.startswith(b"%PDF")
    pages, metadata = read_pages(pdf)
    assert "Utilization Review" in pages[0]
    assert "Generated on March 05, 2025" in pages[0]
    assert "Page 1 of 1 | Housing Authority Dashboard" in pages[0]
    assert metadata["Title"] == "Utilization Review"


def test_footer_counts_every_page():
    long_report = "\n\n".join(f"Paragraph {n} " + "text " * 80 for n in range(60))

    pages, _ = read_pages(render_report_pdf(long_report, "Long"))

    assert len(pages) > 1
    assert f"Page {len(pages)} of {len(pages)}" in pages[-1]
    assert f"Page 1 of {len(pages)}" in pages[0]


def test_markup_characters_are_escaped():
    pages, _ = read_pages(render_report_pdf("Rent < payment standard & rising", "Edge"))

    assert "Rent < payment standard & rising" in pages[0]
