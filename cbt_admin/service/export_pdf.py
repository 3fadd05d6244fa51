# -*- coding: utf-8 -*-
"""
cbt_admin/service/export_pdf.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Printable question sheet with answer key, rendered with reportlab.

Layout works top-down in millimetres on A4 portrait. A new page starts when
the cursor passes a fixed threshold before a category header, a question or
an option line; the thresholds are rough estimates, not measurements. The
"Halaman X dari N" footer is drawn once the page count is known.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from io import BytesIO
from typing import List, Optional, Set

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from cbt_admin.config.logger import configure_logger
from cbt_admin.domain.models import ExportData, ExportQuestionDetail
from cbt_admin.utils.html_text import html_to_text

logger = configure_logger(__name__)

PAGE_WIDTH_MM = A4[0] / mm
PAGE_HEIGHT_MM = A4[1] / mm
MARGIN_MM = 15
TOP_MM = 20
LINE_MM = 5

CATEGORY_BREAK_MM = 30
QUESTION_BREAK_MM = 40
OPTION_BREAK_MM = 15

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
ANSWER_COLOR = colors.Color(0, 150 / 255, 0)
MUTED_COLOR = colors.Color(100 / 255, 100 / 255, 100 / 255)

TITLE = "DOKUMEN SOAL & KUNCI JAWABAN"
DEFAULT_SCHOOL_NAME = "Sekolah Umum"


def pdf_filename(title: str | None) -> str:
    """``soal_<title>.pdf`` with every non-alphanumeric character as ``_``."""
    safe = re.sub(r"[^a-z0-9]", "_", title or "", flags=re.IGNORECASE).lower()
    return f"soal_{safe}.pdf"


def answer_letters(answer: str | None) -> Set[str]:
    """Lower-cased letters of a single or comma-joined answer."""
    if not answer:
        return set()
    return {part.strip().lower() for part in answer.split(",") if part.strip()}


@dataclass
class DrawnText:
    page: int
    text: str
    bold: bool = False
    highlighted: bool = False


@dataclass
class RenderedPdf:
    content: bytes
    page_count: int
    filename: str
    texts: List[DrawnText] = field(default_factory=list)


class _NumberedCanvas(canvas.Canvas):
    """Canvas that defers pages so the footer can show the total."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for number, state in enumerate(self._saved_page_states, start=1):
            self.__dict__.update(state)
            self.setFont(FONT, 8)
            self.setFillColor(colors.black)
            self.drawRightString(
                (PAGE_WIDTH_MM - MARGIN_MM) * mm,
                10 * mm,
                f"Halaman {number} dari {total}",
            )
            super().showPage()
        super().save()


class _SheetWriter:
    """Cursor over a canvas, y measured from the top of the page in mm."""

    def __init__(self, pdf: _NumberedCanvas):
        self.pdf = pdf
        self.y = TOP_MM
        self.page = 1
        self.texts: List[DrawnText] = []

    def ensure_space(self, threshold_mm: float) -> None:
        if self.y > PAGE_HEIGHT_MM - threshold_mm:
            self.pdf.showPage()
            self.page += 1
            self.y = TOP_MM

    def _set_style(self, size: float, bold: bool, color) -> None:
        self.pdf.setFont(FONT_BOLD if bold else FONT, size)
        self.pdf.setFillColor(color)

    def centered(self, text: str, size: float, bold: bool = False, color=colors.black) -> None:
        self._set_style(size, bold, color)
        self.pdf.drawCentredString(
            PAGE_WIDTH_MM / 2 * mm, (PAGE_HEIGHT_MM - self.y) * mm, text
        )
        self.texts.append(DrawnText(self.page, text, bold))

    def lines(
        self,
        text: str,
        x_mm: float,
        width_mm: float,
        size: float = 10,
        bold: bool = False,
        color=colors.black,
        highlighted: bool = False,
    ) -> int:
        """Draw wrapped text at the cursor; returns the number of lines."""
        self._set_style(size, bold, color)
        wrapped = simpleSplit(text, FONT_BOLD if bold else FONT, size, width_mm * mm) or [""]
        for index, line in enumerate(wrapped):
            self.pdf.drawString(
                x_mm * mm, (PAGE_HEIGHT_MM - self.y - index * LINE_MM) * mm, line
            )
        self.texts.append(DrawnText(self.page, text, bold, highlighted))
        return len(wrapped)

    def rule(self) -> None:
        self.pdf.setLineWidth(0.5 * mm)
        self.pdf.line(
            MARGIN_MM * mm,
            (PAGE_HEIGHT_MM - self.y) * mm,
            (PAGE_WIDTH_MM - MARGIN_MM) * mm,
            (PAGE_HEIGHT_MM - self.y) * mm,
        )


class TestPdfExporter:
    """Renders an exported test into a question sheet with answer key."""

    @staticmethod
    def render(
        data: ExportData,
        school_name: str | None = None,
        printed_on: Optional[date] = None,
    ) -> RenderedPdf:
        """
        Build the PDF.

        Args:
            data: Nested test-with-questions payload
            school_name: Institution shown in the header
            printed_on: Print date, today by default

        Returns:
            RenderedPdf: PDF bytes, page count, file name and drawn texts
        """
        test = data.test
        printed_on = printed_on or date.today()
        school_name = school_name or DEFAULT_SCHOOL_NAME
        max_width = PAGE_WIDTH_MM - MARGIN_MM * 2

        buffer = BytesIO()
        pdf = _NumberedCanvas(buffer, pagesize=A4)
        pdf.setTitle(test.title or "Ujian")
        writer = _SheetWriter(pdf)

        # Header
        writer.centered(TITLE, 14, bold=True)
        writer.y += 7
        writer.centered(test.title or "Ujian", 12, bold=True)
        if test.sub_title:
            writer.y += 6
            writer.centered(test.sub_title, 10)
        writer.y += 6
        writer.centered(
            f"Institusi: {school_name} | "
            f"Tgl Cetak: {printed_on.day}/{printed_on.month}/{printed_on.year}",
            9,
            color=MUTED_COLOR,
        )
        writer.y += 4
        writer.rule()
        writer.y += 10

        number = 1
        for category in data.question_categories:
            writer.ensure_space(CATEGORY_BREAK_MM)
            category_name = category.question_category.name if category.question_category else None
            if category_name:
                writer.lines(f"Kategori: {category_name}", MARGIN_MM, max_width, 11, bold=True)
                writer.y += 8

            for wrapper in category.questions:
                TestPdfExporter._render_question(writer, wrapper.question, number, max_width)
                number += 1

            writer.y += 5

        pdf.showPage()
        pdf.save()

        logger.info(
            f"📄 PDF '{test.title}' dibuat: {number - 1} soal, {writer.page} halaman"
        )
        return RenderedPdf(
            content=buffer.getvalue(),
            page_count=writer.page,
            filename=pdf_filename(test.title),
            texts=writer.texts,
        )

    @staticmethod
    def _render_question(
        writer: _SheetWriter,
        question: ExportQuestionDetail,
        number: int,
        max_width: float,
    ) -> None:
        writer.ensure_space(QUESTION_BREAK_MM)

        writer.lines(f"{number}.", MARGIN_MM, 8, bold=True)
        count = writer.lines(html_to_text(question.question), MARGIN_MM + 8, max_width - 10)
        writer.y += count * LINE_MM + 2

        correct = answer_letters(question.answer)
        for option in question.options:
            writer.ensure_space(OPTION_BREAK_MM)
            letter = (option.option or "").strip()
            is_correct = bool(letter) and letter.lower() in correct
            prefix = f"{letter.upper()}. " if letter else "- "
            count = writer.lines(
                f"{prefix}{html_to_text(option.text)}",
                MARGIN_MM + 12,
                max_width - 15,
                bold=is_correct,
                color=ANSWER_COLOR if is_correct else colors.black,
                highlighted=is_correct,
            )
            writer.y += count * LINE_MM + 1

        writer.y += 6
