from __future__ import annotations

from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Cm, Pt, RGBColor

A4_WIDTH_MM = 210
A4_HEIGHT_MM = 297

FONT_NAME = "Calibri"
CODE_FONT_NAME = "Consolas"
FONT_SIZE_PT = 11
CODE_FONT_SIZE_PT = 9.5
LINE_SPACING_PT = 16
HEADING_SIZES_PT = {1: 20, 2: 15, 3: 13}
LIST_INDENT_CM = 0.6
QUOTE_INDENT_CM = 1.0

MARGIN_CM = 2.0

TEXT_COLOR = RGBColor(0x1F, 0x29, 0x37)
MUTED_COLOR = RGBColor(0x9C, 0xA3, 0xAF)
ERROR_COLOR = RGBColor(0xEF, 0x44, 0x44)


def apply_page_layout(doc) -> None:
    """A4 page with equal margins, as the notebook prints."""
    section = doc.sections[0]
    section.page_height = Cm(A4_HEIGHT_MM / 10)
    section.page_width = Cm(A4_WIDTH_MM / 10)
    section.left_margin = Cm(MARGIN_CM)
    section.right_margin = Cm(MARGIN_CM)
    section.top_margin = Cm(MARGIN_CM)
    section.bottom_margin = Cm(MARGIN_CM)


def set_run_font(run, bold: bool = False, italic: bool = False, code: bool = False, color: RGBColor | None = None) -> None:
    run.font.name = CODE_FONT_NAME if code else FONT_NAME
    run.font.size = Pt(CODE_FONT_SIZE_PT if code else FONT_SIZE_PT)
    run.font.color.rgb = color or TEXT_COLOR
    run.bold = bold
    run.italic = italic


def apply_body_paragraph_format(paragraph) -> None:
    paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
    paragraph.paragraph_format.space_after = Pt(4)
    paragraph.paragraph_format.space_before = Pt(0)
    paragraph.paragraph_format.line_spacing = Pt(LINE_SPACING_PT)
    paragraph.paragraph_format.first_line_indent = Cm(0)


def apply_heading_format(paragraph, level: int) -> None:
    paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
    paragraph.paragraph_format.space_before = Pt(HEADING_SIZES_PT.get(level, FONT_SIZE_PT))
    paragraph.paragraph_format.space_after = Pt(6)
    paragraph.paragraph_format.keep_with_next = True
    for run in paragraph.runs:
        run.font.size = Pt(HEADING_SIZES_PT.get(level, FONT_SIZE_PT))
        run.bold = True


def apply_block_format(paragraph, left_indent_cm: float = 0.0) -> None:
    """Compact single-spaced block, used for code and diagnostics."""
    paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
    paragraph.paragraph_format.left_indent = Cm(left_indent_cm)
    paragraph.paragraph_format.first_line_indent = Cm(0)
    paragraph.paragraph_format.space_before = Pt(0)
    paragraph.paragraph_format.space_after = Pt(LINE_SPACING_PT / 2)
    paragraph.paragraph_format.line_spacing = 1.0
