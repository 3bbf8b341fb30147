from __future__ import annotations

from pathlib import Path
from typing import Iterable

from docx import Document as DocxDocument
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Cm, Pt

from . import print_format
from .inline_parser import resolve_inline
from .math_render import DISPLAY_OPEN, MathRenderer, literal_source, render_or_none, unicode_math
from .model import (
    BlankLine,
    Block,
    BlockQuote,
    CodeBlock,
    Document,
    EquationBlock,
    Heading,
    InlineBold,
    InlineCode,
    InlineElement,
    InlineEquation,
    InlineText,
    ListItem,
    Paragraph,
    TableBlock,
)


def render_document(
    doc: Document,
    output_path: str | Path,
    title: str | None = None,
    render_math: MathRenderer = unicode_math,
) -> None:
    output_path = Path(output_path)
    docx = DocxDocument()
    print_format.apply_page_layout(docx)

    if title:
        _render_title(docx, title)
    for block in doc.blocks:
        _dispatch_block(docx, block, render_math)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    docx.save(output_path)


def _dispatch_block(docx: DocxDocument, block: Block, render_math: MathRenderer) -> None:
    if isinstance(block, Heading):
        _render_heading(docx, block, render_math)
    elif isinstance(block, Paragraph):
        paragraph = docx.add_paragraph()
        _add_inline_runs(paragraph, resolve_inline(block.text), render_math)
        print_format.apply_body_paragraph_format(paragraph)
    elif isinstance(block, ListItem):
        _render_list_item(docx, block, render_math)
    elif isinstance(block, BlockQuote):
        _render_quote(docx, block, render_math)
    elif isinstance(block, CodeBlock):
        _render_code_block(docx, block)
    elif isinstance(block, EquationBlock):
        _render_equation_block(docx, block, render_math)
    elif isinstance(block, TableBlock):
        _render_table_block(docx, block, render_math)
    elif isinstance(block, BlankLine):
        spacer = docx.add_paragraph("")
        print_format.apply_body_paragraph_format(spacer)


def _render_title(docx: DocxDocument, title: str) -> None:
    paragraph = docx.add_paragraph()
    run = paragraph.add_run(title)
    print_format.set_run_font(run, bold=True)
    run.font.size = Pt(28)
    paragraph.paragraph_format.space_after = Pt(18)


def _render_heading(docx: DocxDocument, heading: Heading, render_math: MathRenderer) -> None:
    paragraph = docx.add_paragraph()
    _add_inline_runs(paragraph, resolve_inline(heading.text), render_math)
    print_format.apply_heading_format(paragraph, heading.level)


def _render_list_item(docx: DocxDocument, item: ListItem, render_math: MathRenderer) -> None:
    paragraph = docx.add_paragraph()
    prefix = f"{item.marker}.\t" if item.ordered and item.marker else "•\t"
    run = paragraph.add_run(prefix)
    print_format.set_run_font(run, color=print_format.MUTED_COLOR)
    _add_inline_runs(paragraph, resolve_inline(item.text), render_math)
    print_format.apply_body_paragraph_format(paragraph)
    paragraph.paragraph_format.left_indent = Cm(print_format.LIST_INDENT_CM)
    paragraph.paragraph_format.first_line_indent = Cm(-print_format.LIST_INDENT_CM)
    paragraph.paragraph_format.tab_stops.add_tab_stop(Cm(print_format.LIST_INDENT_CM))


def _render_quote(docx: DocxDocument, block: BlockQuote, render_math: MathRenderer) -> None:
    paragraph = docx.add_paragraph()
    _add_inline_runs(paragraph, resolve_inline(block.text), render_math)
    for run in paragraph.runs:
        run.italic = True
    print_format.apply_body_paragraph_format(paragraph)
    paragraph.paragraph_format.left_indent = Cm(print_format.QUOTE_INDENT_CM)


def _render_code_block(docx: DocxDocument, block: CodeBlock) -> None:
    if not block.unterminated:
        label = docx.add_paragraph()
        run = label.add_run((block.language or "code").upper())
        print_format.set_run_font(run, code=True, color=print_format.MUTED_COLOR)
        print_format.apply_block_format(label)
        label.paragraph_format.space_after = Pt(0)
        label.paragraph_format.keep_with_next = True

    paragraph = docx.add_paragraph()
    run = paragraph.add_run(block.code)
    color = print_format.MUTED_COLOR if block.unterminated else None
    print_format.set_run_font(run, code=True, color=color)
    print_format.apply_block_format(paragraph, left_indent_cm=0.3)


def _render_equation_block(docx: DocxDocument, block: EquationBlock, render_math: MathRenderer) -> None:
    paragraph = docx.add_paragraph()
    if block.unterminated:
        run = paragraph.add_run(f"{DISPLAY_OPEN}\n{block.latex}")
        print_format.set_run_font(run, code=True, color=print_format.MUTED_COLOR)
        print_format.apply_block_format(paragraph, left_indent_cm=0.5)
        return
    paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    paragraph.paragraph_format.space_before = Pt(print_format.LINE_SPACING_PT / 2)
    paragraph.paragraph_format.space_after = Pt(print_format.LINE_SPACING_PT / 2)
    text = render_or_none(render_math, block.latex, True)
    if text is None:
        run = paragraph.add_run(literal_source(block.latex, True))
        print_format.set_run_font(run, code=True, color=print_format.ERROR_COLOR)
        return
    _append_math(paragraph, text)


def _render_table_block(docx: DocxDocument, block: TableBlock, render_math: MathRenderer) -> None:
    col_count = max([len(block.header)] + [len(row) for row in block.rows])
    table = docx.add_table(rows=1 + len(block.rows), cols=max(col_count, 1))
    table.style = "Table Grid"
    table.alignment = WD_TABLE_ALIGNMENT.LEFT
    for r_idx, cells in enumerate([block.header, *block.rows]):
        # ragged rows leave their trailing cells empty
        for c_idx, cell_text in enumerate(cells):
            paragraph = table.cell(r_idx, c_idx).paragraphs[0]
            _add_inline_runs(paragraph, resolve_inline(cell_text), render_math)
            if r_idx == 0:
                for run in paragraph.runs:
                    run.bold = True

    spacer_after = docx.add_paragraph("")
    print_format.apply_body_paragraph_format(spacer_after)


def _add_inline_runs(
    paragraph,
    elements: Iterable[InlineElement],
    render_math: MathRenderer,
    bold: bool = False,
) -> None:
    for element in elements:
        if isinstance(element, InlineText):
            run = paragraph.add_run(element.text)
            print_format.set_run_font(run, bold=bold)
        elif isinstance(element, InlineCode):
            run = paragraph.add_run(element.code)
            print_format.set_run_font(run, bold=bold, code=True)
        elif isinstance(element, InlineEquation):
            text = render_or_none(render_math, element.latex, element.display)
            if text is not None:
                run = paragraph.add_run(text)
                print_format.set_run_font(run, bold=bold, italic=True)
            else:
                run = paragraph.add_run(literal_source(element.latex, element.display))
                print_format.set_run_font(run, code=True, color=print_format.ERROR_COLOR)
        elif isinstance(element, InlineBold):
            _add_inline_runs(paragraph, element.children, render_math, bold=True)


def _append_math(paragraph, text: str) -> None:
    """Insert a simple Word math object centered in the paragraph."""
    omath_para = OxmlElement("m:oMathPara")
    omath_para_pr = OxmlElement("m:oMathParaPr")
    jc = OxmlElement("m:jc")
    jc.set(qn("m:val"), "center")
    omath_para_pr.append(jc)
    omath_para.append(omath_para_pr)
    omath = OxmlElement("m:oMath")

    run = OxmlElement("m:r")
    text_el = OxmlElement("m:t")
    text_el.text = text
    run.append(text_el)
    omath.append(run)
    omath_para.append(omath)
    paragraph._p.append(omath_para)
