from pathlib import Path

from docx import Document as DocxReader

from LuminaNotes import markdown_parser
from LuminaNotes.math_render import MathRenderError
from LuminaNotes.model import CodeBlock, Document, EquationBlock, Heading, Paragraph, TableBlock
from LuminaNotes.renderer_docx import render_document


def _always_fails(latex, display_mode):
    raise MathRenderError("engine unavailable")


def _paragraph_texts(path: Path) -> list[str]:
    return [p.text for p in DocxReader(path).paragraphs]


def test_render_creates_docx(tmp_path: Path):
    doc = Document(
        blocks=[
            Heading(level=1, text="Introduction"),
            Paragraph(text="Example paragraph for the test."),
            EquationBlock(latex="E = mc^2"),
        ]
    )
    output_file = tmp_path / "notes.docx"
    render_document(doc, output_file, title="Energy")
    assert output_file.exists()
    assert output_file.stat().st_size > 0
    texts = _paragraph_texts(output_file)
    assert texts[:3] == ["Energy", "Introduction", "Example paragraph for the test."]


def test_equation_renders_symbols(tmp_path: Path):
    doc = markdown_parser.parse_markdown("\\[ S = \\pi r^2 \\]")
    out = tmp_path / "eq.docx"
    render_document(doc, out)
    xml = "\n".join(p._p.xml for p in DocxReader(out).paragraphs)
    assert "<m:oMath" in xml
    assert "S = π r^2" in xml


def test_inline_runs_and_list_markers(tmp_path: Path):
    doc = markdown_parser.parse_markdown("7. **Bold** and `code`\n- bullet")
    out = tmp_path / "list.docx"
    render_document(doc, out)
    paragraphs = DocxReader(out).paragraphs
    assert paragraphs[0].text == "7.\tBold and code"
    bold_runs = [run.text for run in paragraphs[0].runs if run.bold]
    assert bold_runs == ["Bold"]
    code_runs = [run.text for run in paragraphs[0].runs if run.font.name == "Consolas"]
    assert code_runs == ["code"]
    assert paragraphs[1].text == "•\tbullet"


def test_math_failure_shows_literal_source(tmp_path: Path):
    doc = markdown_parser.parse_markdown("Area is \\(x^2\\)\n\\[y\\]")
    out = tmp_path / "fallback.docx"
    render_document(doc, out, render_math=_always_fails)
    texts = _paragraph_texts(out)
    assert texts[0] == "Area is \\(x^2\\)"
    assert texts[1] == "\\[y\\]"


def test_unexpected_engine_error_falls_back_to_source(tmp_path: Path):
    def boom(latex, display_mode):
        raise RuntimeError("engine crashed")

    doc = markdown_parser.parse_markdown("Area is \\(x^2\\)\n\\[y\\]\nafter")
    out = tmp_path / "crash.docx"
    render_document(doc, out, render_math=boom)
    texts = _paragraph_texts(out)
    assert texts[:3] == ["Area is \\(x^2\\)", "\\[y\\]", "after"]


def test_broken_latex_falls_back_with_default_engine(tmp_path: Path):
    doc = markdown_parser.parse_markdown("Half is \\(\\frac{1}\\)")
    out = tmp_path / "broken.docx"
    render_document(doc, out)
    assert _paragraph_texts(out)[0] == "Half is \\(\\frac{1}\\)"


def test_code_block_is_literal(tmp_path: Path):
    doc = markdown_parser.parse_markdown("```python\n**not bold**\n```")
    out = tmp_path / "code.docx"
    render_document(doc, out)
    paragraphs = DocxReader(out).paragraphs
    assert paragraphs[0].text == "PYTHON"
    assert paragraphs[1].text == "**not bold**"
    assert not any(run.bold for run in paragraphs[1].runs)


def test_unterminated_blocks_are_kept(tmp_path: Path):
    doc = Document(
        blocks=[
            CodeBlock(language="js", raw_lines=("code here",), unterminated=True),
            EquationBlock(latex="x^2", unterminated=True),
        ]
    )
    out = tmp_path / "pending.docx"
    render_document(doc, out)
    texts = _paragraph_texts(out)
    assert texts[0] == "code here"
    assert texts[1] == "\\[\nx^2"


def test_ragged_table_renders(tmp_path: Path):
    doc = Document(blocks=[TableBlock(header=("a", "b", "c"), rows=(("1",), ("1", "2", "3", "4")))])
    out = tmp_path / "table.docx"
    render_document(doc, out)
    table = DocxReader(out).tables[0]
    assert len(table.rows) == 3
    assert len(table.columns) == 4
    assert [cell.text for cell in table.rows[1].cells] == ["1", "", "", ""]
    assert table.cell(2, 3).text == "4"
