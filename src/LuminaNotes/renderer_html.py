from __future__ import annotations

from typing import Iterable, List, Sequence

from markdown_it.common.utils import escapeHtml

from .config import NotebookConfig
from .inline_parser import resolve_inline
from .math_render import DISPLAY_OPEN, MathRenderer, literal_source, mathml_markup, render_or_none
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

_PAGE_CSS = """
body { margin: 0; background: #fafaf9; color: #1f2937; font-family: 'Inter', system-ui, sans-serif; }
.notebook { max-width: 720px; margin: 0 auto; padding: 4rem 3rem; }
.notebook-header { text-align: center; border-bottom: 1px solid #e5e7eb; padding-bottom: 2rem; margin-bottom: 3rem; }
.notebook-header h1 { font-size: 2.5rem; margin: 0 0 1rem; text-transform: capitalize; }
.byline { color: #6b7280; font-size: 0.875rem; }
h1 { font-size: 1.875rem; margin: 3rem 0 1.5rem; }
h2 { font-size: 1.25rem; margin: 2.5rem 0 1rem; padding-bottom: 0.5rem; border-bottom: 1px solid #f3f4f6; }
h3 { font-size: 1.125rem; margin: 1.5rem 0 0.75rem; }
p { line-height: 2rem; margin: 0 0 1rem; color: #4b5563; }
.list-item { display: flex; align-items: flex-start; margin-bottom: 0.5rem; line-height: 1.75; }
.list-marker { min-width: 24px; color: #9ca3af; }
blockquote { border-left: 2px solid #e5e7eb; padding: 0.5rem 1.5rem; margin: 1.5rem 0; color: #6b7280; font-style: italic; }
code { font-family: ui-monospace, monospace; font-size: 0.85em; background: #f3f4f6; padding: 0.1rem 0.35rem; border-radius: 4px; }
.code-block { margin: 2rem 0; border-radius: 8px; overflow: hidden; background: #18181b; break-inside: avoid; }
.code-language { padding: 0.5rem 1rem; background: #27272a; color: #a1a1aa; font-size: 10px; text-transform: uppercase; letter-spacing: 0.05em; }
.code-block pre { margin: 0; padding: 1rem; color: #d4d4d8; overflow-x: auto; }
.math.display { margin: 2rem 0; padding: 1.5rem 1rem; text-align: center; overflow-x: auto; break-inside: avoid; }
.math-error { color: #ef4444; font-family: ui-monospace, monospace; font-size: 0.875rem; }
.diagnostic { color: #9ca3af; font-size: 0.875rem; white-space: pre-wrap; }
.diagnostic.code { background: #1f2937; color: #fff; padding: 1rem; border-radius: 4px; }
table { min-width: 100%; border-collapse: collapse; margin: 2rem 0; break-inside: avoid; }
th { text-align: left; font-size: 0.75rem; text-transform: uppercase; color: #6b7280; background: #f9fafb; }
th, td { padding: 0.75rem 1.5rem; border-bottom: 1px solid #e5e7eb; }
.spacer { height: 1rem; }
.print-footer { display: none; }
@media print {
  body { background: #fff; color: #000; }
  .notebook { padding: 0; max-width: none; }
  .notebook-header { text-align: left; }
  .code-block { background: #fff; border: 1px solid #d1d5db; }
  .code-block pre { color: #000; white-space: pre-wrap; }
  .print-footer { display: block; margin-top: 2rem; padding-top: 1rem; border-top: 1px solid #d1d5db; text-align: center; font-size: 0.75rem; color: #6b7280; }
}
"""


def render_page(
    doc: Document,
    config: NotebookConfig | None = None,
    title: str | None = None,
    render_math: MathRenderer = mathml_markup,
) -> str:
    """Render a note as a standalone, printable HTML page with MathML math."""
    config = config or NotebookConfig()
    page_title = escapeHtml(title or config.title or "Notes")
    body = render_fragment(doc, render_math=render_math)
    return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{page_title}</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>{_PAGE_CSS}</style>
  </head>
  <body>
    <main class="notebook">
      <header class="notebook-header">
        <h1>{page_title}</h1>
        <p class="byline">{escapeHtml(config.byline)}</p>
      </header>
      <article class="notebook-body">
{body}
      </article>
      <footer class="print-footer">{escapeHtml(config.footer)}</footer>
    </main>
  </body>
</html>
"""


def render_fragment(doc: Document, render_math: MathRenderer = mathml_markup) -> str:
    return "\n".join(render_blocks(doc.blocks, render_math=render_math))


def render_blocks(blocks: Iterable[Block], render_math: MathRenderer = mathml_markup) -> List[str]:
    return [_render_block(block, render_math) for block in blocks]


def _render_block(block: Block, render_math: MathRenderer) -> str:
    if isinstance(block, Heading):
        return f"<h{block.level}>{render_inline(block.text, render_math)}</h{block.level}>"
    if isinstance(block, Paragraph):
        return f"<p>{render_inline(block.text, render_math)}</p>"
    if isinstance(block, ListItem):
        marker = f"{escapeHtml(block.marker)}." if block.ordered and block.marker else "&bull;"
        kind = "ordered" if block.ordered else "unordered"
        return (
            f'<div class="list-item {kind}"><span class="list-marker">{marker}</span>'
            f"<div>{render_inline(block.text, render_math)}</div></div>"
        )
    if isinstance(block, BlockQuote):
        return f"<blockquote>{render_inline(block.text, render_math)}</blockquote>"
    if isinstance(block, CodeBlock):
        return _render_code_block(block)
    if isinstance(block, EquationBlock):
        return _render_equation_block(block, render_math)
    if isinstance(block, TableBlock):
        return _render_table(block, render_math)
    if isinstance(block, BlankLine):
        return '<div class="spacer"></div>'
    raise TypeError(f"Unsupported block: {type(block).__name__}")


def _render_code_block(block: CodeBlock) -> str:
    code = escapeHtml(block.code)
    if block.unterminated:
        return f'<pre class="diagnostic code">{code}</pre>'
    label = escapeHtml(block.language or "code")
    return (
        f'<div class="code-block"><div class="code-language">{label}</div>'
        f"<pre><code>{code}</code></pre></div>"
    )


def _render_equation_block(block: EquationBlock, render_math: MathRenderer) -> str:
    if block.unterminated:
        source = escapeHtml(DISPLAY_OPEN + "\n" + block.latex)
        return f'<pre class="diagnostic math">{source}</pre>'
    return render_math_or_literal(block.latex, True, render_math)


def _render_table(block: TableBlock, render_math: MathRenderer) -> str:
    head = "".join(f"<th>{render_inline(cell, render_math)}</th>" for cell in block.header)
    rows = "".join(_render_row(row, render_math) for row in block.rows)
    return f"<table><thead><tr>{head}</tr></thead><tbody>{rows}</tbody></table>"


def _render_row(cells: Sequence[str], render_math: MathRenderer) -> str:
    return "<tr>" + "".join(f"<td>{render_inline(cell, render_math)}</td>" for cell in cells) + "</tr>"


def render_inline(text: str, render_math: MathRenderer = mathml_markup) -> str:
    return _render_elements(resolve_inline(text), render_math)


def _render_elements(elements: Iterable[InlineElement], render_math: MathRenderer) -> str:
    parts: List[str] = []
    for element in elements:
        if isinstance(element, InlineText):
            parts.append(escapeHtml(element.text))
        elif isinstance(element, InlineCode):
            parts.append(f"<code>{escapeHtml(element.code)}</code>")
        elif isinstance(element, InlineEquation):
            parts.append(render_math_or_literal(element.latex, element.display, render_math))
        elif isinstance(element, InlineBold):
            parts.append(f"<strong>{_render_elements(element.children, render_math)}</strong>")
    return "".join(parts)


def render_math_or_literal(latex: str, display_mode: bool, render_math: MathRenderer) -> str:
    """Typeset math, or show the author's source flagged as an error."""
    markup = render_or_none(render_math, latex, display_mode)
    if markup is not None:
        return markup
    tag = "pre" if display_mode else "span"
    return f'<{tag} class="math-error">{escapeHtml(literal_source(latex, display_mode))}</{tag}>'
