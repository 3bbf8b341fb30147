"""LaTeX boundary between the note tree and whatever typesets the math.

The HTML notebook typesets math with latex2mathml: each expression becomes a
MathML fragment that browsers lay out natively, the same way for screen and
print. Whatever the engine rejects is reported as ``MathRenderError`` and the
renderers show the literal source flagged as an error instead.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

import latex2mathml.converter

logger = logging.getLogger(__name__)

INLINE_OPEN, INLINE_CLOSE = "\\(", "\\)"
DISPLAY_OPEN, DISPLAY_CLOSE = "\\[", "\\]"

MathRenderer = Callable[[str, bool], str]

LATEX_TO_UNICODE = {
    r"\alpha": "α",
    r"\beta": "β",
    r"\gamma": "γ",
    r"\delta": "δ",
    r"\Delta": "Δ",
    r"\epsilon": "ε",
    r"\theta": "θ",
    r"\lambda": "λ",
    r"\mu": "μ",
    r"\pi": "π",
    r"\rho": "ρ",
    r"\sigma": "σ",
    r"\Sigma": "Σ",
    r"\phi": "φ",
    r"\omega": "ω",
    r"\Omega": "Ω",
    r"\times": "×",
    r"\cdot": "·",
    r"\div": "÷",
    r"\pm": "±",
    r"\leq": "≤",
    r"\geq": "≥",
    r"\neq": "≠",
    r"\approx": "≈",
    r"\infty": "∞",
    r"\rightarrow": "→",
    r"\to": "→",
    r"\sqrt": "√",
}

_COLOR_WRAPPER = re.compile(r"\\color\{[^}]*\}")


class MathRenderError(ValueError):
    """Raised when a LaTeX expression cannot be rendered."""


def latex_to_mathml(latex: str, display_mode: bool) -> str:
    try:
        return latex2mathml.converter.convert(latex, display="block" if display_mode else "inline")
    except Exception as exc:
        raise MathRenderError(f"cannot typeset {latex!r}: {exc}") from exc


def mathml_markup(latex: str, display_mode: bool) -> str:
    """Default HTML math engine."""
    mathml = latex_to_mathml(latex, display_mode)
    if display_mode:
        return f'<div class="math display">{mathml}</div>'
    return f'<span class="math inline">{mathml}</span>'


def unicode_math(latex: str, display_mode: bool) -> str:
    """Plain-text math engine for targets without a typesetter (DOCX runs)."""
    latex_to_mathml(latex, display_mode)
    return latex_to_unicode(latex)


def render_or_none(render_math: MathRenderer, latex: str, display_mode: bool) -> str | None:
    """Run a math engine; any failure stays local to this one formula."""
    try:
        return render_math(latex, display_mode)
    except Exception as exc:
        logger.warning("Math rendering failed, showing source instead: %s", exc)
        return None


def literal_source(latex: str, display_mode: bool) -> str:
    """The math as the author wrote it, delimiters included."""
    if display_mode:
        return f"{DISPLAY_OPEN}{latex}{DISPLAY_CLOSE}"
    return f"{INLINE_OPEN}{latex}{INLINE_CLOSE}"


def latex_to_unicode(latex: str) -> str:
    """Convert a small subset of LaTeX commands to Unicode glyphs for plain-text output."""
    text = _COLOR_WRAPPER.sub("", latex.strip())
    for command, glyph in LATEX_TO_UNICODE.items():
        text = re.sub(re.escape(command) + r"(?![a-zA-Z])", glyph, text)
    return text.replace("{", "").replace("}", "")
