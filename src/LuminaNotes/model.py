from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence


@dataclass(frozen=True)
class Block:
    """Base class for block-level nodes."""


@dataclass(frozen=True)
class Document:
    blocks: Sequence[Block]
    metadata: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class Heading(Block):
    level: int
    text: str


@dataclass(frozen=True)
class Paragraph(Block):
    text: str


@dataclass(frozen=True)
class ListItem(Block):
    """One list line. Ordered items keep the literal number they were written with."""

    ordered: bool
    text: str
    marker: Optional[str] = None


@dataclass(frozen=True)
class BlockQuote(Block):
    text: str


@dataclass(frozen=True)
class CodeBlock(Block):
    language: str | None
    raw_lines: Sequence[str] = ()
    unterminated: bool = False

    @property
    def code(self) -> str:
        return "\n".join(self.raw_lines)


@dataclass(frozen=True)
class EquationBlock(Block):
    latex: str
    unterminated: bool = False


@dataclass(frozen=True)
class TableBlock(Block):
    header: Sequence[str]
    rows: Sequence[Sequence[str]] = ()


@dataclass(frozen=True)
class BlankLine(Block):
    """Empty source line, kept for vertical rhythm."""


@dataclass(frozen=True)
class InlineElement:
    """Base class for inline nodes."""


@dataclass(frozen=True)
class InlineText(InlineElement):
    text: str


@dataclass(frozen=True)
class InlineCode(InlineElement):
    code: str


@dataclass(frozen=True)
class InlineEquation(InlineElement):
    latex: str
    display: bool = False


@dataclass(frozen=True)
class InlineBold(InlineElement):
    children: Sequence[InlineElement] = field(default_factory=tuple)
