from __future__ import annotations

import re
from enum import Enum
from typing import Any, List, Mapping, Sequence

from .model import (
    BlankLine,
    Block,
    BlockQuote,
    CodeBlock,
    Document,
    EquationBlock,
    Heading,
    ListItem,
    Paragraph,
    TableBlock,
)

FENCE = "```"
MATH_OPEN = "\\["
MATH_CLOSE = "\\]"

_HEADING_PREFIXES = (("# ", 1), ("## ", 2), ("### ", 3))
_ORDERED_ITEM = re.compile(r"^(?P<num>\d+)\.")
_ORDERED_PREFIX = re.compile(r"^\d+\.\s+")
_DELIMITER_ROW = re.compile(r"^\|?\s*:?-+:?\s*(\|\s*:?-+:?\s*)+\|?$")


class _Mode(Enum):
    DEFAULT = "default"
    CODE_FENCE = "code_fence"
    MATH_BLOCK = "math_block"
    TABLE = "table"


def parse_markdown(text: str, metadata: Mapping[str, Any] | None = None) -> Document:
    return Document(blocks=tuple(parse_blocks(text)), metadata=metadata)


def parse_blocks(source: str) -> List[Block]:
    """Split a note into blocks in a single forward pass over its lines."""
    lines = source.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    return _BlockParser(lines).run()


class _BlockParser:
    def __init__(self, lines: Sequence[str]) -> None:
        self.lines = lines
        self.blocks: List[Block] = []
        self.mode = _Mode.DEFAULT
        self.buffer: List[str] = []
        self.language: str | None = None

    def run(self) -> List[Block]:
        steps = {
            _Mode.DEFAULT: self._step_default,
            _Mode.CODE_FENCE: self._step_code_fence,
            _Mode.MATH_BLOCK: self._step_math_block,
            _Mode.TABLE: self._step_table,
        }
        for i, line in enumerate(self.lines):
            steps[self.mode](i, line)
        self._flush_at_end()
        return self.blocks

    def _enter(self, mode: _Mode) -> None:
        self.mode = mode
        self.buffer = []

    def _step_code_fence(self, i: int, line: str) -> None:
        if line.strip().startswith(FENCE):
            self.blocks.append(CodeBlock(language=self.language, raw_lines=tuple(self.buffer)))
            self.language = None
            self._enter(_Mode.DEFAULT)
        else:
            self.buffer.append(line)

    def _step_math_block(self, i: int, line: str) -> None:
        if line.strip() == MATH_CLOSE:
            self.blocks.append(EquationBlock(latex="\n".join(self.buffer)))
            self._enter(_Mode.DEFAULT)
        else:
            self.buffer.append(line)

    def _step_table(self, i: int, line: str) -> None:
        trimmed = line.strip()
        if trimmed.startswith("|") or self._continues_pipeless_table(trimmed):
            self.buffer.append(trimmed)
            return
        self._flush_table()
        self._enter(_Mode.DEFAULT)
        # the closing line belongs to whatever follows the table
        self._step_default(i, line)

    def _step_default(self, i: int, line: str) -> None:
        trimmed = line.strip()

        if trimmed.startswith(FENCE):
            self._enter(_Mode.CODE_FENCE)
            self.language = trimmed[len(FENCE) :].strip() or None
            return

        if trimmed == MATH_OPEN:
            self._enter(_Mode.MATH_BLOCK)
            return
        if trimmed.startswith(MATH_OPEN) and trimmed.endswith(MATH_CLOSE):
            self.blocks.append(EquationBlock(latex=trimmed[len(MATH_OPEN) : -len(MATH_CLOSE)]))
            return

        if self._starts_table(i, trimmed):
            self._enter(_Mode.TABLE)
            self.buffer.append(trimmed)
            return

        for prefix, level in _HEADING_PREFIXES:
            if line.startswith(prefix):
                self.blocks.append(Heading(level=level, text=line[len(prefix) :]))
                return

        if trimmed.startswith("- ") or trimmed.startswith("* "):
            self.blocks.append(ListItem(ordered=False, text=trimmed[2:]))
            return
        match = _ORDERED_ITEM.match(trimmed)
        if match:
            # "3.14 is pi" keeps its text whole; only "N. " is a prefix
            text = _ORDERED_PREFIX.sub("", trimmed, count=1)
            self.blocks.append(ListItem(ordered=True, text=text, marker=match.group("num")))
            return

        if trimmed.startswith("> "):
            self.blocks.append(BlockQuote(text=trimmed[2:]))
        elif not trimmed:
            self.blocks.append(BlankLine())
        else:
            self.blocks.append(Paragraph(text=line))

    def _starts_table(self, i: int, trimmed: str) -> bool:
        if "|" not in trimmed or i + 1 >= len(self.lines):
            return False
        next_line = self.lines[i + 1].strip()
        if trimmed.startswith("|"):
            return next_line.startswith("|") and "-" in next_line
        return bool(_DELIMITER_ROW.match(next_line))

    def _continues_pipeless_table(self, trimmed: str) -> bool:
        """Rows of a table without outer pipes must have the header's cell count."""
        header = self.buffer[0]
        if header.startswith("|") or "|" not in trimmed:
            return False
        return len(_split_row(trimmed)) == len(_split_row(header))

    def _flush_table(self) -> None:
        if len(self.buffer) < 2:
            self.blocks.extend(Paragraph(text=row) for row in self.buffer)
            return
        self.blocks.append(parse_table(self.buffer))

    def _flush_at_end(self) -> None:
        if self.mode is _Mode.CODE_FENCE:
            self.blocks.append(CodeBlock(language=self.language, raw_lines=tuple(self.buffer), unterminated=True))
        elif self.mode is _Mode.MATH_BLOCK:
            self.blocks.append(EquationBlock(latex="\n".join(self.buffer), unterminated=True))
        elif self.mode is _Mode.TABLE:
            self._flush_table()
        self._enter(_Mode.DEFAULT)


def parse_table(rows: Sequence[str]) -> TableBlock:
    """Build a table from buffered rows; the second row is the separator and is dropped."""
    parsed = [_split_row(row) for row in rows]
    body = tuple(tuple(cells) for cells in parsed[2:])
    return TableBlock(header=tuple(parsed[0]), rows=body)


def _split_row(row: str) -> List[str]:
    content = row.strip()
    if content.startswith("|"):
        content = content[1:]
    if content.endswith("|"):
        content = content[:-1]
    return [cell.strip() for cell in content.split("|")]
