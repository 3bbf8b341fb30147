from __future__ import annotations

import re
from typing import Callable, List, Union

from .model import InlineBold, InlineCode, InlineElement, InlineEquation, InlineText

# Pending segments are plain strings; anything else is already resolved.
_Segment = Union[str, InlineElement]

_CODE_SPAN = re.compile(r"`([^`]*)`")
_MATH_SPAN = re.compile(r"\\\((.*?)\\\)", re.DOTALL)
_BOLD_SPAN = re.compile(r"\*\*(.*?)\*\*", re.DOTALL)


def resolve_inline(text: str) -> List[InlineElement]:
    """Classify the spans of one line of block text.

    Code spans are split out first, then inline math, then bold. Each step only
    looks at text that an earlier step left unclassified, so backticks and math
    delimiters shield their content from the later rules.
    """
    segments: List[_Segment] = [text]
    segments = _split_pending(segments, _CODE_SPAN, lambda inner: InlineCode(inner))
    segments = _split_pending(segments, _MATH_SPAN, lambda inner: InlineEquation(inner, display=False))
    segments = _split_pending(segments, _BOLD_SPAN, _bold)
    return [InlineText(seg) if isinstance(seg, str) else seg for seg in segments]


def _bold(inner: str) -> InlineBold:
    # Bold content stays plain text: code or math inside ** ** is not resolved.
    return InlineBold(children=(InlineText(inner),))


def _split_pending(
    segments: List[_Segment],
    pattern: re.Pattern[str],
    build: Callable[[str], InlineElement],
) -> List[_Segment]:
    result: List[_Segment] = []
    for seg in segments:
        if not isinstance(seg, str):
            result.append(seg)
            continue
        pos = 0
        for match in pattern.finditer(seg):
            if match.start() > pos:
                result.append(seg[pos : match.start()])
            result.append(build(match.group(1)))
            pos = match.end()
        if pos < len(seg):
            result.append(seg[pos:])
    return result


def plain_text(elements: List[InlineElement]) -> str:
    """Flatten inline nodes back to readable text, math and code kept literal."""
    parts: List[str] = []
    for element in elements:
        if isinstance(element, InlineText):
            parts.append(element.text)
        elif isinstance(element, InlineCode):
            parts.append(element.code)
        elif isinstance(element, InlineEquation):
            parts.append(element.latex)
        elif isinstance(element, InlineBold):
            parts.append(plain_text(list(element.children)))
    return "".join(parts)
