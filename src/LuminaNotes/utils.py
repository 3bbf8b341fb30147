from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from .inline_parser import plain_text, resolve_inline
from .model import Document, Heading


def configure_logging(verbose: bool = False) -> None:
    """Configure a simple console logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(message)s",
    )


def resolve_output_path(input_path: Path, output: Optional[str], suffix: str) -> Path:
    if output:
        out_path = Path(output)
        if out_path.is_dir():
            out_path = out_path / f"{input_path.stem}{suffix}"
        return out_path
    return input_path.with_suffix(suffix)


def read_markdown(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def slugify(text: str) -> str:
    slug = re.sub(r"[^\w]+", "-", text.strip().lower()).strip("-")
    return slug or "notes"


def document_title(doc: Document) -> str | None:
    """Readable text of the first top-level heading, if the note has one."""
    for block in doc.blocks:
        if isinstance(block, Heading) and block.level == 1:
            return plain_text(resolve_inline(block.text)).strip() or None
    return None
