from __future__ import annotations

import argparse
import logging
from pathlib import Path

from . import markdown_parser, renderer_docx, renderer_html
from .config import AppConfig, load_config
from .generator import LANGUAGES, NoteGenerationError, NoteRequest, generate_notes
from .model import Document
from .utils import configure_logging, document_title, read_markdown, resolve_output_path, slugify, write_text

FORMAT_SUFFIXES = {"html": ".html", "docx": ".docx"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="luminanotes",
        description="Generate study notes and render Markdown with LaTeX math as a printable notebook.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Render an existing Markdown note")
    render.add_argument("input", type=str, help="Path to Markdown file")
    _add_output_arguments(render)

    generate = subparsers.add_parser("generate", help="Generate a note with Gemini and render it")
    generate.add_argument("--topic", required=True, help="Topic of the notes")
    generate.add_argument("--grade", required=True, help="Standard/class the notes are written for")
    generate.add_argument("--language", choices=LANGUAGES, default="English")
    generate.add_argument("--save-markdown", type=str, help="Also write the generated Markdown here")
    _add_output_arguments(generate)
    return parser


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-o", "--output", type=str, help="Output file or directory")
    parser.add_argument("--format", choices=sorted(FORMAT_SUFFIXES), help="Output format (default: from -o suffix, else html)")
    parser.add_argument("--title", type=str, help="Notebook title")
    parser.add_argument("--config", type=str, help="Path to YAML config file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)
    config = load_config(args.config)
    if args.command == "render":
        return _render_command(args, config)
    return _generate_command(args, config)


def _render_command(args: argparse.Namespace, config: AppConfig) -> int:
    input_path = Path(args.input).expanduser()
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")
    fmt = _output_format(args)
    output_path = resolve_output_path(input_path, args.output, FORMAT_SUFFIXES[fmt])

    logging.info("Reading %s", input_path)
    markdown_text = read_markdown(input_path)
    logging.debug("Markdown length: %d chars", len(markdown_text))

    document = markdown_parser.parse_markdown(markdown_text)
    title = args.title or config.notebook.title or document_title(document) or input_path.stem
    _write_output(document, output_path, fmt, title, config)
    return 0


def _generate_command(args: argparse.Namespace, config: AppConfig) -> int:
    try:
        request = NoteRequest(topic=args.topic, grade=args.grade, language=args.language)
        markdown_text = generate_notes(request, config.generation)
    except (ValueError, NoteGenerationError) as exc:
        logging.error("Could not generate notes: %s", exc)
        return 1
    logging.debug("Generated %d chars of Markdown", len(markdown_text))

    if args.save_markdown:
        write_text(Path(args.save_markdown), markdown_text)
        logging.info("Saved Markdown to %s", args.save_markdown)

    fmt = _output_format(args)
    output_path = resolve_output_path(Path(slugify(request.topic)), args.output, FORMAT_SUFFIXES[fmt])
    metadata = {"topic": request.topic, "grade": request.grade, "language": request.language}
    document = markdown_parser.parse_markdown(markdown_text, metadata=metadata)
    title = args.title or config.notebook.title or request.topic
    _write_output(document, output_path, fmt, title, config)
    return 0


def _output_format(args: argparse.Namespace) -> str:
    if args.format:
        return args.format
    if args.output and Path(args.output).suffix.lower() == ".docx":
        return "docx"
    return "html"


def _write_output(document: Document, output_path: Path, fmt: str, title: str, config: AppConfig) -> None:
    logging.info("Parsed %d blocks", len(document.blocks))
    logging.info("Rendering %s to %s", fmt.upper(), output_path)
    if fmt == "docx":
        renderer_docx.render_document(document, output_path, title=title)
    else:
        write_text(output_path, renderer_html.render_page(document, config=config.notebook, title=title))
    logging.info("Done. Saved to %s", output_path)


if __name__ == "__main__":
    raise SystemExit(main())
