from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import google.generativeai as genai

from .config import GenerationConfig

logger = logging.getLogger(__name__)

LANGUAGES = ("English", "Bengali")
EMPTY_REPLY = "Failed to generate notes. Please try again."
API_KEY_VARIABLES = ("GEMINI_API_KEY", "API_KEY")


class NoteGenerationError(RuntimeError):
    """The AI provider could not produce notes."""


@dataclass(frozen=True)
class NoteRequest:
    topic: str
    grade: str
    language: str = "English"

    def __post_init__(self) -> None:
        if not self.topic.strip():
            raise ValueError("Topic must not be empty.")
        if self.language not in LANGUAGES:
            raise ValueError(f"Unsupported language {self.language!r}; expected one of {', '.join(LANGUAGES)}.")


def build_prompt(request: NoteRequest) -> str:
    return f"""
You are an expert teacher and note-maker. Whenever a user gives you:
- a Topic (e.g. "{request.topic}")
- a Standard/Class (e.g. {request.grade})
- a Language (e.g. {request.language})

you must generate comprehensive, high-quality academic notes, as if a highly experienced teacher prepared them. Use the following rules:

1. Use reliable, up-to-date information: accurate definitions, theories, examples and facts.

2. Structured layout and formatting (in Markdown):
- Use hierarchical headings: #, ## and ### only.
- Provide a table of contents at the top (optional but preferred).
- Present definitions, concept explanations, derivations, examples, common mistakes / misconceptions, summary, questions for practice.
- Use LaTeX for all mathematical expressions or chemical formulas.
  - Inline math: \\( a^2 + b^2 = c^2 \\)
  - Block equations on their own lines: \\[ PV = nRT \\]
- Use fenced code blocks for all code examples (with appropriate language tags).
- Use pipe tables with a dashed separator row for comparisons, advantages/disadvantages and differences.
- Use callouts via bold labels like **Definition:**, **Important:**, **Tip for Exams:**, **Key Idea:** to highlight key ideas or warnings.

3. Tone and style:
- Write as a patient and clear teacher explaining to students.
- Use simple, understandable language while keeping academic seriousness.
- Provide both conceptual understanding and exam-ready clarity.

4. Depth and completeness:
- Cover all subtopics relevant to the given topic.
- Include real-world examples or applications when relevant.
- Include sample problems (with solutions) if applicable, and practice questions for the student.

5. No references, sources or links:
- DO NOT include any "References", "Sources", "Citations", "Further Reading" or similar sections.
- DO NOT include URLs or external links.
- The output must look like a completely self-contained handwritten notebook.

6. Output constraints:
- Output valid Markdown only (no HTML).
- If the requested language is not English, write the entire notes in that language.
- Do not mention this prompt or the instructions themselves.

7. Optional enhancements (if applicable):
- A summary bullet list at the end.
- A "Common Mistakes / Pitfalls" section.
- An "Exam Tips / Quick Revision" section.

BEGIN NOTES for the given user input (Topic: {request.topic}, Class: {request.grade}, Language: {request.language}).
"""


def resolve_api_key(api_key: str | None = None) -> str:
    if api_key:
        return api_key
    for name in API_KEY_VARIABLES:
        value = os.environ.get(name)
        if value:
            return value
    raise NoteGenerationError(f"API key is missing; set {' or '.join(API_KEY_VARIABLES)}.")


def generate_notes(request: NoteRequest, config: GenerationConfig | None = None, api_key: str | None = None) -> str:
    """Ask Gemini for a Markdown note on the requested topic."""
    config = config or GenerationConfig()
    genai.configure(api_key=resolve_api_key(api_key))
    model = genai.GenerativeModel(
        model_name=config.model,
        generation_config={
            "temperature": config.temperature,
            "top_k": config.top_k,
            "max_output_tokens": config.max_output_tokens,
        },
    )

    logger.info("Requesting notes on %r (grade %s, %s) from %s", request.topic, request.grade, request.language, config.model)
    try:
        response = model.generate_content(build_prompt(request))
    except Exception as exc:
        logger.error("Gemini API error: %s", exc)
        raise NoteGenerationError(str(exc)) from exc

    try:
        text = response.text
    except ValueError:
        # blocked or empty candidates
        logger.warning("Gemini returned no text for %r", request.topic)
        text = ""
    return text or EMPTY_REPLY
