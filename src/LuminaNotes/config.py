from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml


class ConfigError(ValueError):
    """Raised when the configuration file has an unexpected shape."""


@dataclass(frozen=True)
class NotebookConfig:
    title: str | None = None
    byline: str = "Generated by Lumina Intelligence"
    footer: str = "Created with Lumina Notes"


@dataclass(frozen=True)
class GenerationConfig:
    model: str = "gemini-2.5-flash"
    temperature: float = 0.5
    top_k: int = 40
    max_output_tokens: int = 8192


@dataclass(frozen=True)
class AppConfig:
    notebook: NotebookConfig = field(default_factory=NotebookConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load settings from a YAML file; without a path the defaults are used."""
    if path is None:
        return AppConfig()
    return parse_config(Path(path).read_text(encoding="utf-8"))


def parse_config(text: str) -> AppConfig:
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ConfigError("Config root must be a mapping with 'notebook' and/or 'generation' sections.")
    unknown = set(data) - {"notebook", "generation"}
    if unknown:
        raise ConfigError(f"Unknown config sections: {', '.join(sorted(unknown))}")
    return AppConfig(
        notebook=_section(NotebookConfig(), data.get("notebook"), "notebook"),
        generation=_section(GenerationConfig(), data.get("generation"), "generation"),
    )


def _section(defaults, value: Any, name: str):
    if value is None:
        return defaults
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping.")
    allowed = {f.name for f in fields(defaults)}
    unknown = set(value) - allowed
    if unknown:
        raise ConfigError(f"Unknown keys in '{name}': {', '.join(sorted(unknown))}")
    return replace(defaults, **value)
