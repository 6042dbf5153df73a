"""Jinja environment for the text artifacts siteprep writes."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATES_DIR = Path(__file__).parent / "templates"


def template_env() -> Environment:
    """Escape XML templates only; Markdown and robots.txt are plain text."""

    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["xml"], default_for_string=False, default=False),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def render(template_name: str, **context: Any) -> str:
    return template_env().get_template(template_name).render(**context)


__all__ = ["TEMPLATES_DIR", "render", "template_env"]
