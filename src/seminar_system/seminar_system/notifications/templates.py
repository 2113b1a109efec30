from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


def format_date(value: Optional[date]) -> str:
    if not value:
        return "To be announced"
    return value.strftime("%d %B %Y")


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["human_date"] = format_date
    return env


_env = _environment()


def render(template_name: str, **context: Any) -> str:
    return _env.get_template(template_name).render(**context)
