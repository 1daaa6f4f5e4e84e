"""Prompt loading and rendering helpers for the extraction and unification calls."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Sequence

from ..core.types import News, Source


_PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"


@lru_cache(maxsize=None)
def _load_template(name: str) -> str:
    path = _PROMPT_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def _render_template(name: str, **values: object) -> str:
    template = _load_template(name)
    return template.format(**values)


def build_extraction_prompt(chunk: str, source: Source, max_items: int | None = None) -> str:
    return _render_template(
        "extraction",
        source_name=source.name,
        source_url=source.url,
        max_items=max_items if max_items is not None else source.limit,
        content=chunk,
    )


def build_unification_prompt(news: Sequence[News]) -> str:
    lines = "\n".join(f"ID: {idx} | Title: {item.title}" for idx, item in enumerate(news))
    return _render_template("unification", items=lines)
