"""
Decoding of untrusted JSON produced by the LLM.

Model output is cleaned of markdown code fences, parsed, and validated into
small typed structures with explicit defaults for every optional field.
Anything that is not a JSON array of objects raises LLMOutputError, the
single failure the callers have to handle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import math
import re
from typing import Any

from ..errors import LLMOutputError

UNTITLED_EVENT = "Untitled Event"

_JSON_FENCE_RE = re.compile(r"```json", re.IGNORECASE)
_FENCE = "```"


@dataclass(frozen=True)
class ExtractedItem:
    title: str = ""
    summary: str = ""


@dataclass(frozen=True)
class EventGroup:
    title: str = UNTITLED_EVENT
    summary: str = ""
    ids: list[int] = field(default_factory=list)
    importance: int = 0


def strip_code_fences(content: str) -> str:
    """Remove a ```json ... ``` or ``` ... ``` wrapper from model output.

    Text after the opening fence marker and before the last closing fence is
    kept. Without any fence marker the trimmed input is returned as-is.

    Examples:
        >>> strip_code_fences('```json\\n[1]\\n```')
        '[1]'
        >>> strip_code_fences('[1]')
        '[1]'
    """
    text = (content or "").strip()
    match = _JSON_FENCE_RE.search(text)
    if match:
        text = text[match.end() :]
    elif _FENCE in text:
        text = text.split(_FENCE, 1)[1]
    else:
        return text
    head, sep, _tail = text.rpartition(_FENCE)
    if sep:
        text = head
    return text.strip()


def decode_extracted_items(content: str) -> list[ExtractedItem]:
    """Decode an extraction response into items.

    Missing or non-string title/summary fields default to an empty string;
    no object is dropped.
    """
    return [
        ExtractedItem(
            title=_as_str(obj.get("title"), ""),
            summary=_as_str(obj.get("summary"), ""),
        )
        for obj in _load_object_array(content)
    ]


def decode_event_groups(content: str) -> list[EventGroup]:
    """Decode a unification response into event groups.

    ids entries are coerced to integers (floats truncate toward zero,
    numeric strings are parsed) and anything unparseable is dropped.
    Range checks against the input list are left to the caller.
    """
    groups = []
    for obj in _load_object_array(content):
        raw_ids = obj.get("ids")
        ids: list[int] = []
        if isinstance(raw_ids, list):
            for raw in raw_ids:
                value = coerce_int(raw)
                if value is not None:
                    ids.append(value)
        importance = coerce_int(obj.get("importance"))
        groups.append(
            EventGroup(
                title=_as_str(obj.get("title"), UNTITLED_EVENT),
                summary=_as_str(obj.get("summary"), ""),
                ids=ids,
                importance=importance if importance is not None else 0,
            )
        )
    return groups


def coerce_int(value: Any) -> int | None:
    """Convert a JSON scalar to int, truncating toward zero; None if not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return int(number) if math.isfinite(number) else None
    return None


def _load_object_array(content: str) -> list[dict[str, Any]]:
    cleaned = strip_code_fences(content)
    if not cleaned:
        raise LLMOutputError("Empty model output")
    try:
        data = json.loads(cleaned)
    except (ValueError, RecursionError) as exc:
        raise LLMOutputError(f"Model output is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise LLMOutputError(f"Expected a JSON array, got {type(data).__name__}")
    for idx, obj in enumerate(data):
        if not isinstance(obj, dict):
            raise LLMOutputError(f"Array element {idx} is {type(obj).__name__}, expected an object")
    return data


def _as_str(value: Any, default: str) -> str:
    return value if isinstance(value, str) else default
