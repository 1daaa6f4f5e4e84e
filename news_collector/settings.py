"""
Persisted user settings backed by a single JSON file.

The store keeps the source list, the selected model (id and display name)
and the OpenRouter bearer token. Every read goes to disk so values saved by
another process (e.g. the CLI) are visible to the next pipeline run.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import tempfile
import threading
from typing import Any

from .core.types import Source

logger = logging.getLogger(__name__)

SOURCES_KEY = "saved_sources"
SELECTED_MODEL_ID = "selected_model_id"
SELECTED_MODEL_NAME = "selected_model_name"
OPENROUTER_TOKEN = "openrouter_bearer_token"


class SettingsStore:
    """JSON key/value store for pipeline settings.

    Attributes:
        path: Location of the settings file
        token_env: Environment variable consulted when no token is saved
    """

    def __init__(self, path: Path, token_env: str | None = "OPENROUTER_API_KEY"):
        self.path = Path(path)
        self.token_env = token_env
        self._lock = threading.Lock()

    def load_sources(self) -> list[Source]:
        raw = self._read().get(SOURCES_KEY) or []
        sources = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                sources.append(Source.from_dict(item))
            except (TypeError, ValueError):
                logger.warning("Skipping malformed source entry: %r", item)
        return sources

    def save_sources(self, sources: list[Source]) -> None:
        self._update({SOURCES_KEY: [source.to_dict() for source in sources]})

    def add_source(self, name: str, url: str, is_rss: bool = False, limit: int = 10) -> Source:
        if limit < 0:
            raise ValueError("limit must not be negative")
        source = Source(name=name, url=url, is_rss=is_rss, limit=limit)
        self.save_sources(self.load_sources() + [source])
        return source

    def remove_source(self, source_id: str) -> bool:
        sources = self.load_sources()
        kept = [s for s in sources if s.id != source_id]
        if len(kept) == len(sources):
            return False
        self.save_sources(kept)
        return True

    def selected_model_id(self) -> str | None:
        return self._read().get(SELECTED_MODEL_ID) or None

    def selected_model_name(self) -> str | None:
        return self._read().get(SELECTED_MODEL_NAME) or None

    def save_selected_model(self, model_id: str, display_name: str) -> None:
        self._update({SELECTED_MODEL_ID: model_id, SELECTED_MODEL_NAME: display_name})

    def bearer_token(self) -> str | None:
        token = self._read().get(OPENROUTER_TOKEN)
        if token and str(token).strip():
            return str(token).strip()
        if self.token_env:
            return os.getenv(self.token_env) or None
        return None

    def save_api_token(self, token: str) -> None:
        self._update({OPENROUTER_TOKEN: token.strip()})

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            logger.warning("Settings file %s is not valid JSON; ignoring it", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _update(self, values: dict[str, Any]) -> None:
        with self._lock:
            data = self._read()
            data.update(values)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".settings-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, ensure_ascii=True, indent=2)
                os.replace(tmp, self.path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
