"""
Logging setup and structured event helpers.

Pipeline modules log through `log_event`, which attaches keyword fields
(event name, source, counts, errors) to the record. The console handler
renders those fields after the message; the file handlers write one JSON
object per record. LLM prompts and responses go to a separate JSONL log
after redaction.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
import re
from typing import Any

from rich.logging import RichHandler

from .config import LoggingConfig

ROOT_LOGGER = "news_collector"
LLM_LOGGER = "news_collector.llm"

REDACTION_MODES = ("none", "redact_content", "redact_urls")

_URL_RE = re.compile(r"https?://\S+")
_SECRET_RE = re.compile(r"(Bearer\s+)\S+|sk-or-[A-Za-z0-9-]+")

# Attributes set by logging.LogRecord itself; event fields must not shadow them.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def setup_logging(cfg: LoggingConfig, log_dir: Path | None = None) -> logging.Logger:
    level = _level_from_string(cfg.level)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers = []
    logger.propagate = False

    if cfg.console:
        console_handler = RichHandler(rich_tracebacks=True, show_time=False, show_level=True)
        console_handler.setLevel(level)
        console_handler.setFormatter(EventConsoleFormatter())
        logger.addHandler(console_handler)

    if cfg.file:
        formatter = JsonlFormatter() if cfg.format == "jsonl" else EventConsoleFormatter("%(asctime)s %(levelname)s ")
        logger.addHandler(_file_handler(cfg, log_dir, cfg.filename, formatter))

    return logger


def setup_llm_logger(cfg: LoggingConfig, log_dir: Path | None = None) -> logging.Logger | None:
    """Return the JSONL logger for LLM calls, or None when disabled."""
    if not cfg.llm_log_enabled:
        return None

    logger = logging.getLogger(LLM_LOGGER)
    logger.setLevel(_level_from_string(cfg.level))
    logger.handlers = []
    logger.propagate = False
    logger.addHandler(_file_handler(cfg, log_dir, cfg.llm_log_file, JsonlFormatter()))
    return logger


def log_event(logger: logging.Logger | None, message: str, level: int = logging.INFO, **fields: Any) -> None:
    """Log message with fields attached as record attributes.

    Fields named like a LogRecord attribute (e.g. "name") are stored with a
    "field_" prefix instead of overwriting the record.
    """
    if logger is None:
        return
    extra = {(f"field_{key}" if key in _RECORD_ATTRS else key): value for key, value in fields.items()}
    logger.log(level, message, extra=extra)


def redact_text(text: str, mode: str) -> str:
    """Apply a redaction mode to LLM prompt or response text.

    Every mode except "none" masks bearer tokens and OpenRouter keys;
    "redact_urls" also replaces URLs, "redact_content" drops the text.
    """
    if mode == "none":
        return text
    if mode == "redact_content":
        return ""
    text = _SECRET_RE.sub(lambda m: f"{m.group(1)}[REDACTED]" if m.group(1) else "[REDACTED]", text)
    if mode == "redact_urls":
        text = _URL_RE.sub("[REDACTED_URL]", text)
    return text


def truncate_text(text: str, max_chars: int = 20000) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "...(truncated)"


def event_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Fields attached to record by log_event."""
    return {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}


class EventConsoleFormatter(logging.Formatter):
    """Message followed by `key=value` event fields, the event name first."""

    def __init__(self, prefix: str = ""):
        super().__init__(prefix + "%(message)s")

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        fields = event_fields(record)
        if not fields:
            return text
        event = fields.pop("event", None)
        parts = [f"[{event}]"] if event else []
        parts.extend(f"{key}={_console_value(value)}" for key, value in fields.items())
        return f"{text} {' '.join(parts)}"


class JsonlFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(event_fields(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def _file_handler(cfg: LoggingConfig, log_dir: Path | None, filename: str, formatter: logging.Formatter) -> logging.Handler:
    directory = log_dir if log_dir is not None else Path(cfg.directory)
    directory.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(directory / filename, encoding="utf-8")
    handler.setLevel(_level_from_string(cfg.level))
    handler.setFormatter(formatter)
    return handler


def _console_value(value: Any) -> str:
    text = str(value)
    return repr(text) if " " in text else text


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
