"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ProviderConfig: LLM chat-completion provider settings
- FetchConfig: HTTP fetching settings
- ExtractConfig: HTML-to-text extraction settings
- ChunkConfig: Source text chunking settings
- PipelineConfig: Aggregation behavior
- SettingsConfig: Location of the persisted user settings
- LoggingConfig: Logging behavior
- LangfuseConfig: Langfuse tracing settings
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from pathlib import Path
from typing import Any

import yaml


@dataclass
class ProviderConfig:
    """Configuration for the LLM provider.

    Attributes:
        name: Provider name ("openrouter" or an OpenAI-compatible alias)
        base_url: Base URL for the provider API
        api_key: Optional inline API key (overrides the settings store and env var)
        api_key_env: Environment variable consulted when no token is stored
        timeout_seconds: Request timeout for chat and catalog calls
        trust_env: Whether to respect system proxy settings for API requests
    """

    name: str = "openrouter"
    base_url: str = "https://openrouter.ai"
    api_key: str | None = None
    api_key_env: str = "OPENROUTER_API_KEY"
    timeout_seconds: float = 60.0
    trust_env: bool = True


@dataclass
class FetchConfig:
    """Configuration for HTTP content fetching.

    Attributes:
        timeout_seconds: HTTP request timeout
        retries: Number of retry attempts for failed requests (0 = single attempt)
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 20.0
    retries: int = 0
    trust_env: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )


@dataclass
class ExtractConfig:
    """Configuration for HTML content extraction.

    Attributes:
        primary: Primary extraction method ("bs4", "trafilatura", or "readability")
        fallback: List of fallback methods to try if primary yields nothing
    """

    primary: str = "bs4"
    fallback: list[str] = field(default_factory=lambda: ["trafilatura", "readability"])


@dataclass
class ChunkConfig:
    """Configuration for splitting source text.

    Attributes:
        max_chars: Maximum characters per chunk sent to one extraction call
    """

    max_chars: int = 5000


@dataclass
class PipelineConfig:
    """Configuration for pipeline execution.

    Attributes:
        source_concurrency: Number of sources processed in parallel (1 = sequential)
        default_source_limit: Item limit applied to sources added without one
    """

    source_concurrency: int = 1
    default_source_limit: int = 10


@dataclass
class SettingsConfig:
    """Configuration for the persisted user settings.

    Attributes:
        path: JSON file holding sources, selected model and token
    """

    path: str = "~/.news_collector/settings.json"

    def resolved_path(self) -> Path:
        return Path(self.path).expanduser()


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        directory: Directory for log files
        filename: Name of the main log file
        llm_log_enabled: Whether to enable separate LLM interaction logging
        llm_log_detail: LLM log detail level ("summary_only", "response_only", "prompt_response")
        llm_log_redaction: Redaction mode for LLM logs ("none", "redact_content", "redact_urls")
        llm_log_file: Name of the LLM log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    directory: str = "logs"
    filename: str = "run.jsonl"
    llm_log_enabled: bool = False
    llm_log_detail: str = "response_only"
    llm_log_redaction: str = "redact_urls"
    llm_log_file: str = "llm.jsonl"


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse tracing.

    Attributes:
        enabled: Whether to enable Langfuse tracing
        public_key: Langfuse public key (optional)
        secret_key: Langfuse secret key (optional)
        host: Langfuse host URL (optional)
        environment: Langfuse environment label (optional)
        release: Langfuse release identifier (optional)
        redaction: Redaction mode for prompt/response payloads
        max_text_chars: Maximum characters for prompt/response payloads
    """

    enabled: bool = False
    public_key: str | None = None
    secret_key: str | None = None
    host: str | None = None
    environment: str | None = None
    release: str | None = None
    redaction: str = "redact_urls"
    max_text_chars: int = 20000


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    chunk: ChunkConfig = field(default_factory=ChunkConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    settings: SettingsConfig = field(default_factory=SettingsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)


_SECTIONS: dict[str, type] = {
    "provider": ProviderConfig,
    "fetch": FetchConfig,
    "extract": ExtractConfig,
    "chunk": ChunkConfig,
    "pipeline": PipelineConfig,
    "settings": SettingsConfig,
    "logging": LoggingConfig,
    "langfuse": LangfuseConfig,
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    A missing path (None or a file that does not exist) yields the defaults.
    """
    if not path or not os.path.exists(path):
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Unknown sections and unknown keys inside a section are ignored.
    """
    data = asdict(base)
    for key, value in raw.items():
        if key not in data or not isinstance(value, dict):
            continue
        known = {k: v for k, v in value.items() if k in data[key]}
        data[key].update(known)
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(**{name: cls(**data[name]) for name, cls in _SECTIONS.items()})
