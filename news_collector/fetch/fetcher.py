"""
HTTP content fetching for configured sources.

Sources are fetched with a synchronous httpx client. Free-text pages go
through the HTML extraction chain; feed sources are parsed with feedparser.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time

import httpx

from ..config import ExtractConfig, FetchConfig
from ..core.types import Source
from ..errors import FetchError
from ..logging_utils import log_event
from .extractor import extract_text
from .feeds import parse_feed_text

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either content will be populated (success) or error will be populated
    (failure), but never both. status_code may be None for network-level
    failures.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if request failed before getting response
        content: The raw response body, or None on error
        text: The decoded response body, or None on error
        error: Error message if fetch failed, None on success
    """

    url: str
    status_code: int | None
    content: bytes | None
    text: str | None
    error: str | None


def fetch_url(
    url: str,
    timeout: float,
    retries: int,
    user_agent: str,
    trust_env: bool,
    transport: httpx.BaseTransport | None = None,
) -> FetchResult:
    """Fetch a URL using httpx with optional retries.

    Non-success status codes are reported as errors. With retries=0 a single
    failed attempt is final.

    Args:
        url: The URL to fetch
        timeout: Request timeout in seconds
        retries: Number of retry attempts after initial failure
        user_agent: User-Agent header string
        trust_env: Whether to respect system proxy settings from environment
        transport: Optional httpx transport (used by tests)

    Returns:
        FetchResult with body on success or error message on failure
    """
    headers = {"User-Agent": user_agent}
    last_error: str | None = None
    status_code: int | None = None

    for attempt in range(retries + 1):
        try:
            with httpx.Client(
                timeout=timeout,
                headers=headers,
                follow_redirects=True,
                trust_env=trust_env,
                transport=transport,
            ) as client:
                resp = client.get(url)
            status_code = resp.status_code
            if resp.is_success:
                return FetchResult(
                    url=url, status_code=status_code, content=resp.content, text=resp.text, error=None
                )
            last_error = f"HTTP {status_code}"
        except httpx.HTTPError as exc:
            status_code = None
            last_error = f"{type(exc).__name__}: {exc}"
        if attempt < retries:
            time.sleep(0.5 * (attempt + 1))

    return FetchResult(url=url, status_code=status_code, content=None, text=None, error=last_error)


def fetch_source_text(
    source: Source,
    fetch_cfg: FetchConfig,
    extract_cfg: ExtractConfig,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Fetch a source and return its plain text.

    Raises:
        FetchError: On network failure, non-success status, or empty text
    """
    result = fetch_url(
        source.url,
        timeout=fetch_cfg.timeout_seconds,
        retries=fetch_cfg.retries,
        user_agent=fetch_cfg.user_agent,
        trust_env=fetch_cfg.trust_env,
        transport=transport,
    )
    if result.error or result.content is None:
        raise FetchError(
            f"Failed to fetch {source.url}: {result.error}",
            url=source.url,
            status_code=result.status_code,
        )

    if source.is_rss:
        text = parse_feed_text(result.content, url=source.url)
    else:
        text = extract_text(result.text or "", extract_cfg.primary, extract_cfg.fallback)
    if not text:
        raise FetchError(f"No text extracted from {source.url}", url=source.url, status_code=result.status_code)

    log_event(
        logger,
        "Source fetched",
        event="source_fetched",
        source=source.name,
        status_code=result.status_code,
        chars=len(text),
        mode="feed" if source.is_rss else "page",
    )
    return text


class HttpSourceFetcher:
    """Callable content fetch boundary bound to one configuration."""

    def __init__(
        self,
        fetch_cfg: FetchConfig,
        extract_cfg: ExtractConfig,
        transport: httpx.BaseTransport | None = None,
    ):
        self.fetch_cfg = fetch_cfg
        self.extract_cfg = extract_cfg
        self._transport = transport

    def __call__(self, source: Source) -> str:
        return fetch_source_text(source, self.fetch_cfg, self.extract_cfg, transport=self._transport)
