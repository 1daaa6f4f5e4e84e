"""
HTML-to-text extraction with multiple fallback strategies.

This module provides a chain of extraction methods:
1. bs4: Full visible body text via BeautifulSoup (default, keeps headline lists)
2. trafilatura: Main-content extraction, good for single article pages
3. readability: Mozilla's readability algorithm
"""

from __future__ import annotations

from typing import Callable

from bs4 import BeautifulSoup
import trafilatura
from readability import Document


def extract_text(html: str, primary: str, fallback: list[str]) -> str | None:
    """Extract plain text from HTML using a chain of extractors.

    Tries each extraction method in order until one produces non-empty
    output.

    Args:
        html: The HTML content to extract text from
        primary: Name of the primary extraction method to try first
        fallback: List of fallback method names to try if primary fails

    Returns:
        Extracted plain text with leading/trailing whitespace stripped,
        or None if all methods fail

    Examples:
        >>> extract_text("<html><body><p>Hi</p></body></html>", "bs4", [])
        'Hi'
    """
    order = [primary] + [name for name in fallback if name != primary]
    for method in order:
        extractor = _get_extractor(method)
        if not extractor:
            continue
        text = extractor(html)
        if text and text.strip():
            return text.strip()
    return None


def html_to_text(html: str) -> str:
    """Collapse an HTML fragment (e.g. a feed summary) into single-line text."""
    if "<" not in html:
        return " ".join(html.split())
    soup = BeautifulSoup(html, "html.parser")
    return " ".join(soup.get_text(separator=" ").split())


def _get_extractor(name: str) -> Callable[[str], str | None] | None:
    if name == "bs4":
        return _extract_bs4
    if name == "trafilatura":
        return _extract_trafilatura
    if name == "readability":
        return _extract_readability
    return None


def _extract_bs4(html: str) -> str | None:
    """Return the visible text of the page body, one block per line.

    Script, style and noscript tags are removed before text collection.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    root = soup.body or soup
    text = root.get_text(separator="\n")
    cleaned = "\n".join([line.strip() for line in text.splitlines() if line.strip()])
    return cleaned if cleaned else None


def _extract_trafilatura(html: str) -> str | None:
    return trafilatura.extract(html)


def _extract_readability(html: str) -> str | None:
    doc = Document(html)
    return _extract_bs4(doc.summary())
