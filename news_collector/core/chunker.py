"""Fixed-length splitting of source text into extraction-sized chunks."""

from __future__ import annotations

from typing import Iterator

DEFAULT_CHUNK_CHARS = 5000


def iter_chunks(text: str, max_chars: int = DEFAULT_CHUNK_CHARS) -> Iterator[str]:
    """Yield consecutive non-overlapping slices of at most max_chars characters.

    Concatenating the yielded chunks reproduces text exactly. Every chunk
    except possibly the last has length max_chars.

    Raises:
        ValueError: If max_chars is not positive
    """
    if max_chars <= 0:
        raise ValueError(f"max_chars must be positive, got {max_chars}")
    for start in range(0, len(text), max_chars):
        yield text[start : start + max_chars]


def chunk_text(text: str, max_chars: int = DEFAULT_CHUNK_CHARS) -> list[str]:
    """Split text into a list of chunks; empty text yields an empty list."""
    return list(iter_chunks(text, max_chars))
