"""Ordering of unified events by importance."""

from __future__ import annotations

from typing import Iterable

from .types import UnifiedNews


def rank(events: Iterable[UnifiedNews]) -> list[UnifiedNews]:
    """Return events sorted by importance_score, highest first.

    The sort is stable: events with equal scores keep their input order.
    """
    return sorted(events, key=lambda event: event.importance_score, reverse=True)
