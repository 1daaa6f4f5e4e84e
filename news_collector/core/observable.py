"""Thread-safe observable value holder for published pipeline state."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Observable(Generic[T]):
    """Holds a single value and notifies subscribers when it is replaced.

    Updates replace the reference atomically; readers always see either the
    previous value or the new one. Subscriber callbacks run on the writer's
    thread after the value has been stored.
    """

    def __init__(self, initial: T):
        self._value = initial
        self._lock = threading.Lock()
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(value)
            except Exception:  # noqa: BLE001
                logger.exception("Observable subscriber failed")

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register callback and return a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe
