"""Background refresh scheduling with replace-on-duplicate semantics."""

from __future__ import annotations

import logging
import threading

from .errors import ConfigurationError
from .pipeline.orchestrator import PipelineOrchestrator, RunOutcome

logger = logging.getLogger(__name__)

REFRESH_TASK_KEY = "refresh_news_task"


class RefreshScheduler:
    """Run orchestrator refreshes on worker threads, one logical task key.

    A request arriving while a run is active replaces it: the orchestrator
    generation moves on, the old run stops at its next chunk boundary and
    its result is discarded. Requests are never queued.
    """

    def __init__(self, orchestrator: PipelineOrchestrator, task_key: str = REFRESH_TASK_KEY):
        self.orchestrator = orchestrator
        self.task_key = task_key
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._last_outcome: RunOutcome | None = None

    def request_refresh(self) -> threading.Thread:
        with self._lock:
            previous = self._thread
            if previous is not None and previous.is_alive():
                logger.info("Replacing in-flight %s", self.task_key)
            thread = threading.Thread(target=self._run, name=self.task_key, daemon=True)
            self._thread = thread
            thread.start()
            return thread

    def cancel(self) -> None:
        self.orchestrator.invalidate()

    def wait(self, timeout: float | None = None) -> RunOutcome | None:
        """Join the most recent run and return its outcome."""
        with self._lock:
            thread = self._thread
        if thread is not None:
            thread.join(timeout)
        return self._last_outcome

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        try:
            outcome = self.orchestrator.refresh()
        except ConfigurationError as exc:
            self.orchestrator.reject(str(exc))
            outcome = RunOutcome(status="rejected")
        if threading.current_thread() is self._thread:
            self._last_outcome = outcome
