"""
Pipeline orchestration: aggregate, unify, rank, publish.

The orchestrator owns all published state. Observers read it through
Observable values and never mutate it. Each run takes a generation token;
starting a new run invalidates the token of any run still in flight, which
then stops at the next chunk or source boundary and never publishes.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
from typing import Protocol

from ..core.observable import Observable
from ..core.ranker import rank
from ..core.types import RunState, Source, UnifiedNews
from ..errors import ConfigurationError, FatalRunError
from ..llm.tracing import set_span_output, start_span
from ..logging_utils import log_event
from .aggregator import Aggregator
from .unifier import Unifier

logger = logging.getLogger(__name__)


class SettingsReader(Protocol):
    def load_sources(self) -> list[Source]: ...

    def selected_model_id(self) -> str | None: ...

    def bearer_token(self) -> str | None: ...


@dataclass
class RunOutcome:
    """Result of one refresh call.

    status is "published" (new result set published), "empty" (no News
    extracted, previous results kept), "superseded" (a newer run took over,
    nothing published), "failed" (error holds the FatalRunError) or
    "rejected" (the scheduler hit a configuration error).
    """

    status: str
    published: list[UnifiedNews] | None = None
    unification_status: str | None = None
    error: FatalRunError | None = None


class PipelineOrchestrator:
    """Sequence Aggregator -> Unifier -> Ranker and publish the result set.

    Attributes:
        results: Published ranked events of the last successful run
        refreshing: True while a run is active
        last_error: Message of the last failed run, None otherwise
        state: Current RunState
    """

    def __init__(self, settings: SettingsReader, aggregator: Aggregator, unifier: Unifier):
        self.settings = settings
        self.aggregator = aggregator
        self.unifier = unifier
        self.results: Observable[list[UnifiedNews]] = Observable([])
        self.refreshing: Observable[bool] = Observable(False)
        self.last_error: Observable[str | None] = Observable(None)
        self.state: Observable[RunState] = Observable(RunState.IDLE)
        self._lock = threading.RLock()
        self._generation = 0

    def refresh(self) -> RunOutcome:
        """Run the pipeline once.

        Raises:
            ConfigurationError: If no model is selected or no credential is
                configured; no state transition happens in that case
        """
        model_id = self.settings.selected_model_id()
        if not model_id:
            raise ConfigurationError("No model selected. Choose a model before refreshing.")
        if not self.settings.bearer_token():
            raise ConfigurationError("Please set your OpenRouter bearer token first.")

        token = self._begin()
        final_state = RunState.FAILED
        message: str | None = "Run interrupted"
        try:
            with start_span("news_collector.run", kind="chain", attributes={"llm.model": model_id}) as span:
                outcome = self._run(token, model_id)
                set_span_output(span, {"status": outcome.status})
            final_state, message = RunState.IDLE, None
            return outcome
        except Exception as exc:  # noqa: BLE001
            error = FatalRunError(f"{type(exc).__name__}: {exc}")
            message = str(error)
            logger.exception("Pipeline run failed")
            if not self.is_current(token):
                return RunOutcome(status="superseded")
            return RunOutcome(status="failed", error=error)
        finally:
            self._finish(token, final_state, message)

    def invalidate(self) -> None:
        """Supersede any in-flight run without starting a new one."""
        with self._lock:
            self._generation += 1
            if self.state.value is RunState.RUNNING:
                self.state.set(RunState.IDLE)
            self.refreshing.set(False)

    def reject(self, message: str) -> None:
        """Record a refresh that could not start, e.g. missing configuration."""
        with self._lock:
            self.last_error.set(message)
        log_event(logger, "Refresh rejected", level=logging.WARNING, event="run_rejected", error=message)

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._generation

    def _run(self, token: int, model_id: str) -> RunOutcome:
        sources = self.settings.load_sources()
        news = self.aggregator.aggregate(sources, model_id, should_continue=lambda: self.is_current(token))
        if not self.is_current(token):
            return RunOutcome(status="superseded")
        if not news:
            log_event(logger, "No news extracted; keeping previous results", event="run_empty")
            return RunOutcome(status="empty")

        unified = self.unifier.unify(news, model_id)
        ranked = rank(unified.events)
        if not self._publish(token, ranked):
            return RunOutcome(status="superseded")
        log_event(
            logger,
            "Results published",
            event="run_published",
            news=len(news),
            events=len(ranked),
            unification=unified.status,
        )
        return RunOutcome(status="published", published=ranked, unification_status=unified.status)

    def _begin(self) -> int:
        with self._lock:
            self._generation += 1
            token = self._generation
            self.last_error.set(None)
            self.state.set(RunState.RUNNING)
            self.refreshing.set(True)
        log_event(logger, "Pipeline run started", event="run_start", generation=token)
        return token

    def _publish(self, token: int, ranked: list[UnifiedNews]) -> bool:
        with self._lock:
            if token != self._generation:
                return False
            self.results.set(list(ranked))
            return True

    def _finish(self, token: int, state: RunState, error: str | None) -> None:
        with self._lock:
            if token != self._generation:
                return
            if error is not None:
                self.last_error.set(error)
            self.state.set(state)
            self.refreshing.set(False)
