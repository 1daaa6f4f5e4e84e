"""Tests for Langfuse tracing setup behavior."""

from __future__ import annotations

import sys
import types

import pytest

from news_collector.config import LangfuseConfig
from news_collector.llm import tracing


@pytest.fixture(autouse=True)
def _reset_tracer():
    yield
    tracing.setup_langfuse(LangfuseConfig(enabled=False))


class DummySpan:
    def __init__(self, log):
        self.log = log

    def update(self, **kwargs):
        self.log.append(("update", kwargs))


class DummyContext:
    def __init__(self, log, kwargs):
        self.log = log
        self.kwargs = kwargs

    def __enter__(self):
        self.log.append(("enter", self.kwargs))
        return DummySpan(self.log)

    def __exit__(self, *exc):
        self.log.append(("exit", None))
        return False


def _install_fake_langfuse(monkeypatch, captured, log):
    class DummyLangfuse:
        def __init__(self, **kwargs):
            captured.update(kwargs)

        def start_as_current_span(self, **kwargs):
            return DummyContext(log, kwargs)

        def flush(self):
            log.append(("flush", None))

    monkeypatch.setitem(sys.modules, "langfuse", types.SimpleNamespace(Langfuse=DummyLangfuse))


def test_setup_langfuse_prefers_config_over_env(monkeypatch):
    captured: dict = {}
    _install_fake_langfuse(monkeypatch, captured, [])
    monkeypatch.setenv("LANGFUSE_PUBLIC_KEY", "pk-env")
    monkeypatch.setenv("LANGFUSE_SECRET_KEY", "sk-env")
    monkeypatch.setenv("LANGFUSE_HOST", "https://env.example.com")

    tracing.setup_langfuse(LangfuseConfig(enabled=True, public_key="pk-cfg"))

    assert captured["public_key"] == "pk-cfg"
    assert captured["secret_key"] == "sk-env"
    assert captured["host"] == "https://env.example.com"


def test_spans_are_noops_when_disabled():
    tracing.setup_langfuse(LangfuseConfig(enabled=False))

    with tracing.start_span("x", kind="llm") as span:
        assert span is None
        tracing.set_span_output(span, "ignored")
        tracing.record_span_error(span, RuntimeError("ignored"))
    tracing.flush()


def test_span_input_is_redacted_and_errors_recorded(monkeypatch):
    log: list = []
    _install_fake_langfuse(monkeypatch, {}, log)
    tracing.setup_langfuse(LangfuseConfig(enabled=True, redaction="redact_urls"))

    with pytest.raises(ValueError):
        with tracing.start_span(
            "news_collector.extract",
            kind="llm",
            input_value="see https://example.com/a",
            attributes={"llm.model": "m", "skip": None},
        ) as span:
            tracing.set_span_output(span, {"items": 1})
            tracing.record_span_error(span, ValueError("bad"))
            raise ValueError("bad")
    tracing.flush()

    enter_kwargs = log[0][1]
    assert enter_kwargs["input"] == "see [REDACTED_URL]"
    assert enter_kwargs["metadata"] == {"llm.model": "m", "span.kind": "llm"}
    assert ("update", {"output": '{"items": 1}'}) in log
    assert ("update", {"level": "ERROR", "status_message": "bad"}) in log
    assert ("exit", None) in log
    assert log[-1] == ("flush", None)
