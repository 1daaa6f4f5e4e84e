"""Shared stubs for pipeline tests."""

from __future__ import annotations

import pytest

from news_collector.core.types import ChatResponse, ModelInfo, Source
from news_collector.llm.providers.base import ChatProvider


class ScriptedProvider(ChatProvider):
    """Chat provider returning queued responses; exceptions in the queue are raised."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def chat(self, model_id, messages):
        self.calls.append((model_id, messages))
        if not self.responses:
            raise AssertionError("unexpected chat call")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return ChatResponse(choices=[response])

    def list_models(self):
        return [ModelInfo(id="test/model", name="Test", input_modalities=("text",), output_modalities=("text",))]


class DictFetcher:
    """Source fetcher serving text per source name; exceptions are raised."""

    def __init__(self, texts):
        self.texts = texts
        self.calls = []

    def __call__(self, source):
        self.calls.append(source.name)
        value = self.texts[source.name]
        if isinstance(value, BaseException):
            raise value
        return value


class MemorySettings:
    def __init__(self, sources=(), model_id="test/model", token="token"):
        self.sources = list(sources)
        self.model_id = model_id
        self.token = token

    def load_sources(self):
        return list(self.sources)

    def selected_model_id(self):
        return self.model_id

    def bearer_token(self):
        return self.token


@pytest.fixture
def scripted_provider():
    return ScriptedProvider


@pytest.fixture
def dict_fetcher():
    return DictFetcher


@pytest.fixture
def memory_settings():
    return MemorySettings


@pytest.fixture
def make_source():
    def _make(name="Site", limit=5, is_rss=False):
        return Source(name=name, url=f"https://{name.lower()}.example.com", is_rss=is_rss, limit=limit)

    return _make
