"""Tests for run sequencing, publication and supersession."""

import json

import httpx
import pytest

from news_collector.config import ProviderConfig
from news_collector.core.types import RunState
from news_collector.errors import ConfigurationError, FetchError
from news_collector.llm.providers.openrouter import OpenRouterProvider
from news_collector.pipeline.aggregator import Aggregator
from news_collector.pipeline.news_extractor import NewsExtractor
from news_collector.pipeline.orchestrator import PipelineOrchestrator
from news_collector.pipeline.source_processor import SourceProcessor
from news_collector.pipeline.unifier import Unifier


def _build(settings, fetcher, provider):
    processor = SourceProcessor(fetcher, NewsExtractor(provider), chunk_chars=100)
    return PipelineOrchestrator(settings, Aggregator(processor), Unifier(provider))


def _items(*titles):
    return json.dumps([{"title": t, "summary": f"{t} summary"} for t in titles])


def test_end_to_end_failed_source_grouping_and_ranking(scripted_provider, dict_fetcher, memory_settings, make_source):
    source1 = make_source("One", limit=5)
    source2 = make_source("Two", limit=5)
    fetcher = dict_fetcher({"One": FetchError("HTTP 503"), "Two": "page text"})
    grouping = json.dumps(
        [
            {"title": "Single", "summary": "only c", "ids": [2], "importance": 0},
            {"title": "Merged", "summary": "a and b", "ids": [0, 1], "importance": 8},
        ]
    )
    provider = scripted_provider([_items("a", "b", "c"), grouping])
    orchestrator = _build(memory_settings([source1, source2]), fetcher, provider)

    outcome = orchestrator.refresh()

    assert outcome.status == "published"
    assert outcome.unification_status == "ok"
    results = orchestrator.results.value
    assert [(e.title, e.importance_score) for e in results] == [("Merged", 8), ("Single", 0)]
    assert [a.title for a in results[0].original_articles] == ["a", "b"]
    assert results[0].sources == (source2,)
    assert orchestrator.refreshing.value is False
    assert orchestrator.state.value is RunState.IDLE
    assert orchestrator.last_error.value is None


def test_unification_failure_publishes_fallback(scripted_provider, dict_fetcher, memory_settings, make_source):
    source = make_source("One")
    provider = scripted_provider([_items("a", "b"), "not json"])
    orchestrator = _build(memory_settings([source]), dict_fetcher({"One": "text"}), provider)

    outcome = orchestrator.refresh()

    assert outcome.status == "published"
    assert outcome.unification_status == "fallback"
    assert sorted(e.title for e in orchestrator.results.value) == ["a", "b"]
    assert all(e.importance_score == 0 for e in orchestrator.results.value)


@pytest.mark.parametrize("model_id,token", [(None, "token"), ("test/model", None)])
def test_missing_configuration_rejects_without_state_change(
    scripted_provider, dict_fetcher, memory_settings, make_source, model_id, token
):
    settings = memory_settings([make_source()], model_id=model_id, token=token)
    orchestrator = _build(settings, dict_fetcher({}), scripted_provider([]))
    seen = []
    orchestrator.refreshing.subscribe(seen.append)

    with pytest.raises(ConfigurationError):
        orchestrator.refresh()

    assert seen == []
    assert orchestrator.refreshing.value is False
    assert orchestrator.state.value is RunState.IDLE


def test_empty_run_keeps_previous_results(scripted_provider, dict_fetcher, memory_settings, make_source):
    source = make_source("One")
    fetcher = dict_fetcher({"One": "text"})
    provider = scripted_provider([_items("a"), '[{"title": "E", "ids": [0], "importance": 2}]', "[]"])
    orchestrator = _build(memory_settings([source]), fetcher, provider)

    assert orchestrator.refresh().status == "published"
    previous = orchestrator.results.value

    outcome = orchestrator.refresh()

    assert outcome.status == "empty"
    assert orchestrator.results.value == previous
    assert orchestrator.refreshing.value is False
    assert orchestrator.state.value is RunState.IDLE


def test_fatal_error_sets_failed_state_and_keeps_results(
    scripted_provider, dict_fetcher, memory_settings, make_source
):
    source = make_source("One")
    provider = scripted_provider([_items("a"), '[{"title": "E", "ids": [0], "importance": 2}]', RuntimeError("bad")])
    orchestrator = _build(memory_settings([source]), dict_fetcher({"One": "text"}), provider)
    orchestrator.refresh()
    previous = orchestrator.results.value

    outcome = orchestrator.refresh()

    assert outcome.status == "failed"
    assert "bad" in str(outcome.error)
    assert orchestrator.results.value == previous
    assert orchestrator.refreshing.value is False
    assert orchestrator.state.value is RunState.FAILED
    assert "RuntimeError" in orchestrator.last_error.value


def test_next_run_clears_last_error(scripted_provider, dict_fetcher, memory_settings, make_source):
    source = make_source("One")
    provider = scripted_provider([RuntimeError("bad"), "[]"])
    orchestrator = _build(memory_settings([source]), dict_fetcher({"One": "text"}), provider)
    orchestrator.refresh()
    assert orchestrator.last_error.value is not None

    assert orchestrator.refresh().status == "empty"
    assert orchestrator.last_error.value is None
    assert orchestrator.state.value is RunState.IDLE


def test_invalidate_during_aggregation_discards_run(scripted_provider, memory_settings, make_source):
    sources = [make_source("One"), make_source("Two")]
    provider = scripted_provider([])
    holder = {}
    fetched = []

    def fetcher(source):
        fetched.append(source.name)
        holder["orchestrator"].invalidate()
        return "text"

    orchestrator = _build(memory_settings(sources), fetcher, provider)
    holder["orchestrator"] = orchestrator

    outcome = orchestrator.refresh()

    assert outcome.status == "superseded"
    assert fetched == ["One"]
    assert provider.calls == []
    assert orchestrator.results.value == []
    assert orchestrator.refreshing.value is False
    assert orchestrator.state.value is RunState.IDLE


def test_newer_run_supersedes_in_flight_run(scripted_provider, memory_settings, make_source):
    source = make_source("One")
    provider = scripted_provider([_items("newer"), '[{"title": "Newer", "ids": [0], "importance": 1}]'])
    holder = {"calls": 0, "outcomes": []}

    def fetcher(_source):
        holder["calls"] += 1
        if holder["calls"] == 1:
            holder["outcomes"].append(holder["orchestrator"].refresh())
        return "text"

    orchestrator = _build(memory_settings([source]), fetcher, provider)
    holder["orchestrator"] = orchestrator

    outcome = orchestrator.refresh()

    assert outcome.status == "superseded"
    assert [o.status for o in holder["outcomes"]] == ["published"]
    assert [e.title for e in orchestrator.results.value] == ["Newer"]
    assert orchestrator.refreshing.value is False
    assert orchestrator.state.value is RunState.IDLE


def test_observers_see_refreshing_transitions_and_results(
    scripted_provider, dict_fetcher, memory_settings, make_source
):
    source = make_source("One")
    provider = scripted_provider([_items("a"), '[{"title": "E", "ids": [0], "importance": 4}]'])
    orchestrator = _build(memory_settings([source]), dict_fetcher({"One": "text"}), provider)
    refreshing, published = [], []
    orchestrator.refreshing.subscribe(refreshing.append)
    unsubscribe = orchestrator.results.subscribe(published.append)

    orchestrator.refresh()
    unsubscribe()

    assert refreshing == [True, False]
    assert [[e.title for e in batch] for batch in published] == [["E"]]


def test_malformed_provider_body_does_not_abort_run(dict_fetcher, memory_settings, make_source):
    provider = OpenRouterProvider(
        ProviderConfig(),
        lambda: "tok",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=["unexpected"])),
    )
    orchestrator = _build(memory_settings([make_source("One")]), dict_fetcher({"One": "text"}), provider)

    outcome = orchestrator.refresh()

    assert outcome.status == "empty"
    assert orchestrator.state.value is RunState.IDLE
    assert orchestrator.last_error.value is None


def test_reject_records_error_without_state_change(scripted_provider, dict_fetcher, memory_settings):
    orchestrator = _build(memory_settings(), dict_fetcher({}), scripted_provider([]))
    errors = []
    orchestrator.last_error.subscribe(errors.append)

    orchestrator.reject("No model selected")

    assert errors == ["No model selected"]
    assert orchestrator.state.value is RunState.IDLE
    assert orchestrator.refreshing.value is False
