"""Tests for the JSON settings store and configuration loading."""

import json

import pytest

from news_collector.config import AppConfig, load_config
from news_collector.settings import SettingsStore


def test_sources_roundtrip_through_file(tmp_path):
    store = SettingsStore(tmp_path / "settings.json", token_env=None)

    added = store.add_source("Example", "https://example.com/feed", is_rss=True, limit=3)

    (loaded,) = SettingsStore(tmp_path / "settings.json", token_env=None).load_sources()
    assert loaded == added
    stored = json.loads((tmp_path / "settings.json").read_text())
    assert stored["saved_sources"][0]["isRss"] is True


def test_remove_source_by_id(tmp_path):
    store = SettingsStore(tmp_path / "settings.json", token_env=None)
    keep = store.add_source("Keep", "https://keep.example.com")
    drop = store.add_source("Drop", "https://drop.example.com")

    assert store.remove_source(drop.id) is True
    assert store.remove_source("missing") is False
    assert store.load_sources() == [keep]


def test_negative_limit_rejected(tmp_path):
    store = SettingsStore(tmp_path / "settings.json", token_env=None)

    with pytest.raises(ValueError):
        store.add_source("Bad", "https://bad.example.com", limit=-1)


def test_malformed_entries_are_skipped(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"saved_sources": ["junk", {"name": "Only name"}, {"name": "Ok", "url": "https://ok.example.com"}]})
    )

    assert [s.name for s in SettingsStore(path, token_env=None).load_sources()] == ["Ok"]


def test_invalid_json_reads_as_empty(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    store = SettingsStore(path, token_env=None)

    assert store.load_sources() == []
    assert store.selected_model_id() is None


def test_selected_model_and_token(tmp_path):
    store = SettingsStore(tmp_path / "nested" / "settings.json", token_env=None)

    store.save_selected_model("vendor/model", "Model (0.1, 0.2)")
    store.save_api_token("  secret  ")

    assert store.selected_model_id() == "vendor/model"
    assert store.selected_model_name() == "Model (0.1, 0.2)"
    assert store.bearer_token() == "secret"


def test_token_falls_back_to_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("TEST_NEWS_TOKEN", "from-env")
    store = SettingsStore(tmp_path / "settings.json", token_env="TEST_NEWS_TOKEN")

    assert store.bearer_token() == "from-env"
    store.save_api_token("stored")
    assert store.bearer_token() == "stored"


def test_load_config_defaults_when_missing(tmp_path):
    cfg = load_config(str(tmp_path / "absent.yaml"))

    assert cfg == AppConfig()
    assert load_config(None).chunk.max_chars == 5000


def test_load_config_merges_sections_and_ignores_unknown(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "chunk:\n"
        "  max_chars: 1200\n"
        "pipeline:\n"
        "  source_concurrency: 4\n"
        "  bogus: 1\n"
        "unknown_section:\n"
        "  a: b\n"
        "logging: not-a-mapping\n"
    )

    cfg = load_config(str(path))

    assert cfg.chunk.max_chars == 1200
    assert cfg.pipeline.source_concurrency == 4
    assert cfg.pipeline.default_source_limit == 10
    assert cfg.logging.level == "INFO"
    assert cfg.provider.base_url == "https://openrouter.ai"
