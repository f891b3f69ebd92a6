"""Tests for YAML configuration loading."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from feedback_intel.utils.config import (
    DEFAULT_CATEGORIES,
    DEFAULT_KEYWORD_FAMILIES,
    Config,
    load_config,
)

SHIPPED_CONFIG = Path(__file__).resolve().parent.parent / "config" / "config.yaml"


def test_defaults_are_usable() -> None:
    config = Config()

    assert config.engine.categories == DEFAULT_CATEGORIES
    assert config.engine.similarity_threshold == 0.25
    assert config.ollama.summary_enabled is False
    assert config.ollama.summary_timeout_seconds == 3.0


def test_config_is_frozen() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        Config().engine.similarity_threshold = 0.9


def test_shipped_config_matches_defaults(monkeypatch) -> None:
    monkeypatch.delenv("ENABLE_OLLAMA_SUMMARY", raising=False)

    config = load_config(str(SHIPPED_CONFIG))

    assert config.engine.categories == DEFAULT_CATEGORIES
    assert config.engine.keyword_families == DEFAULT_KEYWORD_FAMILIES
    assert config.ollama.model == "gemma:2b"
    assert config.ollama.summary_enabled is False
    assert config.api.cors_origins == ("http://localhost:3000",)


def test_partial_yaml_keeps_defaults(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("ENABLE_OLLAMA_SUMMARY", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(
        "storage:\n"
        "  topics_path: /tmp/topics.json\n"
        "engine:\n"
        "  similarity_threshold: 0.4\n"
        "  stopwords: [The, wifi]\n"
        "  keyword_families:\n"
        "    Administration: [Fee, office]\n"
    )

    config = load_config(str(path))

    assert config.storage.topics_path == "/tmp/topics.json"
    assert config.engine.similarity_threshold == 0.4
    assert config.engine.stopwords == frozenset({"the", "wifi"})
    assert config.engine.keyword_families == (("Administration", ("fee", "office")),)
    assert config.engine.categories == DEFAULT_CATEGORIES
    assert config.ollama.base_url == "http://localhost:11434"


def test_empty_file_gives_defaults(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("ENABLE_OLLAMA_SUMMARY", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text("")

    assert load_config(str(path)) == Config()


def test_summary_flag_from_environment(tmp_path, monkeypatch) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("ollama:\n  model: llama3\n")

    monkeypatch.setenv("ENABLE_OLLAMA_SUMMARY", "1")
    enabled = load_config(str(path))
    monkeypatch.setenv("ENABLE_OLLAMA_SUMMARY", "true")
    untouched = load_config(str(path))

    assert enabled.ollama.summary_enabled is True
    assert enabled.ollama.model == "llama3"
    assert untouched.ollama.summary_enabled is False


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))
