"""Unit tests for category classification."""

from __future__ import annotations

import asyncio

import pytest

from feedback_intel.classifier import CategoryClassifier
from feedback_intel.utils.config import EngineConfig
from feedback_intel.utils.ollama_client import OracleError


def test_valid_oracle_reply_is_used(stub_oracle) -> None:
    oracle = stub_oracle(reply="Hostel")
    classifier = CategoryClassifier(oracle)

    assert asyncio.run(classifier.classify("Mess food", "wifi is down")) == "Hostel"
    assert oracle.calls == 1


def test_out_of_taxonomy_reply_becomes_other_without_heuristic(stub_oracle) -> None:
    classifier = CategoryClassifier(stub_oracle(reply="Networking problems"))

    assert asyncio.run(classifier.classify("WiFi", "wifi issues everywhere")) == "Other"


def test_oracle_other_reply_does_not_trigger_heuristic(stub_oracle) -> None:
    classifier = CategoryClassifier(stub_oracle(reply="Other"))

    assert asyncio.run(classifier.classify("WiFi", "wifi issues everywhere")) == "Other"


def test_oracle_failure_falls_back_to_keywords(stub_oracle) -> None:
    classifier = CategoryClassifier(stub_oracle(error=OracleError("connection refused")))

    assert asyncio.run(classifier.classify("Connectivity", "wifi issues")) == "Infrastructure"


def test_unexpected_oracle_exception_falls_back_to_keywords(stub_oracle) -> None:
    classifier = CategoryClassifier(stub_oracle(error=RuntimeError("boom")))

    assert asyncio.run(classifier.classify("Teaching", "The professor skips class")) == "Faculty"


def test_slow_oracle_times_out_and_falls_back(stub_oracle) -> None:
    oracle = stub_oracle(reply="Administration", delay=1.0)
    classifier = CategoryClassifier(oracle, timeout_seconds=0.05)

    assert asyncio.run(classifier.classify("Dorm", "dorm heating is off")) == "Hostel"


def test_missing_oracle_uses_keywords() -> None:
    classifier = CategoryClassifier(None)

    assert asyncio.run(classifier.classify("Exams", "The exam timetable is wrong")) == "Academics"


@pytest.mark.parametrize(
    "description, expected",
    [
        ("Our TEACHER never shows up", "Faculty"),
        ("Professor and hostel both bad", "Faculty"),
        ("dorm wifi is down", "Infrastructure"),
        ("The classroom is cold", "Hostel"),
        ("Course registration portal", "Academics"),
        ("Fee receipts are delayed", "Other"),
        ("", "Other"),
    ],
)
def test_keyword_families_checked_in_order(description: str, expected: str) -> None:
    assert CategoryClassifier(None).classify_by_keywords(description) == expected


def test_custom_keyword_families_from_config() -> None:
    config = EngineConfig(keyword_families=(("Administration", ("fee", "office")),))

    assert CategoryClassifier(None, config).classify_by_keywords("Fee receipts") == "Administration"


def test_prompt_lists_categories_and_submission() -> None:
    prompt = CategoryClassifier(None).build_prompt("Mess food", "Cold every day")

    assert "Academics, Faculty, Infrastructure, Hostel, Administration, Other" in prompt
    assert '"Mess food"' in prompt
    assert '"Cold every day"' in prompt


def test_padded_oracle_reply_is_recognised(stub_oracle) -> None:
    classifier = CategoryClassifier(stub_oracle(reply=" Hostel\n"))

    assert asyncio.run(classifier.classify("Mess food", "Cold every day")) == "Hostel"
