"""Tests for the JSON topic store."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

from feedback_intel.utils.storage import TopicStorage, trend_window


def test_create_and_lookup(storage) -> None:
    topic = storage.create_topic("WiFi issues", "dorm wifi is down", category="Infrastructure")

    assert topic.id.startswith("topic_")
    assert topic.votes == 1
    assert topic.status == "open"
    assert storage.get_topic(topic.id) == topic
    assert storage.find_by_title("WiFi issues") == topic
    assert storage.find_by_title("wifi issues") is None
    assert storage.get_topic("missing") is None


def test_data_persists_across_instances(tmp_path) -> None:
    path = str(tmp_path / "nested" / "topics.json")
    TopicStorage(topics_path=path).create_topic("Library hours", "Close too early", category="Academics")

    reopened = TopicStorage(topics_path=path)

    assert reopened.find_titles() == ["Library hours"]


def test_filters_and_sorting(storage) -> None:
    storage.create_topic("A", "a", category="Hostel", votes=2)
    storage.create_topic("B", "b", category="Academics", votes=5)
    storage.create_topic("C", "c", category="Hostel", votes=5)

    assert storage.find_titles() == ["A", "B", "C"]
    assert storage.count_by_filter() == 3
    assert storage.count_by_filter("All") == 3
    assert storage.count_by_filter("Hostel") == 2
    assert [t.title for t in storage.find_sorted_by_votes()] == ["B", "C", "A"]
    assert [t.title for t in storage.find_sorted_by_votes("Hostel", limit=1)] == ["C"]
    assert [t.title for t in storage.find_topics(limit=2)] == ["A", "B"]


def test_increment_votes(storage) -> None:
    topic = storage.create_topic("WiFi issues", "down")

    updated = storage.increment_votes(topic.id)

    assert updated.votes == 2
    assert storage.get_topic(topic.id).votes == 2
    assert storage.get_topic(topic.id).created_at == topic.created_at
    assert storage.increment_votes("missing") is None


def test_concurrent_increments_are_not_lost(tmp_path) -> None:
    path = str(tmp_path / "topics.json")
    topic = TopicStorage(topics_path=path).create_topic("WiFi issues", "down")

    def bump(_):
        # separate instances on the same file share one lock
        return TopicStorage(topics_path=path).increment_votes(topic.id)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(bump, range(40)))

    assert TopicStorage(topics_path=path).get_topic(topic.id).votes == 41


def test_aggregate_by_category(storage) -> None:
    storage.create_topic("A", "a", category="Hostel")
    storage.create_topic("B", "b", category="Academics")
    storage.create_topic("C", "c", category="Hostel")

    assert storage.aggregate_by_category() == [
        {"category": "Hostel", "count": 2},
        {"category": "Academics", "count": 1},
    ]
    assert storage.aggregate_by_category("Academics") == [{"category": "Academics", "count": 1}]
    assert TopicStorage(topics_path=str(storage.topics_path) + ".empty").aggregate_by_category() == []


def test_aggregate_by_date_range(storage, now) -> None:
    storage.create_topic("A", "a", created_at=now)
    storage.create_topic("B", "b", created_at=now)
    storage.create_topic("C", "c", category="Hostel", created_at=now - timedelta(days=2))
    storage.create_topic("D", "d", created_at=now - timedelta(days=10))

    start, end = trend_window(7, now.date())

    assert start == now.date() - timedelta(days=6)
    assert storage.aggregate_by_date_range(start, end) == [
        {"date": "2025-02-27", "count": 1},
        {"date": "2025-03-01", "count": 2},
    ]
    assert storage.aggregate_by_date_range(start, end, "Hostel") == [{"date": "2025-02-27", "count": 1}]
    assert storage.aggregate_by_date_range(end + timedelta(days=1), end + timedelta(days=5)) == []
