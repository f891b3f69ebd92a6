"""Shared fixtures for the engine tests."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Callable, List, Optional

import pytest

from feedback_intel.topics import FeedbackTopic
from feedback_intel.utils.ollama_client import TextOracle
from feedback_intel.utils.storage import TopicStorage

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class StubOracle(TextOracle):
    """Oracle double that replays a canned reply, raises, or stalls."""

    def __init__(
        self,
        reply: str = "",
        error: Optional[BaseException] = None,
        delay: float = 0.0,
        responder: Optional[Callable[[str, bool], str]] = None,
    ) -> None:
        self.reply = reply
        self.error = error
        self.delay = delay
        self.responder = responder
        self.prompts: List[str] = []
        self.json_modes: List[bool] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: str, timeout_seconds: float, json_mode: bool = False) -> str:
        self.prompts.append(prompt)
        self.json_modes.append(json_mode)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.responder is not None:
            return self.responder(prompt, json_mode)
        return self.reply


@pytest.fixture
def stub_oracle() -> type:
    return StubOracle


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def storage(tmp_path) -> TopicStorage:
    return TopicStorage(topics_path=str(tmp_path / "topics.json"))


@pytest.fixture
def make_topic() -> Callable[..., FeedbackTopic]:
    counter = {"n": 0}

    def _make(
        title: str,
        description: str = "",
        category: str = "Other",
        votes: int = 1,
        created_at: Optional[datetime] = NOW,
    ) -> FeedbackTopic:
        counter["n"] += 1
        return FeedbackTopic(
            id=f"t{counter['n']}",
            title=title,
            description=description,
            category=category,
            votes=votes,
            created_at=created_at,
        )

    return _make
