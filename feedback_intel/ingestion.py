"""Feedback submission flow: merge into a duplicate or create a new topic."""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from feedback_intel.classifier import CategoryClassifier
from feedback_intel.matcher import DuplicateMatcher
from feedback_intel.topics import FeedbackTopic
from feedback_intel.utils.helpers import truncate_text
from feedback_intel.utils.logging_config import setup_logger
from feedback_intel.utils.storage import TopicStorage

logger = setup_logger(__name__)


class InvalidFeedbackError(ValueError):
    """A submission is missing its title or description."""


@dataclass
class IngestionResult:
    """Outcome of one submission."""
    merged: bool
    topic: FeedbackTopic
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'merged': self.merged,
            'topic': self.topic.to_payload(),
            'category': self.category,
        }


def _require_text(value: Optional[str], field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidFeedbackError(f"{field_name} is required")
    return value.strip()


class FeedbackIngestor:
    """Runs duplicate matching, then classification, for each submission."""

    def __init__(
        self,
        storage: TopicStorage,
        matcher: DuplicateMatcher,
        classifier: CategoryClassifier
    ):
        self.storage = storage
        self.matcher = matcher
        self.classifier = classifier

    async def submit(self, title: str, description: str) -> IngestionResult:
        """
        Ingest one piece of feedback.

        Args:
            title: Topic being complained about
            description: Free-text details

        Returns:
            IngestionResult with merged=True when votes went to an existing topic

        Raises:
            InvalidFeedbackError: If title or description is blank
        """
        title = _require_text(title, "title")
        description = _require_text(description, "description")
        logger.info(f"FEEDBACK: Received submission {truncate_text(title, 60)!r}")

        existing_titles = self.storage.find_titles()
        match = await self.matcher.find_match(title, existing_titles)

        if match.matched:
            existing = self.storage.find_by_title(match.matched_topic)
            updated = self.storage.increment_votes(existing.id) if existing is not None else None
            if updated is not None:
                logger.info(f"FEEDBACK: Merged into topic {updated.id} ({updated.votes} votes)")
                return IngestionResult(merged=True, topic=updated, category=updated.category)
            logger.warning(f"FEEDBACK: Matched topic {match.matched_topic!r} disappeared, creating a new topic")

        category = await self.classifier.classify(title, description)
        topic = self.storage.create_topic(
            title=title,
            description=description,
            category=category,
            votes=1
        )
        logger.info(f"FEEDBACK: Created topic {topic.id} in {category}")
        return IngestionResult(merged=False, topic=topic, category=category)
