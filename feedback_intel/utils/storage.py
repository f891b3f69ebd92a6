"""
Storage Layer for the Feedback Intelligence Engine.

Persists FeedbackTopic records to a single JSON file and provides the
operations the engine consumes:
- title lookups for duplicate matching
- counts, vote-sorted listings and samples filtered by category
- topic creation and the atomic vote increment
- category and daily aggregations (pandas)
"""
import json
import threading
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from feedback_intel.topics import FeedbackTopic
from feedback_intel.utils.config import ALL_CATEGORIES, FALLBACK_CATEGORY, Config
from feedback_intel.utils.helpers import generate_topic_id, utc_now
from feedback_intel.utils.logging_config import setup_logger

logger = setup_logger(__name__)

# One lock per backing file, shared by every TopicStorage in the process.
_FILE_LOCKS: Dict[str, threading.RLock] = {}
_FILE_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _FILE_LOCKS_GUARD:
        if key not in _FILE_LOCKS:
            _FILE_LOCKS[key] = threading.RLock()
        return _FILE_LOCKS[key]


def _category_filter(category: Optional[str]) -> Optional[str]:
    if not category or category == ALL_CATEGORIES:
        return None
    return category


class TopicStorage:
    """JSON-file topic store."""

    def __init__(self, config: Config = None, topics_path: str = None):
        """
        Initialize the topic store.

        Args:
            config: Configuration object (defaults are used if not provided)
            topics_path: Explicit JSON file path, overrides the config
        """
        if config is None:
            config = Config()

        self.topics_path = Path(topics_path or config.storage.topics_path)
        self.topics_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = _lock_for(self.topics_path)

    # ========== Raw file access ==========

    def _load_records(self) -> List[Dict[str, Any]]:
        if not self.topics_path.exists():
            return []

        try:
            with open(self.topics_path, 'r') as f:
                data = json.load(f)
        except Exception as e:
            logger.error(f"Error loading topics from {self.topics_path}: {e}", exc_info=True)
            raise

        return data.get('topics', [])

    def _save_records(self, records: List[Dict[str, Any]]):
        data = {
            'topics': records,
            'last_updated': utc_now().isoformat(),
            'num_topics': len(records)
        }
        tmp_path = self.topics_path.with_suffix(self.topics_path.suffix + '.tmp')
        try:
            with open(tmp_path, 'w') as f:
                json.dump(data, f, indent=2)
            tmp_path.replace(self.topics_path)
        except Exception as e:
            logger.error(f"Error saving topics to {self.topics_path}: {e}", exc_info=True)
            raise

    def _load_topics(self, category: Optional[str] = None) -> List[FeedbackTopic]:
        with self._lock:
            records = self._load_records()
        topics = [FeedbackTopic.from_record(record) for record in records]
        wanted = _category_filter(category)
        if wanted is not None:
            topics = [topic for topic in topics if topic.category == wanted]
        return topics

    # ========== Lookups ==========

    def find_titles(self) -> List[str]:
        """All topic titles, in insertion order, across every category."""
        return [topic.title for topic in self._load_topics()]

    def find_by_title(self, title: str) -> Optional[FeedbackTopic]:
        """First topic whose title equals `title` exactly."""
        for topic in self._load_topics():
            if topic.title == title:
                return topic
        return None

    def get_topic(self, topic_id: str) -> Optional[FeedbackTopic]:
        for topic in self._load_topics():
            if topic.id == topic_id:
                return topic
        return None

    def count_by_filter(self, category: Optional[str] = None) -> int:
        """Number of topics, optionally restricted to one category."""
        return len(self._load_topics(category))

    def find_sorted_by_votes(self, category: Optional[str] = None, limit: Optional[int] = None) -> List[FeedbackTopic]:
        """Topics sorted by votes descending (stable on insertion order)."""
        topics = sorted(self._load_topics(category), key=lambda topic: -topic.votes)
        if limit is not None:
            topics = topics[:limit]
        return topics

    def find_topics(self, category: Optional[str] = None, limit: Optional[int] = None) -> List[FeedbackTopic]:
        """Topics in insertion order, optionally capped."""
        topics = self._load_topics(category)
        if limit is not None:
            topics = topics[:limit]
        return topics

    # ========== Writes ==========

    def create_topic(
        self,
        title: str,
        description: str,
        category: str = FALLBACK_CATEGORY,
        votes: int = 1,
        status: str = "open",
        created_at: Optional[datetime] = None
    ) -> FeedbackTopic:
        """
        Persist a new topic.

        Args:
            title: Topic title
            description: Topic description
            category: Resolved category
            votes: Initial vote count
            status: Workflow status
            created_at: Creation time (defaults to now)

        Returns:
            The stored topic
        """
        now = utc_now()
        topic = FeedbackTopic(
            id=generate_topic_id(),
            title=title,
            description=description,
            category=category or FALLBACK_CATEGORY,
            votes=votes,
            status=status,
            created_at=created_at or now,
            updated_at=now,
        )

        with self._lock:
            records = self._load_records()
            records.append(topic.to_record())
            self._save_records(records)

        logger.info(f"Created topic {topic.id} in {topic.category}")
        return topic

    def increment_votes(self, topic_id: str, amount: int = 1) -> Optional[FeedbackTopic]:
        """
        Atomically add `amount` votes to a topic.

        The read-modify-write happens under the file lock, so concurrent
        increments on the same topic are never lost.

        Returns:
            The updated topic, or None if no topic has this id
        """
        with self._lock:
            records = self._load_records()
            for record in records:
                if str(record.get('id')) == topic_id:
                    record['votes'] = int(record.get('votes') or 0) + amount
                    record['updated_at'] = utc_now().isoformat()
                    self._save_records(records)
                    logger.info(f"Incremented votes for topic {topic_id} to {record['votes']}")
                    return FeedbackTopic.from_record(record)

        logger.warning(f"Cannot increment votes, topic {topic_id} not found")
        return None

    # ========== Aggregations ==========

    def _frame(self, category: Optional[str] = None) -> pd.DataFrame:
        topics = self._load_topics(category)
        return pd.DataFrame(
            [{'category': topic.category, 'created_at': topic.created_at} for topic in topics],
            columns=['category', 'created_at']
        )

    def aggregate_by_category(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Count topics per category.

        Returns:
            List of {"category", "count"} sorted by count descending
        """
        df = self._frame(category)
        if df.empty:
            return []

        counts = df.groupby('category').size().reset_index(name='count')
        counts = counts.sort_values(['count', 'category'], ascending=[False, True])
        return [
            {'category': record['category'], 'count': int(record['count'])}
            for record in counts.to_dict('records')
        ]

    def aggregate_by_date_range(
        self,
        start: date,
        end: date,
        category: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Count topics created per UTC day in [start, end].

        Days with no submissions are omitted.

        Returns:
            List of {"date": "YYYY-MM-DD", "count"} in ascending date order
        """
        df = self._frame(category).dropna(subset=['created_at'])
        if df.empty:
            return []

        days = pd.to_datetime(df['created_at'], utc=True).dt.date
        in_range = days[(days >= start) & (days <= end)]
        if in_range.empty:
            return []

        counts = in_range.value_counts().sort_index()
        return [
            {'date': day.isoformat(), 'count': int(count)}
            for day, count in counts.items()
        ]


def trend_window(days: int, today: Optional[date] = None) -> tuple:
    """(start, end) dates of the last `days` days, today inclusive."""
    end = today or utc_now().date()
    return end - timedelta(days=days - 1), end
