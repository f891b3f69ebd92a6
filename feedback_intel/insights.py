"""
Insights aggregation for the admin dashboard.

Combines store reads, theme clustering and severity scoring into summary
payloads. The prose summary may come from the oracle under a hard timeout;
otherwise a deterministic template is used, so a response is always produced.
"""
import json
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from feedback_intel.severity import topic_severity
from feedback_intel.themes import ThemeClusterer
from feedback_intel.topics import FeedbackTopic
from feedback_intel.utils.config import ALL_CATEGORIES, Config
from feedback_intel.utils.helpers import format_timestamp
from feedback_intel.utils.logging_config import setup_logger
from feedback_intel.utils.ollama_client import OracleError, TextOracle, consult_oracle
from feedback_intel.utils.storage import TopicStorage, trend_window

logger = setup_logger(__name__)

SUMMARY_SOURCE_ORACLE = "ollama"
SUMMARY_SOURCE_DETERMINISTIC = "deterministic"


def _topic_summary(topic: FeedbackTopic) -> Dict[str, Any]:
    return {
        'id': topic.id,
        'title': topic.title,
        'category': topic.category,
        'votes': topic.votes,
        'createdAt': format_timestamp(topic.created_at),
    }


def make_deterministic_summary(
    total_submissions: int,
    top_topics: List[Dict[str, Any]],
    themes: List[Dict[str, Any]],
    top_count: int = 3
) -> str:
    """
    Template summary used when the oracle is off or fails.

    Args:
        total_submissions: Number of topics in scope
        top_topics: Topic payloads sorted by votes
        themes: Theme payloads sorted by total votes
        top_count: How many topic titles to name

    Returns:
        Summary sentence(s)
    """
    titles = [topic.get('title') for topic in top_topics[:top_count] if topic.get('title')]
    if themes:
        top_theme = themes[0]
        theme_line = (
            f"Top theme is \"{top_theme['title']}\" in {top_theme['category']} "
            f"(votes: {top_theme['votesTotal']})."
        )
    else:
        theme_line = "No dominant theme yet."

    return f"Total submissions: {total_submissions}. Top topics: {', '.join(titles) or 'N/A'}. {theme_line}"


class InsightsAggregator:
    """Builds insights, analytics and theme payloads from the topic store."""

    def __init__(
        self,
        storage: TopicStorage,
        oracle: Optional[TextOracle] = None,
        config: Config = None,
        clusterer: ThemeClusterer = None
    ):
        """
        Initialize the aggregator.

        Args:
            storage: Topic store
            oracle: Text oracle for prose summaries (optional)
            config: Configuration object
            clusterer: Theme clusterer (built from config if not provided)
        """
        self.storage = storage
        self.oracle = oracle
        self.config = config or Config()
        self.clusterer = clusterer or ThemeClusterer(self.config.engine)

    def resolve_category(self, category: Optional[str]) -> str:
        """Known category names pass through, anything else means All."""
        if isinstance(category, str) and category.strip() in self.config.engine.categories:
            return category.strip()
        return ALL_CATEGORIES

    def build_themes(self, category: Optional[str] = None, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Cluster every stored topic in scope into theme payloads."""
        selected = self.resolve_category(category)
        topics = self.storage.find_topics(selected)
        themes = self.clusterer.cluster(topics, now=now)
        logger.info(f"Built {len(themes)} themes from {len(topics)} topics ({selected})")
        return [theme.to_dict() for theme in themes]

    def severity_leaderboard(self, topics: List[FeedbackTopic], now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Rank topics by severity, then votes, both descending."""
        scored = [
            dict(_topic_summary(topic), severity=topic_severity(topic, now))
            for topic in topics
        ]
        scored.sort(key=lambda entry: (-entry['severity'], -entry['votes']))
        return scored[:self.config.engine.leaderboard_limit]

    async def build_insights(self, category: Optional[str] = None, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Assemble the insights payload for one category or All.

        Storage errors propagate; oracle problems never do.

        Args:
            category: Category name, anything unknown reads as All
            now: Reference time for severity scoring

        Returns:
            Insights payload with summary and summarySource
        """
        engine = self.config.engine
        selected = self.resolve_category(category)
        logger.info(f"INSIGHTS: Building insights for {selected}")

        total_submissions = self.storage.count_by_filter(selected)
        top_topics = self.storage.find_sorted_by_votes(selected, limit=engine.top_topics_limit)
        sample = self.storage.find_topics(selected, limit=engine.theme_sample_size)
        themes = self.clusterer.cluster(sample, now=now)
        category_distribution = self.storage.aggregate_by_category(selected)

        payload = {
            'selectedCategory': selected,
            'totalSubmissions': total_submissions,
            'topTopics': [_topic_summary(topic) for topic in top_topics],
            'categoryDistribution': category_distribution,
            'themes': [theme.to_dict() for theme in themes[:engine.themes_limit]],
            'severityLeaderboard': self.severity_leaderboard(top_topics, now),
        }

        oracle_summary = await self.try_oracle_summary(payload)
        if oracle_summary:
            payload['summary'] = oracle_summary
            payload['summarySource'] = SUMMARY_SOURCE_ORACLE
        else:
            payload['summary'] = make_deterministic_summary(
                total_submissions,
                payload['topTopics'],
                payload['themes'],
                top_count=engine.summary_top_topics
            )
            payload['summarySource'] = SUMMARY_SOURCE_DETERMINISTIC

        logger.info(f"INSIGHTS: {total_submissions} submissions, {len(themes)} themes, "
                    f"summary from {payload['summarySource']}")
        return payload

    def build_summary_prompt(self, payload: Dict[str, Any]) -> str:
        data = json.dumps(payload, default=str)[:self.config.ollama.summary_char_budget]
        return "\n".join([
            "You are an analytics assistant for a university feedback platform.",
            "Summarize the key insights in 4-6 bullet points. Be concrete and action-oriented.",
            "Data (JSON):",
            data,
        ])

    async def try_oracle_summary(self, payload: Dict[str, Any]) -> Optional[str]:
        """One bounded oracle call for a prose summary, None on any failure or when disabled."""
        ollama = self.config.ollama
        if not ollama.summary_enabled or self.oracle is None:
            return None

        try:
            summary = await consult_oracle(
                self.oracle,
                self.build_summary_prompt(payload),
                ollama.summary_timeout_seconds,
                purpose="insights summary"
            )
        except OracleError:
            return None

        return summary or None

    def build_analytics(self, category: Optional[str] = None, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Dashboard analytics: totals, top topics, category split and daily trend.

        Args:
            category: Category name, anything unknown reads as All
            today: Last day of the trend window (defaults to today, UTC)
        """
        engine = self.config.engine
        selected = self.resolve_category(category)
        start, end = trend_window(engine.trend_window_days, today)

        top_topics = self.storage.find_sorted_by_votes(selected, limit=engine.analytics_top_topics)
        return {
            'selectedCategory': selected,
            'totalSubmissions': self.storage.count_by_filter(selected),
            'topTopics': [_topic_summary(topic) for topic in top_topics],
            'categoryDistribution': self.storage.aggregate_by_category(selected),
            'weeklyTrends': self.storage.aggregate_by_date_range(start, end, selected),
        }
