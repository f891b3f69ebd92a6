"""
Deterministic theme clustering.

Groups topics by category, then greedily merges topics within a category
whose tokens overlap a cluster's running token union. No oracle is involved,
so the same topics in the same order always give the same themes.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Set

from feedback_intel.severity import topic_severity
from feedback_intel.text import jaccard, tokenize
from feedback_intel.topics import FeedbackTopic
from feedback_intel.utils.config import FALLBACK_CATEGORY, EngineConfig
from feedback_intel.utils.helpers import format_timestamp
from feedback_intel.utils.logging_config import setup_logger

logger = setup_logger(__name__)

THEME_TOPICS_LIMIT = 5
UNTITLED = "Untitled"


@dataclass
class ThemeTopic:
    """Reduced view of a member topic."""
    id: str
    title: str
    votes: int
    created_at: Optional[datetime]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'votes': self.votes,
            'createdAt': format_timestamp(self.created_at),
        }


@dataclass
class Theme:
    """A cluster of lexically similar topics within one category."""
    category: str
    title: str
    count: int
    votes_total: int
    severity: int
    topics: List[ThemeTopic] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category,
            'title': self.title,
            'count': self.count,
            'votesTotal': self.votes_total,
            'severity': self.severity,
            'topics': [topic.to_dict() for topic in self.topics],
        }


@dataclass
class _Cluster:
    title: str
    tokens: Set[str]
    members: List[FeedbackTopic]
    votes_total: int
    severity_max: int


class ThemeClusterer:
    """Greedy single-pass clustering of topics into themes."""

    def __init__(self, config: EngineConfig = None):
        self.config = config or EngineConfig()

    def topic_tokens(self, topic: FeedbackTopic) -> List[str]:
        return tokenize(f"{topic.title or ''} {topic.description or ''}", self.config.stopwords)

    def cluster(
        self,
        topics: Sequence[FeedbackTopic],
        threshold: Optional[float] = None,
        now: Optional[datetime] = None
    ) -> List[Theme]:
        """
        Cluster topics into themes.

        Args:
            topics: Topics in their source order
            threshold: Minimum Jaccard score to join a cluster
            now: Reference time for severity scoring

        Returns:
            Themes sorted by total votes, descending
        """
        if threshold is None:
            threshold = self.config.similarity_threshold

        by_category: Dict[str, List[FeedbackTopic]] = {}
        for topic in topics or []:
            by_category.setdefault(topic.category or FALLBACK_CATEGORY, []).append(topic)

        themes: List[Theme] = []
        for category, members in by_category.items():
            clusters = self._cluster_partition(members, threshold, now)
            category_themes = [self._to_theme(category, cluster) for cluster in clusters]
            category_themes.sort(key=lambda theme: -theme.votes_total)
            themes.extend(category_themes)

        themes.sort(key=lambda theme: -theme.votes_total)
        logger.debug(f"Clustered {len(topics or [])} topics into {len(themes)} themes "
                     f"across {len(by_category)} categories (threshold={threshold})")
        return themes

    def _cluster_partition(
        self,
        topics: Sequence[FeedbackTopic],
        threshold: float,
        now: Optional[datetime]
    ) -> List[_Cluster]:
        clusters: List[_Cluster] = []

        for topic in topics:
            tokens = self.topic_tokens(topic)
            votes = int(topic.votes or 0)
            severity = topic_severity(topic, now)

            best_index = -1
            best_score = 0.0
            for index, cluster in enumerate(clusters):
                score = jaccard(tokens, cluster.tokens)
                # strict > keeps the earliest cluster on ties
                if score > best_score:
                    best_score = score
                    best_index = index

            if best_index != -1 and best_score >= threshold:
                cluster = clusters[best_index]
                cluster.members.append(topic)
                cluster.tokens.update(tokens)
                cluster.votes_total += votes
                cluster.severity_max = max(cluster.severity_max, severity)
            else:
                clusters.append(_Cluster(
                    title=topic.title or UNTITLED,
                    tokens=set(tokens),
                    members=[topic],
                    votes_total=votes,
                    severity_max=severity,
                ))

        return clusters

    def _to_theme(self, category: str, cluster: _Cluster) -> Theme:
        top_members = sorted(cluster.members, key=lambda topic: -int(topic.votes or 0))
        return Theme(
            category=category,
            title=cluster.title,
            count=len(cluster.members),
            votes_total=cluster.votes_total,
            severity=cluster.severity_max,
            topics=[
                ThemeTopic(
                    id=topic.id,
                    title=topic.title,
                    votes=topic.votes,
                    created_at=topic.created_at,
                )
                for topic in top_members[:THEME_TOPICS_LIMIT]
            ],
        )


def group_into_themes(
    topics: Sequence[FeedbackTopic],
    threshold: Optional[float] = None,
    config: EngineConfig = None,
    now: Optional[datetime] = None
) -> List[Theme]:
    """Convenience wrapper around ThemeClusterer.cluster."""
    return ThemeClusterer(config).cluster(topics, threshold=threshold, now=now)
