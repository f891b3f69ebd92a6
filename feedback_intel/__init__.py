"""Feedback Intelligence Engine: ingestion, theme clustering, severity and insights for student feedback."""
from .classifier import CategoryClassifier
from .ingestion import FeedbackIngestor, IngestionResult, InvalidFeedbackError
from .insights import InsightsAggregator, make_deterministic_summary
from .matcher import DuplicateMatcher, MatchResult
from .severity import compute_severity
from .text import jaccard, tokenize
from .themes import Theme, ThemeClusterer, group_into_themes
from .topics import FeedbackTopic

__all__ = [
    'CategoryClassifier',
    'FeedbackIngestor',
    'IngestionResult',
    'InvalidFeedbackError',
    'InsightsAggregator',
    'make_deterministic_summary',
    'DuplicateMatcher',
    'MatchResult',
    'compute_severity',
    'jaccard',
    'tokenize',
    'Theme',
    'ThemeClusterer',
    'group_into_themes',
    'FeedbackTopic'
]
