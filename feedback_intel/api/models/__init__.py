"""API models package initialization."""
from .requests import FeedbackRequest
from .responses import (
    TopicResponse,
    TopicSummaryResponse,
    LeaderboardEntryResponse,
    ThemeTopicResponse,
    ThemeResponse,
    CategoryCountResponse,
    DailyCountResponse,
    IngestionResponse,
    InsightsResponse,
    AnalyticsResponse
)

__all__ = [
    'FeedbackRequest',
    'TopicResponse',
    'TopicSummaryResponse',
    'LeaderboardEntryResponse',
    'ThemeTopicResponse',
    'ThemeResponse',
    'CategoryCountResponse',
    'DailyCountResponse',
    'IngestionResponse',
    'InsightsResponse',
    'AnalyticsResponse'
]
