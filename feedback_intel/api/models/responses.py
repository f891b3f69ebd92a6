"""Pydantic response models for the API."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts either spelling."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TopicResponse(CamelModel):
    """Response model for a stored feedback topic."""
    id: str
    title: str
    description: str
    category: str
    votes: int
    status: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class TopicSummaryResponse(CamelModel):
    """Topic entry in top-topic listings."""
    id: str
    title: str
    category: str
    votes: int
    created_at: Optional[str] = None


class LeaderboardEntryResponse(TopicSummaryResponse):
    """Topic entry ranked by severity."""
    severity: int


class ThemeTopicResponse(CamelModel):
    """Member topic of a theme."""
    id: str
    title: str
    votes: int
    created_at: Optional[str] = None


class ThemeResponse(CamelModel):
    """Response model for a computed theme."""
    category: str
    title: str
    count: int
    votes_total: int
    severity: int
    topics: List[ThemeTopicResponse]


class CategoryCountResponse(CamelModel):
    category: str
    count: int


class DailyCountResponse(CamelModel):
    date: str
    count: int


class IngestionResponse(CamelModel):
    """Response model for a feedback submission."""
    merged: bool
    topic: TopicResponse
    category: str


class InsightsResponse(CamelModel):
    """Response model for the insights summary."""
    selected_category: str
    total_submissions: int
    top_topics: List[TopicSummaryResponse]
    category_distribution: List[CategoryCountResponse]
    themes: List[ThemeResponse]
    severity_leaderboard: List[LeaderboardEntryResponse]
    summary: str
    summary_source: str


class AnalyticsResponse(CamelModel):
    """Response model for dashboard analytics."""
    selected_category: str
    total_submissions: int
    top_topics: List[TopicSummaryResponse]
    category_distribution: List[CategoryCountResponse]
    weekly_trends: List[DailyCountResponse]
