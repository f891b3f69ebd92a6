"""Pydantic request models for the API."""
from pydantic import BaseModel, Field


class FeedbackRequest(BaseModel):
    """Request model for a student feedback submission."""
    title: str = Field(..., min_length=1, description="Topic being raised")
    description: str = Field(..., min_length=1, description="Details of the feedback")
