"""Severity heuristic blending popularity and recency."""
import math
from datetime import datetime
from typing import Any, Optional

from feedback_intel.utils.helpers import parse_timestamp, utc_now

MIN_SEVERITY = 1
MAX_SEVERITY = 5
UNKNOWN_AGE_DAYS = 999.0
SECONDS_PER_DAY = 60 * 60 * 24


def age_in_days(created_at: Any, now: Optional[datetime] = None) -> float:
    """Days since `created_at`; unknown or unparseable timestamps count as 999."""
    created = parse_timestamp(created_at)
    if created is None:
        return UNKNOWN_AGE_DAYS
    reference = parse_timestamp(now) if now is not None else utc_now()
    return max(0.0, (reference - created).total_seconds() / SECONDS_PER_DAY)


def compute_severity(votes: Optional[int], created_at: Any, now: Optional[datetime] = None) -> int:
    """
    Score a topic from 1 (minor) to 5 (urgent).

    Args:
        votes: Vote count, None reads as 0
        created_at: Creation timestamp (datetime or ISO string)
        now: Reference time, defaults to the current UTC time

    Returns:
        Integer severity in [1, 5]
    """
    vote_score = math.log10(max(1, int(votes or 0))) * 2
    age = age_in_days(created_at, now)
    if age <= 7:
        recency_score = 2
    elif age <= 30:
        recency_score = 1
    else:
        recency_score = 0

    raw = 1 + vote_score + recency_score
    # round half up
    rounded = math.floor(raw + 0.5)
    return max(MIN_SEVERITY, min(MAX_SEVERITY, rounded))


def topic_severity(topic, now: Optional[datetime] = None) -> int:
    """Severity of a FeedbackTopic."""
    return compute_severity(topic.votes, topic.created_at, now)
