"""FeedbackTopic record shared by the store and the engine."""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from feedback_intel.utils.config import FALLBACK_CATEGORY
from feedback_intel.utils.helpers import format_timestamp, parse_timestamp


@dataclass
class FeedbackTopic:
    """A single piece of student feedback and its vote count."""
    id: str
    title: str
    description: str
    category: str = FALLBACK_CATEGORY
    votes: int = 1
    status: str = "open"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "FeedbackTopic":
        """Build a topic from a stored JSON record."""
        return cls(
            id=str(record.get('id', '')),
            title=record.get('title') or '',
            description=record.get('description') or '',
            category=record.get('category') or FALLBACK_CATEGORY,
            votes=int(record.get('votes') or 0),
            status=record.get('status') or 'open',
            created_at=parse_timestamp(record.get('created_at')),
            updated_at=parse_timestamp(record.get('updated_at')),
        )

    def to_record(self) -> Dict[str, Any]:
        """Serialize for the JSON store."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'category': self.category,
            'votes': self.votes,
            'status': self.status,
            'created_at': format_timestamp(self.created_at),
            'updated_at': format_timestamp(self.updated_at),
        }

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for API responses and oracle prompts."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'category': self.category,
            'votes': self.votes,
            'status': self.status,
            'createdAt': format_timestamp(self.created_at),
            'updatedAt': format_timestamp(self.updated_at),
        }
