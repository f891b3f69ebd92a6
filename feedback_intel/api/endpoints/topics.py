"""Topics API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List
from feedback_intel.api.dependencies import get_storage
from feedback_intel.api.models.responses import TopicResponse
from feedback_intel.utils import setup_logger
from feedback_intel.utils.storage import TopicStorage

router = APIRouter()
logger = setup_logger(__name__)


@router.get("/top", response_model=List[TopicResponse])
async def get_top_topics(limit: int = Query(5, ge=1, le=100), storage: TopicStorage = Depends(get_storage)):
    """Most voted topics."""
    try:
        topics = storage.find_sorted_by_votes(limit=limit)
        logger.info(f"Retrieved {len(topics)} top topics")
        return [topic.to_payload() for topic in topics]
    except Exception as e:
        logger.error(f"Error getting top topics: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load top topics")


@router.get("/{topic_id}", response_model=TopicResponse)
async def get_topic_details(topic_id: str, storage: TopicStorage = Depends(get_storage)):
    """Get details for a specific topic."""
    try:
        logger.debug(f"Fetching details for topic_id={topic_id}")
        topic = storage.get_topic(topic_id)
    except Exception as e:
        logger.error(f"Error getting topic details: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch topic")

    if topic is None:
        logger.warning(f"Topic {topic_id} not found")
        raise HTTPException(status_code=404, detail=f"Topic {topic_id} not found")
    return topic.to_payload()
