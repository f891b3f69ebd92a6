"""Feedback submission API endpoints."""
from fastapi import APIRouter, Depends, HTTPException
from feedback_intel.api.dependencies import get_ingestor
from feedback_intel.api.models.requests import FeedbackRequest
from feedback_intel.api.models.responses import IngestionResponse
from feedback_intel.ingestion import FeedbackIngestor, InvalidFeedbackError
from feedback_intel.utils import setup_logger

router = APIRouter()
logger = setup_logger(__name__)


@router.post("", response_model=IngestionResponse, status_code=201)
async def submit_feedback(request: FeedbackRequest, ingestor: FeedbackIngestor = Depends(get_ingestor)):
    """Merge feedback into a matching topic or create a new one."""
    try:
        result = await ingestor.submit(request.title, request.description)
        return result.to_dict()
    except InvalidFeedbackError as e:
        logger.warning(f"Rejected feedback submission: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Error submitting feedback: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to submit feedback")
