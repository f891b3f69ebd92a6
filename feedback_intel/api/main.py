"""
FastAPI Main Application for the Feedback Intelligence Engine.

This module provides the REST API for:
- Submitting student feedback (duplicate merge or new topic)
- Insights summaries and severity leaderboards
- Deterministic theme clustering
- Dashboard analytics and topic lookups
"""
import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from feedback_intel.api.endpoints import feedback, insights, topics
from feedback_intel.utils import APIConfig, setup_logger

logger = setup_logger(__name__)


def create_app(api_config: APIConfig = None) -> FastAPI:
    """Build the FastAPI application."""
    api_config = api_config or APIConfig()

    app = FastAPI(
        title="Feedback Intelligence API",
        description="Student feedback ingestion, theme clustering and insights",
        version="0.1.0"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(api_config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request and response with its duration."""
        start_time = time.time()
        logger.info(f"REQUEST: {request.method} {request.url.path}")

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(f"RESPONSE: {request.method} {request.url.path} - Status: {response.status_code} - Duration: {duration_ms:.2f}ms")
        return response

    app.include_router(feedback.router, prefix="/api/v1/feedback", tags=["Feedback"])
    app.include_router(insights.router, prefix="/api/v1", tags=["Insights"])
    app.include_router(topics.router, prefix="/api/v1/topics", tags=["Topics"])

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Feedback Intelligence API",
            "version": "0.1.0",
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    from feedback_intel.api.dependencies import get_config

    config = get_config()
    logger.info(f"Starting API server on {config.api.host}:{config.api.port}")

    uvicorn.run(
        create_app(config.api),
        host=config.api.host,
        port=config.api.port,
        reload=False,
    )
