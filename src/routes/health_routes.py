"""
Health Check Routes

System health and status endpoints.
"""

from fastapi import APIRouter
from models.schemas import HealthResponse
from config.settings import settings


router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Reports "degraded" when Redis is unreachable: runs still work but
    reports are not persisted.
    """
    from config.database import test_connections

    status = test_connections()

    return HealthResponse(
        status="healthy" if status["redis"]["connected"] else "degraded",
        version=settings.APP_VERSION
    )


@router.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "description": "Tests whether AI assistants recognise a business, its services and its competitive position",
        "providers": settings.DEFAULT_PROVIDERS,
        "endpoints": {
            "health": "/health",
            "analyze": "POST /brand-awareness/analyze",
            "stream": "POST /brand-awareness/stream",
            "report": "GET /brand-awareness/report/{run_id}"
        }
    }
