"""
Health check endpoints.

Provides endpoints for monitoring application health.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from shared.config import Settings

from ..dependencies import get_app_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=settings.app_version)
