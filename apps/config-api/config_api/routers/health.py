"""
File: routers/health.py
Purpose: Liveness probe and service index.
"""

from fastapi import APIRouter, Depends
from ..config import Settings
from ..deps import get_settings
from ..utils import utc_timestamp

router = APIRouter()

@router.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict:
    """Return service health status for liveness probes."""
    return {
        "status": "healthy",
        "timestamp": utc_timestamp(),
        "version": settings.SERVICE_VERSION,
        "environment": settings.ENV,
    }

@router.get("/")
def index(settings: Settings = Depends(get_settings)) -> dict:
    return {
        "name": "Configuration API",
        "version": settings.SERVICE_VERSION,
        "endpoints": {"health": "/health", "config": "/api/config", "metrics": "/metrics"},
    }
