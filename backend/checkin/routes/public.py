# /checkin/routes/public.py

from datetime import datetime
from fastapi import APIRouter

from checkin.config.settings import settings
from checkin.services.session_service import session_service

# Public endpoints that do not touch a session: root info and health checks.

router = APIRouter()

@router.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Check-in Flow Engine",
        "version": "1.0.0",
        "status": "operational",
        "environment": settings.environment
    }

@router.get("/health", summary="Basic Health Check")
async def health_check():
    """Basic health check for load balancers."""
    return {
        "status": "healthy",
        "live_sessions": len(session_service.sessions),
        "timestamp": datetime.utcnow()
    }
