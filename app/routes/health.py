"""
Health check endpoints.
Used for monitoring, deployment readiness checks, and basic connectivity tests.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from google.api_core.exceptions import GoogleAPIError
from app.config.firebase import get_db
from app.core.errors import StoreUnavailable
from app.core.settings import settings
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check():
    """
    Basic health check endpoint.
    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/db")
def database_health():
    """
    Database connectivity check.
    Lists collections as a lightweight round trip to the store.
    """
    try:
        db = get_db()
        collections = list(db.collections())
    except (StoreUnavailable, GoogleAPIError) as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(status_code=503, content={"error": "Database connection failed"})

    return {
        "status": "healthy",
        "database": "firestore",
        "connected": True,
        "collections_count": len(collections),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
