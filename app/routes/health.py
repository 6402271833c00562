"""
Health check endpoints.
Used for monitoring, deployment readiness checks, and basic connectivity tests.
"""

from fastapi import APIRouter
from app.config.firebase import get_db
from app.core.errors import ApiError
from app.core.settings import settings
from datetime import datetime, timezone


router = APIRouter(prefix="/health", tags=["Health"])

# Collections the report and notification flows read on every request
CORE_COLLECTIONS = ["reports", "notifications", "categories", "users"]


@router.get("")
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "notification_dispatch": settings.NOTIFICATION_DISPATCH_ENABLED,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/db")
async def database_health():
    """
    Database connectivity check.

    Reads at most one document from each core collection, so an unreachable
    Firestore (or missing permissions on one collection) shows up as 503.
    Empty collections are reported as such, not as failures.
    """
    try:
        db = get_db()
        collections = {
            name: len(db.collection(name).limit(1).get()) > 0
            for name in CORE_COLLECTIONS
        }
    except Exception as e:
        raise ApiError(503, f"Database connection failed: {str(e)}")

    return {
        "status": "healthy",
        "database": "firestore",
        "connected": True,
        "collections": {name: "populated" if has_docs else "empty" for name, has_docs in collections.items()},
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
