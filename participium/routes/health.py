"""
Liveness and readiness probes.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
import logging

from participium.config.firebase import get_db
from participium.core.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])

# Collections the application writes to
APP_COLLECTIONS = (
    "users",
    "reports",
    "report_messages",
    "internal_notes",
    "notifications",
    "external_companies",
    "telegram_link_tokens",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("")
async def liveness():
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": _now(),
    }


@router.get("/db")
async def readiness():
    """
    Ready when the Firestore client answers a collection listing.
    Reports which of the application's collections already hold data.
    """
    try:
        existing = {c.id for c in get_db().collections()}
    except Exception as e:
        logger.error(f"Readiness probe failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "message": "Database connection failed", "timestamp": _now()},
        )

    return {
        "status": "healthy",
        "backend": "mock" if settings.USE_MOCK_DB else "firestore",
        "collections": {name: name in existing for name in APP_COLLECTIONS},
        "timestamp": _now(),
    }
