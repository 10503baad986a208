from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text

from inventory_api.database import AppContext, get_context

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {
        "status": "OK",
        "message": "Inventory API is running",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the database is reachable."
)
def readiness_check(context: AppContext = Depends(get_context)):
    """
    Readiness check for all dependencies.

    Returns status of:
    - Database connection
    """
    checks = {"database": False}

    try:
        with context.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        checks["database_error"] = str(e)

    return {
        "status": "ready" if checks["database"] else "not_ready",
        "checks": checks
    }
