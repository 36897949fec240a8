"""
Health check endpoint.
"""

from fastapi import APIRouter

from auditoiso.db import get_db

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {"status": "ok"}


@router.get("/health/detailed")
def detailed_health():
    """Detailed health check with datastore status."""
    status = get_db().status()
    healthy = all("error" not in c for c in status["collections"].values())

    return {
        "status": "ok" if healthy else "degraded",
        "store": status
    }
