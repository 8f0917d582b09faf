"""
Health check endpoint.
/health always returns 200; /health/ready also probes the backend API.
"""

from fastapi import APIRouter, Depends

from showdesk.client.backend import BackendClient, BackendError
from showdesk.config import settings
from showdesk.dependencies import get_backend_client, get_session_store
from showdesk.review.sessions import ImportSessionStore

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(store: ImportSessionStore = Depends(get_session_store)):
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "open_imports": len(store),
    }


@router.get("/health/ready")
async def readiness_check(client: BackendClient = Depends(get_backend_client)):
    """Readiness probe: the backend must answer a listing call."""
    try:
        await client.list_shows()
        return {"ready": True}
    except BackendError as e:
        return {"ready": False, "backend_error": e.message[:200]}
