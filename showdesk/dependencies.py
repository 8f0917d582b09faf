"""
FastAPI dependency injection.
Provides the backend client, import pipeline and API key validation.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from showdesk.client.backend import BackendClient
from showdesk.config import settings
from showdesk.pipeline.orchestrator import ImportPipeline
from showdesk.review.sessions import ImportSessionStore


# ── Singleton instances ──────────────────────────────────────
_backend_client: Optional[BackendClient] = None
_session_store: Optional[ImportSessionStore] = None


def get_backend_client() -> BackendClient:
    """Get or create the backend client singleton."""
    global _backend_client
    if _backend_client is None:
        _backend_client = BackendClient()
    return _backend_client


def get_session_store() -> ImportSessionStore:
    """Get or create the import session store singleton."""
    global _session_store
    if _session_store is None:
        _session_store = ImportSessionStore()
    return _session_store


def get_import_pipeline(
    client: BackendClient = Depends(get_backend_client),
    store: ImportSessionStore = Depends(get_session_store),
) -> ImportPipeline:
    return ImportPipeline(client, store)


async def close_backend_client() -> None:
    global _backend_client
    if _backend_client is not None:
        await _backend_client.aclose()
        _backend_client = None


async def verify_api_key(
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> Optional[str]:
    """
    Verify API key if configured.
    If API_KEY is not set, all requests are allowed (dev mode).
    """
    if settings.API_KEY is None:
        return None

    if x_api_key is None or x_api_key != settings.API_KEY:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return x_api_key
