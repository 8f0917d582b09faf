"""
Top-level API router.
Combines all sub-routers into a single router.
"""

from fastapi import APIRouter

from showdesk.api.health import router as health_router
from showdesk.api.imports import router as imports_router
from showdesk.api.shows import router as shows_router

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(imports_router)
api_router.include_router(shows_router)
