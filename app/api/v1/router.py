"""API v1 router aggregation.

Includes all endpoint modules with consistent tags. All routes use
dependencies from app.api.v1.dependencies (no manual service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import file_info, health, upload

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(upload.router, tags=["upload"])
api_router.include_router(file_info.router, tags=["files"])
