"""
API Router

Mounted under ``settings.api_prefix`` (``/api`` by default).
"""

from fastapi import APIRouter

from . import bootstrap, tasks, users

router = APIRouter()

router.include_router(bootstrap.router, tags=["Bootstrap"])
router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
router.include_router(users.router, tags=["Users"])


@router.get("/", tags=["API"])
async def api_root():
    """API root: returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/bootstrap",
            "/tasks",
            "/users",
            "/reporting",
            "/auth/login",
        ],
    }
