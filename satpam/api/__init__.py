"""
API package for the Satpam backend.

This package aggregates all API routers to be included in the FastAPI
application. The API is versioned under ``/api/v1``.
"""

from fastapi import APIRouter, Depends
from .v1.auth import router as auth_router
from .v1.personnel import router as personnel_router
from .v1.locations import router as locations_router
from .v1.schedules import router as schedules_router
from .v1.reports import router as reports_router
from .v1.dashboard import router as dashboard_router
from .v1.health import router as health_router
from ..core.auth import get_current_user

api_router = APIRouter()
protected = [Depends(get_current_user)]
api_router.include_router(auth_router)
api_router.include_router(health_router)
api_router.include_router(personnel_router, dependencies=protected)
api_router.include_router(locations_router, dependencies=protected)
api_router.include_router(schedules_router, dependencies=protected)
api_router.include_router(reports_router, dependencies=protected)
api_router.include_router(dashboard_router, dependencies=protected)
