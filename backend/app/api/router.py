"""
API Router.

Aggregates all API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.endpoints import drivers, vehicles, dashboard

router = APIRouter()

router.include_router(drivers.router)
router.include_router(vehicles.router)
router.include_router(dashboard.router)
