"""
Dashboard Service.

Aggregates counts and upcoming renewals for the overview screen.
Focused on READ-ONLY operations.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from backend.app.core.config import settings
from backend.app.models.driver import Driver
from backend.app.schemas.vehicle import DashboardSummary, VehicleResponse
from backend.app.services.renewals import by_proximity, expiring_within
from backend.app.services.store import store_operation
from backend.app.services.vehicle_registry import list_vehicles


class DashboardService:

    @staticmethod
    async def get_summary(db: AsyncSession, now: Optional[datetime] = None) -> DashboardSummary:
        """Driver/vehicle totals plus the soonest registrations due for renewal."""
        async with store_operation(db, "Count drivers"):
            drivers = (await db.execute(select(func.count(Driver.id)))).scalar() or 0

        vehicles = await list_vehicles(db)
        expiring = expiring_within(vehicles, now=now)
        upcoming = by_proximity(expiring)[:settings.upcoming_renewals_limit]

        return DashboardSummary(
            drivers=drivers,
            vehicles=len(vehicles),
            expiring=len(expiring),
            upcoming_renewals=[VehicleResponse.model_validate(vehicle) for vehicle in upcoming]
        )
