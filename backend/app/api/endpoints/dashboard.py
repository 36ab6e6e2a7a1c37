"""
Dashboard API Endpoints.

Read-only overview for the front-end landing page.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.session import get_db
from backend.app.schemas.vehicle import DashboardSummary
from backend.app.services.dashboard import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardSummary)
async def get_dashboard(db: AsyncSession = Depends(get_db)):
    """Totals, renewal window count and the next registrations to renew."""
    return await DashboardService.get_summary(db)
