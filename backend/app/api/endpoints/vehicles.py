"""
Vehicle API Endpoints.

CRUD over vehicles. Reads embed the owning driver.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import settings
from backend.app.db.session import get_db
from backend.app.schemas.common import MessageResponse
from backend.app.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleResponse
from backend.app.services import vehicle_registry
from backend.app.services.export import export_csv
from backend.app.services.filters import parse_vehicle_filters
from backend.app.services.renewals import upcoming_renewals

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


async def _filtered_vehicles(db: AsyncSession, status_filter, type_filter, search):
    status_value, type_value = parse_vehicle_filters(status_filter, type_filter)
    return await vehicle_registry.list_vehicles(
        db, status=status_value, vehicle_type=type_value, search=search
    )


@router.get("", response_model=List[VehicleResponse])
async def list_vehicles(
    status_filter: Optional[str] = Query(None, alias="status", description="active, inactive, suspended or all"),
    type_filter: Optional[str] = Query(None, alias="vehicleType", description="Car, Bike, Other or all"),
    search: Optional[str] = Query(None, description="Matches registration number, make or model"),
    db: AsyncSession = Depends(get_db)
):
    """List vehicles, most recently registered first, owners populated."""
    vehicles = await _filtered_vehicles(db, status_filter, type_filter, search)
    return [VehicleResponse.model_validate(vehicle) for vehicle in vehicles]


@router.get("/expiring", response_model=List[VehicleResponse])
async def list_expiring_vehicles(
    days: Optional[int] = Query(None, ge=0, description="Window length in days"),
    limit: Optional[int] = Query(None, ge=1, description="Return at most this many"),
    db: AsyncSession = Depends(get_db)
):
    """
    Vehicles whose registration expires within the renewal window.

    Ordered soonest first. Already expired registrations are not included.
    """
    vehicles = await vehicle_registry.list_vehicles(db)
    horizon = days if days is not None else settings.renewal_horizon_days
    expiring = upcoming_renewals(vehicles, horizon_days=horizon, limit=limit)
    return [VehicleResponse.model_validate(vehicle) for vehicle in expiring]


@router.get("/export")
async def export_vehicles(
    status_filter: Optional[str] = Query(None, alias="status"),
    type_filter: Optional[str] = Query(None, alias="vehicleType"),
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Download the (filtered) vehicle list as CSV."""
    vehicles = await _filtered_vehicles(db, status_filter, type_filter, search)
    content = export_csv(VehicleResponse.model_validate(vehicle) for vehicle in vehicles)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="vehicles.csv"'}
    )


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    vehicle_id: str = Path(..., description="Vehicle ID"),
    db: AsyncSession = Depends(get_db)
):
    """Get a single vehicle with its owner."""
    vehicle = await vehicle_registry.get_vehicle(db, vehicle_id)
    return VehicleResponse.model_validate(vehicle)


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_data: VehicleCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new vehicle.

    The owner must be the ID of an existing driver and the registration
    number must be unused.
    """
    vehicle = await vehicle_registry.create_vehicle(db, vehicle_data)
    return VehicleResponse.model_validate(vehicle)


@router.put("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    vehicle_id: str = Path(..., description="Vehicle ID"),
    vehicle_data: VehicleUpdate = ...,
    db: AsyncSession = Depends(get_db)
):
    """Update vehicle details (only the fields provided)."""
    vehicle = await vehicle_registry.update_vehicle(db, vehicle_id, vehicle_data)
    return VehicleResponse.model_validate(vehicle)


@router.delete("/{vehicle_id}", response_model=MessageResponse)
async def delete_vehicle(
    vehicle_id: str = Path(..., description="Vehicle ID"),
    db: AsyncSession = Depends(get_db)
):
    """Delete a vehicle."""
    await vehicle_registry.delete_vehicle(db, vehicle_id)
    return MessageResponse(message="Vehicle removed")
