"""
Driver API Endpoints.

CRUD over drivers. Deleting a driver also removes every vehicle it owns.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.session import get_db
from backend.app.schemas.common import DriverDeleteResponse
from backend.app.schemas.driver import DriverCreate, DriverUpdate, DriverResponse
from backend.app.schemas.vehicle import VehicleResponse
from backend.app.services import driver_registry, vehicle_registry
from backend.app.services.cascade import on_driver_deleted
from backend.app.services.export import export_csv
from backend.app.services.filters import filter_drivers

router = APIRouter(prefix="/drivers", tags=["Drivers"])


@router.get("", response_model=List[DriverResponse])
async def list_drivers(
    search: Optional[str] = Query(None, description="Matches name, license or contact number"),
    db: AsyncSession = Depends(get_db)
):
    """List drivers, most recently registered first."""
    drivers = await driver_registry.list_drivers(db)
    return [DriverResponse.model_validate(driver) for driver in filter_drivers(drivers, search)]


@router.get("/export")
async def export_drivers(
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Download the (filtered) driver list as CSV."""
    drivers = filter_drivers(await driver_registry.list_drivers(db), search)
    content = export_csv(DriverResponse.model_validate(driver) for driver in drivers)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="drivers.csv"'}
    )


@router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(
    driver_id: str = Path(..., description="Driver ID"),
    db: AsyncSession = Depends(get_db)
):
    """Get a single driver."""
    driver = await driver_registry.get_driver(db, driver_id)
    return DriverResponse.model_validate(driver)


@router.get("/{driver_id}/vehicles", response_model=List[VehicleResponse])
async def list_driver_vehicles(
    driver_id: str = Path(..., description="Driver ID"),
    db: AsyncSession = Depends(get_db)
):
    """Vehicles registered to this driver."""
    vehicles = await vehicle_registry.list_vehicles_for_driver(db, driver_id)
    return [VehicleResponse.model_validate(vehicle) for vehicle in vehicles]


@router.post("", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
async def create_driver(
    driver_data: DriverCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new driver.

    The license number must not already be registered.
    """
    driver = await driver_registry.create_driver(db, driver_data)
    return DriverResponse.model_validate(driver)


@router.put("/{driver_id}", response_model=DriverResponse)
async def update_driver(
    driver_id: str = Path(..., description="Driver ID"),
    driver_data: DriverUpdate = ...,
    db: AsyncSession = Depends(get_db)
):
    """Update driver details (only the fields provided)."""
    driver = await driver_registry.update_driver(db, driver_id, driver_data)
    return DriverResponse.model_validate(driver)


@router.delete("/{driver_id}", response_model=DriverDeleteResponse)
async def delete_driver(
    driver_id: str = Path(..., description="Driver ID"),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a driver and all vehicles it owns.

    Returns 500 with error code ERR_CASCADE_PARTIAL if the driver was
    removed but its vehicles were not; retry with POST /drivers/{id}/cascade.
    """
    _, vehicles_removed = await driver_registry.delete_driver(db, driver_id)
    return DriverDeleteResponse(message="Driver removed", vehicles_removed=vehicles_removed)


@router.post("/{driver_id}/cascade", response_model=DriverDeleteResponse)
async def rerun_cascade(
    driver_id: str = Path(..., description="ID of a deleted driver"),
    db: AsyncSession = Depends(get_db)
):
    """
    Remove vehicles still referencing a driver.

    Idempotent: returns vehiclesRemoved = 0 once nothing is left.
    """
    vehicles_removed = await on_driver_deleted(db, driver_id)
    return DriverDeleteResponse(message="Vehicle cleanup completed", vehicles_removed=vehicles_removed)
