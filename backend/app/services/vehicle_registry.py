"""
Vehicle registry service.

Owns vehicle records. Every vehicle read resolves ("populates") the owner
reference into the full driver record with one extra lookup.
"""

import logging
from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from backend.app.core.exceptions import ResourceNotFoundError, ValidationError
from backend.app.models.driver import Driver
from backend.app.models.vehicle import Vehicle
from backend.app.schemas.vehicle import InsuranceRecord, VehicleCreate, VehicleUpdate
from backend.app.services.audit import log_event, AuditAction
from backend.app.services.driver_registry import get_driver
from backend.app.services.filters import ALL, filter_vehicles
from backend.app.services.store import store_operation

logger = logging.getLogger("vrms.vehicles")

DUPLICATE_REGISTRATION = "registrationNumber is already registered to another vehicle"


async def populate_owners(db: AsyncSession, vehicles: list[Vehicle]) -> list[Vehicle]:
    """
    Attach the owning Driver to each vehicle's ``owner`` attribute.

    A vehicle whose driver no longer exists gets ``owner = None`` rather
    than failing the read.
    """
    owner_ids = {vehicle.owner_id for vehicle in vehicles}
    owners = {}
    if owner_ids:
        result = await db.execute(select(Driver).where(Driver.id.in_(owner_ids)))
        owners = {driver.id: driver for driver in result.scalars().all()}

    for vehicle in vehicles:
        vehicle.owner = owners.get(vehicle.owner_id)
    return vehicles


async def list_vehicles(
    db: AsyncSession,
    status: Optional[str] = ALL,
    vehicle_type: Optional[str] = ALL,
    search: Optional[str] = None
) -> list[Vehicle]:
    """
    All vehicles, most recently created first, with owners populated.

    Args:
        status: Status value or "all"
        vehicle_type: Vehicle type value or "all"
        search: Free text matched against registration number, make and model
    """
    async with store_operation(db, "List vehicles"):
        result = await db.execute(select(Vehicle).order_by(Vehicle.created_at.desc()))
        vehicles = filter_vehicles(result.scalars().all(), search, status, vehicle_type)
        return await populate_owners(db, vehicles)


async def list_vehicles_for_driver(db: AsyncSession, driver_id: str) -> list[Vehicle]:
    """Vehicles owned by one driver, most recent first."""
    await get_driver(db, driver_id)
    async with store_operation(db, "List driver vehicles"):
        result = await db.execute(
            select(Vehicle)
            .where(Vehicle.owner_id == driver_id)
            .order_by(Vehicle.created_at.desc())
        )
        return await populate_owners(db, list(result.scalars().all()))


async def _load_vehicle(db: AsyncSession, vehicle_id: str) -> Vehicle:
    async with store_operation(db, "Get vehicle"):
        result = await db.execute(select(Vehicle).where(Vehicle.id == vehicle_id))
        vehicle = result.scalar_one_or_none()

    if not vehicle:
        raise ResourceNotFoundError("Vehicle", vehicle_id)
    return vehicle


async def get_vehicle(db: AsyncSession, vehicle_id: str) -> Vehicle:
    """
    Fetch a single vehicle with its owner populated.

    Raises:
        ResourceNotFoundError: If no vehicle has this ID
    """
    vehicle = await _load_vehicle(db, vehicle_id)
    async with store_operation(db, "Get vehicle owner"):
        await populate_owners(db, [vehicle])
    return vehicle


async def _ensure_registration_available(
    db: AsyncSession,
    registration_number: str,
    exclude_id: Optional[str] = None
) -> None:
    query = select(Vehicle.id).where(Vehicle.registration_number == registration_number)
    if exclude_id:
        query = query.where(Vehicle.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise ValidationError(DUPLICATE_REGISTRATION, details={"field": "registrationNumber"})


async def _ensure_owner_exists(db: AsyncSession, owner_id: str) -> None:
    result = await db.execute(select(Driver.id).where(Driver.id == owner_id))
    if result.first() is None:
        raise ValidationError(
            f"owner '{owner_id}' does not reference an existing driver",
            details={"field": "owner"}
        )


def _apply_insurance(vehicle: Vehicle, insurance: Optional[InsuranceRecord]) -> None:
    vehicle.insurance_company = insurance.company if insurance else None
    vehicle.insurance_policy_number = insurance.policy_number if insurance else None
    vehicle.insurance_expiry = insurance.expiry if insurance else None


async def create_vehicle(db: AsyncSession, data: VehicleCreate) -> Vehicle:
    """
    Register a new vehicle for an existing driver.

    Raises:
        ValidationError: On a duplicate registration number or unknown owner
    """
    async with store_operation(db, "Create vehicle", conflict_message=DUPLICATE_REGISTRATION):
        await _ensure_registration_available(db, data.registration_number)
        await _ensure_owner_exists(db, data.owner)

        vehicle = Vehicle(
            registration_number=data.registration_number,
            owner_id=data.owner,
            vehicle_type=data.vehicle_type,
            make=data.make,
            model=data.model,
            registration_date=data.registration_date or date.today(),
            registration_expiry=data.registration_expiry,
            tax_expiry=data.tax_expiry,
            status=data.status,
        )
        if data.year is not None:
            vehicle.year = data.year
        _apply_insurance(vehicle, data.insurance)

        db.add(vehicle)
        await db.commit()
        await db.refresh(vehicle)

        await log_event(
            db=db,
            action=AuditAction.VEHICLE_CREATED,
            entity_type="vehicle",
            entity_id=vehicle.id,
            metadata={"registration_number": vehicle.registration_number, "owner_id": vehicle.owner_id}
        )
        await populate_owners(db, [vehicle])

    logger.info("Vehicle %s registered to driver %s", vehicle.registration_number, vehicle.owner_id)
    return vehicle


async def update_vehicle(db: AsyncSession, vehicle_id: str, data: VehicleUpdate) -> Vehicle:
    """
    Apply the supplied fields to an existing vehicle.

    Raises:
        ResourceNotFoundError: If no vehicle has this ID
        ValidationError: On a duplicate registration number or unknown owner
    """
    vehicle = await _load_vehicle(db, vehicle_id)
    update_data = data.model_dump(exclude_unset=True, exclude={"insurance"})

    # A blank year or registration date means "leave as is"
    for field in ("year", "registration_date"):
        if field in update_data and update_data[field] is None:
            del update_data[field]

    async with store_operation(db, "Update vehicle", conflict_message=DUPLICATE_REGISTRATION):
        new_registration = update_data.get("registration_number")
        if new_registration and new_registration != vehicle.registration_number:
            await _ensure_registration_available(db, new_registration, exclude_id=vehicle.id)

        if "owner" in update_data:
            owner_id = update_data.pop("owner")
            await _ensure_owner_exists(db, owner_id)
            vehicle.owner_id = owner_id

        for field, value in update_data.items():
            setattr(vehicle, field, value)
        if "insurance" in data.model_fields_set:
            _apply_insurance(vehicle, data.insurance)

        await db.commit()
        await db.refresh(vehicle)

        updated_fields = list(update_data.keys())
        if "insurance" in data.model_fields_set:
            updated_fields.append("insurance")
        await log_event(
            db=db,
            action=AuditAction.VEHICLE_UPDATED,
            entity_type="vehicle",
            entity_id=vehicle.id,
            metadata={"updated_fields": updated_fields}
        )
        await populate_owners(db, [vehicle])

    return vehicle


async def delete_vehicle(db: AsyncSession, vehicle_id: str) -> Vehicle:
    """
    Delete a single vehicle. Nothing depends on vehicles, so nothing cascades.

    Raises:
        ResourceNotFoundError: If no vehicle has this ID
    """
    vehicle = await _load_vehicle(db, vehicle_id)

    async with store_operation(db, "Delete vehicle"):
        await db.delete(vehicle)
        await db.commit()

        await log_event(
            db=db,
            action=AuditAction.VEHICLE_DELETED,
            entity_type="vehicle",
            entity_id=vehicle_id,
            metadata={"registration_number": vehicle.registration_number}
        )

    logger.info("Vehicle %s deleted", vehicle.registration_number)
    return vehicle
