"""
Driver registry service.

Owns driver records: lookup, registration, update and deletion. Deleting
a driver hands over to the cascade coordinator to remove its vehicles.
"""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from backend.app.core.exceptions import (
    AppException,
    PartialCascadeFailure,
    ResourceNotFoundError,
    ValidationError,
)
from backend.app.models.driver import Driver
from backend.app.schemas.driver import DriverCreate, DriverUpdate
from backend.app.services.audit import log_event, log_event_best_effort, AuditAction
from backend.app.services.cascade import on_driver_deleted
from backend.app.services.store import store_operation

logger = logging.getLogger("vrms.drivers")

DUPLICATE_LICENSE = "licenseNumber is already registered to another driver"


async def list_drivers(db: AsyncSession) -> list[Driver]:
    """All drivers, most recently created first."""
    async with store_operation(db, "List drivers"):
        result = await db.execute(select(Driver).order_by(Driver.created_at.desc()))
        return list(result.scalars().all())


async def get_driver(db: AsyncSession, driver_id: str) -> Driver:
    """
    Fetch a single driver.

    Raises:
        ResourceNotFoundError: If no driver has this ID
    """
    async with store_operation(db, "Get driver"):
        result = await db.execute(select(Driver).where(Driver.id == driver_id))
        driver = result.scalar_one_or_none()

    if not driver:
        raise ResourceNotFoundError("Driver", driver_id)
    return driver


async def _ensure_license_available(
    db: AsyncSession,
    license_number: str,
    exclude_id: Optional[str] = None
) -> None:
    query = select(Driver.id).where(Driver.license_number == license_number)
    if exclude_id:
        query = query.where(Driver.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise ValidationError(DUPLICATE_LICENSE, details={"field": "licenseNumber"})


async def create_driver(db: AsyncSession, data: DriverCreate) -> Driver:
    """
    Register a new driver.

    Raises:
        ValidationError: If the license number is already registered
    """
    async with store_operation(db, "Create driver", conflict_message=DUPLICATE_LICENSE):
        await _ensure_license_available(db, data.license_number)

        driver = Driver(**data.model_dump())
        db.add(driver)
        await db.commit()
        await db.refresh(driver)

        await log_event(
            db=db,
            action=AuditAction.DRIVER_CREATED,
            entity_type="driver",
            entity_id=driver.id,
            metadata={"license_number": driver.license_number}
        )

    logger.info("Driver %s registered (license %s)", driver.id, driver.license_number)
    return driver


async def update_driver(db: AsyncSession, driver_id: str, data: DriverUpdate) -> Driver:
    """
    Apply the supplied fields to an existing driver.

    Raises:
        ResourceNotFoundError: If no driver has this ID
        ValidationError: If the new license number belongs to another driver
    """
    driver = await get_driver(db, driver_id)
    update_data = data.model_dump(exclude_unset=True)

    async with store_operation(db, "Update driver", conflict_message=DUPLICATE_LICENSE):
        new_license = update_data.get("license_number")
        if new_license and new_license != driver.license_number:
            await _ensure_license_available(db, new_license, exclude_id=driver.id)

        for field, value in update_data.items():
            setattr(driver, field, value)

        await db.commit()
        await db.refresh(driver)

        await log_event(
            db=db,
            action=AuditAction.DRIVER_UPDATED,
            entity_type="driver",
            entity_id=driver.id,
            metadata={"updated_fields": list(update_data.keys())}
        )

    return driver


async def delete_driver(db: AsyncSession, driver_id: str) -> tuple[Driver, int]:
    """
    Delete a driver and then every vehicle it owns.

    The two steps are separate commits. If the vehicle cleanup fails the
    driver stays deleted and PartialCascadeFailure is raised; the cleanup
    can be re-run with ``on_driver_deleted``.

    Returns:
        (removed driver, number of vehicles removed)

    Raises:
        ResourceNotFoundError: If no driver has this ID
        PartialCascadeFailure: If the driver was removed but its vehicles were not
    """
    driver = await get_driver(db, driver_id)

    async with store_operation(db, "Delete driver"):
        await db.delete(driver)
        await db.commit()

    # The driver is gone from here on; only PartialCascadeFailure may escape
    try:
        await log_event_best_effort(
            db=db,
            action=AuditAction.DRIVER_DELETED,
            entity_type="driver",
            entity_id=driver_id,
            metadata={"license_number": driver.license_number}
        )
        vehicles_removed = await on_driver_deleted(db, driver_id)
    except Exception as exc:
        reason = exc.message if isinstance(exc, AppException) else str(exc)
        logger.error("Driver %s deleted but its vehicles were not removed: %s", driver_id, reason)
        raise PartialCascadeFailure(driver_id, reason) from exc

    logger.info("Driver %s deleted with %d vehicle(s)", driver_id, vehicles_removed)
    return driver, vehicles_removed
