"""
Cascade coordinator for driver deletion.

The database does not enforce the vehicle -> driver reference, so vehicles
of a deleted driver are removed here, after the driver deletion commits.
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete

from backend.app.models.vehicle import Vehicle
from backend.app.services.audit import log_event_best_effort, AuditAction
from backend.app.services.store import store_operation

logger = logging.getLogger("vrms.cascade")


async def on_driver_deleted(db: AsyncSession, driver_id: str) -> int:
    """
    Delete every vehicle owned by ``driver_id``.

    Safe to call again for the same driver: a repeat run removes nothing
    and returns 0. Does not check that the driver is gone, so it doubles
    as the repair step after a partial failure.

    Returns:
        Number of vehicles deleted

    Raises:
        StoreError: If the bulk delete fails
    """
    async with store_operation(db, "Remove vehicles of deleted driver"):
        result = await db.execute(
            delete(Vehicle).where(Vehicle.owner_id == driver_id)
        )
        removed = result.rowcount or 0
        await db.commit()

    await log_event_best_effort(
        db=db,
        action=AuditAction.CASCADE_COMPLETED,
        entity_type="driver",
        entity_id=driver_id,
        metadata={"vehicles_removed": removed}
    )

    if removed:
        logger.info("Removed %d vehicle(s) owned by driver %s", removed, driver_id)
    return removed
