"""
Database seeding script for sample drivers and vehicles.

Creates a few drivers with vehicles (one due for renewal) for development.
Run this script after the database is reachable.
"""

import asyncio
import sys
from datetime import date, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.app.db.session import AsyncSessionLocal, engine, Base
from backend.app.models.driver import Driver
from backend.app.schemas.driver import DriverCreate
from backend.app.schemas.vehicle import VehicleCreate
from backend.app.services.driver_registry import create_driver
from backend.app.services.vehicle_registry import create_vehicle
from sqlalchemy import select


SAMPLE_DRIVERS = [
    {
        "fullName": "Jane Doe",
        "contactNumber": "+1-555-0100",
        "licenseNumber": "DL-1001",
        "address": "12 Elm Street, Springfield",
    },
    {
        "fullName": "Ravi Kumar",
        "contactNumber": "+91-98450-00000",
        "licenseNumber": "DL-1002",
        "address": "4 MG Road, Bengaluru",
    },
]


async def seed_data():
    """
    Seed sample records.

    Creates:
    - 2 drivers
    - 3 vehicles, one expiring within the renewal window
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting seeding...")

        result = await db.execute(
            select(Driver).where(Driver.license_number == SAMPLE_DRIVERS[0]["licenseNumber"])
        )
        if result.scalar_one_or_none():
            print("ℹ️  Sample drivers already exist, skipping seeding")
            return

        jane = await create_driver(db, DriverCreate(**SAMPLE_DRIVERS[0]))
        ravi = await create_driver(db, DriverCreate(**SAMPLE_DRIVERS[1]))
        print(f"✅ Created drivers {jane.full_name} ({jane.id}) and {ravi.full_name} ({ravi.id})")

        today = date.today()
        vehicles = [
            VehicleCreate(
                registrationNumber="ABC-1234", owner=jane.id, vehicleType="Car",
                make="Toyota", model="Corolla", year="2019",
                registrationExpiry=today + timedelta(days=12),
            ),
            VehicleCreate(
                registrationNumber="XYZ-9876", owner=jane.id, vehicleType="Bike",
                make="Honda", model="CB350", year="",
                registrationExpiry=today + timedelta(days=200), status="inactive",
            ),
            VehicleCreate(
                registrationNumber="KA-01-AB-4321", owner=ravi.id, vehicleType="Other",
                model="Tractor", registrationExpiry=today - timedelta(days=3),
                insurance={"company": "Acme Mutual", "policyNumber": "P-77"},
            ),
        ]
        for data in vehicles:
            vehicle = await create_vehicle(db, data)
            print(f"✅ Registered vehicle {vehicle.registration_number}")

        print("\n🎉 Seeding completed successfully!")


if __name__ == "__main__":
    asyncio.run(seed_data())
