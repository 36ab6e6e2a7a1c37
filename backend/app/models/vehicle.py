"""
Vehicle database model.

A vehicle is registered to exactly one driver (its owner).
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, Enum
from datetime import date
from backend.app.db.session import Base
from backend.app.models.driver import new_id, utcnow
from backend.app.models.enums import VehicleType, VehicleStatus


class Vehicle(Base):
    """
    Vehicle model.

    ``owner_id`` holds the driver's ID without a database foreign key: the
    registries check the reference on write and remove orphans on driver
    deletion. The resolved driver is attached to ``owner`` at read time.
    """
    __tablename__ = "vehicles"

    id = Column(String(32), primary_key=True, default=new_id)

    # Identification
    registration_number = Column(String(100), unique=True, nullable=False, index=True)

    # Ownership - plain reference to drivers.id
    owner_id = Column(String(32), nullable=False, index=True)

    # Vehicle details
    vehicle_type = Column(Enum(VehicleType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    make = Column(String(100), nullable=True)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=True)

    # Registration
    registration_date = Column(Date, default=date.today, nullable=False)
    registration_expiry = Column(Date, nullable=True, index=True)
    tax_expiry = Column(Date, nullable=True)

    # Insurance (flattened nested record)
    insurance_company = Column(String(255), nullable=True)
    insurance_policy_number = Column(String(100), nullable=True)
    insurance_expiry = Column(Date, nullable=True)

    # Status
    status = Column(
        Enum(VehicleStatus, values_callable=lambda e: [m.value for m in e]),
        default=VehicleStatus.ACTIVE,
        nullable=False,
        index=True
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Populated driver, not persisted
    owner = None

    @property
    def insurance(self):
        if not any((self.insurance_company, self.insurance_policy_number, self.insurance_expiry)):
            return None
        return {
            "company": self.insurance_company,
            "policy_number": self.insurance_policy_number,
            "expiry": self.insurance_expiry,
        }

    def __repr__(self):
        return f"<Vehicle(id={self.id}, registration='{self.registration_number}', owner_id={self.owner_id})>"
