"""
Driver database model.

A driver is a licensed individual who may own zero or more vehicles.
"""

import uuid
from sqlalchemy import Column, String, Date, DateTime
from datetime import datetime, timezone
from backend.app.db.session import Base


def new_id() -> str:
    """Opaque identifier assigned on creation."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Driver(Base):
    """
    Driver model.

    The license number is unique across all drivers. Vehicles point at a
    driver by ID; there is no back-reference collection on this side.
    """
    __tablename__ = "drivers"

    id = Column(String(32), primary_key=True, default=new_id)

    # Identity and contact details
    full_name = Column(String(255), nullable=False)
    contact_number = Column(String(50), nullable=False)
    license_number = Column(String(100), unique=True, nullable=False, index=True)
    address = Column(String(500), nullable=False)

    # License dates
    dob = Column(Date, nullable=True)
    issued_date = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<Driver(id={self.id}, name='{self.full_name}', license='{self.license_number}')>"
