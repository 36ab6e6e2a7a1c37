"""
Vehicle enumerations.

Closed value sets for vehicle type and registration status.
"""

import enum


class VehicleType(str, enum.Enum):
    """Vehicle type enumeration."""
    CAR = "Car"
    BIKE = "Bike"
    OTHER = "Other"


class VehicleStatus(str, enum.Enum):
    """
    Registration status enumeration.

    Statuses:
        ACTIVE: Registration in good standing (default)
        INACTIVE: Vehicle off the road or registration lapsed
        SUSPENDED: Registration suspended by the authority
    """
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
