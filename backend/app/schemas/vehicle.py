"""
Vehicle Pydantic schemas.

Defines request and response models for vehicle registration.
"""

from pydantic import Field, field_validator, model_serializer
from datetime import datetime, date
from typing import Optional, List
from backend.app.models.enums import VehicleType, VehicleStatus
from backend.app.schemas.common import CamelModel, blank_to_none, coerce_year, require_text
from backend.app.schemas.driver import DriverResponse


OPTIONAL_VEHICLE_DATES = ("registration_date", "registration_expiry", "tax_expiry")


class InsuranceRecord(CamelModel):
    """Insurance details nested inside a vehicle."""
    company: Optional[str] = Field(None, max_length=255)
    policy_number: Optional[str] = Field(None, max_length=100)
    expiry: Optional[date] = None

    @field_validator("company", "policy_number", "expiry", mode="before")
    @classmethod
    def _blank(cls, value):
        return blank_to_none(value)


class VehicleCreate(CamelModel):
    """Schema for registering a new vehicle."""
    registration_number: str = Field(..., max_length=100, description="Unique registration number")
    owner: str = Field(..., description="ID of the owning driver")
    vehicle_type: VehicleType = Field(..., description="Car, Bike or Other")
    make: Optional[str] = Field(None, max_length=100)
    model: str = Field(..., max_length=100)
    year: Optional[int] = Field(None, description="Model year; blank or non-numeric input is dropped")
    registration_date: Optional[date] = Field(None, description="Defaults to today")
    registration_expiry: Optional[date] = None
    insurance: Optional[InsuranceRecord] = None
    tax_expiry: Optional[date] = None
    status: VehicleStatus = VehicleStatus.ACTIVE

    @field_validator("registration_number", "owner", "model", mode="before")
    @classmethod
    def _required_text(cls, value, info):
        return require_text(value, info.field_name)

    @field_validator("make", *OPTIONAL_VEHICLE_DATES, mode="before")
    @classmethod
    def _blank(cls, value):
        return blank_to_none(value)

    @field_validator("year", mode="before")
    @classmethod
    def _year(cls, value):
        return coerce_year(value)

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value):
        return blank_to_none(value) or VehicleStatus.ACTIVE


class VehicleUpdate(CamelModel):
    """
    Schema for updating an existing vehicle.

    Only fields present in the payload are applied. A blank year leaves the
    stored year unchanged.
    """
    registration_number: Optional[str] = Field(None, max_length=100)
    owner: Optional[str] = None
    vehicle_type: Optional[VehicleType] = None
    make: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    year: Optional[int] = None
    registration_date: Optional[date] = None
    registration_expiry: Optional[date] = None
    insurance: Optional[InsuranceRecord] = None
    tax_expiry: Optional[date] = None
    status: Optional[VehicleStatus] = None

    @field_validator("registration_number", "owner", "model", "vehicle_type", "status", mode="before")
    @classmethod
    def _required_text(cls, value, info):
        return require_text(value, info.field_name)

    @field_validator("make", *OPTIONAL_VEHICLE_DATES, mode="before")
    @classmethod
    def _blank(cls, value):
        return blank_to_none(value)

    @field_validator("year", mode="before")
    @classmethod
    def _year(cls, value):
        return coerce_year(value)


class VehicleResponse(CamelModel):
    """Schema for vehicle response with the owner populated."""
    id: str
    registration_number: str
    owner: Optional[DriverResponse] = None
    vehicle_type: VehicleType
    make: Optional[str] = None
    model: str
    year: Optional[int] = None
    registration_date: date
    registration_expiry: Optional[date] = None
    insurance: Optional[InsuranceRecord] = None
    tax_expiry: Optional[date] = None
    status: VehicleStatus
    created_at: datetime
    updated_at: datetime

    @model_serializer(mode="wrap")
    def _omit_missing_year(self, handler):
        data = handler(self)
        if data.get("year") is None:
            data.pop("year", None)
        return data


class DashboardSummary(CamelModel):
    """Counts and upcoming renewals for the dashboard."""
    drivers: int
    vehicles: int
    expiring: int
    upcoming_renewals: List[VehicleResponse]
