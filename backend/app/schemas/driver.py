"""
Driver Pydantic schemas.

Defines request and response models for driver management.
"""

from pydantic import Field, field_validator
from datetime import datetime, date
from typing import Optional
from backend.app.schemas.common import CamelModel, blank_to_none, require_text


REQUIRED_DRIVER_FIELDS = ("full_name", "contact_number", "license_number", "address")


class DriverCreate(CamelModel):
    """Schema for registering a new driver."""
    full_name: str = Field(..., max_length=255, description="Driver full name")
    contact_number: str = Field(..., max_length=50, description="Contact phone number")
    license_number: str = Field(..., max_length=100, description="Unique driving license number")
    address: str = Field(..., max_length=500, description="Postal address")
    dob: Optional[date] = Field(None, description="Date of birth")
    issued_date: Optional[date] = Field(None, description="License issue date")
    expiry_date: Optional[date] = Field(None, description="License expiry date")

    @field_validator(*REQUIRED_DRIVER_FIELDS, mode="before")
    @classmethod
    def _required_text(cls, value, info):
        return require_text(value, info.field_name)

    @field_validator("dob", "issued_date", "expiry_date", mode="before")
    @classmethod
    def _optional_date(cls, value):
        return blank_to_none(value)


class DriverUpdate(CamelModel):
    """
    Schema for updating an existing driver.

    Only fields present in the payload are applied. Required fields may be
    changed but not cleared.
    """
    full_name: Optional[str] = Field(None, max_length=255)
    contact_number: Optional[str] = Field(None, max_length=50)
    license_number: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, max_length=500)
    dob: Optional[date] = None
    issued_date: Optional[date] = None
    expiry_date: Optional[date] = None

    @field_validator(*REQUIRED_DRIVER_FIELDS, mode="before")
    @classmethod
    def _required_text(cls, value, info):
        return require_text(value, info.field_name)

    @field_validator("dob", "issued_date", "expiry_date", mode="before")
    @classmethod
    def _optional_date(cls, value):
        return blank_to_none(value)


class DriverResponse(CamelModel):
    """Schema for driver response."""
    id: str
    full_name: str
    contact_number: str
    license_number: str
    address: str
    dob: Optional[date] = None
    issued_date: Optional[date] = None
    expiry_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime
