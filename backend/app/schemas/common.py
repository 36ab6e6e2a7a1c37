"""
Shared Pydantic helpers.

JSON payloads use camelCase keys; Python code uses snake_case attribute
names. Both are accepted on input.
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def blank_to_none(value: Any) -> Any:
    """Form inputs send "" for untouched optional fields."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def coerce_year(value: Any) -> Optional[int]:
    """
    Coerce a year from form text.

    Returns None for missing, blank or non-numeric input so the field is
    left out of the stored record instead of becoming zero.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def require_text(value: Any, field_name: str) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{field_name} is required")
    return value.strip() if isinstance(value, str) else value


class MessageResponse(CamelModel):
    """Schema for simple confirmation responses."""
    message: str


class DriverDeleteResponse(CamelModel):
    """Schema for driver deletion (and cascade retry) responses."""
    message: str
    vehicles_removed: int
