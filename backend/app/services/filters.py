"""
Search and filter logic over driver and vehicle collections.

Pure functions: they never touch the database and never mutate the input
collections. Records may be ORM rows, response schemas or plain mappings
keyed in snake_case or camelCase, so the same rules serve the listing
endpoints and any client holding fetched JSON.
"""

from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence, Type
from pydantic.alias_generators import to_camel

from backend.app.core.exceptions import ValidationError
from backend.app.models.enums import VehicleStatus, VehicleType

ALL = "all"

DRIVER_SEARCH_FIELDS = ("full_name", "license_number", "contact_number")
VEHICLE_SEARCH_FIELDS = ("registration_number", "make", "model")


def read_field(record: Any, field: str) -> Any:
    """Read ``field`` (snake_case) from an object or a snake/camel keyed mapping."""
    if isinstance(record, Mapping):
        if field in record:
            return record[field]
        return record.get(to_camel(field))
    return getattr(record, field, None)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def normalize_query(query: Optional[str]) -> str:
    return (query or "").strip().casefold()


def matches_text(record: Any, fields: Sequence[str], query: Optional[str]) -> bool:
    """
    True if the normalized query is a substring of any of ``fields``.

    An empty or whitespace-only query matches every record. Missing values
    never match.
    """
    needle = normalize_query(query)
    if not needle:
        return True
    for field in fields:
        value = _plain(read_field(record, field))
        if value is None or value == "":
            continue
        if needle in str(value).casefold():
            return True
    return False


def matches_selector(value: Any, selector: Optional[str]) -> bool:
    if selector is None or selector == ALL:
        return True
    return _plain(value) == _plain(selector)


def parse_selector(value: Optional[str], enum_cls: Type[Enum], field_name: str) -> str:
    """
    Validate a filter selector from a query string.

    Returns ALL for a missing, blank or "all" selector, otherwise the enum
    value.

    Raises:
        ValidationError: If the value is not a member of ``enum_cls``
    """
    if value is None or not value.strip() or value.strip().lower() == ALL:
        return ALL
    try:
        return enum_cls(value.strip()).value
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"Invalid {field_name} '{value}'. Expected one of: all, {allowed}",
            details={"field": field_name}
        )


def filter_drivers(drivers: Iterable[Any], query: Optional[str] = None) -> list:
    """Drivers whose full name, license number or contact number contains ``query``."""
    return [driver for driver in drivers if matches_text(driver, DRIVER_SEARCH_FIELDS, query)]


def filter_vehicles(
    vehicles: Iterable[Any],
    query: Optional[str] = None,
    status: Optional[str] = ALL,
    vehicle_type: Optional[str] = ALL
) -> list:
    """
    Vehicles matching the search text AND the status selector AND the type selector.

    The text is matched against registration number, make and model.
    """
    return [
        vehicle for vehicle in vehicles
        if matches_text(vehicle, VEHICLE_SEARCH_FIELDS, query)
        and matches_selector(read_field(vehicle, "status"), status)
        and matches_selector(read_field(vehicle, "vehicle_type"), vehicle_type)
    ]


def parse_vehicle_filters(status: Optional[str], vehicle_type: Optional[str]) -> tuple[str, str]:
    return (
        parse_selector(status, VehicleStatus, "status"),
        parse_selector(vehicle_type, VehicleType, "vehicleType"),
    )
