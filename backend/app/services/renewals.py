"""
Renewal window evaluation.

Finds vehicles whose registration expires between now and a fixed horizon.
Already expired registrations are not part of the window: this view only
surfaces upcoming renewals.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Iterable, Optional, Union

from backend.app.core.config import settings
from backend.app.services.filters import read_field

Moment = Union[date, datetime, str]


def as_utc_naive(value: Moment) -> datetime:
    """
    Normalize a date, datetime or ISO-8601 string to a naive UTC datetime.

    Plain dates become midnight of that day.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text) if "T" in text or " " in text else date.fromisoformat(text)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    return datetime.combine(value, time.min)


def _expiry(vehicle: Any) -> Optional[datetime]:
    expiry = read_field(vehicle, "registration_expiry")
    if expiry is None or expiry == "":
        return None
    return as_utc_naive(expiry)


def expiring_within(
    vehicles: Iterable[Any],
    now: Optional[Moment] = None,
    horizon_days: Optional[int] = None
) -> list:
    """
    Vehicles with ``now <= registration_expiry <= now + horizon_days``.

    Vehicles without an expiry and vehicles already past it are left out.
    Input order is preserved.

    Args:
        vehicles: Any iterable of vehicle records; not modified
        now: Reference instant, defaults to the current UTC time
        horizon_days: Window length, defaults to ``settings.renewal_horizon_days``
    """
    if horizon_days is None:
        horizon_days = settings.renewal_horizon_days
    start = as_utc_naive(now) if now is not None else datetime.now(timezone.utc).replace(tzinfo=None)
    end = start + timedelta(days=horizon_days)

    selected = []
    for vehicle in vehicles:
        expiry = _expiry(vehicle)
        if expiry is not None and start <= expiry <= end:
            selected.append(vehicle)
    return selected


def by_proximity(vehicles: Iterable[Any]) -> list:
    """Sort vehicles by registration expiry, soonest first. Stable for ties."""
    return sorted(vehicles, key=lambda vehicle: _expiry(vehicle) or datetime.max)


def upcoming_renewals(
    vehicles: Iterable[Any],
    now: Optional[Moment] = None,
    horizon_days: Optional[int] = None,
    limit: Optional[int] = None
) -> list:
    """The renewal window ordered by proximity, truncated to ``limit``."""
    ordered = by_proximity(expiring_within(vehicles, now=now, horizon_days=horizon_days))
    return ordered[:limit] if limit is not None else ordered
