"""
Tests for the renewal window evaluator.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from backend.app.services.renewals import as_utc_naive, expiring_within, upcoming_renewals

NOW = date(2024, 1, 1)


def vehicle(reg, expiry):
    return {"registrationNumber": reg, "registrationExpiry": expiry}


def test_window_boundaries():
    vehicles = [
        vehicle("IN", "2024-01-31"),
        vehicle("OUT", "2024-02-01"),
        vehicle("PAST", "2023-12-31"),
        vehicle("NONE", None),
    ]

    result = expiring_within(vehicles, now=NOW, horizon_days=30)

    assert [v["registrationNumber"] for v in result] == ["IN"]


def test_expiry_equal_to_now_is_included():
    result = expiring_within([vehicle("TODAY", date(2024, 1, 1))], now=NOW)

    assert len(result) == 1


def test_default_horizon_is_thirty_days():
    vehicles = [vehicle("D30", date(2024, 1, 31)), vehicle("D31", date(2024, 2, 1))]

    assert [v["registrationNumber"] for v in expiring_within(vehicles, now=NOW)] == ["D30"]


def test_missing_or_empty_expiry_excluded():
    vehicles = [{"registrationNumber": "NOKEY"}, vehicle("EMPTY", "")]

    assert expiring_within(vehicles, now=NOW) == []


def test_input_order_preserved_and_source_untouched():
    vehicles = [vehicle("B", "2024-01-20"), vehicle("A", "2024-01-05")]
    snapshot = list(vehicles)

    result = expiring_within(vehicles, now=NOW)

    assert [v["registrationNumber"] for v in result] == ["B", "A"]
    assert vehicles == snapshot


def test_accepts_aware_datetimes_and_iso_timestamps():
    now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    vehicles = [
        vehicle("ISO-Z", "2024-01-10T00:00:00.000Z"),
        vehicle("OFFSET", datetime(2024, 1, 1, 13, 30, tzinfo=timezone(timedelta(hours=1)))),
        vehicle("EARLIER-TODAY", "2024-01-01"),
    ]

    result = expiring_within(vehicles, now=now)

    assert [v["registrationNumber"] for v in result] == ["ISO-Z", "OFFSET"]


def test_reads_attribute_records():
    class Row:
        def __init__(self, registration_expiry):
            self.registration_expiry = registration_expiry

    rows = [Row(date(2024, 1, 15)), Row(None)]

    assert expiring_within(rows, now=NOW) == [rows[0]]


def test_upcoming_renewals_sorted_and_truncated():
    vehicles = [vehicle(f"V{day}", date(2024, 1, day)) for day in (25, 3, 14, 9, 30, 2, 20)]

    result = upcoming_renewals(vehicles, now=NOW, limit=5)

    assert [v["registrationNumber"] for v in result] == ["V2", "V3", "V9", "V14", "V20"]


@pytest.mark.parametrize("value,expected", [
    ("2024-03-05", datetime(2024, 3, 5)),
    (date(2024, 3, 5), datetime(2024, 3, 5)),
    ("2024-03-05T10:15:00+02:00", datetime(2024, 3, 5, 8, 15)),
])
def test_as_utc_naive(value, expected):
    assert as_utc_naive(value) == expected


@pytest.mark.asyncio
async def test_expiring_endpoint(client, make_driver, make_vehicle):
    owner = await make_driver("1")
    today = date.today()
    await make_vehicle(owner["id"], "SOON", registrationExpiry=(today + timedelta(days=10)).isoformat())
    await make_vehicle(owner["id"], "SOONER", registrationExpiry=(today + timedelta(days=2)).isoformat())
    await make_vehicle(owner["id"], "LATER", registrationExpiry=(today + timedelta(days=90)).isoformat())
    await make_vehicle(owner["id"], "OVERDUE", registrationExpiry=(today - timedelta(days=5)).isoformat())
    await make_vehicle(owner["id"], "UNSET")

    response = await client.get("/api/vehicles/expiring")
    assert response.status_code == 200
    assert [v["registrationNumber"] for v in response.json()] == ["SOONER", "SOON"]

    response = await client.get("/api/vehicles/expiring", params={"days": 120, "limit": 2})
    assert [v["registrationNumber"] for v in response.json()] == ["SOONER", "SOON"]

    response = await client.get("/api/vehicles/expiring", params={"days": 120})
    assert [v["registrationNumber"] for v in response.json()] == ["SOONER", "SOON", "LATER"]
