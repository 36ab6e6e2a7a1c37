"""
Integration tests for driver management.

Tests driver CRUD, license uniqueness and field validation.
"""

import pytest
from conftest import driver_payload


# TEST 1: Driver Registration
@pytest.mark.asyncio
async def test_create_driver_success(client):
    """A driver can be registered with the required fields."""
    response = await client.post("/api/drivers", json=driver_payload("1", dob="1990-05-17"))

    assert response.status_code == 201
    data = response.json()
    assert data["fullName"] == "Driver 1"
    assert data["licenseNumber"] == "DL-1"
    assert data["dob"] == "1990-05-17"
    assert data["issuedDate"] is None
    assert data["id"]
    assert data["createdAt"]


@pytest.mark.asyncio
async def test_duplicate_license_number_rejected(client, make_driver):
    """A second driver with the same license number fails with 400."""
    await make_driver("1")

    response = await client.post("/api/drivers", json=driver_payload("2", licenseNumber="DL-1"))

    assert response.status_code == 400
    body = response.json()
    assert "licenseNumber" in body["error"]
    assert body["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_missing_required_field_rejected(client):
    payload = driver_payload("1")
    del payload["address"]

    response = await client.post("/api/drivers", json=payload)

    assert response.status_code == 400
    assert "address" in response.json()["error"]


@pytest.mark.asyncio
async def test_blank_full_name_rejected(client):
    response = await client.post("/api/drivers", json=driver_payload("1", fullName="   "))

    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_blank_optional_dates_are_ignored(client):
    """Form posts send "" for untouched date inputs."""
    response = await client.post("/api/drivers", json=driver_payload("1", dob="", expiryDate=""))

    assert response.status_code == 201
    assert response.json()["dob"] is None


# TEST 2: Listing
@pytest.mark.asyncio
async def test_list_drivers_most_recent_first(client, make_driver):
    first = await make_driver("1")
    second = await make_driver("2")
    third = await make_driver("3")

    response = await client.get("/api/drivers")

    assert response.status_code == 200
    ids = [driver["id"] for driver in response.json()]
    assert ids == [third["id"], second["id"], first["id"]]


@pytest.mark.asyncio
async def test_list_drivers_search(client, make_driver):
    await make_driver("1", fullName="Jane Doe")
    await make_driver("2", fullName="John Smith")

    response = await client.get("/api/drivers", params={"search": "  JANE "})

    assert response.status_code == 200
    names = [driver["fullName"] for driver in response.json()]
    assert names == ["Jane Doe"]


# TEST 3: Lookup
@pytest.mark.asyncio
async def test_get_driver(client, make_driver):
    driver = await make_driver("1")

    response = await client.get(f"/api/drivers/{driver['id']}")

    assert response.status_code == 200
    assert response.json()["licenseNumber"] == "DL-1"


@pytest.mark.asyncio
async def test_get_unknown_driver_returns_404(client):
    response = await client.get("/api/drivers/does-not-exist")

    assert response.status_code == 404
    assert response.json()["error"] == "Driver not found"


# TEST 4: Update
@pytest.mark.asyncio
async def test_update_driver_applies_only_given_fields(client, make_driver):
    driver = await make_driver("1")

    response = await client.put(
        f"/api/drivers/{driver['id']}",
        json={"address": "99 New Road"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["address"] == "99 New Road"
    assert data["fullName"] == driver["fullName"]
    assert data["createdAt"] == driver["createdAt"]


@pytest.mark.asyncio
async def test_update_driver_keeping_own_license(client, make_driver):
    driver = await make_driver("1")

    response = await client.put(
        f"/api/drivers/{driver['id']}",
        json={"licenseNumber": "DL-1", "fullName": "Renamed"}
    )

    assert response.status_code == 200
    assert response.json()["fullName"] == "Renamed"


@pytest.mark.asyncio
async def test_update_driver_duplicate_license_rejected(client, make_driver):
    await make_driver("1")
    other = await make_driver("2")

    response = await client.put(f"/api/drivers/{other['id']}", json={"licenseNumber": "DL-1"})

    assert response.status_code == 400
    assert "licenseNumber" in response.json()["error"]


@pytest.mark.asyncio
async def test_update_driver_cannot_clear_required_field(client, make_driver):
    driver = await make_driver("1")

    response = await client.put(f"/api/drivers/{driver['id']}", json={"contactNumber": ""})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_unknown_driver_returns_404(client):
    response = await client.put("/api/drivers/missing", json={"address": "x"})

    assert response.status_code == 404


# TEST 5: Delete
@pytest.mark.asyncio
async def test_delete_driver_without_vehicles(client, make_driver):
    driver = await make_driver("1")

    response = await client.delete(f"/api/drivers/{driver['id']}")

    assert response.status_code == 200
    assert response.json() == {"message": "Driver removed", "vehiclesRemoved": 0}
    assert (await client.get(f"/api/drivers/{driver['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_unknown_driver_returns_404(client):
    response = await client.delete("/api/drivers/missing")

    assert response.status_code == 404
    assert "error" in response.json()
