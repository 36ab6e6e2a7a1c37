"""
Failure Injection Tests.

Validates that store failures surface as StoreError / 500 responses with
the standard error body, and that the service endpoints stay healthy.
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from backend.app.core.exceptions import StoreError, ValidationError
from backend.app.schemas.driver import DriverCreate
from backend.app.services import driver_registry, vehicle_registry
from backend.app.services.audit import get_audit_trail, AuditAction
from conftest import driver_payload


def _operational_error():
    return OperationalError("SELECT 1", {}, Exception("connection lost"))


@pytest.mark.asyncio
async def test_list_drivers_store_failure(db_session, mocker):
    mocker.patch.object(db_session, "execute", side_effect=_operational_error())

    with pytest.raises(StoreError) as exc_info:
        await driver_registry.list_drivers(db_session)

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_list_vehicles_store_failure(db_session, mocker):
    mocker.patch.object(db_session, "execute", side_effect=_operational_error())

    with pytest.raises(StoreError):
        await vehicle_registry.list_vehicles(db_session)


@pytest.mark.asyncio
async def test_store_failure_returns_500_error_body(client, mocker):
    mocker.patch(
        "backend.app.api.endpoints.drivers.driver_registry.list_drivers",
        side_effect=StoreError("List drivers failed")
    )

    response = await client.get("/api/drivers")

    assert response.status_code == 500
    assert response.json()["error"] == "List drivers failed"
    assert response.json()["error_code"] == "ERR_STORE"


@pytest.mark.asyncio
async def test_unique_index_race_maps_to_validation_error(db_session, mocker):
    """A duplicate that slips past the pre-check still surfaces as ValidationError."""
    mocker.patch.object(driver_registry, "_ensure_license_available", return_value=None)
    await driver_registry.create_driver(db_session, DriverCreate(**driver_payload("1")))

    with pytest.raises(ValidationError) as exc_info:
        await driver_registry.create_driver(db_session, DriverCreate(**driver_payload("2", licenseNumber="DL-1")))

    assert "licenseNumber" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, IntegrityError)


@pytest.mark.asyncio
async def test_registry_mutations_are_audited(client, db_session, make_driver, make_vehicle):
    driver = await make_driver("1")
    vehicle = await make_vehicle(driver["id"])
    await client.put(f"/api/vehicles/{vehicle['id']}", json={"status": "inactive"})
    await client.delete(f"/api/vehicles/{vehicle['id']}")

    trail = await get_audit_trail(db_session, entity_type="vehicle", entity_id=vehicle["id"])

    assert [entry.action for entry in trail] == [
        AuditAction.VEHICLE_DELETED,
        AuditAction.VEHICLE_UPDATED,
        AuditAction.VEHICLE_CREATED,
    ]
    assert trail[1].meta_data == {"updated_fields": ["status"]}


@pytest.mark.asyncio
async def test_health_and_root(client):
    health = await client.get("/health")
    root = await client.get("/")

    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
    assert root.json()["status"] == "ok"
    assert "X-Correlation-ID" in health.headers


@pytest.mark.asyncio
async def test_correlation_id_is_propagated(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    assert response.headers["X-Correlation-ID"] == "abc-123"


@pytest.mark.asyncio
async def test_unknown_path_uses_error_body(client):
    response = await client.get("/api/no-such-resource")

    assert response.status_code == 404
    assert response.json()["error"] == "Not Found"
    assert response.json()["error_code"] == "ERR_NOT_FOUND"


@pytest.mark.asyncio
async def test_wrong_method_uses_error_body(client):
    response = await client.post("/health")

    assert response.status_code == 405
    assert response.json()["error_code"] == "ERR_METHOD_NOT_ALLOWED"
    assert "GET" in response.headers["allow"]
