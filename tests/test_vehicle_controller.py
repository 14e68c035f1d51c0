from unittest.mock import AsyncMock, MagicMock

import pytest

from rentfleet.controllers.vehicle_controller import VehicleController
from rentfleet.schemas.vehicle import VehicleCreate, VehicleFilters, VehicleUpdate
from rentfleet.services.vehicle_service import VehicleService


@pytest.fixture
def mock_service():
    service = MagicMock(spec=VehicleService)
    for name in (
        "get_all_vehicles",
        "get_available_vehicles",
        "get_vehicle_by_id",
        "create_vehicle",
        "update_vehicle",
        "delete_vehicle",
        "get_vehicle_statistics",
        "get_popular_vehicles",
        "toggle_availability",
        "bulk_update_vehicles",
    ):
        setattr(service, name, AsyncMock())
    return service


async def test_invalid_pagination_never_reaches_service(mock_service):
    controller = VehicleController(mock_service)
    result = await controller.get_all_vehicles(page=0, limit=101)

    assert result.success is False
    assert result.error == "Page must be greater than 0, Limit must be between 1 and 100"
    mock_service.get_all_vehicles.assert_not_called()


async def test_invalid_filters_rejected(controller):
    result = await controller.get_all_vehicles(filters=VehicleFilters(min_price=10, max_price=5))
    assert result.error == "Minimum price cannot be greater than maximum price"


async def test_valid_list_delegates(controller):
    result = await controller.get_all_vehicles(filters=VehicleFilters(is_available=True))
    assert result.success
    assert [v.id for v in result.data.vehicles] == ["1"]


async def test_bad_date_range(controller):
    result = await controller.get_available_vehicles("2024-05-02", "2024-05-01")
    assert result.error == "Start date must be before end date"


@pytest.mark.parametrize("vehicle_id", ["", "   ", None])
async def test_blank_ids_rejected(mock_service, vehicle_id):
    controller = VehicleController(mock_service)

    for call in (
        controller.get_vehicle_by_id(vehicle_id),
        controller.update_vehicle(vehicle_id, VehicleUpdate(color="Red")),
        controller.delete_vehicle(vehicle_id),
        controller.toggle_availability(vehicle_id),
    ):
        result = await call
        assert result.success is False
        assert result.error == "Vehicle ID is required"

    mock_service.get_vehicle_by_id.assert_not_called()
    mock_service.update_vehicle.assert_not_called()
    mock_service.delete_vehicle.assert_not_called()
    mock_service.toggle_availability.assert_not_called()


async def test_get_unknown_vehicle(controller):
    result = await controller.get_vehicle_by_id("does-not-exist")
    assert result.success is False
    assert result.error == "Vehicle not found"


async def test_create_example_vehicle(controller, tesla_payload):
    result = await controller.create_vehicle(VehicleCreate(**tesla_payload))

    assert result.success
    assert result.data.id
    assert result.data.is_available is True


async def test_create_validation_errors_are_joined(controller, tesla_payload):
    tesla_payload.update({"year": 1850, "vin": "SHORT"})
    result = await controller.create_vehicle(VehicleCreate(**tesla_payload))

    assert result.success is False
    assert result.error == "Year must be between 1900 and 2030, Invalid VIN format"


async def test_update_validation(controller):
    result = await controller.update_vehicle("1", VehicleUpdate(capacity=20))
    assert result.error == "Capacity must be between 1 and 12"


@pytest.mark.parametrize("limit", [0, 51])
async def test_popular_limit_bounds(mock_service, limit):
    controller = VehicleController(mock_service)
    result = await controller.get_popular_vehicles(limit)

    assert result.error == "Limit must be between 1 and 50"
    mock_service.get_popular_vehicles.assert_not_called()


async def test_popular_delegates(controller):
    result = await controller.get_popular_vehicles(50)
    assert len(result.data) == 2


async def test_bulk_update_requires_ids(controller):
    result = await controller.bulk_update_vehicles([], VehicleUpdate(color="Red"))
    assert result.error == "Vehicle IDs are required"


async def test_bulk_update_caps_id_count(mock_service):
    controller = VehicleController(mock_service)
    result = await controller.bulk_update_vehicles([str(i) for i in range(101)], VehicleUpdate(color="Red"))

    assert result.error == "Cannot update more than 100 vehicles at once"
    mock_service.bulk_update_vehicles.assert_not_called()


async def test_bulk_update_partial(controller):
    result = await controller.bulk_update_vehicles(["1", "nope"], VehicleUpdate(mileage=1))

    assert result.success
    assert len(result.data) < 2
    assert result.message == "Successfully updated 1 out of 2 vehicles"


async def test_unexpected_service_error_is_normalized(mock_service):
    mock_service.get_vehicle_statistics.side_effect = RuntimeError("boom")
    controller = VehicleController(mock_service)

    result = await controller.get_vehicle_statistics()
    assert result.success is False
    assert result.error == "Failed to retrieve vehicle statistics"
    assert result.message == "boom"
