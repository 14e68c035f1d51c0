import pytest
from fastapi.testclient import TestClient

from rentfleet import bootstrap
from rentfleet.bootstrap import get_vehicle_controller
from rentfleet.config import settings
from rentfleet.controllers.vehicle_controller import VehicleController
from rentfleet.main import app
from rentfleet.models.vehicle import InMemoryVehicleRepository
from rentfleet.services.vehicle_service import VehicleService


@pytest.fixture(autouse=True)
def memory_storage(monkeypatch):
    """Keep app startup off MongoDB whatever STORAGE_BACKEND the environment sets"""
    monkeypatch.setattr(settings, "storage_backend", "memory")
    monkeypatch.setattr(bootstrap, "_controller", None)


@pytest.fixture
def repository():
    return InMemoryVehicleRepository()


@pytest.fixture
def service(repository):
    return VehicleService(repository, revenue_per_vehicle=1500.0)


@pytest.fixture
def controller(service):
    return VehicleController(service)


@pytest.fixture
def client(controller):
    app.dependency_overrides[get_vehicle_controller] = lambda: controller
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def tesla_payload():
    """Wire-format (camelCase) body for a valid new vehicle"""
    return {
        "make": "Tesla",
        "model": "Model 3",
        "year": 2023,
        "color": "White",
        "licensePlate": "TSLA-001",
        "vin": "5YJ3E1EA0KF123456",
        "fuelType": "electric",
        "transmission": "automatic",
        "category": "luxury",
        "pricePerDay": 120.0,
        "mileage": 5000,
        "capacity": 5,
    }
