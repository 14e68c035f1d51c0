import logging
from typing import Optional, Tuple
from rentfleet.config import settings
from rentfleet.controllers.vehicle_controller import VehicleController
from rentfleet.database import get_database
from rentfleet.models.vehicle import (
    InMemoryVehicleRepository,
    MongoVehicleRepository,
    VehicleRepository,
)
from rentfleet.services.vehicle_service import VehicleService

logger = logging.getLogger(__name__)

_controller: Optional[VehicleController] = None


def build_repository() -> VehicleRepository:
    """Create the repository named by settings.storage_backend"""
    backend = settings.storage_backend.lower()
    if backend == "memory":
        logger.info("Using in-memory vehicle storage")
        return InMemoryVehicleRepository(seed=settings.seed_mock_data)
    if backend == "mongo":
        logger.info("Using MongoDB vehicle storage")
        return MongoVehicleRepository(
            get_database(),
            settings.vehicles_collection,
            seed=settings.seed_mock_data
        )
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


def initialize_vehicle_system(
    repository: Optional[VehicleRepository] = None
) -> Tuple[VehicleService, VehicleController]:
    """Wire a service and controller together over the given (or configured) repository"""
    if repository is None:
        repository = build_repository()
    vehicle_service = VehicleService(repository)
    vehicle_controller = VehicleController(vehicle_service)
    return vehicle_service, vehicle_controller


def get_vehicle_controller() -> VehicleController:
    """FastAPI dependency returning the process-wide controller (lazy initialization)"""
    global _controller

    if _controller is None:
        _, _controller = initialize_vehicle_system()

    return _controller
