import logging
from typing import List, Optional
from rentfleet.schemas.vehicle import (
    PaginatedVehicles,
    ServiceResponse,
    Vehicle,
    VehicleCreate,
    VehicleFilters,
    VehicleStatistics,
    VehicleUpdate,
)
from rentfleet.services.vehicle_service import VehicleService
from rentfleet.validators.vehicle import ValidationResult, VehicleValidator

logger = logging.getLogger(__name__)

MAX_POPULAR_LIMIT = 50
MAX_BULK_UPDATE = 100


def _invalid(validation: ValidationResult, response_type):
    return response_type.fail(", ".join(validation.errors))


def _blank_id(vehicle_id: Optional[str]) -> bool:
    return not vehicle_id or not vehicle_id.strip()


class VehicleController:
    """Gate inputs through VehicleValidator before handing them to VehicleService."""

    def __init__(self, vehicle_service: VehicleService):
        self.vehicle_service = vehicle_service

    async def get_all_vehicles(
        self,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        filters: Optional[VehicleFilters] = None
    ) -> ServiceResponse[PaginatedVehicles]:
        filters = filters or VehicleFilters()
        try:
            pagination = VehicleValidator.validate_pagination(page, limit)
            if not pagination.is_valid:
                return _invalid(pagination, ServiceResponse[PaginatedVehicles])

            filter_check = VehicleValidator.validate_filters(filters)
            if not filter_check.is_valid:
                return _invalid(filter_check, ServiceResponse[PaginatedVehicles])

            return await self.vehicle_service.get_all_vehicles(page, limit, sort_by, sort_order, filters)
        except Exception as e:
            logger.error(f"get_all_vehicles failed: {e}", exc_info=True)
            return ServiceResponse[PaginatedVehicles].fail("Failed to retrieve vehicles", str(e))

    async def get_available_vehicles(
        self,
        start_date: str,
        end_date: str,
        location_id: Optional[str] = None
    ) -> ServiceResponse[List[Vehicle]]:
        try:
            dates = VehicleValidator.validate_date_range(start_date, end_date)
            if not dates.is_valid:
                return _invalid(dates, ServiceResponse[List[Vehicle]])

            return await self.vehicle_service.get_available_vehicles(start_date, end_date, location_id)
        except Exception as e:
            logger.error(f"get_available_vehicles failed: {e}", exc_info=True)
            return ServiceResponse[List[Vehicle]].fail("Failed to retrieve available vehicles", str(e))

    async def get_vehicle_by_id(self, vehicle_id: str) -> ServiceResponse[Vehicle]:
        try:
            if _blank_id(vehicle_id):
                return ServiceResponse[Vehicle].fail("Vehicle ID is required")

            return await self.vehicle_service.get_vehicle_by_id(vehicle_id)
        except Exception as e:
            logger.error(f"get_vehicle_by_id failed: {e}", exc_info=True)
            return ServiceResponse[Vehicle].fail("Failed to retrieve vehicle", str(e))

    async def create_vehicle(self, vehicle_data: VehicleCreate) -> ServiceResponse[Vehicle]:
        try:
            validation = VehicleValidator.validate_create_vehicle(vehicle_data)
            if not validation.is_valid:
                return _invalid(validation, ServiceResponse[Vehicle])

            return await self.vehicle_service.create_vehicle(vehicle_data)
        except Exception as e:
            logger.error(f"create_vehicle failed: {e}", exc_info=True)
            return ServiceResponse[Vehicle].fail("Failed to create vehicle", str(e))

    async def update_vehicle(self, vehicle_id: str, updates: VehicleUpdate) -> ServiceResponse[Vehicle]:
        try:
            if _blank_id(vehicle_id):
                return ServiceResponse[Vehicle].fail("Vehicle ID is required")

            validation = VehicleValidator.validate_update_vehicle(updates)
            if not validation.is_valid:
                return _invalid(validation, ServiceResponse[Vehicle])

            return await self.vehicle_service.update_vehicle(vehicle_id, updates)
        except Exception as e:
            logger.error(f"update_vehicle failed: {e}", exc_info=True)
            return ServiceResponse[Vehicle].fail("Failed to update vehicle", str(e))

    async def delete_vehicle(self, vehicle_id: str) -> ServiceResponse[None]:
        try:
            if _blank_id(vehicle_id):
                return ServiceResponse[None].fail("Vehicle ID is required")

            return await self.vehicle_service.delete_vehicle(vehicle_id)
        except Exception as e:
            logger.error(f"delete_vehicle failed: {e}", exc_info=True)
            return ServiceResponse[None].fail("Failed to delete vehicle", str(e))

    async def get_vehicle_statistics(self) -> ServiceResponse[VehicleStatistics]:
        try:
            return await self.vehicle_service.get_vehicle_statistics()
        except Exception as e:
            logger.error(f"get_vehicle_statistics failed: {e}", exc_info=True)
            return ServiceResponse[VehicleStatistics].fail("Failed to retrieve vehicle statistics", str(e))

    async def get_popular_vehicles(self, limit: int = 10) -> ServiceResponse[List[Vehicle]]:
        try:
            if limit < 1 or limit > MAX_POPULAR_LIMIT:
                return ServiceResponse[List[Vehicle]].fail(f"Limit must be between 1 and {MAX_POPULAR_LIMIT}")

            return await self.vehicle_service.get_popular_vehicles(limit)
        except Exception as e:
            logger.error(f"get_popular_vehicles failed: {e}", exc_info=True)
            return ServiceResponse[List[Vehicle]].fail("Failed to retrieve popular vehicles", str(e))

    async def toggle_availability(self, vehicle_id: str) -> ServiceResponse[Vehicle]:
        try:
            if _blank_id(vehicle_id):
                return ServiceResponse[Vehicle].fail("Vehicle ID is required")

            return await self.vehicle_service.toggle_availability(vehicle_id)
        except Exception as e:
            logger.error(f"toggle_availability failed: {e}", exc_info=True)
            return ServiceResponse[Vehicle].fail("Failed to toggle vehicle availability", str(e))

    async def bulk_update_vehicles(self, vehicle_ids: List[str], updates: VehicleUpdate) -> ServiceResponse[List[Vehicle]]:
        try:
            if not vehicle_ids:
                return ServiceResponse[List[Vehicle]].fail("Vehicle IDs are required")

            if len(vehicle_ids) > MAX_BULK_UPDATE:
                return ServiceResponse[List[Vehicle]].fail(
                    f"Cannot update more than {MAX_BULK_UPDATE} vehicles at once"
                )

            validation = VehicleValidator.validate_update_vehicle(updates)
            if not validation.is_valid:
                return _invalid(validation, ServiceResponse[List[Vehicle]])

            return await self.vehicle_service.bulk_update_vehicles(vehicle_ids, updates)
        except Exception as e:
            logger.error(f"bulk_update_vehicles failed: {e}", exc_info=True)
            return ServiceResponse[List[Vehicle]].fail("Failed to bulk update vehicles", str(e))
