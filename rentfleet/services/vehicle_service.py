import logging
import math
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import List, Optional
from pydantic.alias_generators import to_snake
from rentfleet.config import settings
from rentfleet.models.vehicle import InMemoryVehicleRepository, VehicleRepository
from rentfleet.schemas.vehicle import (
    PaginatedVehicles,
    ServiceResponse,
    Vehicle,
    VehicleCreate,
    VehicleFilters,
    VehicleStatistics,
    VehicleUpdate,
)

logger = logging.getLogger(__name__)

VEHICLE_NOT_FOUND = "Vehicle not found"
DUPLICATE_VEHICLE = "Duplicate vehicle"


def sort_vehicles(vehicles: List[dict], sort_by: str, sort_order: str) -> List[dict]:
    """
    Order records by one field.

    Strings compare case-insensitively and the sort is stable, so ties keep
    storage order. Records without the field go last whatever the direction.
    """
    field = to_snake(sort_by)
    present = [v for v in vehicles if v.get(field) is not None]
    missing = [v for v in vehicles if v.get(field) is None]

    def key(vehicle):
        value = vehicle[field]
        return value.casefold() if isinstance(value, str) else value

    present.sort(key=key, reverse=sort_order != "asc")
    return present + missing


class VehicleService:
    """
    Vehicle business operations over a VehicleRepository.

    Every public method returns a ServiceResponse; storage errors are logged
    and reported as a failure instead of being raised.
    """

    def __init__(self, repository: Optional[VehicleRepository] = None, revenue_per_vehicle: Optional[float] = None):
        self.repository = repository if repository is not None else InMemoryVehicleRepository()
        if revenue_per_vehicle is None:
            revenue_per_vehicle = settings.estimated_revenue_per_vehicle
        self.revenue_per_vehicle = revenue_per_vehicle

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def _duplicate(self, vin: Optional[str], license_plate: Optional[str], vehicle_id: Optional[str] = None):
        """Return a failure when another vehicle already holds this VIN or plate"""
        if vin:
            match = self.repository.find_by_vin(vin)
            if match is not None and match["id"] != vehicle_id:
                return ServiceResponse[Vehicle].fail(DUPLICATE_VEHICLE, f"A vehicle with VIN {vin} already exists")
        if license_plate:
            match = self.repository.find_by_license_plate(license_plate)
            if match is not None and match["id"] != vehicle_id:
                return ServiceResponse[Vehicle].fail(
                    DUPLICATE_VEHICLE, f"A vehicle with license plate {license_plate} already exists"
                )
        return None

    @staticmethod
    def _not_found(vehicle_id: str):
        return ServiceResponse[Vehicle].fail(VEHICLE_NOT_FOUND, f"No vehicle found with ID: {vehicle_id}")

    async def get_all_vehicles(
        self,
        page: int,
        limit: int,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        filters: Optional[VehicleFilters] = None
    ) -> ServiceResponse[PaginatedVehicles]:
        try:
            criteria = filters.model_dump(exclude_none=True) if filters else {}
            vehicles = sort_vehicles(self.repository.query(criteria), sort_by, sort_order)

            total_count = len(vehicles)
            total_pages = math.ceil(total_count / limit)
            offset = (page - 1) * limit
            page_items = vehicles[offset:offset + limit]

            result = PaginatedVehicles(
                vehicles=[Vehicle(**v) for v in page_items],
                total_count=total_count,
                total_pages=total_pages,
                current_page=page,
                has_next_page=page < total_pages,
                has_previous_page=page > 1,
            )
            return ServiceResponse[PaginatedVehicles].ok(result, f"Retrieved {len(page_items)} vehicles")
        except Exception as e:
            logger.error(f"Failed to list vehicles: {e}", exc_info=True)
            return ServiceResponse[PaginatedVehicles].fail("Failed to retrieve vehicles from database", str(e))

    async def get_available_vehicles(
        self,
        start_date: str,
        end_date: str,
        location_id: Optional[str] = None
    ) -> ServiceResponse[List[Vehicle]]:
        # No reservation data exists yet, so the date range does not narrow the result.
        try:
            criteria = {"is_available": True}
            if location_id:
                criteria["location_id"] = location_id
            vehicles = [Vehicle(**v) for v in self.repository.query(criteria)]
            return ServiceResponse[List[Vehicle]].ok(vehicles, f"Found {len(vehicles)} available vehicles")
        except Exception as e:
            logger.error(f"Failed to list available vehicles: {e}", exc_info=True)
            return ServiceResponse[List[Vehicle]].fail("Failed to retrieve available vehicles", str(e))

    async def get_vehicle_by_id(self, vehicle_id: str) -> ServiceResponse[Vehicle]:
        try:
            record = self.repository.get_by_id(vehicle_id)
            if record is None:
                return self._not_found(vehicle_id)
            return ServiceResponse[Vehicle].ok(Vehicle(**record), "Vehicle retrieved successfully")
        except Exception as e:
            logger.error(f"Failed to get vehicle {vehicle_id}: {e}", exc_info=True)
            return ServiceResponse[Vehicle].fail("Failed to retrieve vehicle", str(e))

    async def create_vehicle(self, vehicle_data: VehicleCreate) -> ServiceResponse[Vehicle]:
        try:
            duplicate = self._duplicate(vehicle_data.vin, vehicle_data.license_plate)
            if duplicate is not None:
                return duplicate

            now = self._now()
            vehicle = Vehicle(
                **vehicle_data.model_dump(exclude={"mileage", "features", "images"}),
                id=str(uuid.uuid4()),
                is_available=True,
                mileage=vehicle_data.mileage or 0,
                features=vehicle_data.features or [],
                images=vehicle_data.images or [],
                created_at=now,
                updated_at=now,
            )
            self.repository.create(vehicle.model_dump())
            logger.info(f"Created vehicle {vehicle.id} ({vehicle.make} {vehicle.model})")
            return ServiceResponse[Vehicle].ok(vehicle, "Vehicle created successfully")
        except Exception as e:
            logger.error(f"Failed to create vehicle: {e}", exc_info=True)
            return ServiceResponse[Vehicle].fail("Failed to create vehicle", str(e))

    async def update_vehicle(self, vehicle_id: str, updates: VehicleUpdate) -> ServiceResponse[Vehicle]:
        try:
            existing = self.repository.get_by_id(vehicle_id)
            if existing is None:
                return self._not_found(vehicle_id)

            data = updates.model_dump(exclude_unset=True)
            duplicate = self._duplicate(data.get("vin"), data.get("license_plate"), vehicle_id)
            if duplicate is not None:
                return duplicate

            data["updated_at"] = self._now()
            merged = Vehicle(**{**existing, **data})

            updated = self.repository.update(vehicle_id, merged.model_dump(exclude={"id", "created_at"}))
            if updated is None:
                return self._not_found(vehicle_id)
            logger.info(f"Updated vehicle {vehicle_id}: {sorted(data)}")
            return ServiceResponse[Vehicle].ok(Vehicle(**updated), "Vehicle updated successfully")
        except Exception as e:
            logger.error(f"Failed to update vehicle {vehicle_id}: {e}", exc_info=True)
            return ServiceResponse[Vehicle].fail("Failed to update vehicle", str(e))

    async def delete_vehicle(self, vehicle_id: str) -> ServiceResponse[None]:
        try:
            if not self.repository.delete(vehicle_id):
                return ServiceResponse[None].fail(VEHICLE_NOT_FOUND, f"No vehicle found with ID: {vehicle_id}")
            logger.info(f"Deleted vehicle {vehicle_id}")
            return ServiceResponse[None].ok(message="Vehicle deleted successfully")
        except Exception as e:
            logger.error(f"Failed to delete vehicle {vehicle_id}: {e}", exc_info=True)
            return ServiceResponse[None].fail("Failed to delete vehicle", str(e))

    async def get_vehicle_statistics(self) -> ServiceResponse[VehicleStatistics]:
        try:
            vehicles = self.repository.query()

            total = len(vehicles)
            available = sum(1 for v in vehicles if v["is_available"])
            average_price = sum(v["price_per_day"] for v in vehicles) / total if total else 0.0

            # max() keeps the first category to reach the top count
            category_counts = Counter(v["category"] for v in vehicles)
            most_popular = max(category_counts, key=category_counts.get) if category_counts else ""

            statistics = VehicleStatistics(
                total_vehicles=total,
                available_vehicles=available,
                rented_vehicles=total - available,
                average_price=round(average_price, 2),
                most_popular_category=most_popular,
                total_revenue=total * self.revenue_per_vehicle,
            )
            return ServiceResponse[VehicleStatistics].ok(statistics, "Statistics retrieved successfully")
        except Exception as e:
            logger.error(f"Failed to compute vehicle statistics: {e}", exc_info=True)
            return ServiceResponse[VehicleStatistics].fail("Failed to retrieve statistics", str(e))

    async def get_popular_vehicles(self, limit: int) -> ServiceResponse[List[Vehicle]]:
        # Popularity is approximated by model year until bookings are tracked.
        try:
            vehicles = sorted(self.repository.query(), key=lambda v: v["year"], reverse=True)[:limit]
            popular = [Vehicle(**v) for v in vehicles]
            return ServiceResponse[List[Vehicle]].ok(popular, f"Retrieved {len(popular)} popular vehicles")
        except Exception as e:
            logger.error(f"Failed to list popular vehicles: {e}", exc_info=True)
            return ServiceResponse[List[Vehicle]].fail("Failed to retrieve popular vehicles", str(e))

    async def toggle_availability(self, vehicle_id: str) -> ServiceResponse[Vehicle]:
        try:
            existing = self.repository.get_by_id(vehicle_id)
            if existing is None:
                return self._not_found(vehicle_id)

            updated = self.repository.update(vehicle_id, {
                "is_available": not existing["is_available"],
                "updated_at": self._now(),
            })
            if updated is None:
                return self._not_found(vehicle_id)

            vehicle = Vehicle(**updated)
            state = "available" if vehicle.is_available else "unavailable"
            logger.info(f"Vehicle {vehicle_id} is now {state}")
            return ServiceResponse[Vehicle].ok(vehicle, f"Vehicle availability toggled to {state}")
        except Exception as e:
            logger.error(f"Failed to toggle availability for {vehicle_id}: {e}", exc_info=True)
            return ServiceResponse[Vehicle].fail("Failed to toggle vehicle availability", str(e))

    async def bulk_update_vehicles(self, vehicle_ids: List[str], updates: VehicleUpdate) -> ServiceResponse[List[Vehicle]]:
        try:
            updated: List[Vehicle] = []
            for vehicle_id in vehicle_ids:
                result = await self.update_vehicle(vehicle_id, updates)
                if result.success and result.data is not None:
                    updated.append(result.data)

            return ServiceResponse[List[Vehicle]].ok(
                updated,
                f"Successfully updated {len(updated)} out of {len(vehicle_ids)} vehicles"
            )
        except Exception as e:
            logger.error(f"Bulk update failed: {e}", exc_info=True)
            return ServiceResponse[List[Vehicle]].fail("Failed to bulk update vehicles", str(e))
