from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Generic, List, Optional, TypeVar
from datetime import datetime

FUEL_TYPES = ("gasoline", "diesel", "electric", "hybrid")
TRANSMISSIONS = ("manual", "automatic")
CATEGORIES = ("economy", "compact", "mid-size", "luxury", "suv", "truck")

T = TypeVar("T")


class CamelModel(BaseModel):
    """Snake-case attributes on the Python side, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        allow_inf_nan = False


class Vehicle(CamelModel):
    id: str
    make: str
    model: str
    year: int
    color: str
    license_plate: str
    vin: str
    fuel_type: str
    transmission: str
    category: str
    price_per_day: float
    mileage: int = 0
    capacity: int
    is_available: bool = True
    location_id: Optional[str] = None
    features: List[str] = []
    images: List[str] = []
    created_at: datetime
    updated_at: datetime


# Every field is optional at the type level; VehicleValidator decides what
# is actually required so all rule violations are reported together.
class VehicleCreate(CamelModel):
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    color: Optional[str] = None
    license_plate: Optional[str] = None
    vin: Optional[str] = None
    fuel_type: Optional[str] = None
    transmission: Optional[str] = None
    category: Optional[str] = None
    price_per_day: Optional[float] = None
    mileage: Optional[int] = 0
    capacity: Optional[int] = None
    location_id: Optional[str] = None
    features: Optional[List[str]] = None
    images: Optional[List[str]] = None


class VehicleUpdate(CamelModel):
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    color: Optional[str] = None
    license_plate: Optional[str] = None
    vin: Optional[str] = None
    fuel_type: Optional[str] = None
    transmission: Optional[str] = None
    category: Optional[str] = None
    price_per_day: Optional[float] = None
    mileage: Optional[int] = None
    capacity: Optional[int] = None
    is_available: Optional[bool] = None
    location_id: Optional[str] = None
    features: Optional[List[str]] = None
    images: Optional[List[str]] = None


class VehicleFilters(CamelModel):
    make: Optional[str] = None
    model: Optional[str] = None
    category: Optional[str] = None
    fuel_type: Optional[str] = None
    transmission: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    is_available: Optional[bool] = None
    location_id: Optional[str] = None


class PaginatedVehicles(CamelModel):
    vehicles: List[Vehicle]
    total_count: int
    total_pages: int
    current_page: int
    has_next_page: bool
    has_previous_page: bool


class VehicleStatistics(CamelModel):
    total_vehicles: int
    available_vehicles: int
    rented_vehicles: int
    average_price: float
    most_popular_category: str
    total_revenue: float


class BulkUpdateRequest(CamelModel):
    vehicle_ids: Optional[List[str]] = None
    updates: Optional[VehicleUpdate] = None


class ServiceResponse(BaseModel, Generic[T]):
    """Tagged result passed between service, controller and routes."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, data=None, message: Optional[str] = None):
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str, message: Optional[str] = None):
        return cls(success=False, error=error, message=message)

    def to_payload(self) -> dict:
        """Serialize for the wire, dropping top-level keys that are unset."""
        payload = self.model_dump(mode="json", by_alias=True)
        return {key: value for key, value in payload.items() if value is not None}
