import math
import re
from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel
from rentfleet.schemas.vehicle import (
    CATEGORIES,
    FUEL_TYPES,
    TRANSMISSIONS,
    VehicleCreate,
    VehicleFilters,
    VehicleUpdate,
)

MIN_YEAR = 1900
MAX_YEAR = 2030
MAX_CAPACITY = 12
MAX_PAGE_SIZE = 100

VIN_PATTERN = re.compile(r"[A-HJ-NPR-Z0-9]{17}")
LICENSE_PLATE_PATTERN = re.compile(r"[A-Z0-9\-\s]{1,20}", re.IGNORECASE)


class ValidationResult(BaseModel):
    is_valid: bool
    errors: List[str] = []


def _result(errors: List[str]) -> ValidationResult:
    return ValidationResult(is_valid=not errors, errors=errors)


def _blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


def _year_in_range(value) -> bool:
    return value is not None and MIN_YEAR <= value <= MAX_YEAR


def _positive_price(value) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def _capacity_in_range(value) -> bool:
    return value is not None and 1 <= value <= MAX_CAPACITY


def _parse_date(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime; naive values are taken as UTC."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _one_of(label: str, allowed) -> str:
    return f"{label} must be one of: {', '.join(allowed)}"


class VehicleValidator:
    """
    Stateless rule checks for vehicle payloads and query parameters.

    Every check runs; violations accumulate so a caller sees all of them at once.
    """

    @staticmethod
    def validate_create_vehicle(data: VehicleCreate) -> ValidationResult:
        errors: List[str] = []

        # Required text fields
        if _blank(data.make):
            errors.append("Make is required")
        if _blank(data.model):
            errors.append("Model is required")
        if _blank(data.color):
            errors.append("Color is required")
        if _blank(data.license_plate):
            errors.append("License plate is required")
        if _blank(data.vin):
            errors.append("VIN is required")

        if not _year_in_range(data.year):
            errors.append(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")

        if data.fuel_type not in FUEL_TYPES:
            errors.append(_one_of("Fuel type", FUEL_TYPES))
        if data.transmission not in TRANSMISSIONS:
            errors.append(_one_of("Transmission", TRANSMISSIONS))
        if data.category not in CATEGORIES:
            errors.append(_one_of("Category", CATEGORIES))

        if not _positive_price(data.price_per_day):
            errors.append("Price per day must be greater than 0")

        if data.mileage is not None and data.mileage < 0:
            errors.append("Mileage cannot be negative")

        if not _capacity_in_range(data.capacity):
            errors.append(f"Capacity must be between 1 and {MAX_CAPACITY}")

        if data.vin and not VIN_PATTERN.fullmatch(data.vin):
            errors.append("Invalid VIN format")

        if data.license_plate and not LICENSE_PLATE_PATTERN.fullmatch(data.license_plate):
            errors.append("Invalid license plate format")

        return _result(errors)

    @staticmethod
    def validate_update_vehicle(data: VehicleUpdate) -> ValidationResult:
        """Check only the fields the caller actually sent."""
        errors: List[str] = []
        fields = data.model_dump(exclude_unset=True)

        for name, label in (("make", "Make"), ("model", "Model"), ("color", "Color")):
            if name in fields and _blank(fields[name]):
                errors.append(f"{label} cannot be empty")

        if "year" in fields and not _year_in_range(fields["year"]):
            errors.append(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")

        if "fuel_type" in fields and fields["fuel_type"] not in FUEL_TYPES:
            errors.append(_one_of("Fuel type", FUEL_TYPES))
        if "transmission" in fields and fields["transmission"] not in TRANSMISSIONS:
            errors.append(_one_of("Transmission", TRANSMISSIONS))
        if "category" in fields and fields["category"] not in CATEGORIES:
            errors.append(_one_of("Category", CATEGORIES))

        if "price_per_day" in fields and not _positive_price(fields["price_per_day"]):
            errors.append("Price per day must be greater than 0")

        if "mileage" in fields and (fields["mileage"] is None or fields["mileage"] < 0):
            errors.append("Mileage cannot be negative")

        if "capacity" in fields and not _capacity_in_range(fields["capacity"]):
            errors.append(f"Capacity must be between 1 and {MAX_CAPACITY}")

        if "vin" in fields and not (fields["vin"] and VIN_PATTERN.fullmatch(fields["vin"])):
            errors.append("Invalid VIN format")

        if "license_plate" in fields and not (
            fields["license_plate"] and LICENSE_PLATE_PATTERN.fullmatch(fields["license_plate"])
        ):
            errors.append("Invalid license plate format")

        if "is_available" in fields and fields["is_available"] is None:
            errors.append("Availability must be true or false")

        if "features" in fields and fields["features"] is None:
            errors.append("Features must be an array of strings")
        if "images" in fields and fields["images"] is None:
            errors.append("Images must be an array of URLs")

        return _result(errors)

    @staticmethod
    def validate_filters(filters: VehicleFilters) -> ValidationResult:
        errors: List[str] = []

        if filters.fuel_type and filters.fuel_type not in FUEL_TYPES:
            errors.append(_one_of("Fuel type filter", FUEL_TYPES))
        if filters.transmission and filters.transmission not in TRANSMISSIONS:
            errors.append(_one_of("Transmission filter", TRANSMISSIONS))
        if filters.category and filters.category not in CATEGORIES:
            errors.append(_one_of("Category filter", CATEGORIES))

        if filters.min_price is not None and filters.min_price < 0:
            errors.append("Minimum price cannot be negative")
        if filters.max_price is not None and filters.max_price < 0:
            errors.append("Maximum price cannot be negative")
        if (
            filters.min_price is not None
            and filters.max_price is not None
            and filters.min_price > filters.max_price
        ):
            errors.append("Minimum price cannot be greater than maximum price")

        if filters.min_year is not None and not _year_in_range(filters.min_year):
            errors.append(f"Minimum year must be between {MIN_YEAR} and {MAX_YEAR}")
        if filters.max_year is not None and not _year_in_range(filters.max_year):
            errors.append(f"Maximum year must be between {MIN_YEAR} and {MAX_YEAR}")
        if (
            filters.min_year is not None
            and filters.max_year is not None
            and filters.min_year > filters.max_year
        ):
            errors.append("Minimum year cannot be greater than maximum year")

        return _result(errors)

    @staticmethod
    def validate_pagination(page: int, limit: int) -> ValidationResult:
        errors: List[str] = []

        if page < 1:
            errors.append("Page must be greater than 0")
        if limit < 1 or limit > MAX_PAGE_SIZE:
            errors.append(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

        return _result(errors)

    @staticmethod
    def validate_date_range(start_date: str, end_date: str) -> ValidationResult:
        errors: List[str] = []

        start = _parse_date(start_date)
        end = _parse_date(end_date)

        if start is None:
            errors.append("Invalid start date format")
        if end is None:
            errors.append("Invalid end date format")

        # Past dates are accepted
        if start is not None and end is not None and start >= end:
            errors.append("Start date must be before end date")

        return _result(errors)
