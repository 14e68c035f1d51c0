import copy
import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional
from pymongo import ASCENDING, ReturnDocument
from pymongo.collation import Collation
from pymongo.collection import Collection

logger = logging.getLogger(__name__)


def mock_vehicles() -> List[dict]:
    """The two demo records every fresh store starts from."""
    return [
        {
            "id": "1",
            "make": "Toyota",
            "model": "Camry",
            "year": 2023,
            "color": "Silver",
            "license_plate": "ABC-1234",
            "vin": "1HGBH41JXMN109186",
            "fuel_type": "gasoline",
            "transmission": "automatic",
            "category": "mid-size",
            "price_per_day": 65.00,
            "mileage": 15000,
            "capacity": 5,
            "is_available": True,
            "location_id": "loc-1",
            "features": ["Air Conditioning", "Bluetooth", "Backup Camera"],
            "images": ["toyota-camry-1.jpg"],
            "created_at": datetime(2023, 1, 15, tzinfo=timezone.utc),
            "updated_at": datetime(2023, 6, 1, tzinfo=timezone.utc),
        },
        {
            "id": "2",
            "make": "Honda",
            "model": "Civic",
            "year": 2022,
            "color": "Blue",
            "license_plate": "XYZ-5678",
            "vin": "2HGFC2F59HH123456",
            "fuel_type": "gasoline",
            "transmission": "manual",
            "category": "compact",
            "price_per_day": 55.00,
            "mileage": 22000,
            "capacity": 5,
            "is_available": False,
            "location_id": "loc-2",
            "features": ["Air Conditioning", "USB Ports"],
            "images": ["honda-civic-1.jpg"],
            "created_at": datetime(2022, 8, 20, tzinfo=timezone.utc),
            "updated_at": datetime(2023, 5, 15, tzinfo=timezone.utc),
        },
    ]


def matches_filters(vehicle: dict, filters: dict) -> bool:
    """Return True when a stored vehicle satisfies every given filter."""
    make = filters.get("make")
    if make and vehicle.get("make", "").lower() != make.lower():
        return False
    model = filters.get("model")
    if model and vehicle.get("model", "").lower() != model.lower():
        return False
    for field in ("category", "fuel_type", "transmission", "location_id"):
        if filters.get(field) and vehicle.get(field) != filters[field]:
            return False
    if filters.get("min_price") is not None and vehicle["price_per_day"] < filters["min_price"]:
        return False
    if filters.get("max_price") is not None and vehicle["price_per_day"] > filters["max_price"]:
        return False
    if filters.get("min_year") is not None and vehicle["year"] < filters["min_year"]:
        return False
    if filters.get("max_year") is not None and vehicle["year"] > filters["max_year"]:
        return False
    if filters.get("is_available") is not None and vehicle.get("is_available") != filters["is_available"]:
        return False
    return True


def build_mongo_query(filters: dict) -> dict:
    """Translate vehicle filters into a MongoDB query document."""
    query: Dict[str, object] = {}

    for field in ("make", "model"):
        if filters.get(field):
            query[field] = {"$regex": f"^{re.escape(filters[field])}$", "$options": "i"}
    for field in ("category", "fuel_type", "transmission", "location_id"):
        if filters.get(field):
            query[field] = filters[field]

    price: Dict[str, float] = {}
    if filters.get("min_price") is not None:
        price["$gte"] = filters["min_price"]
    if filters.get("max_price") is not None:
        price["$lte"] = filters["max_price"]
    if price:
        query["price_per_day"] = price

    year: Dict[str, int] = {}
    if filters.get("min_year") is not None:
        year["$gte"] = filters["min_year"]
    if filters.get("max_year") is not None:
        year["$lte"] = filters["max_year"]
    if year:
        query["year"] = year

    if filters.get("is_available") is not None:
        query["is_available"] = filters["is_available"]

    return query


class VehicleRepository(ABC):
    """Storage for vehicle records, kept as plain dicts with snake_case keys."""

    @abstractmethod
    def create(self, vehicle: dict) -> dict:
        ...

    @abstractmethod
    def get_by_id(self, vehicle_id: str) -> Optional[dict]:
        ...

    @abstractmethod
    def query(self, filters: Optional[dict] = None) -> List[dict]:
        ...

    @abstractmethod
    def update(self, vehicle_id: str, data: dict) -> Optional[dict]:
        ...

    @abstractmethod
    def delete(self, vehicle_id: str) -> bool:
        ...

    @abstractmethod
    def find_by_vin(self, vin: str) -> Optional[dict]:
        ...

    @abstractmethod
    def find_by_license_plate(self, license_plate: str) -> Optional[dict]:
        ...


class InMemoryVehicleRepository(VehicleRepository):
    """Process-local store; records come back as copies so callers can't mutate state."""

    def __init__(self, seed: bool = True):
        self._records: Dict[str, dict] = {}
        if seed:
            for record in mock_vehicles():
                self._records[record["id"]] = record

    def create(self, vehicle: dict):
        self._records[vehicle["id"]] = copy.deepcopy(vehicle)
        return copy.deepcopy(vehicle)

    def get_by_id(self, vehicle_id: str):
        record = self._records.get(vehicle_id)
        return copy.deepcopy(record) if record is not None else None

    def query(self, filters: Optional[dict] = None):
        filters = filters or {}
        return [
            copy.deepcopy(record)
            for record in self._records.values()
            if matches_filters(record, filters)
        ]

    def update(self, vehicle_id: str, data: dict):
        record = self._records.get(vehicle_id)
        if record is None:
            return None
        record.update(copy.deepcopy(data))
        return copy.deepcopy(record)

    def delete(self, vehicle_id: str):
        return self._records.pop(vehicle_id, None) is not None

    def find_by_vin(self, vin: str):
        for record in self._records.values():
            if record["vin"] == vin:
                return copy.deepcopy(record)
        return None

    def find_by_license_plate(self, license_plate: str):
        wanted = license_plate.strip().casefold()
        for record in self._records.values():
            if record["license_plate"].strip().casefold() == wanted:
                return copy.deepcopy(record)
        return None


class MongoVehicleRepository(VehicleRepository):
    """Vehicles collection; the string id is stored as the document _id."""

    def __init__(self, db, collection_name: str = "vehicles", seed: bool = False):
        self.collection: Collection = db[collection_name]
        self.collection.create_index([("make", ASCENDING), ("model", ASCENDING)])
        self.collection.create_index("category")
        self.collection.create_index("is_available")
        self.collection.create_index("location_id")
        self.collection.create_index("price_per_day")
        self.collection.create_index("year")
        self.collection.create_index("vin", unique=True)
        # strength 2 makes the unique check ignore case, matching find_by_license_plate
        self.collection.create_index(
            "license_plate", unique=True, collation=Collation(locale="en", strength=2)
        )

        if seed and self.collection.count_documents({}) == 0:
            self.collection.insert_many([self._to_document(v) for v in mock_vehicles()])
            logger.info("Seeded vehicles collection with demo records")

    @staticmethod
    def _to_document(vehicle: dict) -> dict:
        document = dict(vehicle)
        document["_id"] = document.pop("id")
        return document

    @staticmethod
    def _to_record(document: Optional[dict]) -> Optional[dict]:
        if document is None:
            return None
        document["id"] = str(document.pop("_id"))
        return document

    def create(self, vehicle: dict):
        self.collection.insert_one(self._to_document(vehicle))
        return dict(vehicle)

    def get_by_id(self, vehicle_id: str):
        return self._to_record(self.collection.find_one({"_id": vehicle_id}))

    def query(self, filters: Optional[dict] = None):
        documents = self.collection.find(build_mongo_query(filters or {}))
        return [self._to_record(d) for d in documents]

    def update(self, vehicle_id: str, data: dict):
        document = self.collection.find_one_and_update(
            {"_id": vehicle_id},
            {"$set": data},
            return_document=ReturnDocument.AFTER
        )
        return self._to_record(document)

    def delete(self, vehicle_id: str):
        result = self.collection.delete_one({"_id": vehicle_id})
        return result.deleted_count > 0

    def find_by_vin(self, vin: str):
        return self._to_record(self.collection.find_one({"vin": vin}))

    def find_by_license_plate(self, license_plate: str):
        return self._to_record(self.collection.find_one({
            "license_plate": {"$regex": f"^{re.escape(license_plate.strip())}$", "$options": "i"}
        }))
