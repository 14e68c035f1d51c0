from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from typing import Callable, Dict, Optional
from rentfleet.bootstrap import get_vehicle_controller
from rentfleet.controllers.vehicle_controller import VehicleController
from rentfleet.schemas.vehicle import (
    BulkUpdateRequest,
    ServiceResponse,
    VehicleCreate,
    VehicleFilters,
    VehicleUpdate,
)
from rentfleet.services.vehicle_service import VEHICLE_NOT_FOUND

router = APIRouter(prefix="/api/vehicles", tags=["vehicles"])


def _respond(
    result: ServiceResponse,
    success_code: int = status.HTTP_200_OK,
    failure_code: int = status.HTTP_400_BAD_REQUEST
) -> JSONResponse:
    if result.success:
        code = success_code
    elif result.error == VEHICLE_NOT_FOUND:
        code = status.HTTP_404_NOT_FOUND
    else:
        code = failure_code
    return JSONResponse(status_code=code, content=result.to_payload())


def _bad_request(error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": error}
    )


@router.get("")
async def get_vehicles(
    page: int = 1,
    limit: int = 10,
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    make: Optional[str] = None,
    model: Optional[str] = None,
    category: Optional[str] = None,
    fuel_type: Optional[str] = Query(None, alias="fuelType"),
    transmission: Optional[str] = None,
    min_price: Optional[float] = Query(None, alias="minPrice", allow_inf_nan=False),
    max_price: Optional[float] = Query(None, alias="maxPrice", allow_inf_nan=False),
    min_year: Optional[int] = Query(None, alias="minYear"),
    max_year: Optional[int] = Query(None, alias="maxYear"),
    is_available: Optional[bool] = Query(None, alias="isAvailable"),
    location_id: Optional[str] = Query(None, alias="locationId"),
    controller: VehicleController = Depends(get_vehicle_controller)
):
    """List vehicles with filtering, sorting and pagination"""
    filters = VehicleFilters(
        make=make,
        model=model,
        category=category,
        fuel_type=fuel_type,
        transmission=transmission,
        min_price=min_price,
        max_price=max_price,
        min_year=min_year,
        max_year=max_year,
        is_available=is_available,
        location_id=location_id,
    )
    result = await controller.get_all_vehicles(page, limit, sort_by, sort_order, filters)
    return _respond(result)


@router.get("/available")
async def get_available_vehicles(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    location_id: Optional[str] = Query(None, alias="locationId"),
    controller: VehicleController = Depends(get_vehicle_controller)
):
    """Vehicles available for a date range, optionally at one location"""
    if not start_date or not end_date:
        return _bad_request("Start date and end date are required")

    result = await controller.get_available_vehicles(start_date, end_date, location_id)
    return _respond(result)


@router.get("/statistics")
async def get_vehicle_statistics(
    controller: VehicleController = Depends(get_vehicle_controller)
):
    result = await controller.get_vehicle_statistics()
    return _respond(result, failure_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("/popular")
async def get_popular_vehicles(
    limit: int = 10,
    controller: VehicleController = Depends(get_vehicle_controller)
):
    result = await controller.get_popular_vehicles(limit)
    return _respond(result)


@router.patch("/bulk-update")
async def bulk_update_vehicles(
    request: BulkUpdateRequest,
    controller: VehicleController = Depends(get_vehicle_controller)
):
    """Apply the same update to many vehicles, skipping ids that fail"""
    if request.vehicle_ids is None:
        return _bad_request("Vehicle IDs array is required")
    if request.updates is None:
        return _bad_request("Updates object is required")

    result = await controller.bulk_update_vehicles(request.vehicle_ids, request.updates)
    return _respond(result)


@router.get("/{vehicle_id}")
async def get_vehicle(
    vehicle_id: str,
    controller: VehicleController = Depends(get_vehicle_controller)
):
    result = await controller.get_vehicle_by_id(vehicle_id)
    return _respond(result)


@router.post("")
async def create_vehicle(
    vehicle: VehicleCreate,
    controller: VehicleController = Depends(get_vehicle_controller)
):
    result = await controller.create_vehicle(vehicle)
    return _respond(result, success_code=status.HTTP_201_CREATED)


@router.put("/{vehicle_id}")
async def update_vehicle(
    vehicle_id: str,
    vehicle_update: VehicleUpdate,
    controller: VehicleController = Depends(get_vehicle_controller)
):
    result = await controller.update_vehicle(vehicle_id, vehicle_update)
    return _respond(result)


@router.delete("/{vehicle_id}")
async def delete_vehicle(
    vehicle_id: str,
    controller: VehicleController = Depends(get_vehicle_controller)
):
    result = await controller.delete_vehicle(vehicle_id)
    return _respond(result)


@router.patch("/{vehicle_id}/toggle-availability")
async def toggle_availability(
    vehicle_id: str,
    controller: VehicleController = Depends(get_vehicle_controller)
):
    result = await controller.toggle_availability(vehicle_id)
    return _respond(result)


def route_table() -> Dict[str, Callable]:
    """Map "METHOD /path" keys (":id" for the path parameter) to endpoint functions"""
    table: Dict[str, Callable] = {}
    for route in router.routes:
        path = route.path.replace("{vehicle_id}", ":id")
        for method in sorted(route.methods):
            table[f"{method} {path}"] = route.endpoint
    return table
