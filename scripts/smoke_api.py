#!/usr/bin/env python3
"""
Smoke test against a running RentFleet API.

Start the server first (python -m rentfleet.main), then run this script.
The base URL comes from RENTFLEET_API_URL (environment or .env).
"""
import os
import sys
import requests
from dotenv import load_dotenv

load_dotenv()

BASE_URL = os.getenv("RENTFLEET_API_URL", "http://localhost:8000")

NEW_VEHICLE = {
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
    "features": ["Autopilot"],
}


def check(label: str, response: requests.Response, expected_status: int) -> dict:
    body = response.json()
    if response.status_code == expected_status:
        print(f"✓ {label}: {response.status_code} {body.get('message') or ''}")
    else:
        print(f"✗ {label}: expected {expected_status}, got {response.status_code}")
        print(f"  Response: {body}")
    return body


def main() -> int:
    try:
        requests.get(f"{BASE_URL}/health", timeout=5).raise_for_status()
    except requests.RequestException as e:
        print(f"✗ API not reachable at {BASE_URL}: {e}")
        return 1

    check("List vehicles", requests.get(f"{BASE_URL}/api/vehicles", params={"limit": 5}), 200)
    check("Statistics", requests.get(f"{BASE_URL}/api/vehicles/statistics"), 200)
    check("Popular", requests.get(f"{BASE_URL}/api/vehicles/popular", params={"limit": 3}), 200)
    check(
        "Available",
        requests.get(
            f"{BASE_URL}/api/vehicles/available",
            params={"startDate": "2025-01-01", "endDate": "2025-01-05"}
        ),
        200
    )

    created = check("Create", requests.post(f"{BASE_URL}/api/vehicles", json=NEW_VEHICLE), 201)
    vehicle_id = (created.get("data") or {}).get("id")
    if not vehicle_id:
        return 1

    check("Get by id", requests.get(f"{BASE_URL}/api/vehicles/{vehicle_id}"), 200)
    check("Update", requests.put(f"{BASE_URL}/api/vehicles/{vehicle_id}", json={"mileage": 5200}), 200)
    check("Toggle", requests.patch(f"{BASE_URL}/api/vehicles/{vehicle_id}/toggle-availability"), 200)
    check(
        "Bulk update",
        requests.patch(
            f"{BASE_URL}/api/vehicles/bulk-update",
            json={"vehicleIds": [vehicle_id, "missing"], "updates": {"color": "Black"}}
        ),
        200
    )
    check("Delete", requests.delete(f"{BASE_URL}/api/vehicles/{vehicle_id}"), 200)
    check("Get deleted", requests.get(f"{BASE_URL}/api/vehicles/{vehicle_id}"), 404)

    print("\n--- Smoke test completed ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
