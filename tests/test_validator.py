import pytest

from rentfleet.schemas.vehicle import VehicleCreate, VehicleFilters, VehicleUpdate
from rentfleet.validators.vehicle import VehicleValidator


@pytest.fixture
def create_data(tesla_payload):
    return VehicleCreate(**tesla_payload)


def test_valid_create_payload(create_data):
    result = VehicleValidator.validate_create_vehicle(create_data)
    assert result.is_valid
    assert result.errors == []


@pytest.mark.parametrize("year", [1899, 2031, 0])
def test_create_rejects_year_out_of_range(create_data, year):
    result = VehicleValidator.validate_create_vehicle(create_data.model_copy(update={"year": year}))
    assert not result.is_valid
    assert "Year must be between 1900 and 2030" in result.errors


@pytest.mark.parametrize("year", [1900, 2030])
def test_create_accepts_year_bounds(create_data, year):
    result = VehicleValidator.validate_create_vehicle(create_data.model_copy(update={"year": year}))
    assert result.is_valid


@pytest.mark.parametrize("vin", [
    "5YJ3E1EA0KF12345",     # 16 chars
    "5YJ3E1EA0KF1234567",   # 18 chars
    "5YJ3E1EA0KF12345I",    # contains I
    "5YJ3E1EA0KF12345O",    # contains O
    "5YJ3E1EA0KF12345Q",    # contains Q
    "5yj3e1ea0kf123456",    # lowercase
])
def test_create_rejects_bad_vin(create_data, vin):
    result = VehicleValidator.validate_create_vehicle(create_data.model_copy(update={"vin": vin}))
    assert not result.is_valid
    assert "Invalid VIN format" in result.errors


def test_create_license_plate_pattern(create_data):
    ok = VehicleValidator.validate_create_vehicle(create_data.model_copy(update={"license_plate": "ab 12-cd"}))
    assert ok.is_valid

    too_long = VehicleValidator.validate_create_vehicle(create_data.model_copy(update={"license_plate": "A" * 21}))
    assert "Invalid license plate format" in too_long.errors

    symbols = VehicleValidator.validate_create_vehicle(create_data.model_copy(update={"license_plate": "AB#12"}))
    assert "Invalid license plate format" in symbols.errors


def test_create_accumulates_every_error():
    result = VehicleValidator.validate_create_vehicle(VehicleCreate())

    assert not result.is_valid
    for message in (
        "Make is required",
        "Model is required",
        "Color is required",
        "License plate is required",
        "VIN is required",
        "Year must be between 1900 and 2030",
        "Fuel type must be one of: gasoline, diesel, electric, hybrid",
        "Transmission must be one of: manual, automatic",
        "Category must be one of: economy, compact, mid-size, luxury, suv, truck",
        "Price per day must be greater than 0",
        "Capacity must be between 1 and 12",
    ):
        assert message in result.errors
    # Missing VIN and plate are reported as required, not as malformed
    assert "Invalid VIN format" not in result.errors
    assert "Invalid license plate format" not in result.errors


def test_create_blank_strings_count_as_missing(create_data):
    result = VehicleValidator.validate_create_vehicle(create_data.model_copy(update={"make": "   "}))
    assert result.errors == ["Make is required"]


def test_create_numeric_rules(create_data):
    result = VehicleValidator.validate_create_vehicle(
        create_data.model_copy(update={"price_per_day": 0, "mileage": -1, "capacity": 13})
    )
    assert result.errors == [
        "Price per day must be greater than 0",
        "Mileage cannot be negative",
        "Capacity must be between 1 and 12",
    ]


def test_update_checks_only_present_fields():
    assert VehicleValidator.validate_update_vehicle(VehicleUpdate()).is_valid
    assert VehicleValidator.validate_update_vehicle(VehicleUpdate(color="Red")).is_valid


def test_update_rejects_invalid_present_fields():
    result = VehicleValidator.validate_update_vehicle(
        VehicleUpdate(make="", year=1800, fuel_type="steam", capacity=0, vin="BAD")
    )
    assert result.errors == [
        "Make cannot be empty",
        "Year must be between 1900 and 2030",
        "Fuel type must be one of: gasoline, diesel, electric, hybrid",
        "Capacity must be between 1 and 12",
        "Invalid VIN format",
    ]


def test_update_rejects_explicit_nulls():
    result = VehicleValidator.validate_update_vehicle(
        VehicleUpdate.model_validate({"model": None, "pricePerDay": None, "isAvailable": None})
    )
    assert "Model cannot be empty" in result.errors
    assert "Price per day must be greater than 0" in result.errors
    assert "Availability must be true or false" in result.errors


def test_update_allows_clearing_location():
    result = VehicleValidator.validate_update_vehicle(VehicleUpdate.model_validate({"locationId": None}))
    assert result.is_valid


def test_filters_price_and_year_ordering():
    result = VehicleValidator.validate_filters(
        VehicleFilters(min_price=100, max_price=50, min_year=2020, max_year=2010)
    )
    assert result.errors == [
        "Minimum price cannot be greater than maximum price",
        "Minimum year cannot be greater than maximum year",
    ]


def test_filters_equal_bounds_are_fine():
    result = VehicleValidator.validate_filters(
        VehicleFilters(min_price=50, max_price=50, min_year=2020, max_year=2020)
    )
    assert result.is_valid


def test_filters_enums_and_ranges():
    result = VehicleValidator.validate_filters(
        VehicleFilters(category="spaceship", transmission="cvt", min_price=-1, max_year=2031)
    )
    assert result.errors == [
        "Transmission filter must be one of: manual, automatic",
        "Category filter must be one of: economy, compact, mid-size, luxury, suv, truck",
        "Minimum price cannot be negative",
        "Maximum year must be between 1900 and 2030",
    ]


@pytest.mark.parametrize("page,limit,valid", [
    (1, 1, True),
    (1, 100, True),
    (5, 10, True),
    (0, 10, False),
    (-3, 10, False),
    (1, 0, False),
    (1, 101, False),
])
def test_pagination(page, limit, valid):
    assert VehicleValidator.validate_pagination(page, limit).is_valid is valid


def test_pagination_reports_both_errors():
    result = VehicleValidator.validate_pagination(0, 500)
    assert result.errors == ["Page must be greater than 0", "Limit must be between 1 and 100"]


def test_date_range_valid():
    assert VehicleValidator.validate_date_range("2024-01-01", "2024-01-02").is_valid
    assert VehicleValidator.validate_date_range("2024-01-01T10:00:00Z", "2024-01-01T12:00:00+00:00").is_valid


def test_date_range_start_must_precede_end():
    same = VehicleValidator.validate_date_range("2024-01-01", "2024-01-01")
    assert same.errors == ["Start date must be before end date"]

    reversed_range = VehicleValidator.validate_date_range("2024-02-01", "2024-01-01")
    assert reversed_range.errors == ["Start date must be before end date"]


def test_date_range_unparseable():
    result = VehicleValidator.validate_date_range("not-a-date", "2024-01-01")
    assert result.errors == ["Invalid start date format"]

    result = VehicleValidator.validate_date_range("2024-01-01", "31/12/2024")
    assert result.errors == ["Invalid end date format"]


def test_date_range_allows_past_dates():
    assert VehicleValidator.validate_date_range("1999-01-01", "1999-01-02").is_valid


@pytest.mark.parametrize("price", [float("nan"), float("inf"), float("-inf")])
def test_create_rejects_non_finite_price(create_data, price):
    result = VehicleValidator.validate_create_vehicle(create_data.model_copy(update={"price_per_day": price}))
    assert result.errors == ["Price per day must be greater than 0"]


@pytest.mark.parametrize("price", [float("nan"), float("inf")])
def test_update_rejects_non_finite_price(price):
    result = VehicleValidator.validate_update_vehicle(VehicleUpdate.model_construct(price_per_day=price))
    assert result.errors == ["Price per day must be greater than 0"]


def test_wire_models_refuse_non_finite_numbers():
    with pytest.raises(ValueError):
        VehicleCreate.model_validate({"pricePerDay": float("nan")})
    with pytest.raises(ValueError):
        VehicleUpdate.model_validate({"pricePerDay": float("inf")})


def test_date_range_accepts_fractional_seconds_and_offsets():
    assert VehicleValidator.validate_date_range("2024-01-01T10:00:00.5Z", "2024-01-01T10:00:01Z").is_valid
    assert VehicleValidator.validate_date_range("2024-01-01T10:00:00+05:30", "2024-01-01T10:00:00Z").is_valid
