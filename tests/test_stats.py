from datetime import datetime, timedelta
from decimal import Decimal

from app.models.vehicle import Vehicle, VehicleStatus
from app.services.stats import compute_vehicle_stats, start_of_month

NOW = datetime(2026, 10, 18, 12, 30)


def make_vehicle(status=VehicleStatus.AVAILABLE, sold_price=None, purchase_price=None, sold_at=None) -> Vehicle:
    return Vehicle(
        make="Toyota",
        model="Corolla",
        year=2018,
        status=status,
        sold_price=Decimal(sold_price) if sold_price is not None else None,
        purchase_price=Decimal(purchase_price) if purchase_price is not None else None,
        sold_at=sold_at,
    )


def test_empty_vehicle_set_is_all_zero():
    stats = compute_vehicle_stats([], now=NOW)

    assert stats.total_vehicles == 0
    assert stats.available_vehicles == 0
    assert stats.sold_this_month == 0
    assert stats.total_revenue == 0
    assert stats.total_profit == 0
    assert stats.average_profit == 0


def test_revenue_and_profit_treat_missing_purchase_price_as_zero():
    vehicles = [
        make_vehicle(VehicleStatus.SOLD, sold_price="1000", purchase_price="600"),
        make_vehicle(VehicleStatus.SOLD, sold_price="500"),
        make_vehicle(VehicleStatus.AVAILABLE),
    ]

    stats = compute_vehicle_stats(vehicles, now=NOW)

    assert stats.total_vehicles == 3
    assert stats.available_vehicles == 1
    assert stats.total_revenue == Decimal("1500")
    assert stats.total_profit == Decimal("900")
    assert stats.average_profit == Decimal("450")


def test_sold_without_price_is_excluded_from_revenue_and_average():
    vehicles = [
        make_vehicle(VehicleStatus.SOLD, sold_price="2000", purchase_price="1500"),
        make_vehicle(VehicleStatus.SOLD, purchase_price="900"),
    ]

    stats = compute_vehicle_stats(vehicles, now=NOW)

    assert stats.total_revenue == Decimal("2000")
    assert stats.average_profit == Decimal("500")


def test_non_sold_vehicles_with_sold_price_are_ignored():
    vehicles = [
        make_vehicle(VehicleStatus.PENDING, sold_price="800", purchase_price="100"),
        make_vehicle(VehicleStatus.AVAILABLE, sold_price="700"),
    ]

    stats = compute_vehicle_stats(vehicles, now=NOW)

    assert stats.total_revenue == 0
    assert stats.average_profit == 0
    assert stats.available_vehicles == 1


def test_decimal_sums_do_not_drift():
    vehicles = [make_vehicle(VehicleStatus.SOLD, sold_price="0.10", purchase_price="0.00") for _ in range(3)]

    stats = compute_vehicle_stats(vehicles, now=NOW)

    assert stats.total_revenue == Decimal("0.30")
    assert stats.average_profit == Decimal("0.10")


def test_average_profit_is_rounded_to_cents():
    vehicles = [
        make_vehicle(VehicleStatus.SOLD, sold_price="100", purchase_price="0"),
        make_vehicle(VehicleStatus.SOLD, sold_price="0", purchase_price="0"),
        make_vehicle(VehicleStatus.SOLD, sold_price="0", purchase_price="0"),
    ]

    stats = compute_vehicle_stats(vehicles, now=NOW)

    assert stats.average_profit == Decimal("33.33")


def test_average_profit_can_be_negative():
    vehicles = [make_vehicle(VehicleStatus.SOLD, sold_price="900", purchase_price="1000")]

    assert compute_vehicle_stats(vehicles, now=NOW).average_profit == Decimal("-100")


def test_sold_this_month_window():
    month_start = start_of_month(NOW)
    vehicles = [
        make_vehicle(VehicleStatus.SOLD, sold_price="1", sold_at=month_start),
        make_vehicle(VehicleStatus.SOLD, sold_price="1", sold_at=month_start - timedelta(microseconds=1)),
        make_vehicle(VehicleStatus.SOLD, sold_price="1", sold_at=datetime(2026, 9, 15)),
        make_vehicle(VehicleStatus.SOLD, sold_price="1", sold_at=NOW - timedelta(minutes=5)),
        make_vehicle(VehicleStatus.SOLD, sold_price="1", sold_at=NOW + timedelta(days=1)),
    ]

    assert compute_vehicle_stats(vehicles, now=NOW).sold_this_month == 2


def test_sold_this_month_requires_sold_status_and_timestamp():
    vehicles = [
        make_vehicle(VehicleStatus.SOLD, sold_price="1", sold_at=None),
        # reverted sale keeps its old sold_at but no longer counts
        make_vehicle(VehicleStatus.AVAILABLE, sold_at=NOW - timedelta(hours=1)),
    ]

    assert compute_vehicle_stats(vehicles, now=NOW).sold_this_month == 0


def test_start_of_month():
    assert start_of_month(datetime(2026, 1, 31, 23, 59, 59)) == datetime(2026, 1, 1)
