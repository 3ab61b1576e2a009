"""Profitability statistics over a user's vehicle set."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from app.models.vehicle import Vehicle, VehicleStatus

CENT = Decimal("0.01")
ZERO = Decimal("0")


@dataclass(frozen=True)
class VehicleStats:
    total_vehicles: int
    available_vehicles: int
    sold_this_month: int
    total_revenue: Decimal
    total_profit: Decimal
    average_profit: Decimal


def start_of_month(value: datetime) -> datetime:
    return datetime(value.year, value.month, 1)


def _is_sold(vehicle: Vehicle) -> bool:
    return vehicle.status == VehicleStatus.SOLD


def compute_vehicle_stats(vehicles: Iterable[Vehicle], now: datetime | None = None) -> VehicleStats:
    """Aggregate counts, revenue and profit for one owner's vehicles.

    ``now`` is naive UTC, the same clock that stamps ``sold_at``. A sale counts
    towards ``sold_this_month`` when ``sold_at`` falls in
    ``[start_of_month(now), now)``.

    Revenue and profit are taken over sold vehicles with a recorded sold price.
    A missing purchase price counts as zero cost, so such a sale contributes its
    full sold price to profit.
    """
    now = now or datetime.utcnow()
    month_start = start_of_month(now)
    vehicles = list(vehicles)

    available = sum(1 for v in vehicles if v.status == VehicleStatus.AVAILABLE)
    sold_this_month = sum(
        1 for v in vehicles if _is_sold(v) and v.sold_at is not None and month_start <= v.sold_at < now
    )

    priced_sales = [v for v in vehicles if _is_sold(v) and v.sold_price is not None]
    total_revenue = sum((Decimal(v.sold_price) for v in priced_sales), ZERO)
    total_profit = sum(
        (Decimal(v.sold_price) - Decimal(v.purchase_price or ZERO) for v in priced_sales),
        ZERO,
    )
    if priced_sales:
        average_profit = (total_profit / len(priced_sales)).quantize(CENT, rounding=ROUND_HALF_UP)
    else:
        average_profit = ZERO

    return VehicleStats(
        total_vehicles=len(vehicles),
        available_vehicles=available,
        sold_this_month=sold_this_month,
        total_revenue=total_revenue,
        total_profit=total_profit,
        average_profit=average_profit,
    )
