from app.models.user import User
from app.models.vehicle import Vehicle, VehicleExpense, VehicleStatus

__all__ = [
    "User",
    "Vehicle",
    "VehicleExpense",
    "VehicleStatus",
]
