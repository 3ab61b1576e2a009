"""Process-local record store with incrementing integer ids.

Used for demos and tests (``STORAGE_BACKEND=memory``). Records are plain,
never-persisted ORM instances so they serialize through the same schemas as
the database backend.
"""

import itertools
import logging
from datetime import datetime

from app.models.user import User
from app.models.vehicle import Vehicle, VehicleExpense, VehicleStatus
from app.schemas.vehicle import VehicleCreate, VehicleExpenseCreate, VehicleUpdate
from app.services.storage import DuplicateRecordError, Storage, VehicleNotFoundError, mark_sold_transition

logger = logging.getLogger(__name__)


class MemoryStorage(Storage):
    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._vehicles: dict[int, Vehicle] = {}
        self._expenses: dict[int, VehicleExpense] = {}
        self._user_ids = itertools.count(1)
        self._vehicle_ids = itertools.count(1)
        self._expense_ids = itertools.count(1)

    def _ensure_unique_vin(self, vin: str | None, vehicle_id: int | None = None) -> None:
        if vin is None:
            return
        for other in self._vehicles.values():
            if other.vin == vin and other.id != vehicle_id:
                raise DuplicateRecordError(f"VIN {vin} already exists")

    def get_user(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    def get_user_by_email(self, email: str) -> User | None:
        wanted = email.strip().lower()
        return next((user for user in self._users.values() if user.email == wanted), None)

    def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        if self.get_user_by_email(email):
            raise DuplicateRecordError(f"Email {email} already exists")
        now = datetime.utcnow()
        user = User(
            id=next(self._user_ids),
            email=email.strip().lower(),
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            created_at=now,
            updated_at=now,
        )
        self._users[user.id] = user
        logger.info("Created user %s", user.id)
        return user

    def list_vehicles(self, user_id: int) -> list[Vehicle]:
        owned = [v for v in self._vehicles.values() if v.user_id == user_id]
        return sorted(owned, key=lambda v: (v.created_at, v.id), reverse=True)

    def get_vehicle(self, vehicle_id: int, user_id: int) -> Vehicle | None:
        vehicle = self._vehicles.get(vehicle_id)
        if vehicle is None or vehicle.user_id != user_id:
            return None
        return vehicle

    def create_vehicle(self, payload: VehicleCreate, user_id: int) -> Vehicle:
        fields = payload.model_dump()
        self._ensure_unique_vin(fields["vin"])
        now = datetime.utcnow()
        vehicle = Vehicle(
            **fields,
            id=next(self._vehicle_ids),
            user_id=user_id,
            created_at=now,
            updated_at=now,
            sold_at=now if fields["status"] == VehicleStatus.SOLD else None,
        )
        self._vehicles[vehicle.id] = vehicle
        logger.info("Created vehicle %s for user %s", vehicle.id, user_id)
        return vehicle

    def update_vehicle(self, vehicle_id: int, payload: VehicleUpdate, user_id: int) -> Vehicle | None:
        vehicle = self.get_vehicle(vehicle_id, user_id)
        if not vehicle:
            logger.debug("Update skipped: vehicle %s not found for user %s", vehicle_id, user_id)
            return None

        changes = payload.changes()
        if "vin" in changes:
            self._ensure_unique_vin(changes["vin"], vehicle_id=vehicle.id)
        now = datetime.utcnow()
        mark_sold_transition(vehicle, changes.get("status"), now)
        for field, value in changes.items():
            setattr(vehicle, field, value)
        vehicle.updated_at = now
        return vehicle

    def delete_vehicle(self, vehicle_id: int, user_id: int) -> bool:
        if not self.get_vehicle(vehicle_id, user_id):
            logger.debug("Delete skipped: vehicle %s not found for user %s", vehicle_id, user_id)
            return False
        del self._vehicles[vehicle_id]
        for expense_id in [e.id for e in self._expenses.values() if e.vehicle_id == vehicle_id]:
            del self._expenses[expense_id]
        logger.info("Deleted vehicle %s for user %s", vehicle_id, user_id)
        return True

    def list_vehicle_expenses(self, vehicle_id: int, user_id: int) -> list[VehicleExpense]:
        if not self.get_vehicle(vehicle_id, user_id):
            return []
        expenses = [e for e in self._expenses.values() if e.vehicle_id == vehicle_id]
        return sorted(expenses, key=lambda e: (e.date, e.id), reverse=True)

    def add_vehicle_expense(
        self,
        vehicle_id: int,
        payload: VehicleExpenseCreate,
        user_id: int,
    ) -> VehicleExpense:
        if not self.get_vehicle(vehicle_id, user_id):
            raise VehicleNotFoundError(vehicle_id)

        now = datetime.utcnow()
        expense = VehicleExpense(
            id=next(self._expense_ids),
            vehicle_id=vehicle_id,
            type=payload.type,
            description=payload.description,
            amount=payload.amount,
            date=payload.date or now,
            created_at=now,
        )
        self._expenses[expense.id] = expense
        logger.info("Recorded %s expense %s on vehicle %s", expense.type, expense.id, vehicle_id)
        return expense
