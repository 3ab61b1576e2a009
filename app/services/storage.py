"""Record store for users, vehicles and vehicle expenses.

Every vehicle and expense operation is scoped to an owner: a record is only
visible or mutable when its ``user_id`` matches the requesting user's id. A
vehicle that exists but belongs to someone else is reported exactly like a
missing one.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.user import User
from app.models.vehicle import Vehicle, VehicleExpense, VehicleStatus
from app.schemas.vehicle import VehicleCreate, VehicleExpenseCreate, VehicleUpdate
from app.services.stats import VehicleStats, compute_vehicle_stats

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


class DuplicateRecordError(StorageError):
    pass


class ConstraintViolationError(StorageError):
    pass


class VehicleNotFoundError(LookupError):
    def __init__(self, vehicle_id: int) -> None:
        super().__init__(f"Vehicle {vehicle_id} not found")
        self.vehicle_id = vehicle_id


class Storage(ABC):
    # Users
    @abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User: ...

    # Vehicles
    @abstractmethod
    def list_vehicles(self, user_id: int) -> list[Vehicle]: ...

    @abstractmethod
    def get_vehicle(self, vehicle_id: int, user_id: int) -> Vehicle | None: ...

    @abstractmethod
    def create_vehicle(self, payload: VehicleCreate, user_id: int) -> Vehicle: ...

    @abstractmethod
    def update_vehicle(self, vehicle_id: int, payload: VehicleUpdate, user_id: int) -> Vehicle | None: ...

    @abstractmethod
    def delete_vehicle(self, vehicle_id: int, user_id: int) -> bool: ...

    # Expenses
    @abstractmethod
    def list_vehicle_expenses(self, vehicle_id: int, user_id: int) -> list[VehicleExpense]: ...

    @abstractmethod
    def add_vehicle_expense(
        self,
        vehicle_id: int,
        payload: VehicleExpenseCreate,
        user_id: int,
    ) -> VehicleExpense: ...

    # Analytics
    def get_vehicle_stats(self, user_id: int, now: datetime | None = None) -> VehicleStats:
        return compute_vehicle_stats(self.list_vehicles(user_id), now=now)


def mark_sold_transition(vehicle: Vehicle, new_status: VehicleStatus | None, now: datetime) -> None:
    # sold_at is stamped on the move into sold and left alone on the way out
    if new_status == VehicleStatus.SOLD and vehicle.status != VehicleStatus.SOLD:
        vehicle.sold_at = now


def _is_unique_violation(exc: IntegrityError) -> bool:
    # 23505 is unique_violation on Postgres; SQLite only reports it in the message
    if getattr(exc.orig, "sqlstate", None) == "23505":
        return True
    return "unique" in str(exc.orig).lower()


class DatabaseStorage(Storage):
    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def _guard(self):
        try:
            yield
        except IntegrityError as exc:
            self.db.rollback()
            if _is_unique_violation(exc):
                raise DuplicateRecordError(str(exc.orig)) from exc
            raise ConstraintViolationError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(str(exc)) from exc

    def _commit(self, *refresh) -> None:
        with self._guard():
            self.db.commit()
            for instance in refresh:
                self.db.refresh(instance)

    def get_user(self, user_id: int) -> User | None:
        with self._guard():
            return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        with self._guard():
            return self.db.scalar(select(User).where(func.lower(User.email) == email.strip().lower()))

    def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        user = User(
            email=email.strip().lower(),
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
        )
        self.db.add(user)
        self._commit(user)
        logger.info("Created user %s", user.id)
        return user

    def list_vehicles(self, user_id: int) -> list[Vehicle]:
        query = (
            select(Vehicle)
            .where(Vehicle.user_id == user_id)
            .order_by(Vehicle.created_at.desc(), Vehicle.id.desc())
        )
        with self._guard():
            return list(self.db.scalars(query).all())

    def get_vehicle(self, vehicle_id: int, user_id: int) -> Vehicle | None:
        with self._guard():
            return self.db.scalar(select(Vehicle).where(Vehicle.id == vehicle_id, Vehicle.user_id == user_id))

    def create_vehicle(self, payload: VehicleCreate, user_id: int) -> Vehicle:
        now = datetime.utcnow()
        vehicle = Vehicle(**payload.model_dump(), user_id=user_id, created_at=now, updated_at=now)
        if vehicle.status == VehicleStatus.SOLD:
            vehicle.sold_at = now
        self.db.add(vehicle)
        self._commit(vehicle)
        logger.info("Created vehicle %s for user %s", vehicle.id, user_id)
        return vehicle

    def update_vehicle(self, vehicle_id: int, payload: VehicleUpdate, user_id: int) -> Vehicle | None:
        vehicle = self.get_vehicle(vehicle_id, user_id)
        if not vehicle:
            logger.debug("Update skipped: vehicle %s not found for user %s", vehicle_id, user_id)
            return None

        changes = payload.changes()
        now = datetime.utcnow()
        mark_sold_transition(vehicle, changes.get("status"), now)
        for field, value in changes.items():
            setattr(vehicle, field, value)
        vehicle.updated_at = now
        self._commit(vehicle)
        return vehicle

    def delete_vehicle(self, vehicle_id: int, user_id: int) -> bool:
        vehicle = self.get_vehicle(vehicle_id, user_id)
        if not vehicle:
            logger.debug("Delete skipped: vehicle %s not found for user %s", vehicle_id, user_id)
            return False
        with self._guard():
            self.db.execute(delete(VehicleExpense).where(VehicleExpense.vehicle_id == vehicle.id))
            self.db.delete(vehicle)
        self._commit()
        logger.info("Deleted vehicle %s for user %s", vehicle_id, user_id)
        return True

    def list_vehicle_expenses(self, vehicle_id: int, user_id: int) -> list[VehicleExpense]:
        if not self.get_vehicle(vehicle_id, user_id):
            return []
        query = (
            select(VehicleExpense)
            .where(VehicleExpense.vehicle_id == vehicle_id)
            .order_by(VehicleExpense.date.desc(), VehicleExpense.id.desc())
        )
        with self._guard():
            return list(self.db.scalars(query).all())

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
            vehicle_id=vehicle_id,
            type=payload.type,
            description=payload.description,
            amount=payload.amount,
            date=payload.date or now,
            created_at=now,
        )
        self.db.add(expense)
        self._commit(expense)
        logger.info("Recorded %s expense %s on vehicle %s", expense.type, expense.id, vehicle_id)
        return expense
