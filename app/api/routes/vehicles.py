from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_current_user, get_storage
from app.models.user import User
from app.schemas.auth import GenericMessageResponse
from app.schemas.vehicle import (
    VehicleCreate,
    VehicleExpenseCreate,
    VehicleExpenseOut,
    VehicleOut,
    VehicleStatsOut,
    VehicleUpdate,
)
from app.services.storage import DuplicateRecordError, Storage, VehicleNotFoundError

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])
analytics_router = APIRouter(prefix="/analytics", tags=["Analytics"])


def _vehicle_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")


@router.get("", response_model=list[VehicleOut])
def list_vehicles(
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return storage.list_vehicles(current_user.id)


@router.get("/{vehicle_id}", response_model=VehicleOut)
def get_vehicle(
    vehicle_id: int,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    vehicle = storage.get_vehicle(vehicle_id, current_user.id)
    if not vehicle:
        raise _vehicle_not_found()
    return vehicle


@router.post("", response_model=VehicleOut, status_code=status.HTTP_201_CREATED)
def create_vehicle(
    payload: VehicleCreate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        return storage.create_vehicle(payload, current_user.id)
    except DuplicateRecordError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="VIN already exists") from exc


@router.put("/{vehicle_id}", response_model=VehicleOut)
@router.patch("/{vehicle_id}", response_model=VehicleOut)
def update_vehicle(
    vehicle_id: int,
    payload: VehicleUpdate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        vehicle = storage.update_vehicle(vehicle_id, payload, current_user.id)
    except DuplicateRecordError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="VIN already exists") from exc
    if not vehicle:
        raise _vehicle_not_found()
    return vehicle


@router.delete("/{vehicle_id}", response_model=GenericMessageResponse)
def delete_vehicle(
    vehicle_id: int,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    if not storage.delete_vehicle(vehicle_id, current_user.id):
        raise _vehicle_not_found()
    return GenericMessageResponse(message="Vehicle deleted successfully")


@router.get("/{vehicle_id}/expenses", response_model=list[VehicleExpenseOut])
def list_vehicle_expenses(
    vehicle_id: int,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return storage.list_vehicle_expenses(vehicle_id, current_user.id)


@router.post("/{vehicle_id}/expenses", response_model=VehicleExpenseOut, status_code=status.HTTP_201_CREATED)
def add_vehicle_expense(
    vehicle_id: int,
    payload: VehicleExpenseCreate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        return storage.add_vehicle_expense(vehicle_id, payload, current_user.id)
    except VehicleNotFoundError as exc:
        raise _vehicle_not_found() from exc


@analytics_router.get("/stats", response_model=VehicleStatsOut)
def vehicle_stats(
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return storage.get_vehicle_stats(current_user.id)
