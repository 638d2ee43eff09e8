"""Module: vehicles."""

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from sos911.api.v1.routes.deps import CallerIdentity, get_current_user, get_db
from sos911.api.v1.schemas import PartialUpdate, RequestModel, VehiclePayload, VehicleWithInsurancePayload
from sos911.db.models.vehicle import Vehicle
from sos911.services.crud import apply_changes, commit_or_conflict, delete, get_owned_or_404, save

router = APIRouter()

LABEL = "Vehicle"
CONFLICT = "A vehicle with this information already exists"


class VehicleCreate(RequestModel):
    license_plate: str = Field(min_length=1)
    brand: str = Field(min_length=1)
    model: str = Field(min_length=1)
    year: int = Field(ge=1900, le=2100)
    color: str = Field(min_length=1)
    vin: str | None = None
    vehicle_type: str = Field(min_length=1)


class VehicleUpdate(PartialUpdate):
    required_fields = frozenset({"license_plate", "brand", "model", "year", "color", "vehicle_type"})

    license_plate: str | None = Field(default=None, min_length=1)
    brand: str | None = Field(default=None, min_length=1)
    model: str | None = Field(default=None, min_length=1)
    year: int | None = Field(default=None, ge=1900, le=2100)
    color: str | None = Field(default=None, min_length=1)
    vin: str | None = None
    vehicle_type: str | None = Field(default=None, min_length=1)


def _payload(row: Vehicle) -> dict:
    return VehiclePayload.model_validate(row).model_dump(mode="json")


# Endpoint: vehicles with their insurance policies, newest first.
@router.get("")
def list_vehicles(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    rows = db.execute(
        select(Vehicle)
        .where(Vehicle.user_id == caller.user_id)
        .options(selectinload(Vehicle.vehicle_insurance))
        .order_by(Vehicle.created_at.desc())
    ).scalars().all()
    data = [VehicleWithInsurancePayload.model_validate(r).model_dump(mode="json") for r in rows]
    return {"success": True, "data": data, "count": len(data)}


@router.get("/{vehicle_id}")
def get_vehicle(
    vehicle_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, Vehicle, vehicle_id, caller.user_id, LABEL)
    return {"success": True, "data": VehicleWithInsurancePayload.model_validate(row).model_dump(mode="json")}


@router.post("", status_code=201)
def create_vehicle(
    payload: VehicleCreate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = save(db, Vehicle(user_id=caller.user_id, **payload.model_dump()), CONFLICT)
    return {"success": True, "data": _payload(row), "message": "Vehicle created successfully"}


@router.put("/{vehicle_id}")
def update_vehicle(
    vehicle_id: str,
    payload: VehicleUpdate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, Vehicle, vehicle_id, caller.user_id, LABEL)
    apply_changes(row, payload.changes())
    commit_or_conflict(db, CONFLICT)
    db.refresh(row)
    return {"success": True, "data": _payload(row), "message": "Vehicle updated successfully"}


# Removing a vehicle also removes its insurance policies.
@router.delete("/{vehicle_id}")
def delete_vehicle(
    vehicle_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, Vehicle, vehicle_id, caller.user_id, LABEL)
    delete(db, row)
    return {"success": True, "message": "Vehicle deleted successfully"}
