"""Module: vehicle_insurance.

Policies belong to a vehicle; ownership is checked through the vehicle's
``user_id``.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from sos911.api.v1.routes.deps import CallerIdentity, get_current_user, get_db
from sos911.api.v1.schemas import PartialUpdate, RequestModel, VehicleInsurancePayload
from sos911.db.models.vehicle import Vehicle, VehicleInsurance
from sos911.services.crud import apply_changes, commit_or_conflict, delete, get_owned_or_404, save

router = APIRouter()

CONFLICT = "A vehicle insurance record with this information already exists"


class VehicleInsuranceCreate(RequestModel):
    vehicle_id: str = Field(min_length=1)
    insurance_company: str = Field(min_length=1)
    policy_number: str = Field(min_length=1)
    coverage_type: str = Field(min_length=1)
    expiration_date: datetime
    phone_insurance: str = Field(min_length=1)
    claim_process_info: str | None = None


class VehicleInsuranceUpdate(PartialUpdate):
    required_fields = frozenset(
        {"insurance_company", "policy_number", "coverage_type", "expiration_date", "phone_insurance"}
    )

    insurance_company: str | None = Field(default=None, min_length=1)
    policy_number: str | None = Field(default=None, min_length=1)
    coverage_type: str | None = Field(default=None, min_length=1)
    expiration_date: datetime | None = None
    phone_insurance: str | None = Field(default=None, min_length=1)
    claim_process_info: str | None = None


def _owned_insurance_or_404(db: Session, insurance_id: str, user_id: str) -> VehicleInsurance:
    row = db.execute(
        select(VehicleInsurance)
        .join(Vehicle, Vehicle.id == VehicleInsurance.vehicle_id)
        .where(VehicleInsurance.id == insurance_id, Vehicle.user_id == user_id)
    ).scalar_one_or_none()
    if not row:
        raise HTTPException(status_code=404, detail="Vehicle insurance not found")
    return row


def _payload(row: VehicleInsurance) -> dict:
    return VehicleInsurancePayload.model_validate(row).model_dump(mode="json")


@router.get("")
def list_vehicle_insurance(
    vehicle_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    stmt = (
        select(VehicleInsurance)
        .join(Vehicle, Vehicle.id == VehicleInsurance.vehicle_id)
        .where(Vehicle.user_id == caller.user_id)
        .order_by(VehicleInsurance.created_at.desc())
    )
    if vehicle_id:
        stmt = stmt.where(VehicleInsurance.vehicle_id == vehicle_id)

    rows = db.execute(stmt).scalars().all()
    return {"success": True, "data": [_payload(r) for r in rows], "count": len(rows)}


@router.get("/{insurance_id}")
def get_vehicle_insurance(
    insurance_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = _owned_insurance_or_404(db, insurance_id, caller.user_id)
    return {"success": True, "data": _payload(row)}


@router.post("", status_code=201)
def create_vehicle_insurance(
    payload: VehicleInsuranceCreate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    # The vehicle must belong to the caller before a policy can hang off it.
    get_owned_or_404(db, Vehicle, payload.vehicle_id, caller.user_id, "Vehicle")
    row = save(db, VehicleInsurance(**payload.model_dump()), CONFLICT)
    return {"success": True, "data": _payload(row), "message": "Vehicle insurance created successfully"}


@router.put("/{insurance_id}")
def update_vehicle_insurance(
    insurance_id: str,
    payload: VehicleInsuranceUpdate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = _owned_insurance_or_404(db, insurance_id, caller.user_id)
    apply_changes(row, payload.changes())
    commit_or_conflict(db, CONFLICT)
    db.refresh(row)
    return {"success": True, "data": _payload(row), "message": "Vehicle insurance updated successfully"}


@router.delete("/{insurance_id}")
def delete_vehicle_insurance(
    insurance_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = _owned_insurance_or_404(db, insurance_id, caller.user_id)
    delete(db, row)
    return {"success": True, "message": "Vehicle insurance deleted successfully"}
