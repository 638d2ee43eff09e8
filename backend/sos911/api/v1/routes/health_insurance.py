"""Module: health_insurance."""

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.orm import Session

from sos911.api.v1.routes.deps import CallerIdentity, get_current_user, get_db
from sos911.api.v1.schemas import HealthInsurancePayload, PartialUpdate, RequestModel
from sos911.db.models.insurance import HealthInsurance
from sos911.services.crud import apply_changes, commit_or_conflict, delete, get_owned_or_404, list_owned, save

router = APIRouter()

LABEL = "Health insurance record"
CONFLICT = "A health insurance record with this information already exists"


class HealthInsuranceCreate(RequestModel):
    primary_provider: bool
    provider_name: str = Field(min_length=1)
    plan_name: str | None = None
    member_id: str = Field(min_length=1)
    coverage_info: str | None = None


class HealthInsuranceUpdate(PartialUpdate):
    required_fields = frozenset({"primary_provider", "provider_name", "member_id"})

    primary_provider: bool | None = None
    provider_name: str | None = Field(default=None, min_length=1)
    plan_name: str | None = None
    member_id: str | None = Field(default=None, min_length=1)
    coverage_info: str | None = None


def _payload(row: HealthInsurance) -> dict:
    return HealthInsurancePayload.model_validate(row).model_dump(mode="json")


@router.get("")
def list_health_insurance(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    rows = list_owned(db, HealthInsurance, caller.user_id)
    return {"success": True, "data": [_payload(r) for r in rows], "count": len(rows)}


@router.get("/{insurance_id}")
def get_health_insurance(
    insurance_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, HealthInsurance, insurance_id, caller.user_id, LABEL)
    return {"success": True, "data": _payload(row)}


@router.post("", status_code=201)
def create_health_insurance(
    payload: HealthInsuranceCreate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = save(db, HealthInsurance(user_id=caller.user_id, **payload.model_dump()), CONFLICT)
    return {"success": True, "data": _payload(row), "message": "Health insurance record created successfully"}


@router.put("/{insurance_id}")
def update_health_insurance(
    insurance_id: str,
    payload: HealthInsuranceUpdate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, HealthInsurance, insurance_id, caller.user_id, LABEL)
    apply_changes(row, payload.changes())
    commit_or_conflict(db, CONFLICT)
    db.refresh(row)
    return {"success": True, "data": _payload(row), "message": "Health insurance record updated successfully"}


@router.delete("/{insurance_id}")
def delete_health_insurance(
    insurance_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, HealthInsurance, insurance_id, caller.user_id, LABEL)
    delete(db, row)
    return {"success": True, "message": "Health insurance record deleted successfully"}
