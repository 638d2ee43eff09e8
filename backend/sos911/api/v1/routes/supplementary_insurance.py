"""Module: supplementary_insurance."""

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.orm import Session

from sos911.api.v1.routes.deps import CallerIdentity, get_current_user, get_db
from sos911.api.v1.schemas import PartialUpdate, RequestModel, SupplementaryInsurancePayload
from sos911.db.models.insurance import SupplementaryInsurance
from sos911.services.crud import apply_changes, commit_or_conflict, delete, get_owned_or_404, list_owned, save

router = APIRouter()

LABEL = "Supplementary insurance record"
CONFLICT = "A supplementary insurance record with this information already exists"


class SupplementaryInsuranceCreate(RequestModel):
    insurance_type: str = Field(min_length=1)
    insurance_company: str = Field(min_length=1)
    policy_number: str = Field(min_length=1)
    coverage_info: str | None = None


class SupplementaryInsuranceUpdate(PartialUpdate):
    required_fields = frozenset({"insurance_type", "insurance_company", "policy_number"})

    insurance_type: str | None = Field(default=None, min_length=1)
    insurance_company: str | None = Field(default=None, min_length=1)
    policy_number: str | None = Field(default=None, min_length=1)
    coverage_info: str | None = None


def _payload(row: SupplementaryInsurance) -> dict:
    return SupplementaryInsurancePayload.model_validate(row).model_dump(mode="json")


@router.get("")
def list_supplementary_insurance(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    rows = list_owned(db, SupplementaryInsurance, caller.user_id)
    return {"success": True, "data": [_payload(r) for r in rows], "count": len(rows)}


@router.get("/{insurance_id}")
def get_supplementary_insurance(
    insurance_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, SupplementaryInsurance, insurance_id, caller.user_id, LABEL)
    return {"success": True, "data": _payload(row)}


@router.post("", status_code=201)
def create_supplementary_insurance(
    payload: SupplementaryInsuranceCreate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = save(db, SupplementaryInsurance(user_id=caller.user_id, **payload.model_dump()), CONFLICT)
    return {"success": True, "data": _payload(row), "message": "Supplementary insurance record created successfully"}


@router.put("/{insurance_id}")
def update_supplementary_insurance(
    insurance_id: str,
    payload: SupplementaryInsuranceUpdate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, SupplementaryInsurance, insurance_id, caller.user_id, LABEL)
    apply_changes(row, payload.changes())
    commit_or_conflict(db, CONFLICT)
    db.refresh(row)
    return {"success": True, "data": _payload(row), "message": "Supplementary insurance record updated successfully"}


@router.delete("/{insurance_id}")
def delete_supplementary_insurance(
    insurance_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, SupplementaryInsurance, insurance_id, caller.user_id, LABEL)
    delete(db, row)
    return {"success": True, "message": "Supplementary insurance record deleted successfully"}
