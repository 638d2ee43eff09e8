"""Module: emergency_contacts."""

from fastapi import APIRouter, Depends
from pydantic import EmailStr, Field, field_validator
from sqlalchemy.orm import Session

from sos911.api.v1.routes.deps import CallerIdentity, get_current_user, get_db
from sos911.api.v1.schemas import EmergencyContactPayload, PartialUpdate, RequestModel
from sos911.db.models.emergency_contact import EmergencyContact
from sos911.services.crud import apply_changes, commit_or_conflict, delete, get_owned_or_404, list_owned, save

router = APIRouter()

LABEL = "Emergency contact"
CONFLICT = "An emergency contact with this information already exists"


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class EmergencyContactCreate(RequestModel):
    contact_name: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    relationship: str = Field(min_length=1)
    email: EmailStr | None = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        return _blank_to_none(value)


class EmergencyContactUpdate(PartialUpdate):
    required_fields = frozenset({"contact_name", "phone_number", "relationship"})

    contact_name: str | None = Field(default=None, min_length=1)
    phone_number: str | None = Field(default=None, min_length=1)
    relationship: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        return _blank_to_none(value)


def _payload(row: EmergencyContact) -> dict:
    return EmergencyContactPayload.model_validate(row).model_dump(mode="json")


@router.get("")
def list_emergency_contacts(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    rows = list_owned(db, EmergencyContact, caller.user_id)
    return {"success": True, "data": [_payload(r) for r in rows], "count": len(rows)}


@router.get("/{contact_id}")
def get_emergency_contact(
    contact_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, EmergencyContact, contact_id, caller.user_id, LABEL)
    return {"success": True, "data": _payload(row)}


@router.post("", status_code=201)
def create_emergency_contact(
    payload: EmergencyContactCreate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = save(db, EmergencyContact(user_id=caller.user_id, **payload.model_dump()), CONFLICT)
    return {"success": True, "data": _payload(row), "message": "Emergency contact created successfully"}


@router.put("/{contact_id}")
def update_emergency_contact(
    contact_id: str,
    payload: EmergencyContactUpdate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, EmergencyContact, contact_id, caller.user_id, LABEL)
    apply_changes(row, payload.changes())
    commit_or_conflict(db, CONFLICT)
    db.refresh(row)
    return {"success": True, "data": _payload(row), "message": "Emergency contact updated successfully"}


@router.delete("/{contact_id}")
def delete_emergency_contact(
    contact_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, EmergencyContact, contact_id, caller.user_id, LABEL)
    delete(db, row)
    return {"success": True, "message": "Emergency contact deleted successfully"}
