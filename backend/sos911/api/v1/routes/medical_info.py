"""Module: medical_info."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import field_validator
from sqlalchemy import select
from sqlalchemy.orm import Session

from sos911.api.v1.routes.deps import CallerIdentity, get_current_user, get_db
from sos911.api.v1.schemas import MedicalInfoPayload, PartialUpdate, RequestModel
from sos911.db.models.medical_info import MedicalInfo
from sos911.services.crud import apply_changes, commit_or_conflict, delete, save

router = APIRouter()

LIST_FIELDS = ("medical_conditions", "allergies", "medications")


def _clean_entries(value: list[str] | None) -> list[str] | None:
    if value is None:
        return None
    return [entry.strip() for entry in value if entry and entry.strip()]


class MedicalInfoCreate(RequestModel):
    medical_conditions: list[str] = []
    allergies: list[str] = []
    medications: list[str] = []
    blood_type: str | None = None
    emergency_notes: str | None = None
    voice_password_hash: str | None = None

    @field_validator(*LIST_FIELDS)
    @classmethod
    def drop_blank_entries(cls, value):
        return _clean_entries(value)


class MedicalInfoUpdate(PartialUpdate):
    required_fields = frozenset(LIST_FIELDS)

    medical_conditions: list[str] | None = None
    allergies: list[str] | None = None
    medications: list[str] | None = None
    blood_type: str | None = None
    emergency_notes: str | None = None
    voice_password_hash: str | None = None

    @field_validator(*LIST_FIELDS)
    @classmethod
    def drop_blank_entries(cls, value):
        return _clean_entries(value)


def _get_for_user(db: Session, user_id: str) -> MedicalInfo | None:
    return db.execute(select(MedicalInfo).where(MedicalInfo.user_id == user_id)).scalar_one_or_none()


def _get_or_404(db: Session, user_id: str) -> MedicalInfo:
    row = _get_for_user(db, user_id)
    if not row:
        raise HTTPException(status_code=404, detail="Medical information not found")
    return row


def _payload(row: MedicalInfo) -> dict:
    return MedicalInfoPayload.model_validate(row).model_dump(mode="json")


@router.get("")
def get_medical_info(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = _get_or_404(db, caller.user_id)
    return {"success": True, "data": _payload(row)}


# Singleton per user: a second create is a conflict, PATCH is the upsert.
@router.post("", status_code=201)
def create_medical_info(
    payload: MedicalInfoCreate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    if _get_for_user(db, caller.user_id):
        raise HTTPException(
            status_code=409,
            detail="Medical information already exists for this user. Use PUT to update.",
        )

    row = save(
        db,
        MedicalInfo(user_id=caller.user_id, **payload.model_dump()),
        "Medical information already exists for this user",
    )
    return {"success": True, "data": _payload(row), "message": "Medical information created successfully"}


@router.put("")
def update_medical_info(
    payload: MedicalInfoUpdate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = _get_or_404(db, caller.user_id)
    apply_changes(row, payload.changes())
    commit_or_conflict(db, "Medical information already exists for this user")
    db.refresh(row)
    return {"success": True, "data": _payload(row), "message": "Medical information updated successfully"}


@router.patch("")
def upsert_medical_info(
    payload: MedicalInfoCreate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = _get_for_user(db, caller.user_id)
    if row:
        apply_changes(row, payload.model_dump())
        commit_or_conflict(db, "Medical information already exists for this user")
        db.refresh(row)
    else:
        row = save(
            db,
            MedicalInfo(user_id=caller.user_id, **payload.model_dump()),
            "Medical information already exists for this user",
        )
    return {"success": True, "data": _payload(row), "message": "Medical information saved successfully"}


@router.delete("")
def delete_medical_info(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = _get_or_404(db, caller.user_id)
    delete(db, row)
    return {"success": True, "message": "Medical information deleted successfully"}
