"""Module: users."""

import re

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field, field_validator
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from sos911.api.v1.routes.deps import CallerIdentity, get_caller, get_current_user, get_db
from sos911.api.v1.schemas import PartialUpdate, UserSummaryPayload
from sos911.core.rut import normalize_rut
from sos911.db.models.user import User
from sos911.services.crud import apply_changes, commit_or_conflict, delete, ensure_user_exists
from sos911.services.user_data import user_detail

router = APIRouter()

PHONE_DIGITS = re.compile(r"^[0-9]+$")
RUT_TAKEN = "RUT is already registered by another user"


class UserProfileUpdate(PartialUpdate):
    required_fields = frozenset({"full_name"})

    full_name: str | None = Field(default=None, min_length=1)
    phone_number: str | None = None
    profile_picture_url: str | None = None
    rut: str | None = None

    @field_validator("rut")
    @classmethod
    def check_rut(cls, value: str | None) -> str | None:
        return normalize_rut(value) if value is not None else None


def _summary(user: User) -> dict:
    return UserSummaryPayload.model_validate(user).model_dump(mode="json")


def _rut_or_400(rut: str) -> str:
    try:
        return normalize_rut(rut)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _find_by_phone(db: Session, phone: str) -> User | None:
    digits = phone.strip().removeprefix("+")
    if not PHONE_DIGITS.match(digits):
        raise HTTPException(
            status_code=400,
            detail="Invalid phone number format. Phone number should contain only digits (+ is allowed at the beginning)",
        )
    # Stored numbers may or may not carry the leading +.
    return db.execute(
        select(User).where(or_(User.phone_number == digits, User.phone_number == f"+{digits}")).limit(1)
    ).scalar_one_or_none()


@router.get("")
def list_users(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    rows = db.execute(select(User).order_by(User.created_at.desc())).scalars().all()
    return {"success": True, "data": [_summary(u) for u in rows], "count": len(rows)}


@router.get("/me")
def get_me(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    return {"success": True, "data": user_detail(db, caller.user_id, recent_events=10)}


@router.put("/me")
def update_me(
    payload: UserProfileUpdate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    user = ensure_user_exists(db, caller.user_id)
    changes = payload.changes()

    if changes.get("rut"):
        taken = db.execute(
            select(User.id).where(User.rut == changes["rut"], User.id != user.id)
        ).first()
        if taken:
            raise HTTPException(status_code=409, detail=RUT_TAKEN)

    apply_changes(user, changes)
    commit_or_conflict(db, RUT_TAKEN)
    db.refresh(user)
    return {"success": True, "data": _summary(user), "message": "Profile updated successfully"}


# Local account only; owned records go with it through the cascade.
@router.delete("/me")
def delete_me(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    user = ensure_user_exists(db, caller.user_id)
    delete(db, user)
    return {"success": True, "message": "Account deleted successfully"}


@router.get("/rut/{rut}")
def get_user_by_rut(
    rut: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
):
    formatted = _rut_or_400(rut)
    user = db.execute(select(User).where(User.rut == formatted)).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found with the provided RUT")
    return {"success": True, "data": _summary(user)}


@router.get("/phone/{phone_number}")
def get_user_by_phone(
    phone_number: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
):
    user = _find_by_phone(db, phone_number)
    if not user:
        raise HTTPException(status_code=404, detail="User not found with the provided phone number")
    return {"success": True, "data": _summary(user)}


@router.post("/search")
def search_user(
    rut: str | None = Query(default=None),
    phone_number: str | None = Query(default=None),
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
):
    if not rut and not phone_number:
        raise HTTPException(status_code=400, detail="Please provide either rut or phone_number as query parameters.")

    if rut:
        user = db.execute(select(User).where(User.rut == _rut_or_400(rut))).scalar_one_or_none()
    else:
        user = _find_by_phone(db, phone_number)

    if not user:
        raise HTTPException(status_code=404, detail="User not found.")
    return {"success": True, "data": _summary(user)}


@router.get("/{user_id}")
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    user = ensure_user_exists(db, user_id)
    return {"success": True, "data": _summary(user)}
