"""Module: user_data.

Read-side helpers that pull a user together with their owned collections.
Collections are loaded with ``selectinload`` (one statement each).
"""

from typing import Any

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from sos911.api.v1.schemas import (
    AddressPayload,
    BankAccountPayload,
    EmergencyContactPayload,
    HealthInsurancePayload,
    MedicalInfoPayload,
    UserDetailPayload,
    UserSummaryPayload,
)
from sos911.db.models.user import User
from sos911.db.models.vehicle import Vehicle

DETAIL_LOADERS = (
    selectinload(User.medical_info),
    selectinload(User.emergency_contacts),
    selectinload(User.vehicles).selectinload(Vehicle.vehicle_insurance),
    selectinload(User.addresses),
    selectinload(User.bank_accounts),
    selectinload(User.health_insurance),
    selectinload(User.supplementary_insurance),
    selectinload(User.emergency_events),
)

EMERGENCY_LOADERS = (
    selectinload(User.medical_info),
    selectinload(User.emergency_contacts),
    selectinload(User.addresses),
    selectinload(User.bank_accounts),
    selectinload(User.health_insurance),
)


def load_user_detail(db: Session, user_id: str) -> User | None:
    return db.execute(select(User).where(User.id == user_id).options(*DETAIL_LOADERS)).scalar_one_or_none()


def user_detail(db: Session, user_id: str, recent_events: int | None = None) -> dict[str, Any]:
    user = load_user_detail(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    payload = UserDetailPayload.model_validate(user)
    if recent_events is not None:
        payload.emergency_events = payload.emergency_events[:recent_events]
    return payload.model_dump(mode="json")


def emergency_profile(db: Session, user_id: str) -> dict[str, Any]:
    """
    Everything a responder needs about one user: identity, contacts,
    medical info, health insurance, bank accounts and addresses.

    Raises 404 when the user does not exist. The result is JSON-safe so it
    can be forwarded as an outbound request body.
    """
    user = db.execute(select(User).where(User.id == user_id).options(*EMERGENCY_LOADERS)).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return {
        "user_data": UserSummaryPayload.model_validate(user).model_dump(mode="json"),
        "emergency_contacts": [EmergencyContactPayload.model_validate(c).model_dump(mode="json") for c in user.emergency_contacts],
        "medical_info": (
            MedicalInfoPayload.model_validate(user.medical_info).model_dump(mode="json") if user.medical_info else None
        ),
        "health_insurance": [HealthInsurancePayload.model_validate(h).model_dump(mode="json") for h in user.health_insurance],
        "bank_accounts": [BankAccountPayload.model_validate(b).model_dump(mode="json") for b in user.bank_accounts],
        "addresses": [AddressPayload.model_validate(a).model_dump(mode="json") for a in user.addresses],
    }


def profile_completeness(user: dict[str, Any]) -> int:
    # Eight equally weighted criteria over a serialized user detail.
    checks = [
        bool(user.get("full_name")),
        bool(user.get("phone_number")),
        bool(user.get("profile_picture_url")),
        user.get("medical_info") is not None,
        bool(user.get("emergency_contacts")),
        bool(user.get("addresses")),
        bool(user.get("vehicles")),
        bool(user.get("health_insurance")),
    ]
    return round(sum(checks) / len(checks) * 100)
