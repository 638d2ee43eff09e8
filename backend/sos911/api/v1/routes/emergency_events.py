"""Module: emergency_events."""

import logging
import math

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field, field_validator
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from sos911.api.v1.routes.deps import (
    CallerIdentity,
    get_caller,
    get_current_user,
    get_db,
    require_service_key,
)
from sos911.api.v1.schemas import EmergencyEventPayload, PartialUpdate, RequestModel, TargetUserRequest
from sos911.db.models.emergency_event import EVENT_STATUSES, EmergencyEvent
from sos911.services.crud import apply_changes, delete, ensure_user_exists, get_owned_or_404, save
from sos911.services.user_data import emergency_profile

logger = logging.getLogger(__name__)

router = APIRouter()

LABEL = "Emergency event"
CONFLICT = "An emergency event with this information already exists"


def _check_status(value: str | None) -> str | None:
    if value is not None and value not in EVENT_STATUSES:
        raise ValueError(f"status must be one of: {', '.join(EVENT_STATUSES)}")
    return value


class EmergencyEventCreate(RequestModel):
    user_id: str | None = None
    event_type: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1)
    audio_recording_url: str | None = None


class EmergencyEventUpdate(PartialUpdate):
    required_fields = frozenset({"event_type", "description", "location", "status"})

    event_type: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    location: str | None = Field(default=None, min_length=1)
    audio_recording_url: str | None = None
    status: str | None = None

    @field_validator("status")
    @classmethod
    def check_status(cls, value):
        return _check_status(value)


def _payload(row: EmergencyEvent, with_user: bool = False) -> dict:
    payload = EmergencyEventPayload.model_validate(row)
    return payload.model_dump(mode="json", exclude=None if with_user else {"user"})


def _status_filter(status: str | None) -> str | None:
    if status and status not in EVENT_STATUSES:
        raise HTTPException(status_code=400, detail=f"status must be one of: {', '.join(EVENT_STATUSES)}")
    return status


def _paginate(db: Session, stmt, page: int, limit: int, with_user: bool = False) -> dict:
    total = db.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()
    rows = db.execute(
        stmt.order_by(EmergencyEvent.created_at.desc()).offset((page - 1) * limit).limit(limit)
    ).scalars().all()
    return {
        "success": True,
        "data": [_payload(r, with_user) for r in rows],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit) if total else 0,
        },
    }


# Endpoint: caller's events, newest first, paginated.
@router.get("")
def list_emergency_events(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    status: str | None = Query(default=None),
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    stmt = select(EmergencyEvent).where(EmergencyEvent.user_id == caller.user_id)
    if _status_filter(status):
        stmt = stmt.where(EmergencyEvent.status == status)
    return _paginate(db, stmt, page, limit)


# Endpoint: every user's events, for trusted services only.
@router.get("/all")
def list_all_emergency_events(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    status: str | None = Query(default=None),
    event_type: str | None = Query(default=None),
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(require_service_key),
):
    stmt = select(EmergencyEvent).options(selectinload(EmergencyEvent.user))
    if _status_filter(status):
        stmt = stmt.where(EmergencyEvent.status == status)
    if event_type:
        stmt = stmt.where(EmergencyEvent.event_type == event_type)
    return _paginate(db, stmt, page, limit, with_user=True)


@router.post("/retrieve-user-info")
def retrieve_user_info(
    payload: TargetUserRequest | None = None,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
):
    user_id = caller.resolve_target(payload.user_id if payload else None)
    return {"success": True, "data": emergency_profile(db, user_id)}


@router.get("/{event_id}")
def get_emergency_event(
    event_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, EmergencyEvent, event_id, caller.user_id, LABEL)
    return {"success": True, "data": _payload(row)}


# Voice agents report emergencies with the service key on a user's behalf.
@router.post("", status_code=201)
def create_emergency_event(
    payload: EmergencyEventCreate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
):
    user_id = caller.resolve_target(payload.user_id)
    ensure_user_exists(db, user_id)

    # New events always start active; status changes go through PUT.
    row = save(
        db,
        EmergencyEvent(user_id=user_id, status="active", **payload.model_dump(exclude={"user_id"})),
        CONFLICT,
    )
    logger.info("Emergency event %s (%s) created for user %s", row.id, row.event_type, user_id)
    return {"success": True, "data": _payload(row), "message": "Emergency event created successfully"}


@router.put("/{event_id}")
def update_emergency_event(
    event_id: str,
    payload: EmergencyEventUpdate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, EmergencyEvent, event_id, caller.user_id, LABEL)
    apply_changes(row, payload.changes())
    db.commit()
    db.refresh(row)
    return {"success": True, "data": _payload(row), "message": "Emergency event updated successfully"}


@router.delete("/{event_id}")
def delete_emergency_event(
    event_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, EmergencyEvent, event_id, caller.user_id, LABEL)
    delete(db, row)
    return {"success": True, "message": "Emergency event deleted successfully"}
