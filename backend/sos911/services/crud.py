"""Module: crud.

Helpers shared by every owned-resource router. Ownership is part of the
lookup predicate so another user's row looks exactly like a missing one.
"""

import logging
from typing import Any, TypeVar

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sos911.db.models.user import User

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def get_owned_or_404(db: Session, model: type[ModelT], resource_id: str, user_id: str, label: str) -> ModelT:
    row = db.execute(
        select(model).where(model.id == resource_id, model.user_id == user_id)
    ).scalar_one_or_none()
    if not row:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return row


def list_owned(db: Session, model: type[ModelT], user_id: str, *order_by) -> list[ModelT]:
    stmt = select(model).where(model.user_id == user_id)
    if order_by:
        stmt = stmt.order_by(*order_by)
    else:
        stmt = stmt.order_by(model.created_at.desc())
    return list(db.execute(stmt).scalars().all())


def ensure_user_exists(db: Session, user_id: str) -> User:
    user = db.execute(select(User).where(User.id == user_id)).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def apply_changes(row: Any, changes: dict[str, Any]) -> None:
    for name, value in changes.items():
        setattr(row, name, value)


def commit_or_conflict(db: Session, conflict_message: str) -> None:
    # Unique-constraint violations surface as 409 instead of a generic 500.
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Integrity conflict: %s", conflict_message)
        raise HTTPException(status_code=409, detail=conflict_message)


def save(db: Session, row: Any, conflict_message: str) -> Any:
    db.add(row)
    commit_or_conflict(db, conflict_message)
    db.refresh(row)
    return row


def delete(db: Session, row: Any) -> None:
    db.delete(row)
    db.commit()
