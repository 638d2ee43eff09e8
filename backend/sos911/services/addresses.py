"""Module: addresses.

Primary-address exclusivity: at most one address per user has
``is_primary = True``. There is no partial unique index, so every path that
can promote an address first demotes the others. Both steps share one
transaction, serialized per user by locking the owning ``users`` row first
(a row lock on existing addresses alone would not block a concurrent insert).
"""

from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from sos911.db.models.address import Address
from sos911.db.models.user import User
from sos911.services.crud import apply_changes, get_owned_or_404


def _lock_user_addresses(db: Session, user_id: str) -> None:
    # FOR UPDATE is dropped by dialects without row locks (SQLite).
    db.execute(select(User.id).where(User.id == user_id).with_for_update()).all()
    db.execute(select(Address.id).where(Address.user_id == user_id).with_for_update()).all()


def _demote_primaries(db: Session, user_id: str, exclude_id: str | None = None) -> None:
    stmt = (
        update(Address)
        .where(Address.user_id == user_id, Address.is_primary.is_(True))
        .values(is_primary=False)
        .execution_options(synchronize_session="fetch")
    )
    if exclude_id is not None:
        stmt = stmt.where(Address.id != exclude_id)
    db.execute(stmt)


def list_addresses(db: Session, user_id: str) -> list[Address]:
    return list(
        db.execute(
            select(Address)
            .where(Address.user_id == user_id)
            .order_by(Address.is_primary.desc(), Address.created_at.desc())
        ).scalars().all()
    )


def create_address(db: Session, user_id: str, fields: dict[str, Any]) -> Address:
    is_primary = bool(fields.pop("is_primary", False))
    if is_primary:
        _lock_user_addresses(db, user_id)
        _demote_primaries(db, user_id)

    address = Address(user_id=user_id, is_primary=is_primary, **fields)
    db.add(address)
    db.commit()
    db.refresh(address)
    return address


def update_address(db: Session, address_id: str, user_id: str, changes: dict[str, Any]) -> Address:
    address = get_owned_or_404(db, Address, address_id, user_id, "Address")

    if changes.get("is_primary") and not address.is_primary:
        _lock_user_addresses(db, user_id)
        _demote_primaries(db, user_id, exclude_id=address.id)

    apply_changes(address, changes)
    db.commit()
    db.refresh(address)
    return address


def set_primary_address(db: Session, address_id: str, user_id: str) -> Address:
    address = get_owned_or_404(db, Address, address_id, user_id, "Address")

    _lock_user_addresses(db, user_id)
    _demote_primaries(db, user_id)
    address.is_primary = True
    db.commit()
    db.refresh(address)
    return address
