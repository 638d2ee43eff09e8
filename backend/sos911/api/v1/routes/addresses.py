"""Module: addresses."""

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.orm import Session

from sos911.api.v1.routes.deps import CallerIdentity, get_current_user, get_db
from sos911.api.v1.schemas import AddressPayload, PartialUpdate, RequestModel
from sos911.db.models.address import Address
from sos911.services import addresses as address_service
from sos911.services.crud import delete, get_owned_or_404

router = APIRouter()


class AddressCreate(RequestModel):
    street_address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    region: str = Field(min_length=1)
    postal_code: str | None = None
    country: str = Field(min_length=1)
    address_type: str = Field(min_length=1)
    is_primary: bool = False


class AddressUpdate(PartialUpdate):
    required_fields = frozenset({"street_address", "city", "region", "country", "address_type", "is_primary"})

    street_address: str | None = Field(default=None, min_length=1)
    city: str | None = Field(default=None, min_length=1)
    region: str | None = Field(default=None, min_length=1)
    postal_code: str | None = None
    country: str | None = Field(default=None, min_length=1)
    address_type: str | None = Field(default=None, min_length=1)
    is_primary: bool | None = None


def _payload(row: Address) -> dict:
    return AddressPayload.model_validate(row).model_dump(mode="json")


# Endpoint: primary address first, then newest.
@router.get("")
def list_addresses(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    rows = address_service.list_addresses(db, caller.user_id)
    return {"success": True, "data": [_payload(r) for r in rows], "count": len(rows)}


@router.get("/{address_id}")
def get_address(
    address_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, Address, address_id, caller.user_id, "Address")
    return {"success": True, "data": _payload(row)}


@router.post("", status_code=201)
def create_address(
    payload: AddressCreate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = address_service.create_address(db, caller.user_id, payload.model_dump())
    return {"success": True, "data": _payload(row), "message": "Address created successfully"}


@router.put("/{address_id}")
def update_address(
    address_id: str,
    payload: AddressUpdate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = address_service.update_address(db, address_id, caller.user_id, payload.changes())
    return {"success": True, "data": _payload(row), "message": "Address updated successfully"}


@router.patch("/{address_id}/set-primary")
def set_primary_address(
    address_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = address_service.set_primary_address(db, address_id, caller.user_id)
    return {"success": True, "data": _payload(row), "message": "Address set as primary successfully"}


@router.delete("/{address_id}")
def delete_address(
    address_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, Address, address_id, caller.user_id, "Address")
    delete(db, row)
    return {"success": True, "message": "Address deleted successfully"}
