"""Module: bank_accounts."""

from fastapi import APIRouter, Depends
from pydantic import Field, field_validator
from sqlalchemy.orm import Session

from sos911.api.v1.routes.deps import CallerIdentity, get_current_user, get_db
from sos911.api.v1.schemas import BankAccountPayload, PartialUpdate, RequestModel
from sos911.core.rut import normalize_rut
from sos911.db.models.bank_account import BankAccount
from sos911.services.crud import apply_changes, commit_or_conflict, delete, get_owned_or_404, list_owned, save

router = APIRouter()

LABEL = "Bank account"
CONFLICT = "A bank account with this information already exists"


class BankAccountCreate(RequestModel):
    bank_name: str = Field(min_length=1)
    account_type: str = Field(min_length=1)
    account_number: str = Field(min_length=1)
    rut: str = Field(min_length=1)

    @field_validator("rut")
    @classmethod
    def check_rut(cls, value: str) -> str:
        return normalize_rut(value)


class BankAccountUpdate(PartialUpdate):
    required_fields = frozenset({"bank_name", "account_type", "account_number", "rut"})

    bank_name: str | None = Field(default=None, min_length=1)
    account_type: str | None = Field(default=None, min_length=1)
    account_number: str | None = Field(default=None, min_length=1)
    rut: str | None = None

    @field_validator("rut")
    @classmethod
    def check_rut(cls, value: str | None) -> str | None:
        return normalize_rut(value) if value is not None else None


def _payload(row: BankAccount) -> dict:
    return BankAccountPayload.model_validate(row).model_dump(mode="json")


@router.get("")
def list_bank_accounts(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    rows = list_owned(db, BankAccount, caller.user_id)
    return {"success": True, "data": [_payload(r) for r in rows], "count": len(rows)}


@router.get("/{account_id}")
def get_bank_account(
    account_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, BankAccount, account_id, caller.user_id, LABEL)
    return {"success": True, "data": _payload(row)}


@router.post("", status_code=201)
def create_bank_account(
    payload: BankAccountCreate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = save(db, BankAccount(user_id=caller.user_id, **payload.model_dump()), CONFLICT)
    return {"success": True, "data": _payload(row), "message": "Bank account created successfully"}


@router.put("/{account_id}")
def update_bank_account(
    account_id: str,
    payload: BankAccountUpdate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, BankAccount, account_id, caller.user_id, LABEL)
    apply_changes(row, payload.changes())
    commit_or_conflict(db, CONFLICT)
    db.refresh(row)
    return {"success": True, "data": _payload(row), "message": "Bank account updated successfully"}


@router.delete("/{account_id}")
def delete_bank_account(
    account_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    row = get_owned_or_404(db, BankAccount, account_id, caller.user_id, LABEL)
    delete(db, row)
    return {"success": True, "message": "Bank account deleted successfully"}
