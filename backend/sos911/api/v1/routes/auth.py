"""Module: auth.

Accounts live in the identity provider; this router keeps the local
``users`` mirror in step with it.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import EmailStr, Field, TypeAdapter, ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sos911.api.v1.routes.deps import (
    CallerIdentity,
    ensure_local_user,
    get_current_user,
    get_db,
    get_identity_gateway,
)
from sos911.api.v1.schemas import RequestModel, UserSummaryPayload
from sos911.db.models.user import User
from sos911.services.identity import IdentityError, IdentityGateway, InvalidTokenError
from sos911.services.user_data import profile_completeness, user_detail

logger = logging.getLogger(__name__)

router = APIRouter()

EMAIL_ADAPTER = TypeAdapter(EmailStr)


class RegisterRequest(RequestModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1)
    phone_number: str | None = None
    profile_picture_url: str | None = None


class SignInRequest(RequestModel):
    id_token: str = Field(min_length=1)


class VerifyEmailRequest(RequestModel):
    email: EmailStr


def _normalize_email(value: str) -> str:
    return value.strip().lower()


def _email_in_database(db: Session, email: str) -> bool:
    return db.execute(select(User.id).where(func.lower(User.email) == email)).first() is not None


@router.post("/register", status_code=201)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    gateway: IdentityGateway = Depends(get_identity_gateway),
):
    email = _normalize_email(payload.email)
    if _email_in_database(db, email):
        raise HTTPException(status_code=409, detail="Email already registered")

    try:
        uid = gateway.create_user(
            email=email,
            password=payload.password,
            display_name=payload.full_name,
            phone_number=payload.phone_number,
            photo_url=payload.profile_picture_url,
        )
    except IdentityError as exc:
        logger.info("Identity provider rejected registration: %s", exc.code)
        raise HTTPException(status_code=400, detail={"error": exc.code, "message": exc.message})

    user = User(
        id=uid,
        email=email,
        full_name=payload.full_name,
        phone_number=payload.phone_number,
        profile_picture_url=payload.profile_picture_url,
    )
    try:
        db.add(user)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Local user write failed; removing identity %s", uid)
        # Compensate so the identity provider holds no orphan account.
        try:
            gateway.delete_user(uid)
        except IdentityError:
            logger.exception("Could not remove identity %s after failed registration", uid)
        raise HTTPException(
            status_code=500,
            detail="Failed to create user in database. Firebase user has been cleaned up.",
        )

    db.refresh(user)
    return {
        "success": True,
        "data": {
            "user": UserSummaryPayload.model_validate(user).model_dump(mode="json"),
            "custom_token": gateway.create_custom_token(uid),
            "uid": uid,
        },
        "message": "User registered successfully",
    }


@router.get("/check-email/{email}")
def check_email(
    email: str,
    db: Session = Depends(get_db),
    gateway: IdentityGateway = Depends(get_identity_gateway),
):
    try:
        EMAIL_ADAPTER.validate_python(email)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid email format")

    normalized = _normalize_email(email)
    in_database = _email_in_database(db, normalized)
    try:
        in_identity = gateway.get_uid_by_email(normalized) is not None
    except IdentityError as exc:
        logger.error("Email availability lookup failed: %s", exc.code)
        raise HTTPException(status_code=500, detail="Failed to check email availability")

    return {
        "success": True,
        "data": {
            "email": normalized,
            "available": not in_database and not in_identity,
            "exists_in_database": in_database,
            "exists_in_firebase": in_identity,
        },
    }


@router.post("/signin")
def sign_in(
    payload: SignInRequest,
    db: Session = Depends(get_db),
    gateway: IdentityGateway = Depends(get_identity_gateway),
):
    try:
        claims = gateway.verify_id_token(payload.id_token)
    except InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    if not ensure_local_user(db, claims):
        raise HTTPException(status_code=404, detail="User profile not found")

    return {
        "success": True,
        "data": {
            "user": user_detail(db, claims.uid),
            "token_claims": {
                "uid": claims.uid,
                "email": claims.email,
                "email_verified": claims.email_verified,
                "name": claims.name,
                "picture": claims.picture,
            },
        },
        "message": "Sign in successful",
    }


@router.get("/profile")
def profile(
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_user),
):
    user = user_detail(db, caller.user_id)
    user["profile_completeness"] = profile_completeness(user)
    return {"success": True, "data": user}


@router.post("/verify-email")
def verify_email(
    payload: VerifyEmailRequest,
    gateway: IdentityGateway = Depends(get_identity_gateway),
):
    try:
        link = gateway.generate_email_verification_link(_normalize_email(payload.email))
    except IdentityError as exc:
        logger.error("Verification link failed: %s", exc.code)
        raise HTTPException(status_code=500, detail="Failed to generate email verification link")

    return {"success": True, "data": {"verification_link": link}, "message": "Email verification link generated"}
