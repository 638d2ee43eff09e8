"""Module: deps."""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import AsyncGenerator, Generator

import httpx
from fastapi import Depends, Header, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from sos911.core.config import settings
from sos911.db.models.user import User
from sos911.db.session import SessionLocal
from sos911.services.identity import FirebaseIdentityGateway, IdentityClaims, IdentityGateway, InvalidTokenError

logger = logging.getLogger(__name__)

AUTHENTICATED = "authenticated"
SERVICE_KEY = "service_key"


# Dependency provider: one DB session per request lifecycle.
def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache
def get_identity_gateway() -> IdentityGateway:
    return FirebaseIdentityGateway(settings)


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        yield client


@dataclass(frozen=True)
class CallerIdentity:
    """Who is making the request: a signed-in user or a trusted service."""

    kind: str
    user_id: str | None = None

    @classmethod
    def authenticated(cls, user_id: str) -> "CallerIdentity":
        return cls(kind=AUTHENTICATED, user_id=user_id)

    @classmethod
    def service_key(cls) -> "CallerIdentity":
        return cls(kind=SERVICE_KEY)

    @property
    def is_service_key(self) -> bool:
        return self.kind == SERVICE_KEY

    def resolve_target(self, user_id: str | None = None) -> str:
        if self.is_service_key:
            if not user_id:
                raise HTTPException(
                    status_code=400,
                    detail="user_id is required when using API key authentication",
                )
            return user_id

        # Signed-in users can only act on themselves; anyone else looks missing.
        if user_id and user_id != self.user_id:
            raise HTTPException(status_code=404, detail="User not found")
        return self.user_id


def _get_token_value(authorization: str | None) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="No valid authorization header found")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise HTTPException(status_code=401, detail="No valid authorization header found")

    return parts[1].strip()


def ensure_local_user(db: Session, claims: IdentityClaims) -> User | None:
    user = db.execute(select(User).where(User.id == claims.uid)).scalar_one_or_none()
    if user or not claims.email:
        return user

    user = User(
        id=claims.uid,
        email=claims.email,
        full_name=claims.name or claims.email.split("@")[0],
        phone_number=claims.phone_number,
        profile_picture_url=claims.picture,
    )
    db.add(user)
    db.commit()
    logger.info("Created local user for identity %s", claims.uid)
    return user


def verify_bearer(
    authorization: str | None,
    db: Session,
    gateway: IdentityGateway,
) -> CallerIdentity:
    token = _get_token_value(authorization)
    try:
        claims = gateway.verify_id_token(token)
    except InvalidTokenError as exc:
        logger.info("Rejected bearer token: %s", exc.code)
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    # Identities without an email cannot be mirrored locally.
    if not ensure_local_user(db, claims):
        raise HTTPException(status_code=404, detail="User profile not found")
    return CallerIdentity.authenticated(claims.uid)


# Bearer-only endpoints: every owned-resource router.
def get_current_user(
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db),
    gateway: IdentityGateway = Depends(get_identity_gateway),
) -> CallerIdentity:
    return verify_bearer(authorization, db, gateway)


# Endpoints open to both signed-in users and the voice agent's service key.
def get_caller(
    authorization: str | None = Header(default=None),
    api_key: str | None = Header(default=None, alias="api-key"),
    db: Session = Depends(get_db),
    gateway: IdentityGateway = Depends(get_identity_gateway),
) -> CallerIdentity:
    if api_key is not None and settings.service_api_key and api_key == settings.service_api_key:
        return CallerIdentity.service_key()
    # A stale api-key does not block a valid bearer token.
    if api_key is not None and not authorization:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return verify_bearer(authorization, db, gateway)


def require_service_key(
    api_key: str | None = Header(default=None, alias="api-key"),
) -> CallerIdentity:
    if not api_key or not settings.service_api_key or api_key != settings.service_api_key:
        raise HTTPException(status_code=401, detail="Valid API key required")
    return CallerIdentity.service_key()
