"""
Test configuration and fixtures.

Every test gets a fresh in-memory SQLite database, a fake identity
provider and a mock transport for outbound HTTP calls.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SERVICE_API_KEY"] = "test-service-key"

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sos911.api.v1.routes.deps import get_db, get_http_client, get_identity_gateway
from sos911.db.base import Base
from sos911.db.session import enable_sqlite_foreign_keys
from sos911.main import app
from sos911.services.identity import IdentityClaims, IdentityError, IdentityGateway, InvalidTokenError

import sos911.db.models  # noqa: F401

SERVICE_KEY = "test-service-key"


class FakeIdentityGateway(IdentityGateway):
    """In-memory identity provider. A user's token is ``token-<uid>``."""

    def __init__(self):
        self.users: dict[str, IdentityClaims] = {}
        self.deleted: list[str] = []
        self.next_uid: str | None = None

    def add_user(self, uid: str, email: str, name: str | None = None, **extra) -> IdentityClaims:
        claims = IdentityClaims(uid=uid, email=email, name=name, **extra)
        self.users[uid] = claims
        return claims

    def verify_id_token(self, token: str) -> IdentityClaims:
        uid = token.removeprefix("token-")
        if not token.startswith("token-") or uid not in self.users:
            raise InvalidTokenError("auth/invalid-id-token", "Invalid or expired token")
        return self.users[uid]

    def create_user(self, email, password, display_name, phone_number=None, photo_url=None) -> str:
        if any(c.email == email for c in self.users.values()):
            raise IdentityError("auth/email-already-exists", "An account with this email already exists")
        if len(password) < 6:
            raise IdentityError("auth/invalid-argument", "Password must be at least 6 characters")
        uid = self.next_uid or f"uid-{len(self.users) + 1}"
        self.add_user(uid, email, display_name, phone_number=phone_number, picture=photo_url)
        return uid

    def delete_user(self, uid: str) -> None:
        self.users.pop(uid, None)
        self.deleted.append(uid)

    def get_uid_by_email(self, email: str) -> str | None:
        for claims in self.users.values():
            if claims.email == email:
                return claims.uid
        return None

    def get_user(self, uid: str) -> IdentityClaims | None:
        return self.users.get(uid)

    def create_custom_token(self, uid: str) -> str:
        return f"custom-{uid}"

    def generate_email_verification_link(self, email: str) -> str:
        return f"https://verify.test/?email={email}"


class UpstreamRecorder:
    """Stands in for the remote HTTP services; records what was sent."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body = {"ok": True}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def gateway():
    return FakeIdentityGateway()


@pytest.fixture
def upstream():
    return UpstreamRecorder()


@pytest.fixture
def client(session_factory, gateway, upstream):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    async def override_get_http_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler)) as http_client:
            yield http_client

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_gateway] = lambda: gateway
    app.dependency_overrides[get_http_client] = override_get_http_client

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client, gateway):
    """Register an identity and return bearer headers for it."""

    def _make_user(uid: str = "user-1", email: str | None = None, name: str | None = "Test User") -> dict:
        gateway.add_user(uid, email or f"{uid}@example.com", name)
        headers = {"Authorization": f"Bearer token-{uid}"}
        # First authenticated request mirrors the identity into the users table.
        client.get("/api/v1/users/me", headers=headers)
        return headers

    return _make_user


@pytest.fixture
def service_headers():
    return {"api-key": SERVICE_KEY}
