"""
Test registration, sign-in and caller authentication.
"""

from fastapi.testclient import TestClient

from sos911.db.models.user import User

API = "/api/v1"


def _register(client: TestClient, email: str = "ana@example.com", **extra):
    body = {"email": email, "password": "secret123", "full_name": "Ana Perez", **extra}
    return client.post(f"{API}/auth/register", json=body)


def test_register_creates_identity_and_local_user(client: TestClient, gateway, db_session):
    response = _register(client)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["user"]["email"] == "ana@example.com"
    assert data["custom_token"] == f"custom-{data['uid']}"

    assert gateway.get_uid_by_email("ana@example.com") == data["uid"]
    assert db_session.get(User, data["uid"]) is not None


def test_check_email_reflects_registration(client: TestClient):
    before = client.get(f"{API}/auth/check-email/ana@example.com").json()["data"]
    assert before == {
        "email": "ana@example.com",
        "available": True,
        "exists_in_database": False,
        "exists_in_firebase": False,
    }

    assert _register(client).status_code == 201

    after = client.get(f"{API}/auth/check-email/ana@example.com").json()["data"]
    assert after["available"] is False
    assert after["exists_in_database"] is True
    assert after["exists_in_firebase"] is True

    again = _register(client)
    assert again.status_code == 409
    assert again.json()["success"] is False


def test_check_email_rejects_invalid_address(client: TestClient):
    response = client.get(f"{API}/auth/check-email/not-an-email")
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid email format"


def test_identity_provider_rejection_is_reported_with_its_code(client: TestClient, gateway):
    gateway.add_user("existing", "taken@example.com")

    response = _register(client, email="taken@example.com")
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "auth/email-already-exists"


def test_register_validates_input(client: TestClient):
    response = client.post(f"{API}/auth/register", json={"email": "bad", "password": "123", "full_name": ""})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation Error"
    fields = {d["field"] for d in body["details"]}
    assert {"email", "password", "full_name"} <= fields


def test_failed_local_write_removes_the_identity(client: TestClient, gateway, db_session):
    # A local row already holding the uid makes the insert fail.
    db_session.add(User(id="clash", email="someone-else@example.com", full_name="Other"))
    db_session.commit()
    gateway.next_uid = "clash"

    response = _register(client, email="new@example.com")
    assert response.status_code == 500
    assert "cleaned up" in response.json()["message"]
    assert gateway.deleted == ["clash"]
    assert gateway.get_uid_by_email("new@example.com") is None


def test_missing_or_bad_token_is_unauthorized(client: TestClient):
    missing = client.get(f"{API}/users/me")
    assert missing.status_code == 401
    assert missing.json() == {
        "success": False,
        "error": "Unauthorized",
        "message": "No valid authorization header found",
    }

    bad = client.get(f"{API}/users/me", headers={"Authorization": "Bearer nope"})
    assert bad.status_code == 401
    assert bad.json()["message"] == "Invalid or expired token"


def test_first_authenticated_request_creates_local_user(client: TestClient, gateway, db_session):
    gateway.add_user("u-42", "maria@example.com", name=None)

    response = client.get(f"{API}/users/me", headers={"Authorization": "Bearer token-u-42"})
    assert response.status_code == 200
    assert response.json()["data"]["full_name"] == "maria"
    assert db_session.get(User, "u-42") is not None


def test_signin_returns_user_and_claims(client: TestClient, gateway):
    gateway.add_user("u-7", "pedro@example.com", name="Pedro", email_verified=True)

    response = client.post(f"{API}/auth/signin", json={"id_token": "token-u-7"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["id"] == "u-7"
    assert data["token_claims"]["email_verified"] is True

    rejected = client.post(f"{API}/auth/signin", json={"id_token": "forged"})
    assert rejected.status_code == 401


def test_profile_reports_completeness(client: TestClient, make_user):
    headers = make_user("u-1", name="Ana")
    client.put(f"{API}/users/me", headers=headers, json={"phone_number": "+56911112222"})

    data = client.get(f"{API}/auth/profile", headers=headers).json()["data"]
    # full name and phone out of eight criteria
    assert data["profile_completeness"] == 25


def test_verify_email_returns_link(client: TestClient):
    response = client.post(f"{API}/auth/verify-email", json={"email": "ana@example.com"})
    assert response.status_code == 200
    assert response.json()["data"]["verification_link"].endswith("ana@example.com")


def test_unknown_service_key_is_rejected(client: TestClient):
    response = client.get(f"{API}/users/rut/19831267-3", headers={"api-key": "wrong"})
    assert response.status_code == 401


def test_identity_without_email_has_no_profile(client: TestClient, gateway):
    gateway.add_user("phone-only", None, phone_number="+56911112222")
    headers = {"Authorization": "Bearer token-phone-only"}

    response = client.post(
        f"{API}/emergency-contacts",
        headers=headers,
        json={"contact_name": "Rosa", "phone_number": "1", "relationship": "mother"},
    )
    assert response.status_code == 404
    assert response.json()["message"] == "User profile not found"


def test_stale_service_key_falls_back_to_bearer(client: TestClient, make_user):
    headers = make_user("ana")

    response = client.post(
        f"{API}/emergency-events/retrieve-user-info",
        headers={**headers, "api-key": "old-key"},
    )
    assert response.status_code == 200
    assert response.json()["data"]["user_data"]["id"] == "ana"
