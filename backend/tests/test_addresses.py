"""
Test the one-primary-address rule.
"""

import time
from datetime import datetime

from fastapi.testclient import TestClient
from sqlalchemy import event

from sos911.db.models import User
from sos911.services import addresses as address_service

API = "/api/v1"


def _address(street: str, is_primary: bool = False) -> dict:
    return {
        "street_address": street,
        "city": "Santiago",
        "region": "RM",
        "country": "Chile",
        "address_type": "home",
        "is_primary": is_primary,
    }


def _primaries(client: TestClient, headers: dict) -> list[str]:
    rows = client.get(f"{API}/addresses", headers=headers).json()["data"]
    return [r["street_address"] for r in rows if r["is_primary"]]


def test_creating_a_primary_demotes_the_previous_one(client: TestClient, make_user):
    headers = make_user()
    client.post(f"{API}/addresses", headers=headers, json=_address("Alameda 1", is_primary=True))
    client.post(f"{API}/addresses", headers=headers, json=_address("Providencia 2", is_primary=True))
    client.post(f"{API}/addresses", headers=headers, json=_address("Nunoa 3"))

    rows = client.get(f"{API}/addresses", headers=headers).json()["data"]
    assert rows[0]["street_address"] == "Providencia 2"
    assert _primaries(client, headers) == ["Providencia 2"]


def test_update_to_primary_keeps_a_single_primary(client: TestClient, make_user):
    headers = make_user()
    first = client.post(f"{API}/addresses", headers=headers, json=_address("Alameda 1", is_primary=True)).json()["data"]
    second = client.post(f"{API}/addresses", headers=headers, json=_address("Providencia 2")).json()["data"]

    response = client.put(f"{API}/addresses/{second['id']}", headers=headers, json={"is_primary": True})
    assert response.status_code == 200
    assert _primaries(client, headers) == ["Providencia 2"]

    # Re-saving the current primary leaves it alone.
    client.put(f"{API}/addresses/{second['id']}", headers=headers, json={"is_primary": True, "city": "Valparaiso"})
    assert _primaries(client, headers) == ["Providencia 2"]

    client.put(f"{API}/addresses/{first['id']}", headers=headers, json={"city": "Temuco"})
    assert _primaries(client, headers) == ["Providencia 2"]


def test_set_primary(client: TestClient, make_user):
    headers = make_user("owner")
    first = client.post(f"{API}/addresses", headers=headers, json=_address("Alameda 1", is_primary=True)).json()["data"]
    second = client.post(f"{API}/addresses", headers=headers, json=_address("Providencia 2")).json()["data"]

    response = client.patch(f"{API}/addresses/{second['id']}/set-primary", headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["is_primary"] is True
    assert _primaries(client, headers) == ["Providencia 2"]

    other = make_user("other")
    assert client.patch(f"{API}/addresses/{first['id']}/set-primary", headers=other).status_code == 404
    assert _primaries(client, headers) == ["Providencia 2"]


def test_primary_rule_is_per_user(client: TestClient, make_user):
    ana = make_user("ana")
    luis = make_user("luis")
    client.post(f"{API}/addresses", headers=ana, json=_address("Alameda 1", is_primary=True))
    client.post(f"{API}/addresses", headers=luis, json=_address("Providencia 2", is_primary=True))

    assert _primaries(client, ana) == ["Alameda 1"]
    assert _primaries(client, luis) == ["Providencia 2"]


def test_postal_code_is_optional_and_clearable(client: TestClient, make_user):
    headers = make_user()
    created = client.post(f"{API}/addresses", headers=headers, json={**_address("Alameda 1"), "postal_code": "8320000"})
    address_id = created.json()["data"]["id"]

    cleared = client.put(f"{API}/addresses/{address_id}", headers=headers, json={"postal_code": None})
    assert cleared.json()["data"]["postal_code"] is None

    rejected = client.put(f"{API}/addresses/{address_id}", headers=headers, json={"is_primary": None})
    assert rejected.status_code == 400


def _updated_at(client: TestClient, headers: dict, address_id: str) -> datetime:
    row = client.get(f"{API}/addresses/{address_id}", headers=headers).json()["data"]
    return datetime.fromisoformat(row["updated_at"])


def test_writes_refresh_updated_at(client: TestClient, make_user):
    headers = make_user()
    first = client.post(f"{API}/addresses", headers=headers, json=_address("Alameda 1", is_primary=True)).json()["data"]
    second = client.post(f"{API}/addresses", headers=headers, json=_address("Providencia 2")).json()["data"]

    before = _updated_at(client, headers, second["id"])
    time.sleep(0.01)
    updated = client.put(f"{API}/addresses/{second['id']}", headers=headers, json={"city": "Temuco"}).json()["data"]
    assert datetime.fromisoformat(updated["updated_at"]) > before
    assert updated["created_at"] == second["created_at"]

    # The demoted address is written too.
    demoted_before = _updated_at(client, headers, first["id"])
    time.sleep(0.01)
    client.patch(f"{API}/addresses/{second['id']}/set-primary", headers=headers)
    assert _updated_at(client, headers, first["id"]) > demoted_before


def test_promotion_locks_the_owning_user_row(db_session):
    db_session.add(User(id="ana", email="ana@example.com", full_name="Ana"))
    db_session.commit()

    statements = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    engine = db_session.get_bind()
    event.listen(engine, "before_cursor_execute", record)
    try:
        address_service.create_address(db_session, "ana", _address("Alameda 1", is_primary=True))
    finally:
        event.remove(engine, "before_cursor_execute", record)

    # The user row is read before anything is written, even with no addresses yet.
    user_lock = next(i for i, s in enumerate(statements) if s.startswith("SELECT users.id"))
    insert = next(i for i, s in enumerate(statements) if s.startswith("INSERT INTO addresses"))
    assert user_lock < insert
