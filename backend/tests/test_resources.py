"""
Test the CRUD contract shared by the owned-resource endpoints.
"""

from fastapi.testclient import TestClient

API = "/api/v1"

CONTACT = {"contact_name": "Rosa", "phone_number": "+56922223333", "relationship": "mother", "email": ""}
VEHICLE = {
    "license_plate": "ABCD12",
    "brand": "Toyota",
    "model": "Yaris",
    "year": 2019,
    "color": "red",
    "vehicle_type": "car",
}


def test_list_is_empty_for_new_user(client: TestClient, make_user):
    headers = make_user()
    for path in ("emergency-contacts", "vehicles", "addresses", "bank-accounts", "health-insurance", "supplementary-insurance"):
        response = client.get(f"{API}/{path}", headers=headers)
        assert response.status_code == 200, path
        assert response.json() == {"success": True, "data": [], "count": 0}


def test_other_users_rows_look_missing(client: TestClient, make_user):
    owner = make_user("owner")
    intruder = make_user("intruder")

    created = client.post(f"{API}/emergency-contacts", headers=owner, json=CONTACT)
    assert created.status_code == 201
    contact_id = created.json()["data"]["id"]

    url = f"{API}/emergency-contacts/{contact_id}"
    assert client.get(url, headers=intruder).status_code == 404
    assert client.put(url, headers=intruder, json={"contact_name": "x"}).status_code == 404
    assert client.delete(url, headers=intruder).status_code == 404
    assert client.get(f"{API}/emergency-contacts", headers=intruder).json()["count"] == 0

    missing = client.get(f"{API}/emergency-contacts/does-not-exist", headers=owner)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Emergency contact not found"

    assert client.get(url, headers=owner).status_code == 200


def test_update_changes_only_supplied_fields(client: TestClient, make_user):
    headers = make_user()
    body = {**CONTACT, "email": "rosa@example.com"}
    contact = client.post(f"{API}/emergency-contacts", headers=headers, json=body).json()["data"]
    url = f"{API}/emergency-contacts/{contact['id']}"

    updated = client.put(url, headers=headers, json={"relationship": "aunt"}).json()["data"]
    assert updated["relationship"] == "aunt"
    assert updated["contact_name"] == "Rosa"
    assert updated["email"] == "rosa@example.com"

    cleared = client.put(url, headers=headers, json={"email": None}).json()["data"]
    assert cleared["email"] is None
    assert cleared["contact_name"] == "Rosa"

    rejected = client.put(url, headers=headers, json={"contact_name": None})
    assert rejected.status_code == 400
    assert rejected.json()["error"] == "Validation Error"


def test_create_validates_required_fields(client: TestClient, make_user):
    headers = make_user()
    response = client.post(f"{API}/emergency-contacts", headers=headers, json={"contact_name": "   "})
    assert response.status_code == 400
    fields = {d["field"] for d in response.json()["details"]}
    assert {"contact_name", "phone_number", "relationship"} <= fields


def test_delete_removes_row(client: TestClient, make_user):
    headers = make_user()
    contact = client.post(f"{API}/emergency-contacts", headers=headers, json=CONTACT).json()["data"]
    url = f"{API}/emergency-contacts/{contact['id']}"

    response = client.delete(url, headers=headers)
    assert response.json() == {"success": True, "message": "Emergency contact deleted successfully"}
    assert client.get(url, headers=headers).status_code == 404


def test_medical_info_is_a_singleton(client: TestClient, make_user):
    headers = make_user()
    body = {"medical_conditions": ["  asthma ", "", "   "], "allergies": ["penicillin"], "blood_type": "O+"}

    assert client.get(f"{API}/medical-info", headers=headers).status_code == 404

    created = client.post(f"{API}/medical-info", headers=headers, json=body)
    assert created.status_code == 201
    assert created.json()["data"]["medical_conditions"] == ["asthma"]
    assert created.json()["data"]["medications"] == []

    second = client.post(f"{API}/medical-info", headers=headers, json=body)
    assert second.status_code == 409

    updated = client.put(f"{API}/medical-info", headers=headers, json={"blood_type": "A-"}).json()["data"]
    assert updated["blood_type"] == "A-"
    assert updated["allergies"] == ["penicillin"]


def test_medical_info_upsert(client: TestClient, make_user):
    headers = make_user()

    first = client.patch(f"{API}/medical-info", headers=headers, json={"allergies": ["latex"]})
    assert first.status_code == 200
    second = client.patch(f"{API}/medical-info", headers=headers, json={"medications": ["insulin"]})
    data = second.json()["data"]
    assert data["id"] == first.json()["data"]["id"]
    assert data["medications"] == ["insulin"]
    assert data["allergies"] == []

    assert client.put(f"{API}/medical-info", headers=make_user("other"), json={"blood_type": "B+"}).status_code == 404


def test_vehicle_insurance_follows_vehicle_ownership(client: TestClient, make_user):
    owner = make_user("owner")
    intruder = make_user("intruder")
    vehicle = client.post(f"{API}/vehicles", headers=owner, json=VEHICLE).json()["data"]

    policy = {
        "vehicle_id": vehicle["id"],
        "insurance_company": "Sura",
        "policy_number": "P-1",
        "coverage_type": "full",
        "expiration_date": "2027-01-31T00:00:00",
        "phone_insurance": "600 600 1000",
    }
    assert client.post(f"{API}/vehicle-insurance", headers=intruder, json=policy).status_code == 404
    created = client.post(f"{API}/vehicle-insurance", headers=owner, json=policy)
    assert created.status_code == 201
    insurance_id = created.json()["data"]["id"]

    listed = client.get(f"{API}/vehicles", headers=owner).json()["data"]
    assert [p["id"] for p in listed[0]["vehicle_insurance"]] == [insurance_id]
    assert client.get(f"{API}/vehicle-insurance/{insurance_id}", headers=intruder).status_code == 404

    # Deleting the vehicle takes its policies with it.
    assert client.delete(f"{API}/vehicles/{vehicle['id']}", headers=owner).status_code == 200
    assert client.get(f"{API}/vehicle-insurance", headers=owner).json()["count"] == 0


def test_bank_account_rut_is_checked_and_formatted(client: TestClient, make_user):
    headers = make_user()
    body = {"bank_name": "BancoEstado", "account_type": "vista", "account_number": "123456"}

    bad_digit = client.post(f"{API}/bank-accounts", headers=headers, json={**body, "rut": "19831267-4"})
    assert bad_digit.status_code == 400
    assert "check digit" in bad_digit.json()["details"][0]["message"]

    bad_format = client.post(f"{API}/bank-accounts", headers=headers, json={**body, "rut": "19.831.267-3"})
    assert bad_format.status_code == 400

    created = client.post(f"{API}/bank-accounts", headers=headers, json={**body, "rut": " 10000030-k "})
    assert created.status_code == 201
    assert created.json()["data"]["rut"] == "10000030-K"


def test_insurance_records(client: TestClient, make_user):
    headers = make_user()
    health = client.post(
        f"{API}/health-insurance",
        headers=headers,
        json={"primary_provider": True, "provider_name": "Fonasa", "member_id": "M-1"},
    )
    assert health.status_code == 201
    assert health.json()["data"]["primary_provider"] is True

    extra = client.post(
        f"{API}/supplementary-insurance",
        headers=headers,
        json={"insurance_type": "life", "insurance_company": "MetLife", "policy_number": "L-9"},
    )
    assert extra.status_code == 201
    extra_id = extra.json()["data"]["id"]

    updated = client.put(
        f"{API}/supplementary-insurance/{extra_id}", headers=headers, json={"coverage_info": "UF 1000"}
    ).json()["data"]
    assert updated["coverage_info"] == "UF 1000"
    assert updated["insurance_type"] == "life"
