"""
Test the WhatsApp and agent proxies against a mock transport.
"""

import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from sos911.core.config import settings
from sos911.services.outbound import UpstreamError, send_whatsapp_message

API = "/api/v1"


@pytest.fixture
def wali_configured(monkeypatch):
    monkeypatch.setattr(settings, "wali_api_url", "https://wali.test/")
    monkeypatch.setattr(settings, "wali_api_key", "wali-key")


@pytest.fixture
def agent_configured(monkeypatch):
    monkeypatch.setattr(settings, "agent_api_url", "https://agent.test")
    monkeypatch.setattr(settings, "agent_api_key", "agent-key")


def test_send_message_forwards_to_wali(client: TestClient, make_user, upstream, wali_configured):
    headers = make_user()
    upstream.body = {"id": "msg-1"}

    response = client.post(f"{API}/whatsapp/send-message", headers=headers, json={"message": "Help", "phone": "56911112222"})
    assert response.status_code == 200
    assert response.json()["data"] == {"id": "msg-1"}

    sent = upstream.requests[0]
    assert sent.url.path == f"/wali/{settings.wali_instance_id}/send_message"
    assert sent.url.params["manager"] == "whapi"
    assert sent.url.params["schema"] == "repartes"
    assert sent.headers["api-key"] == "wali-key"
    assert json.loads(sent.content) == {
        "message": "Help",
        "device_id": "whapi",
        "phone": "56911112222",
        "is_group": False,
    }


def test_remote_failure_is_reported(client: TestClient, service_headers, upstream, wali_configured):
    upstream.status_code = 502
    upstream.body = {"message": "device offline"}

    response = client.post(f"{API}/whatsapp/send-message", headers=service_headers, json={"message": "Help", "phone": "1"})
    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "WALI API returned 502: device offline"


def test_missing_configuration(client: TestClient, service_headers, monkeypatch):
    monkeypatch.setattr(settings, "wali_api_url", None)

    response = client.post(f"{API}/whatsapp/send-message", headers=service_headers, json={"message": "Help", "phone": "1"})
    assert response.status_code == 500
    assert response.json()["message"] == "WALI API configuration is missing"


def test_agent_compute_sends_the_user_profile(client: TestClient, make_user, service_headers, upstream, agent_configured):
    make_user("ana")
    upstream.body = {"summary": "ok"}

    response = client.post(f"{API}/agent/agent_compute", headers=service_headers, json={"user_id": "ana"})
    assert response.status_code == 200
    assert response.json()["data"] == {"summary": "ok"}

    sent = upstream.requests[0]
    assert str(sent.url) == "https://agent.test/agent_compute"
    assert sent.headers["api-key"] == "agent-key"
    assert json.loads(sent.content)["user_data"]["id"] == "ana"


def test_agent_compute_unknown_user(client: TestClient, service_headers, upstream, agent_configured):
    response = client.post(f"{API}/agent/agent_compute", headers=service_headers, json={"user_id": "ghost"})
    assert response.status_code == 404
    assert upstream.requests == []


def test_transport_error_becomes_upstream_error(wali_configured):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(refuse)) as http_client:
            await send_whatsapp_message(http_client, settings, "Help", "1")

    with pytest.raises(UpstreamError) as excinfo:
        asyncio.run(run())
    assert excinfo.value.status_code == 500
    assert excinfo.value.service == "WALI"
