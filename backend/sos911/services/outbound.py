"""Module: outbound.

Adapters for the two third-party HTTP services: the WALI WhatsApp gateway
and the agent compute API. Both POST JSON with an ``api-key`` header and hand
the remote body back untouched. No retries.
"""

import logging
from typing import Any

import httpx

from sos911.core.config import Settings

logger = logging.getLogger(__name__)


class IntegrationConfigError(Exception):
    pass


class UpstreamError(Exception):
    def __init__(self, service: str, status_code: int, message: str):
        super().__init__(f"{service} API returned {status_code}: {message}")
        self.service = service
        self.status_code = status_code
        self.message = message


def _remote_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


async def _post_json(client: httpx.AsyncClient, service: str, url: str, api_key: str, payload: Any, **kwargs) -> Any:
    try:
        r = await client.post(url, json=payload, headers={"api-key": api_key}, **kwargs)
    except httpx.HTTPError as exc:
        logger.error("%s API request failed: %s", service, exc)
        raise UpstreamError(service, 500, str(exc)) from exc

    if r.is_error:
        message = _remote_message(r)
        logger.error("%s API error %s: %s", service, r.status_code, message)
        raise UpstreamError(service, r.status_code, message)

    try:
        return r.json()
    except ValueError:
        return r.text


async def send_whatsapp_message(client: httpx.AsyncClient, settings: Settings, message: str, phone: str) -> Any:
    if not settings.wali_api_url or not settings.wali_api_key:
        raise IntegrationConfigError("WALI_API_URL or WALI_API_KEY environment variables are not set")

    url = f"{settings.wali_api_url.rstrip('/')}/wali/{settings.wali_instance_id}/send_message"
    payload = {
        "message": message,
        "device_id": "whapi",
        "phone": phone,
        "is_group": False,
    }
    return await _post_json(
        client,
        "WALI",
        url,
        settings.wali_api_key,
        payload,
        params={"manager": "whapi", "schema": "repartes"},
    )


async def agent_compute(client: httpx.AsyncClient, settings: Settings, user_payload: dict[str, Any]) -> Any:
    if not settings.agent_api_url or not settings.agent_api_key:
        raise IntegrationConfigError("AGENT_API_URL or AGENT_API_KEY environment variables are not set")

    url = f"{settings.agent_api_url.rstrip('/')}/agent_compute"
    return await _post_json(client, "Agent", url, settings.agent_api_key, user_payload)
