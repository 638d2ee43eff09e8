"""Module: whatsapp."""

import httpx
from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from sos911.api.v1.routes.deps import CallerIdentity, get_caller, get_http_client
from sos911.api.v1.schemas import RequestModel
from sos911.core.config import settings
from sos911.services.outbound import IntegrationConfigError, UpstreamError, send_whatsapp_message

router = APIRouter()


class SendMessageRequest(RequestModel):
    message: str = Field(min_length=1)
    phone: str = Field(min_length=1)


@router.post("/send-message")
async def send_message(
    payload: SendMessageRequest,
    caller: CallerIdentity = Depends(get_caller),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    try:
        data = await send_whatsapp_message(client, settings, payload.message, payload.phone)
    except IntegrationConfigError:
        raise HTTPException(status_code=500, detail="WALI API configuration is missing")
    except UpstreamError as exc:
        raise HTTPException(status_code=500, detail={"error": str(exc), "message": "Failed to send WhatsApp message"})

    return {"success": True, "data": data, "message": "WhatsApp message sent successfully"}
