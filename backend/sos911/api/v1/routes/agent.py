"""Module: agent."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from sos911.api.v1.routes.deps import CallerIdentity, get_caller, get_db, get_http_client
from sos911.api.v1.schemas import TargetUserRequest
from sos911.core.config import settings
from sos911.services.outbound import IntegrationConfigError, UpstreamError, agent_compute
from sos911.services.user_data import emergency_profile

logger = logging.getLogger(__name__)

router = APIRouter()


# Endpoint: forward the user's emergency profile to the agent API.
@router.post("/agent_compute")
async def compute(
    payload: TargetUserRequest | None = None,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    user_id = caller.resolve_target(payload.user_id if payload else None)
    profile = await run_in_threadpool(emergency_profile, db, user_id)

    try:
        data = await agent_compute(client, settings, profile)
    except IntegrationConfigError:
        raise HTTPException(status_code=500, detail="Agent API configuration is missing")
    except UpstreamError as exc:
        raise HTTPException(status_code=500, detail={"error": str(exc), "message": "Agent API request failed"})

    logger.info("Agent compute completed for user %s", user_id)
    return {"success": True, "data": data, "message": "Agent compute completed successfully"}
