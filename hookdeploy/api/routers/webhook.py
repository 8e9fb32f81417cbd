"""
Webhook endpoint receiving Git hosting push and merge request notifications.
"""
import json
import logging

from fastapi import APIRouter, HTTPException, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from ...deployment.service import DeploymentService

router = APIRouter(tags=["webhook"])
logger = logging.getLogger(__name__)


def get_deployment_service() -> DeploymentService:
    """Dependency to get deployment service instance"""
    from ..state import app_state
    service = app_state.get("deployment_service")
    if not service:
        raise HTTPException(status_code=500, detail="Deployment service not initialized")
    return service


@router.post("/")
async def receive_webhook(
    request: Request,
    service: DeploymentService = Depends(get_deployment_service)
):
    """Admit a webhook and run the matching repository's deployment"""
    body = await request.body()
    try:
        payload = json.loads(body) if body else None
    except ValueError:
        payload = None

    # deployments shell out and block, keep them off the event loop
    response = await run_in_threadpool(service.handle_webhook, dict(request.headers), payload)
    logger.debug(f"Webhook handled with status {response.status_code}")

    return JSONResponse(status_code=response.status_code, content=response.to_dict())
