"""
Health and readiness endpoints.
"""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..core.settings import Settings
from .dependencies import get_app_settings
from .schemas import HealthResponse, ReadyResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])

# Fallback when the app was started without the lifespan
start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """Liveness probe. Never touches the chain."""
    started_at = getattr(request.app.state, "started_at", start_time)
    return HealthResponse(
        status="healthy",
        version=settings.version,
        environment=settings.environment,
        uptime_seconds=round(time.time() - started_at, 2),
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/ready", response_model=ReadyResponse, responses={503: {"model": ReadyResponse}})
async def readiness_check(request: Request):
    """
    Readiness probe.

    Ready once the shared RPC client is initialized; the payload carries
    the client's request metrics.
    """
    rpc_client = getattr(request.app.state, "rpc_client", None)
    now = datetime.now(timezone.utc)

    if rpc_client is None or not rpc_client.is_initialized:
        logger.warning("Readiness check failed: RPC client not initialized")
        body = ReadyResponse(status="not_ready", timestamp=now)
        return JSONResponse(status_code=503, content=body.model_dump(mode="json"))

    return ReadyResponse(status="ready", timestamp=now, rpc=rpc_client.get_health_status())
