"""
Application factory.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..api import estimate, health
from .exception_handlers import register_exception_handlers
from .lifespan import lifespan
from .middleware import RequestTracingMiddleware
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

API_V1_PREFIX = "/api/v1"


def _root_info(settings: Settings) -> Dict[str, Any]:
    return {
        "service": settings.app_name,
        "version": settings.version,
        "endpoints": {
            "estimate": "/estimate?pool={pool}&src={src}&dst={dst}&src_amount={amount}",
            "estimate_v1": f"{API_V1_PREFIX}/estimate?pool={{pool}}&src={{src}}&dst={{dst}}&src_amount={{amount}}",
            "health": "/health",
            "ready": "/ready",
        },
    }


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit settings; read from the environment when omitted

    Returns:
        Configured FastAPI app. Chain clients are created by the lifespan.
    """
    settings = settings or get_settings()
    docs_enabled = settings.debug or not settings.is_production

    app = FastAPI(
        title=settings.app_name,
        description="Off-chain output estimates for Uniswap V2 swaps",
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
    )
    app.state.settings = settings

    # Middleware order: last added runs first
    allow_all = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_origins,
        allow_credentials=not allow_all,
        allow_methods=settings.cors_allow_methods,
        allow_headers=["*"],
        expose_headers=["X-Trace-ID", "X-Process-Time"],
        max_age=600,
    )
    app.add_middleware(RequestTracingMiddleware)

    register_exception_handlers(app)

    for prefix in ("", API_V1_PREFIX):
        router = APIRouter(prefix=prefix)
        router.include_router(estimate.router)
        router.include_router(health.router)
        app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root() -> Dict[str, Any]:
        return _root_info(settings)

    logger.debug(
        "Application created",
        extra={'extra_data': {'environment': settings.environment, 'docs_enabled': docs_enabled}}
    )
    return app


__all__ = ["create_app", "API_V1_PREFIX"]
