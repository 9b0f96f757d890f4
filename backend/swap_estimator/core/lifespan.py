"""
Application lifespan management.

Builds the RPC client and the estimation pipeline on startup, closes
the connection pool on shutdown.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from ..chains.contract_caller import ContractCaller
from ..chains.rpc_client import RpcClient
from ..dex.uniswap_v2 import ReserveFetcher
from ..services.estimator import SwapEstimator
from ..services.token_metadata import TokenMetadataFetcher
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_estimator(rpc_client: RpcClient) -> SwapEstimator:
    """Wire the fetchers and the estimator around one RPC client."""
    caller = ContractCaller(rpc_client)
    return SwapEstimator(
        reserve_fetcher=ReserveFetcher(caller),
        token_fetcher=TokenMetadataFetcher(caller),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Start and stop the services the API depends on.

    Everything is stored on ``app.state`` so route dependencies can
    read it without module-level globals.
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    app.state.settings = settings
    app.state.started_at = time.time()

    logger.info(
        f"Starting {settings.app_name} v{settings.version}",
        extra={'extra_data': {
            'environment': settings.environment,
            'address': settings.server_address,
        }}
    )

    rpc_client = RpcClient(
        settings.ethereum_rpc_url,
        timeout_seconds=settings.request_timeout,
        max_connections=settings.max_connections,
    )
    await rpc_client.initialize()

    app.state.rpc_client = rpc_client
    app.state.estimator = build_estimator(rpc_client)

    logger.info(
        "Ethereum RPC client ready",
        extra={'extra_data': {'provider': rpc_client.provider_host}}
    )

    try:
        yield
    finally:
        logger.info("Shutting down...")
        await rpc_client.close()
        app.state.estimator = None
        logger.info("Shutdown complete")


__all__ = ["lifespan", "build_estimator"]
