"""
FastAPI dependencies shared by the routers.
"""
from __future__ import annotations

from fastapi import Request

from ..core.exceptions import BlockchainConnectionError
from ..core.settings import Settings, get_settings
from ..services.estimator import SwapEstimator


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with, falling back to the environment."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_estimator(request: Request) -> SwapEstimator:
    """
    Estimator built during startup.

    Raises:
        BlockchainConnectionError: If the app has not finished starting
    """
    estimator = getattr(request.app.state, "estimator", None)
    if estimator is None:
        raise BlockchainConnectionError(details="Ethereum client is not initialized")
    return estimator
