"""
Request and response models for the estimator API.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class EstimateRequest(BaseModel):
    """Swap estimate input, as received from the query string."""

    pool: str = Field(..., description="Uniswap V2 pair address")
    src: str = Field(..., description="Source token address")
    dst: str = Field(..., description="Destination token address")
    src_amount: str = Field(..., description="Input amount in raw token units")


class EstimateResponse(BaseModel):
    """Output amount calculated off-chain."""

    dst_amount: str = Field(..., description="Output amount in raw token units")


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    code: str
    message: str
    details: str = ""
    trace_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str
    uptime_seconds: float
    timestamp: datetime


class ReadyResponse(BaseModel):
    """Readiness probe response model."""

    status: str
    timestamp: datetime
    rpc: Dict[str, Any] = Field(default_factory=dict)
