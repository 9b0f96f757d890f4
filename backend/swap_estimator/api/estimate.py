"""
Swap estimate endpoint.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from ..chains.address import is_valid_address, normalize_address
from ..core.exceptions import InvalidAddressError, InvalidAmountError
from ..core.settings import Settings
from ..dex.swap_math import is_valid_amount
from ..services.estimator import SwapEstimator
from .dependencies import get_app_settings, get_estimator
from .schemas import EstimateRequest, EstimateResponse, ErrorResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["estimate"])


def validate_estimate_request(request: EstimateRequest) -> None:
    """
    Reject malformed input before any chain call is made.

    Checks run in order: pool, src, dst, amount, then the token pair.

    Raises:
        InvalidAddressError: Malformed address or src == dst
        InvalidAmountError: Empty, zero or non-decimal amount
    """
    for value, label in (
        (request.pool, "pool"),
        (request.src, "source token"),
        (request.dst, "destination token"),
    ):
        if not is_valid_address(value):
            raise InvalidAddressError.for_field(label)

    if not is_valid_amount(request.src_amount):
        raise InvalidAmountError()

    if normalize_address(request.src) == normalize_address(request.dst):
        raise InvalidAddressError(
            message="Invalid token pair",
            details="Source and destination tokens must be different",
        )


@router.get(
    "/estimate",
    response_model=EstimateResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        408: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def estimate_swap(
    pool: str = Query("", description="Uniswap V2 pair address"),
    src: str = Query("", description="Source token address"),
    dst: str = Query("", description="Destination token address"),
    src_amount: str = Query("", description="Input amount in raw token units"),
    estimator: SwapEstimator = Depends(get_estimator),
    settings: Settings = Depends(get_app_settings),
) -> EstimateResponse:
    """
    Estimate the output amount of a swap through one Uniswap V2 pool.

    The result is computed off-chain from the pool's current reserves
    with the 0.3% fee applied.
    """
    request = EstimateRequest(pool=pool, src=src, dst=dst, src_amount=src_amount)
    validate_estimate_request(request)

    logger.debug(
        "Estimate requested",
        extra={'extra_data': {
            'pool': pool,
            'src': src,
            'dst': dst,
            'src_amount': src_amount,
        }}
    )

    return await estimator.estimate(request, timeout=settings.request_timeout)
