"""
End-to-end swap estimation against live Uniswap V2 pool state.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, List, Optional, TypeVar

from ..api.schemas import EstimateRequest, EstimateResponse
from ..chains.address import is_valid_address, normalize_address
from ..core.exceptions import InvalidAddressError, InvalidAmountError, TokenMismatchError
from ..dex.models import PoolReserves, SwapCalculation, TokenInfo
from ..dex.swap_math import from_token_units, get_amount_out, parse_amount
from ..dex.uniswap_v2 import ReserveFetcher
from .token_metadata import TokenMetadataFetcher

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Longest amount written verbatim to logs
LOG_AMOUNT_MAX_DIGITS = 80


def _abbreviate(digits: str) -> str:
    if len(digits) <= LOG_AMOUNT_MAX_DIGITS:
        return digits
    half = LOG_AMOUNT_MAX_DIGITS // 2
    return f"{digits[:half]}...{digits[-half:]}"


async def gather_fail_fast(*aws: Awaitable[T]) -> List[T]:
    """
    Run awaitables concurrently; on the first failure cancel the rest
    and re-raise that failure.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class SwapEstimator:
    """
    Estimates the output of a single-pool Uniswap V2 swap.

    Pipeline: normalize addresses, parse the amount, read reserves,
    read both tokens' metadata, orient reserves, apply the swap formula.
    Every step fails fast; nothing is retried or cached.
    """

    def __init__(
        self,
        reserve_fetcher: ReserveFetcher,
        token_fetcher: TokenMetadataFetcher,
    ) -> None:
        self.reserve_fetcher = reserve_fetcher
        self.token_fetcher = token_fetcher

    async def estimate(
        self,
        request: EstimateRequest,
        timeout: Optional[float] = None,
    ) -> EstimateResponse:
        """
        Perform the complete swap estimation.

        Args:
            request: Pool, token addresses and raw input amount
            timeout: Seconds allowed for all chain calls (None = unbounded)

        Returns:
            EstimateResponse with the output amount in raw token units

        Raises:
            EstimatorError: One typed error for whichever step failed
        """
        start_time = time.monotonic()
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout if timeout is not None else None

        pool = self._normalize(request.pool, "pool")
        src = self._normalize(request.src, "source token")
        dst = self._normalize(request.dst, "destination token")

        amount_in = parse_amount(request.src_amount)
        if amount_in == 0:
            raise InvalidAmountError()

        reserves = await self.reserve_fetcher.fetch(pool, deadline)

        src_token, dst_token = await gather_fail_fast(
            self.token_fetcher.fetch(src, deadline),
            self.token_fetcher.fetch(dst, deadline),
        )

        calculation = self.setup_calculation(amount_in, reserves, src_token, dst_token)

        amount_out = get_amount_out(
            calculation.amount_in,
            calculation.reserve_in,
            calculation.reserve_out,
        )

        logger.info(
            f"Estimate {src_token.symbol} -> {dst_token.symbol}",
            extra={'extra_data': {
                'pool': pool,
                'amount_in': _abbreviate(request.src_amount),
                'amount_in_digits': len(request.src_amount),
                'amount_out': str(amount_out),
                'amount_out_whole_tokens': str(from_token_units(amount_out, dst_token.decimals)),
                'reserve_in': str(calculation.reserve_in),
                'reserve_out': str(calculation.reserve_out),
                'execution_time_ms': round((time.monotonic() - start_time) * 1000, 2),
            }}
        )

        return EstimateResponse(dst_amount=str(amount_out))

    @staticmethod
    def setup_calculation(
        amount_in: int,
        reserves: PoolReserves,
        src_token: TokenInfo,
        dst_token: TokenInfo,
    ) -> SwapCalculation:
        """
        Pick reserve_in/reserve_out from the pair's token order.

        Raises:
            TokenMismatchError: If (src, dst) is not (token0, token1) in either order
        """
        src = normalize_address(src_token.address)
        dst = normalize_address(dst_token.address)

        if src == reserves.token0 and dst == reserves.token1:
            reserve_in, reserve_out = reserves.reserve0, reserves.reserve1
        elif src == reserves.token1 and dst == reserves.token0:
            reserve_in, reserve_out = reserves.reserve1, reserves.reserve0
        else:
            raise TokenMismatchError(context={
                "src": src,
                "dst": dst,
                "token0": reserves.token0,
                "token1": reserves.token1,
            })

        return SwapCalculation(
            amount_in=amount_in,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            token_in=src_token,
            token_out=dst_token,
        )

    @staticmethod
    def _normalize(address: str, label: str) -> str:
        if not is_valid_address(address):
            raise InvalidAddressError.for_field(label)
        return normalize_address(address)
