"""
Uniswap V2 pair state reader.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

from ..chains.abi import PAIR_INTERFACE
from ..chains.contract_caller import ContractCaller
from ..core.exceptions import AbiDecodeError, PoolNotFoundError, TransportError
from .models import PoolReserves

logger = logging.getLogger(__name__)


class ReserveFetcher:
    """
    Reads reserves and token order from a Uniswap V2 pair.

    Issues ``getReserves``, ``token0`` and ``token1`` in sequence against
    the same pool. Any failed or undecodable call means the address is
    not a usable pair.
    """

    def __init__(self, caller: ContractCaller) -> None:
        self.caller = caller

    async def fetch(self, pool_address: str, deadline: Optional[float] = None) -> PoolReserves:
        """
        Fetch current pool state.

        Args:
            pool_address: Normalized pair address
            deadline: Absolute loop time for the whole request

        Returns:
            PoolReserves with lowercase token addresses

        Raises:
            PoolNotFoundError: If any call fails or returns garbage
            EstimateTimeoutError: If the deadline elapses
        """
        logger.debug(
            f"Fetching reserves for pool: {pool_address}",
            extra={'extra_data': {'pool': pool_address}}
        )

        reserve0, reserve1, block_timestamp_last = await self._call(
            pool_address, "getReserves", deadline
        )
        (token0,) = await self._call(pool_address, "token0", deadline)
        (token1,) = await self._call(pool_address, "token1", deadline)

        if token0 == token1:
            logger.warning(
                f"Pool reports identical tokens: {pool_address}",
                extra={'extra_data': {'pool': pool_address, 'token0': token0}}
            )
            raise PoolNotFoundError(context={"pool": pool_address})

        logger.info(
            "Fetched pool data",
            extra={'extra_data': {
                'pool': pool_address,
                'token0': token0,
                'token1': token1,
                'reserve0': str(reserve0),
                'reserve1': str(reserve1),
                'block_timestamp_last': block_timestamp_last,
            }}
        )

        return PoolReserves(
            reserve0=reserve0,
            reserve1=reserve1,
            token0=token0,
            token1=token1,
            block_timestamp_last=block_timestamp_last,
        )

    async def _call(
        self,
        pool_address: str,
        function_name: str,
        deadline: Optional[float],
    ) -> Tuple[Any, ...]:
        payload = PAIR_INTERFACE.encode_call(function_name)
        try:
            raw = await self.caller.call(pool_address, payload, deadline)
            return PAIR_INTERFACE.decode_return(function_name, raw)
        except (TransportError, AbiDecodeError) as e:
            logger.warning(
                f"Pair call {function_name} failed for {pool_address}: {e}",
                extra={'extra_data': {
                    'pool': pool_address,
                    'function': function_name,
                    'call_data': payload.hex(),
                    'error_type': type(e).__name__,
                }}
            )
            raise PoolNotFoundError(context={"pool": pool_address, "function": function_name}) from e
