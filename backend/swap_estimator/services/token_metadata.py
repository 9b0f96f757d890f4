"""
ERC20 token metadata reader.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

from ..chains.abi import ERC20_INTERFACE
from ..chains.contract_caller import ContractCaller
from ..core.exceptions import AbiDecodeError, BlockchainConnectionError, TransportError
from ..dex.models import TokenInfo

logger = logging.getLogger(__name__)


class TokenMetadataFetcher:
    """
    Reads ``decimals`` and ``symbol`` from an ERC20 token.

    Nothing is cached: every estimate sees the token as it is now.
    """

    def __init__(self, caller: ContractCaller) -> None:
        self.caller = caller

    async def fetch(self, token_address: str, deadline: Optional[float] = None) -> TokenInfo:
        """
        Fetch token decimals and symbol.

        Args:
            token_address: Normalized token address
            deadline: Absolute loop time for the whole request

        Returns:
            TokenInfo for the token

        Raises:
            BlockchainConnectionError: If either call fails or cannot be decoded
            EstimateTimeoutError: If the deadline elapses
        """
        (decimals,) = await self._call(token_address, "decimals", deadline)
        (symbol,) = await self._call(token_address, "symbol", deadline)

        logger.debug(
            f"Token metadata retrieved: {symbol}",
            extra={'extra_data': {'token': token_address, 'decimals': decimals, 'symbol': symbol}}
        )
        return TokenInfo(address=token_address, decimals=decimals, symbol=symbol)

    async def _call(
        self,
        token_address: str,
        function_name: str,
        deadline: Optional[float],
    ) -> Tuple[Any, ...]:
        payload = ERC20_INTERFACE.encode_call(function_name)
        try:
            raw = await self.caller.call(token_address, payload, deadline)
            return ERC20_INTERFACE.decode_return(function_name, raw)
        except (TransportError, AbiDecodeError) as e:
            logger.warning(
                f"Token call {function_name} failed for {token_address}: {e}",
                extra={'extra_data': {
                    'token': token_address,
                    'function': function_name,
                    'error_type': type(e).__name__,
                }}
            )
            raise BlockchainConnectionError(
                context={"token": token_address, "function": function_name}
            ) from e
