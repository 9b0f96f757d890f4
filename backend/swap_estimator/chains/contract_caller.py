"""
Deadline-bound read-only contract calls.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..core.exceptions import EstimateTimeoutError
from .rpc_client import RpcClient

logger = logging.getLogger(__name__)


def remaining_time(deadline: Optional[float]) -> Optional[float]:
    """Seconds left until ``deadline`` on the running loop's clock, or None."""
    if deadline is None:
        return None
    return deadline - asyncio.get_running_loop().time()


class ContractCaller:
    """
    Issues ``eth_call`` against the shared RPC client.

    Every call honors an absolute deadline expressed in event-loop time.
    Transport failures propagate as ``TransportError``; an expired
    deadline raises ``EstimateTimeoutError`` and cancels the network wait.
    """

    def __init__(self, rpc_client: RpcClient) -> None:
        self.rpc_client = rpc_client

    async def call(
        self,
        contract_address: str,
        payload: bytes,
        deadline: Optional[float] = None,
    ) -> bytes:
        """
        Call a contract at the chain head.

        Args:
            contract_address: Normalized contract address
            payload: ABI-encoded call data
            deadline: Absolute loop time after which the call is abandoned

        Returns:
            Raw return bytes

        Raises:
            TransportError: If the RPC round trip fails
            EstimateTimeoutError: If the deadline elapses first
        """
        timeout = remaining_time(deadline)
        if timeout is not None and timeout <= 0:
            raise EstimateTimeoutError(context={"contract": contract_address})

        try:
            return await asyncio.wait_for(
                self.rpc_client.eth_call(contract_address, payload),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Contract call timed out: {contract_address}",
                extra={'extra_data': {
                    'contract': contract_address,
                    'selector': payload[:4].hex(),
                    'timeout_seconds': timeout,
                }}
            )
            raise EstimateTimeoutError(context={"contract": contract_address}) from None
