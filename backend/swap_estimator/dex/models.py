"""
On-chain state snapshots used by a single estimate.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenInfo:
    """ERC20 token metadata."""
    address: str
    decimals: int
    symbol: str


@dataclass(frozen=True)
class PoolReserves:
    """Current state of a Uniswap V2 pair."""
    reserve0: int
    reserve1: int
    token0: str
    token1: str
    block_timestamp_last: int


@dataclass(frozen=True)
class SwapCalculation:
    """Inputs to the swap formula, oriented in -> out."""
    amount_in: int
    reserve_in: int
    reserve_out: int
    token_in: TokenInfo
    token_out: TokenInfo
