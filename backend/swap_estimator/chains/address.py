"""
Address validation and normalization for EVM addresses.
"""
from __future__ import annotations

import re

from web3 import Web3

# 0x followed by 40 hex characters
ETH_ADDRESS_PATTERN = re.compile(r"0x[0-9a-fA-F]{40}")


def is_valid_address(address: str) -> bool:
    """
    Validate Ethereum address format.

    Args:
        address: Raw address string from the caller

    Returns:
        True if address is exactly 0x plus 40 hex digits (any case)
    """
    if not isinstance(address, str) or len(address) != 42:
        return False
    return ETH_ADDRESS_PATTERN.fullmatch(address) is not None


def normalize_address(address: str) -> str:
    """Convert address to its canonical lowercase form."""
    return address.lower()


def to_checksum_address(address: str) -> str:
    """EIP-55 checksum form, for display in logs only."""
    return Web3.to_checksum_address(normalize_address(address))
