"""
Uniswap V2 constant-product math on raw integer token units.
"""
from __future__ import annotations

import re
from decimal import Decimal

from ..core.exceptions import InsufficientLiquidityError, InvalidAmountError

# Uniswap V2 fee: 0.3%, i.e. 997/1000 of the input is retained
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

_DECIMAL_INTEGER = re.compile(r"[0-9]+")


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """
    Compute the output amount of a single Uniswap V2 swap.

    Mirrors ``UniswapV2Library.getAmountOut``:
    ``(amount_in * 997 * reserve_out) // (reserve_in * 1000 + amount_in * 997)``.
    Python ints are arbitrary precision, so nothing overflows and the
    single floor division matches the contract bit for bit.

    Args:
        amount_in: Input amount in raw token units
        reserve_in: Pool reserve of the input token
        reserve_out: Pool reserve of the output token

    Returns:
        Output amount in raw token units

    Raises:
        InvalidAmountError: If amount_in is not positive
        InsufficientLiquidityError: If either reserve is not positive
    """
    if amount_in <= 0:
        raise InvalidAmountError(details="Amount in must be positive")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidityError()

    amount_in_with_fee = amount_in * FEE_NUMERATOR
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * FEE_DENOMINATOR + amount_in_with_fee
    return numerator // denominator


def parse_amount(text: str) -> int:
    """
    Parse a base-10 amount string.

    Only ASCII digits are accepted: no sign, whitespace, underscores
    or exponent notation.

    Raises:
        InvalidAmountError: If the string is not a non-negative integer
    """
    if not isinstance(text, str) or _DECIMAL_INTEGER.fullmatch(text) is None:
        raise InvalidAmountError()
    # Decimal is exact and bypasses the str -> int digit limit
    return int(Decimal(text))


def is_valid_amount(text: str) -> bool:
    """Check that an amount string is a positive integer."""
    try:
        return parse_amount(text) > 0
    except InvalidAmountError:
        return False


def to_token_units(amount: int, decimals: int) -> int:
    """Scale a whole-token amount up to raw units (amount * 10**decimals)."""
    if decimals == 0:
        return amount
    return amount * 10 ** decimals


def from_token_units(amount: int, decimals: int) -> int:
    """Scale raw units down to whole tokens, truncating the fraction."""
    if decimals == 0:
        return amount
    return amount // 10 ** decimals
