"""Custom exceptions for the swap estimator."""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional


class EstimatorError(Exception):
    """Base exception for errors surfaced to API callers."""

    error_code = "UNKNOWN_ERROR"
    status_code = 500
    default_message = "Estimation failed"
    default_details = ""

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        trace_id: Optional[str] = None
    ):
        self.message = message or self.default_message
        self.details = details if details is not None else self.default_details
        self.context = context or {}
        self.trace_id = trace_id or str(uuid.uuid4())
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Build the public error body."""
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
            "trace_id": self.trace_id,
        }


class InvalidAddressError(EstimatorError):
    """Raised when a pool or token address is not a 0x-prefixed 20-byte hex string."""

    error_code = "INVALID_ADDRESS"
    status_code = 400
    default_message = "Invalid address"
    default_details = "Addresses must be valid Ethereum addresses (42 characters)"

    field_details = {
        "pool": "Pool address must be a valid Ethereum address (42 characters)",
        "source token": "Source token address must be a valid Ethereum address",
        "destination token": "Destination token address must be a valid Ethereum address",
    }

    @classmethod
    def for_field(cls, label: str) -> "InvalidAddressError":
        """Error for one named request field (pool, source token, ...)."""
        return cls(
            message=f"Invalid {label} address",
            details=cls.field_details.get(label, cls.default_details),
        )


class InvalidAmountError(EstimatorError):
    """Raised when the input amount is not a positive integer."""

    error_code = "INVALID_AMOUNT"
    status_code = 400
    default_message = "Invalid amount"
    default_details = "Amount must be a positive integer"


class PoolNotFoundError(EstimatorError):
    """Raised when the pool's reserve or token calls fail."""

    error_code = "POOL_NOT_FOUND"
    status_code = 404
    default_message = "Pool not found"
    default_details = "The specified pool address does not exist or is not a Uniswap V2 pair"


class BlockchainConnectionError(EstimatorError):
    """Raised when token metadata cannot be read from the chain."""

    error_code = "BLOCKCHAIN_CONNECTION_ERROR"
    status_code = 503
    default_message = "Blockchain connection error"
    default_details = "Unable to fetch current state from Ethereum network"


class TokenMismatchError(EstimatorError):
    """Raised when the requested tokens are not the pool's token pair."""

    error_code = "TOKEN_MISMATCH"
    status_code = 400
    default_message = "Token mismatch"
    default_details = "Provided tokens don't match the pool tokens"


class InsufficientLiquidityError(EstimatorError):
    """Raised when a relevant reserve is zero."""

    error_code = "INSUFFICIENT_LIQUIDITY"
    status_code = 400
    default_message = "Insufficient liquidity"
    default_details = "The pool does not have enough liquidity for this swap"


class EstimateTimeoutError(EstimatorError):
    """Raised when the request deadline elapses before all calls complete."""

    error_code = "TIMEOUT"
    status_code = 408
    default_message = "Request timeout"
    default_details = "The request took too long to process"


class TransportError(Exception):
    """Raised by the RPC client for any failed JSON-RPC round trip."""

    def __init__(self, message: str, method: Optional[str] = None):
        self.message = message
        self.method = method
        super().__init__(message)


class AbiDecodeError(Exception):
    """Raised when contract return data cannot be decoded."""

    pass


__all__ = [
    "EstimatorError",
    "InvalidAddressError",
    "InvalidAmountError",
    "PoolNotFoundError",
    "BlockchainConnectionError",
    "TokenMismatchError",
    "InsufficientLiquidityError",
    "EstimateTimeoutError",
    "TransportError",
    "AbiDecodeError",
]
