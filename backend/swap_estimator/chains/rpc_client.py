"""
Shared JSON-RPC transport for read-only Ethereum calls.
"""
from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

import httpx
from httpx import AsyncClient

from ..core.exceptions import TransportError

logger = logging.getLogger(__name__)


@dataclass
class ProviderMetrics:
    """RPC provider performance metrics."""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    avg_response_time_ms: float = 0.0
    last_request_time: float = 0.0
    last_success_time: float = 0.0


class RpcClient:
    """
    JSON-RPC client over one pooled ``httpx.AsyncClient``.

    The underlying connection pool is safe for many in-flight requests,
    so a single instance is shared by every estimate for the life of the
    process. Failures are never retried here.
    """

    def __init__(
        self,
        rpc_url: str,
        timeout_seconds: float = 10.0,
        max_connections: int = 100,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.timeout_seconds = timeout_seconds
        self.max_connections = max_connections
        self.metrics = ProviderMetrics()
        self.client: Optional[AsyncClient] = None
        self._transport = transport
        self._request_ids = itertools.count(1)

    @property
    def is_initialized(self) -> bool:
        return self.client is not None

    @property
    def provider_host(self) -> str:
        """Endpoint host only; RPC URLs often embed API keys in the path."""
        return urlsplit(self.rpc_url).hostname or "unknown"

    async def initialize(self) -> None:
        """Create the pooled HTTP client."""
        if self.client is not None:
            return

        self.client = AsyncClient(
            timeout=httpx.Timeout(self.timeout_seconds, connect=min(self.timeout_seconds, 10.0)),
            limits=httpx.Limits(
                max_connections=self.max_connections,
                max_keepalive_connections=min(self.max_connections, 20),
            ),
            headers={"User-Agent": "Uniswap-Estimator/1.0.0"},
            transport=self._transport,
        )
        logger.info(
            "RPC client initialized for %s",
            self.provider_host,
            extra={'extra_data': {
                'provider': self.provider_host,
                'max_connections': self.max_connections,
                'timeout_seconds': self.timeout_seconds,
            }}
        )

    async def close(self) -> None:
        """Close the HTTP client and release pooled connections."""
        if self.client is not None:
            await self.client.aclose()
            self.client = None
            logger.info("RPC client closed")

    async def make_request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Make a single JSON-RPC request.

        Args:
            method: RPC method name
            params: RPC parameters

        Returns:
            The ``result`` member of the response

        Raises:
            TransportError: On any HTTP, protocol or remote error
        """
        if self.client is None:
            raise TransportError("RPC client is not initialized", method=method)

        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._request_ids),
        }

        start_time = time.monotonic()
        try:
            result = await self._execute_request(method, payload)
        except TransportError as e:
            self._record_failure()
            logger.warning(
                f"RPC request failed: {method}: {e.message}",
                extra={'extra_data': {
                    'method': method,
                    'provider': self.provider_host,
                    'error': e.message,
                }}
            )
            raise

        self._record_success((time.monotonic() - start_time) * 1000)
        return result

    async def _execute_request(self, method: str, payload: Dict[str, Any]) -> Any:
        try:
            response = await self.client.post(self.rpc_url, json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"{type(e).__name__}: {e}", method=method) from e

        if response.status_code != 200:
            raise TransportError(f"HTTP {response.status_code}", method=method)

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError("Malformed JSON-RPC response", method=method) from e

        if not isinstance(data, dict):
            raise TransportError("Malformed JSON-RPC response", method=method)

        if data.get("error") is not None:
            raise TransportError(f"RPC Error: {data['error']}", method=method)

        if "result" not in data:
            raise TransportError("JSON-RPC response has no result", method=method)

        return data["result"]

    async def eth_call(self, to: str, data: bytes, block: str = "latest") -> bytes:
        """
        Execute a read-only contract call.

        Args:
            to: Contract address
            data: ABI-encoded call payload
            block: Block tag, the chain head by default

        Returns:
            Raw return bytes
        """
        result = await self.make_request(
            "eth_call",
            [{"to": to, "data": "0x" + data.hex()}, block],
        )

        if not isinstance(result, str) or not result.startswith("0x"):
            raise TransportError(f"eth_call returned non-hex result: {result!r}", method="eth_call")

        try:
            return bytes.fromhex(result[2:])
        except ValueError as e:
            raise TransportError("eth_call returned invalid hex", method="eth_call") from e

    def _record_success(self, response_time_ms: float) -> None:
        now = time.time()
        metrics = self.metrics
        metrics.total_requests += 1
        metrics.successful_requests += 1
        metrics.last_request_time = now
        metrics.last_success_time = now
        if metrics.avg_response_time_ms == 0:
            metrics.avg_response_time_ms = response_time_ms
        else:
            # Exponential moving average
            metrics.avg_response_time_ms = (
                0.8 * metrics.avg_response_time_ms + 0.2 * response_time_ms
            )

    def _record_failure(self) -> None:
        self.metrics.total_requests += 1
        self.metrics.failed_requests += 1
        self.metrics.last_request_time = time.time()

    def get_health_status(self) -> Dict[str, Any]:
        """
        Get health status of the RPC provider.

        Returns:
            Provider status and request metrics
        """
        metrics = self.metrics
        success_rate = 0.0
        if metrics.total_requests > 0:
            success_rate = metrics.successful_requests / metrics.total_requests

        return {
            "provider": self.provider_host,
            "initialized": self.is_initialized,
            "total_requests": metrics.total_requests,
            "success_rate": round(success_rate, 3),
            "avg_response_time_ms": round(metrics.avg_response_time_ms, 2),
            "last_success_ago_seconds": (
                round(time.time() - metrics.last_success_time)
                if metrics.last_success_time > 0 else None
            ),
        }
