"""
FastAPI middleware for request tracing.
"""
from __future__ import annotations

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging_config import reset_trace_id, set_trace_id

logger = logging.getLogger(__name__)


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns a trace ID to each request and logs its timing.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request with tracing and timing.

        Args:
            request: Incoming request
            call_next: Next middleware/handler

        Returns:
            Response with trace headers
        """
        trace_id = set_trace_id(request.headers.get("X-Trace-ID"))
        request.state.trace_id = trace_id
        start_time = time.monotonic()

        logger.debug(
            f"Request started: {request.method} {request.url.path}",
            extra={'extra_data': {
                'method': request.method,
                'path': request.url.path,
                'query_params': str(request.query_params),
                'client_ip': request.client.host if request.client else "unknown",
            }}
        )

        try:
            response = await call_next(request)
            process_time_ms = round((time.monotonic() - start_time) * 1000, 2)

            response.headers["X-Trace-ID"] = trace_id
            response.headers["X-Process-Time"] = str(process_time_ms)

            logger.info(
                f"{response.status_code} - {request.method} {request.url.path} ({process_time_ms}ms)",
                extra={'extra_data': {
                    'status_code': response.status_code,
                    'process_time_ms': process_time_ms,
                }}
            )
            return response
        finally:
            reset_trace_id()
