"""
Global exception handlers.

Maps every failure to a ``{code, message, details, trace_id}`` body with
a stable status code. Unexpected errors never leak internal detail.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import EstimateTimeoutError, EstimatorError
from .logging_config import get_trace_id

logger = logging.getLogger(__name__)


def _trace_id(request: Request) -> str:
    # Context var is already reset when the catch-all handler runs
    return getattr(request.state, "trace_id", None) or get_trace_id()


def _request_context(request: Request) -> dict:
    return {
        "path": request.url.path,
        "method": request.method,
        "query_params": str(request.query_params),
        "client_ip": request.client.host if request.client else "unknown",
    }


def _error_response(status_code: int, code: str, message: str, details: str, trace_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "code": code,
            "message": message,
            "details": details,
            "trace_id": trace_id,
        },
        headers={"X-Trace-ID": trace_id},
    )


async def estimator_exception_handler(request: Request, exc: EstimatorError) -> JSONResponse:
    """
    Handle domain errors raised by the estimation pipeline.

    Args:
        request: FastAPI request object
        exc: Typed estimator error

    Returns:
        JSONResponse with the error's own status code
    """
    trace_id = _trace_id(request)
    exc.trace_id = trace_id

    log = logger.warning if exc.status_code >= 500 else logger.info
    log(
        f"Estimate failed: {exc.error_code} - {exc.message}",
        extra={'extra_data': {
            **_request_context(request),
            'error_code': exc.error_code,
            'status_code': exc.status_code,
            'context': exc.context,
        }}
    )

    return _error_response(exc.status_code, exc.error_code, exc.message, exc.details, trace_id)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions (404 for unknown routes, 405, ...)."""
    trace_id = _trace_id(request)

    logger.info(
        f"HTTP {exc.status_code}: {exc.detail}",
        extra={'extra_data': {**_request_context(request), 'status_code': exc.status_code}}
    )

    response = _error_response(exc.status_code, "HTTP_ERROR", str(exc.detail), "", trace_id)
    if getattr(exc, "headers", None):
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors with detailed context."""
    trace_id = _trace_id(request)

    logger.info(
        f"Validation error: {exc}",
        extra={'extra_data': {**_request_context(request), 'validation_errors': exc.errors()}}
    )

    return _error_response(422, "VALIDATION_ERROR", "Validation error", "Request validation failed", trace_id)


async def timeout_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle a bare asyncio timeout that escaped the pipeline."""
    trace_id = _trace_id(request)

    logger.warning(
        f"Request timeout: {exc}",
        extra={'extra_data': _request_context(request)}
    )

    return _error_response(
        EstimateTimeoutError.status_code,
        EstimateTimeoutError.error_code,
        EstimateTimeoutError.default_message,
        EstimateTimeoutError.default_details,
        trace_id,
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle uncaught exceptions with full logging and a generic body.

    Args:
        request: FastAPI request object
        exc: Exception that was raised

    Returns:
        JSONResponse with user-safe error message
    """
    trace_id = _trace_id(request)

    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {exc}",
        extra={'extra_data': {**_request_context(request), 'error_type': type(exc).__name__}},
        exc_info=exc
    )

    return _error_response(
        500,
        "INTERNAL_ERROR",
        "Internal server error",
        "An unexpected error occurred",
        trace_id,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(EstimatorError, estimator_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(asyncio.TimeoutError, timeout_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.debug("Exception handlers registered")


__all__ = [
    'estimator_exception_handler',
    'http_exception_handler',
    'validation_exception_handler',
    'timeout_exception_handler',
    'global_exception_handler',
    'register_exception_handlers',
]
