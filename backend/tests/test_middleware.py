"""
Tests for request tracing middleware.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from swap_estimator.core.logging_config import get_trace_id
from swap_estimator.core.middleware import RequestTracingMiddleware


def make_request(trace_id: str) -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "path": "/estimate",
        "query_string": b"",
        "headers": [(b"x-trace-id", trace_id.encode())],
        "client": ("127.0.0.1", 50000),
    })


class TestRequestTracingMiddleware:
    """Trace id lifecycle around one request."""

    @pytest.fixture
    def middleware(self):
        return RequestTracingMiddleware(app=MagicMock())

    @pytest.mark.asyncio
    async def test_sets_headers_and_resets_trace_id(self, middleware):
        seen = {}

        async def call_next(request):
            seen["trace_id"] = get_trace_id()
            return PlainTextResponse("ok")

        response = await middleware.dispatch(make_request("trace-ok"), call_next)

        assert seen["trace_id"] == "trace-ok"
        assert response.headers["X-Trace-ID"] == "trace-ok"
        assert float(response.headers["X-Process-Time"]) >= 0
        assert get_trace_id() != "trace-ok"

    @pytest.mark.asyncio
    async def test_resets_trace_id_when_handler_raises(self, middleware):
        async def call_next(request):
            raise RuntimeError("boom")

        request = make_request("trace-fail")
        with pytest.raises(RuntimeError):
            await middleware.dispatch(request, call_next)

        assert get_trace_id() != "trace-fail"
        assert request.state.trace_id == "trace-fail"
