"""
Tests for the HTTP surface: routing, validation and error bodies.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from swap_estimator.api.dependencies import get_estimator
from swap_estimator.api.schemas import EstimateResponse
from swap_estimator.core.bootstrap import create_app
from swap_estimator.core.exceptions import (
    BlockchainConnectionError,
    EstimateTimeoutError,
    PoolNotFoundError,
    TokenMismatchError,
)

POOL = "0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"


@pytest.fixture
def fake_estimator():
    """Estimator double returning a fixed amount."""
    estimator = MagicMock()
    estimator.estimate = AsyncMock(return_value=EstimateResponse(dst_amount="493579017198530649"))
    return estimator


@pytest.fixture
def app(settings, fake_estimator):
    """App wired to the estimator double; the lifespan is not run."""
    application = create_app(settings)
    application.dependency_overrides[get_estimator] = lambda: fake_estimator
    return application


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


def estimate_params(**overrides):
    params = {"pool": POOL, "src": USDC, "dst": WETH, "src_amount": "1000000000"}
    params.update(overrides)
    return params


class TestEstimateEndpoint:
    """GET /estimate."""

    @pytest.mark.parametrize("path", ["/estimate", "/api/v1/estimate"])
    def test_success(self, client, fake_estimator, settings, path):
        response = client.get(path, params=estimate_params())

        assert response.status_code == 200
        assert response.json() == {"dst_amount": "493579017198530649"}
        assert response.headers["X-Trace-ID"]
        assert "X-Process-Time" in response.headers

        request = fake_estimator.estimate.await_args.args[0]
        assert (request.pool, request.src, request.dst, request.src_amount) == (POOL, USDC, WETH, "1000000000")
        assert fake_estimator.estimate.await_args.kwargs["timeout"] == settings.request_timeout

    @pytest.mark.parametrize("overrides, message", [
        ({"pool": "0x123"}, "Invalid pool address"),
        ({"src": "not-an-address"}, "Invalid source token address"),
        ({"dst": ""}, "Invalid destination token address"),
        ({"pool": "0x123", "src_amount": "0"}, "Invalid pool address"),
        ({"dst": USDC.upper().replace("0X", "0x")}, "Invalid token pair"),
    ])
    def test_invalid_address(self, client, fake_estimator, overrides, message):
        response = client.get("/estimate", params=estimate_params(**overrides))

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "INVALID_ADDRESS"
        assert body["message"] == message
        assert body["trace_id"] == response.headers["X-Trace-ID"]
        fake_estimator.estimate.assert_not_awaited()

    @pytest.mark.parametrize("overrides, details", [
        ({"pool": "0x123"}, "Pool address must be a valid Ethereum address (42 characters)"),
        ({"src": "0x123"}, "Source token address must be a valid Ethereum address"),
        ({"dst": "0x123"}, "Destination token address must be a valid Ethereum address"),
    ])
    def test_invalid_address_details(self, client, overrides, details):
        response = client.get("/estimate", params=estimate_params(**overrides))

        assert response.status_code == 400
        assert response.json()["details"] == details

    def test_amount_beyond_int_string_limit(self, client, fake_estimator):
        amount = "9" * 5000
        response = client.get("/estimate", params=estimate_params(src_amount=amount))

        assert response.status_code == 200
        assert fake_estimator.estimate.await_args.args[0].src_amount == amount

    @pytest.mark.parametrize("amount", ["", "0", "-1", "1.0", "1e18", "0x10"])
    def test_invalid_amount(self, client, fake_estimator, amount):
        response = client.get("/estimate", params=estimate_params(src_amount=amount))

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_AMOUNT"
        fake_estimator.estimate.assert_not_awaited()

    def test_missing_parameters(self, client):
        response = client.get("/estimate")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid pool address"

    @pytest.mark.parametrize("error, status, code", [
        (PoolNotFoundError(), 404, "POOL_NOT_FOUND"),
        (TokenMismatchError(), 400, "TOKEN_MISMATCH"),
        (BlockchainConnectionError(), 503, "BLOCKCHAIN_CONNECTION_ERROR"),
        (EstimateTimeoutError(), 408, "TIMEOUT"),
    ])
    def test_pipeline_errors(self, client, fake_estimator, error, status, code):
        fake_estimator.estimate.side_effect = error
        response = client.get("/estimate", params=estimate_params())

        assert response.status_code == status
        body = response.json()
        assert body["code"] == code
        assert body["message"] == error.default_message
        assert body["details"] == error.default_details

    def test_unexpected_error_is_generic(self, client, fake_estimator):
        fake_estimator.estimate.side_effect = RuntimeError("secret internals")
        response = client.get("/estimate", params=estimate_params(), headers={"X-Trace-ID": "trace-500"})

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "INTERNAL_ERROR"
        assert body["message"] == "Internal server error"
        assert "secret" not in response.text
        assert body["trace_id"] == "trace-500"
        assert response.headers["X-Trace-ID"] == "trace-500"

    def test_trace_id_is_echoed(self, client):
        response = client.get("/estimate", params=estimate_params(), headers={"X-Trace-ID": "trace-abc"})
        assert response.headers["X-Trace-ID"] == "trace-abc"


class TestServiceEndpoints:
    """Health, readiness, root and unknown routes."""

    @pytest.mark.parametrize("path", ["/health", "/api/v1/health"])
    def test_health(self, client, settings, path):
        response = client.get(path)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == settings.version
        assert body["uptime_seconds"] >= 0

    def test_not_ready_without_rpc_client(self, client):
        response = client.get("/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"

    def test_root_lists_endpoints(self, client):
        body = client.get("/").json()
        assert body["endpoints"]["estimate"].startswith("/estimate?pool=")
        assert body["endpoints"]["health"] == "/health"

    def test_unknown_route(self, client):
        response = client.get("/nope")

        assert response.status_code == 404
        assert response.json()["code"] == "HTTP_ERROR"


class TestLifespan:
    """Startup and shutdown wiring."""

    def test_rpc_client_lifecycle(self, settings):
        app = create_app(settings)

        with TestClient(app) as client:
            rpc_client = app.state.rpc_client
            assert rpc_client.is_initialized
            assert app.state.estimator is not None

            response = client.get("/ready")
            assert response.status_code == 200
            body = response.json()
            assert body["status"] == "ready"
            assert body["rpc"]["provider"] == "localhost"
            assert body["rpc"]["initialized"] is True

        assert not rpc_client.is_initialized
        assert app.state.estimator is None
