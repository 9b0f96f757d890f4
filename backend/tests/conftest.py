"""
Shared fixtures for the estimator test suite.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from swap_estimator.core.settings import Settings

POOL = "0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"


@pytest.fixture
def pool_address() -> str:
    """USDC/WETH pair address (lowercase)."""
    return POOL


@pytest.fixture
def token0_address() -> str:
    """Lower-sorting token of the pair."""
    return USDC


@pytest.fixture
def token1_address() -> str:
    """Higher-sorting token of the pair."""
    return WETH


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings that never touch a real provider or the log directory."""
    return Settings(
        ethereum_rpc_url="http://localhost:8545",
        environment="development",
        request_timeout=5.0,
        log_dir=tmp_path / "logs",
        log_to_file=False,
    )
