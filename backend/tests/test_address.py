"""
Tests for address validation and normalization.
"""

from __future__ import annotations

import pytest

from swap_estimator.chains.address import (
    is_valid_address,
    normalize_address,
    to_checksum_address,
)


class TestIsValidAddress:
    """Address shape checks."""

    @pytest.mark.parametrize("address", [
        "0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc",
        "0xB4E16D0168E52D35CACD2C6185B44281EC28C9DC",
        "0xB4e16d0168e52d35CaCD2c6185b44281Ec28C9Dc",
        "0x0000000000000000000000000000000000000000",
    ])
    def test_accepts_any_case(self, address):
        assert is_valid_address(address)

    @pytest.mark.parametrize("address", [
        "",
        "0x",
        "b4e16d0168e52d35cacd2c6185b44281ec28c9dc",
        "0Xb4e16d0168e52d35cacd2c6185b44281ec28c9dc",
        "0xb4e16d0168e52d35cacd2c6185b44281ec28c9d",
        "0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc0",
        "0xg4e16d0168e52d35cacd2c6185b44281ec28c9dc",
        " 0xb4e16d0168e52d35cacd2c6185b44281ec28c9d",
        "0xb4e16d0168e52d35cacd2c6185b44281ec28c9d\n",
    ])
    def test_rejects_malformed(self, address):
        assert not is_valid_address(address)

    def test_rejects_non_string(self):
        assert not is_valid_address(None)
        assert not is_valid_address(0x1234)


class TestNormalizeAddress:
    """Canonical lowercase form."""

    def test_lowercases(self):
        mixed = "0xB4e16d0168e52d35CaCD2c6185b44281Ec28C9Dc"
        assert normalize_address(mixed) == "0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc"

    def test_idempotent(self, pool_address):
        assert normalize_address(normalize_address(pool_address)) == pool_address

    def test_checksum_round_trips_to_lowercase(self, pool_address):
        checksummed = to_checksum_address(pool_address)
        assert checksummed == "0xB4e16d0168e52d35CaCD2c6185b44281Ec28C9Dc"
        assert normalize_address(checksummed) == pool_address
