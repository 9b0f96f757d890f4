"""Uniswap V2 pair reads and swap math."""
