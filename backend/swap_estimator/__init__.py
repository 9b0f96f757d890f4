"""
Uniswap V2 swap estimator.

Reads pool reserves and token metadata over JSON-RPC and computes the
output amount of a single-pool swap off-chain.
"""

__version__ = "1.0.0"
