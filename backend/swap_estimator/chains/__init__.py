"""Ethereum JSON-RPC access: addresses, ABI codec, RPC client, contract calls."""
