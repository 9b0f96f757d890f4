"""
Fixed contract interfaces and ABI encoding/decoding for read-only calls.

Only two mini-interfaces are ever used: the ERC20 metadata getters and
the Uniswap V2 pair getters. Selectors are derived once at import time.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from web3 import Web3

from ..core.exceptions import AbiDecodeError


# Size of one ABI head word
WORD_SIZE = 32

ERC20_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [
            {"internalType": "uint8", "name": "", "type": "uint8"}
        ],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "symbol",
        "outputs": [
            {"internalType": "string", "name": "", "type": "string"}
        ],
        "stateMutability": "view",
        "type": "function"
    }
]

PAIR_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [],
        "name": "getReserves",
        "outputs": [
            {"internalType": "uint112", "name": "reserve0", "type": "uint112"},
            {"internalType": "uint112", "name": "reserve1", "type": "uint112"},
            {"internalType": "uint32", "name": "blockTimestampLast", "type": "uint32"}
        ],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "token0",
        "outputs": [
            {"internalType": "address", "name": "", "type": "address"}
        ],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "token1",
        "outputs": [
            {"internalType": "address", "name": "", "type": "address"}
        ],
        "stateMutability": "view",
        "type": "function"
    }
]


@dataclass(frozen=True)
class ContractFunction:
    """A single view function: its canonical signature and 4-byte selector."""

    name: str
    input_types: Tuple[str, ...]
    output_types: Tuple[str, ...]
    selector: bytes = field(init=False, repr=False)

    def __post_init__(self) -> None:
        selector = bytes(Web3.keccak(text=self.signature)[:4])
        object.__setattr__(self, "selector", selector)

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @classmethod
    def from_abi(cls, entry: Dict[str, Any]) -> "ContractFunction":
        return cls(
            name=entry["name"],
            input_types=tuple(arg["type"] for arg in entry.get("inputs", [])),
            output_types=tuple(arg["type"] for arg in entry.get("outputs", [])),
        )


class ContractInterface:
    """
    Read-only view over a JSON ABI.

    Encodes call payloads by function name and decodes raw return data
    into Python values (ints, lowercase address strings, str).
    """

    def __init__(self, name: str, abi: List[Dict[str, Any]]) -> None:
        self.name = name
        functions = {
            entry["name"]: ContractFunction.from_abi(entry)
            for entry in abi
            if entry.get("type") == "function"
        }
        self.functions: Mapping[str, ContractFunction] = MappingProxyType(functions)

    def get_function(self, function_name: str) -> ContractFunction:
        try:
            return self.functions[function_name]
        except KeyError:
            raise ValueError(f"{self.name} has no function {function_name!r}") from None

    def encode_call(self, function_name: str, *args: Any) -> bytes:
        """
        Build the call payload for a function.

        Args:
            function_name: Name of a function in this interface
            *args: Positional arguments matching the declared input types

        Returns:
            4-byte selector followed by the ABI-encoded arguments
        """
        function = self.get_function(function_name)
        if len(args) != len(function.input_types):
            raise ValueError(
                f"{function.signature} takes {len(function.input_types)} arguments, got {len(args)}"
            )
        if not function.input_types:
            return function.selector
        return function.selector + encode(list(function.input_types), list(args))

    def decode_return(self, function_name: str, raw: bytes) -> Tuple[Any, ...]:
        """
        Decode raw return data for a function.

        Args:
            function_name: Name of a function in this interface
            raw: Bytes returned by eth_call

        Returns:
            Tuple of decoded values in declared output order

        Raises:
            AbiDecodeError: If data is empty, truncated or malformed
        """
        function = self.get_function(function_name)
        head_size = WORD_SIZE * len(function.output_types)

        if len(raw) < head_size:
            raise AbiDecodeError(
                f"{function.signature} returned {len(raw)} bytes, expected at least {head_size}"
            )

        try:
            values = decode(list(function.output_types), raw)
        except (DecodingError, UnicodeDecodeError) as e:
            raise AbiDecodeError(f"Cannot decode {function.signature} output: {e}") from e

        return tuple(
            value.lower() if type_name == "address" else value
            for type_name, value in zip(function.output_types, values)
        )


# Process-wide, immutable interface tables
ERC20_INTERFACE = ContractInterface("ERC20", ERC20_ABI)
PAIR_INTERFACE = ContractInterface("UniswapV2Pair", PAIR_ABI)
