"""Human-readable ABI function signatures.

Parses signatures such as ``function resolver(bytes32 node) external view returns (address)``,
encodes call data for them and decodes return data into the string forms used by callers.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Sequence, Tuple

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector, to_bytes, to_checksum_address

_SIGNATURE = re.compile(
    r"^\s*function\s+(?P<name>[A-Za-z_$][A-Za-z0-9_$]*)\s*"
    r"\((?P<inputs>[^()]*)\)"
    r"(?P<modifiers>[^()]*?)"
    r"(?:\s*returns\s*\((?P<outputs>[^()]*)\))?\s*$"
)

# Aliases resolved by solidity before computing selectors
_TYPE_ALIASES = {"uint": "uint256", "int": "int256", "byte": "bytes1"}


def _parse_params(params: str) -> Tuple[str, ...]:
    types = []
    for param in params.split(","):
        tokens = param.split()
        if not tokens:
            continue
        abi_type = tokens[0]
        types.append(_TYPE_ALIASES.get(abi_type, abi_type))
    return tuple(types)


@dataclass(frozen=True)
class FunctionSignature:
    name: str
    inputs: Tuple[str, ...]
    outputs: Tuple[str, ...]

    @property
    def canonical(self) -> str:
        return f"{self.name}({','.join(self.inputs)})"

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.canonical)

    def encode_call(self, args: Sequence[str]) -> bytes:
        """Build call data (selector followed by ABI encoded arguments).

        Raises:
            ValueError: If the number of arguments does not match the signature
        """
        if len(args) != len(self.inputs):
            raise ValueError(
                f"{self.canonical} expects {len(self.inputs)} argument(s), got {len(args)}"
            )
        values = [coerce_argument(t, a) for t, a in zip(self.inputs, args)]
        return self.selector + encode(list(self.inputs), values)

    def decode_output(self, data: bytes) -> Any:
        """Decode return data.

        Single return values are returned as a string, multiple values as a list of strings.
        """
        values = decode(list(self.outputs), data)
        formatted: List[str] = [
            format_value(t, v) for t, v in zip(self.outputs, values)
        ]
        if len(formatted) == 1:
            return formatted[0]
        return formatted


@lru_cache(maxsize=128)
def parse_signature(signature: str) -> FunctionSignature:
    """Parse a human-readable function signature.

    Args:
        signature: e.g. ``function content(bytes32 nodehash) view returns (bytes32)``

    Returns:
        FunctionSignature with canonical input and output types

    Raises:
        ValueError: If the signature cannot be parsed
    """
    match = _SIGNATURE.match(signature)
    if match is None:
        raise ValueError(f"Unsupported function signature: {signature!r}")
    return FunctionSignature(
        name=match.group("name"),
        inputs=_parse_params(match.group("inputs")),
        outputs=_parse_params(match.group("outputs") or ""),
    )


def coerce_argument(abi_type: str, value: str) -> Any:
    """Convert a string argument into the python value eth_abi expects for abi_type."""
    if abi_type == "address":
        return to_checksum_address(value)
    if abi_type.startswith("bytes"):
        return to_bytes(hexstr=value)
    if abi_type == "bool":
        return value.strip().lower() in ("true", "1")
    if abi_type.startswith(("uint", "int")):
        return int(value, 0)
    if abi_type == "string":
        return value
    raise ValueError(f"Unsupported argument type: {abi_type}")


def format_value(abi_type: str, value: Any) -> str:
    if abi_type == "address":
        return to_checksum_address(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
