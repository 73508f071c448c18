"""
Byte encoding helpers for the serde-compatible JSON wire format.

Byte sequences travel as JSON arrays of integers; decoders also accept
``0x``-prefixed hex strings.
"""

from __future__ import annotations

from typing import Any, List, Optional

from eth_utils import to_checksum_address

from aligned_sdk.protocol.errors import SerializationError


def bytes_to_json(data: bytes) -> List[int]:
    return list(data)


def optional_bytes_to_json(data: Optional[bytes]) -> Optional[List[int]]:
    return None if data is None else list(data)


def bytes_from_json(value: Any, *, name: str, length: Optional[int] = None) -> bytes:
    """Decode a byte field; enforces ``length`` when given."""
    if isinstance(value, str):
        text = value[2:] if value.startswith(("0x", "0X")) else value
        try:
            out = bytes.fromhex(text)
        except ValueError as e:
            raise SerializationError(f"Field '{name}' is not valid hex") from e
    elif isinstance(value, list):
        try:
            out = bytes(value)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Field '{name}' is not a byte array") from e
    else:
        raise SerializationError(f"Field '{name}' has unsupported type {type(value).__name__}")

    if length is not None and len(out) != length:
        raise SerializationError(f"Field '{name}' must be {length} bytes, got {len(out)}")
    return out


def optional_bytes_from_json(value: Any, *, name: str) -> Optional[bytes]:
    if value is None:
        return None
    return bytes_from_json(value, name=name)


def address_to_json(addr: bytes) -> str:
    return "0x" + addr.hex()


def address_from_str(value: str) -> bytes:
    """Parse a 20-byte account address from hex (checksum or lowercase)."""
    try:
        checksummed = to_checksum_address(value)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Invalid address: {value}") from e
    return bytes.fromhex(checksummed[2:])


def quantity_to_json(value: int) -> str:
    return hex(value)


def quantity_from_json(value: Any, *, name: str) -> int:
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 16)
        except ValueError as e:
            raise SerializationError(f"Field '{name}' is not a hex quantity") from e
    raise SerializationError(f"Field '{name}' has unsupported type {type(value).__name__}")
