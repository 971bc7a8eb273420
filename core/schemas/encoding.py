"""
Fixed-width integer encoding shared by the commitment and the on-chain program.

Every multi-byte integer that crosses the program boundary is little-endian.
JSON surfaces carry 64-bit values as decimal strings and byte buffers as
arrays of small integers so that no client loses precision.
"""

from __future__ import annotations

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1


def u32_le(value: int) -> bytes:
    """Encode an unsigned 32-bit integer, little-endian."""
    if not 0 <= value <= U32_MAX:
        raise ValueError(f"Value {value} out of range for u32")
    return value.to_bytes(4, "little")


def u64_le(value: int) -> bytes:
    """Encode an unsigned 64-bit integer, little-endian."""
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"Value {value} out of range for u64")
    return value.to_bytes(8, "little")


def read_u32_le(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset:offset + 4], "little")


def read_u64_le(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset:offset + 8], "little")


def parse_u64(value: int | str) -> int:
    """
    Parse a u64 from an int or a decimal string.

    Floats and booleans are rejected; they cannot carry 64-bit values safely.
    """
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"Expected integer or decimal string, got {type(value).__name__}")
    if isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            raise ValueError(f"Invalid decimal string: {value!r}")
        value = int(text)
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"Value {value} out of range for u64")
    return value


def bytes_to_list(data: bytes) -> list[int]:
    return list(data)


__all__ = [
    "U32_MAX",
    "U64_MAX",
    "u32_le",
    "u64_le",
    "read_u32_le",
    "read_u64_le",
    "parse_u64",
    "bytes_to_list",
]
