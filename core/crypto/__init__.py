"""
Core cryptographic utilities.

Hashing primitives shared by the commitment engine and the ledger gateway.
"""
from .hashing import (
    sha256,
    hash_concat,
    to_hex,
    from_hex,
)

__all__ = [
    "sha256",
    "hash_concat",
    "to_hex",
    "from_hex",
]
