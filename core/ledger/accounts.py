"""
On-Chain Account Decoding

Fixed-offset decoding of receipt accounts written by the pack program.

Receipt layout (78 bytes):
    [0]       format discriminator
    [1..33]   campaign address
    [33..65]  buyer address
    [65..69]  pack index, u32 little-endian
    [69]      claimed flag (1 = claimed)
    [70..78]  nonce, u64 little-endian
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from solders.pubkey import Pubkey

from core.schemas.encoding import read_u32_le, read_u64_le


RECEIPT_ACCOUNT_SIZE = 78


@dataclass(frozen=True)
class ReceiptAccount:
    """Decoded receipt: proof of purchase, and of redemption once claimed."""
    discriminator: int
    campaign: Pubkey
    buyer: Pubkey
    pack_index: int
    is_claimed: bool
    nonce: int


def decode_receipt(data: bytes) -> Optional[ReceiptAccount]:
    """
    Decode a receipt account.

    Returns None for buffers shorter than the receipt layout; a truncated
    account is treated the same as a missing one.
    """
    if len(data) < RECEIPT_ACCOUNT_SIZE:
        return None

    return ReceiptAccount(
        discriminator=data[0],
        campaign=Pubkey(data[1:33]),
        buyer=Pubkey(data[33:65]),
        pack_index=read_u32_le(data, 65),
        is_claimed=data[69] == 1,
        nonce=read_u64_le(data, 70),
    )


__all__ = [
    "RECEIPT_ACCOUNT_SIZE",
    "ReceiptAccount",
    "decode_receipt",
]
