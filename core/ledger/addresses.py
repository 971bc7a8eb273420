"""
Program-Derived Addresses

Deterministic account addresses for the pack program. An address is found
by hashing the seeds with the program id and searching for a bump that puts
the result off the ed25519 curve, so nobody can hold its private key.

Seed layouts (all integers little-endian):
    campaign: ["campaign", seed_u64]
    receipt:  ["receipt", campaign, buyer, nonce_u64]
    vault:    ["vault", campaign]
"""

from __future__ import annotations

from solders.pubkey import Pubkey

from core.schemas.encoding import u64_le


CAMPAIGN_SEED = b"campaign"
RECEIPT_SEED = b"receipt"
VAULT_SEED = b"vault"


def to_pubkey(value: str | Pubkey) -> Pubkey:
    """
    Parse a base58 address.

    Raises:
        ValueError: If the string is not a valid 32-byte address
    """
    if isinstance(value, Pubkey):
        return value
    try:
        return Pubkey.from_string(value)
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Invalid address {value!r}: {exc}") from exc


def campaign_address(program_id: Pubkey, seed: int) -> tuple[Pubkey, int]:
    """Derive the campaign account address and bump from the campaign seed."""
    return Pubkey.find_program_address([CAMPAIGN_SEED, u64_le(seed)], program_id)


def receipt_address(
    program_id: Pubkey,
    campaign: Pubkey,
    buyer: Pubkey,
    nonce: int,
) -> tuple[Pubkey, int]:
    """Derive the receipt account address for one purchase by ``buyer``."""
    return Pubkey.find_program_address(
        [RECEIPT_SEED, bytes(campaign), bytes(buyer), u64_le(nonce)],
        program_id,
    )


def vault_address(program_id: Pubkey, campaign: Pubkey) -> tuple[Pubkey, int]:
    """Derive the campaign's SOL vault address."""
    return Pubkey.find_program_address([VAULT_SEED, bytes(campaign)], program_id)


__all__ = [
    "CAMPAIGN_SEED",
    "RECEIPT_SEED",
    "VAULT_SEED",
    "to_pubkey",
    "campaign_address",
    "receipt_address",
    "vault_address",
]
