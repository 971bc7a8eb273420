"""
Program Instructions

Encoding for the one instruction this service builds: initialize_campaign.

Payload (53 bytes):
    [0]       opcode (0)
    [1..9]    seed, u64 little-endian
    [9..41]   merkle root
    [41..49]  pack price in lamports, u64 little-endian
    [49..53]  total packs, u32 little-endian
"""

from __future__ import annotations

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYS_PROGRAM_ID

from core.ledger.addresses import campaign_address, vault_address
from core.schemas.encoding import u32_le, u64_le


TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")

INITIALIZE_CAMPAIGN_OPCODE = 0
INITIALIZE_CAMPAIGN_SIZE = 53


def encode_initialize_campaign(
    seed: int,
    merkle_root: bytes,
    pack_price: int,
    total_packs: int,
) -> bytes:
    """Build the initialize_campaign instruction payload."""
    if len(merkle_root) != 32:
        raise ValueError(f"Merkle root must be 32 bytes, got {len(merkle_root)}")
    return (
        bytes([INITIALIZE_CAMPAIGN_OPCODE])
        + u64_le(seed)
        + merkle_root
        + u64_le(pack_price)
        + u32_le(total_packs)
    )


def initialize_campaign_instruction(
    program_id: Pubkey,
    authority: Pubkey,
    fee_recipient: Pubkey,
    reward_mint: Pubkey,
    seed: int,
    merkle_root: bytes,
    pack_price: int,
    total_packs: int,
) -> Instruction:
    """
    Build the initialize_campaign instruction.

    Both the authority and the fee recipient must sign.
    """
    campaign, _ = campaign_address(program_id, seed)
    vault, _ = vault_address(program_id, campaign)

    accounts = [
        AccountMeta(pubkey=authority, is_signer=True, is_writable=True),
        AccountMeta(pubkey=fee_recipient, is_signer=True, is_writable=True),
        AccountMeta(pubkey=campaign, is_signer=False, is_writable=True),
        AccountMeta(pubkey=reward_mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=vault, is_signer=False, is_writable=True),
        AccountMeta(pubkey=SYS_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    data = encode_initialize_campaign(seed, merkle_root, pack_price, total_packs)
    return Instruction(program_id, data, accounts)


__all__ = [
    "TOKEN_PROGRAM_ID",
    "INITIALIZE_CAMPAIGN_OPCODE",
    "INITIALIZE_CAMPAIGN_SIZE",
    "encode_initialize_campaign",
    "initialize_campaign_instruction",
]
