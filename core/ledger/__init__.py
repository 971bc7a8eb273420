"""
Ledger Gateway Module

Solana-facing reads and the activation transaction:
- addresses: program-derived campaign, receipt and vault addresses
- accounts: fixed-layout receipt decoding
- instructions: initialize_campaign payload and accounts
- gateway: async RPC access with failures normalized to "not found"
"""

from .accounts import RECEIPT_ACCOUNT_SIZE, ReceiptAccount, decode_receipt
from .addresses import (
    campaign_address,
    receipt_address,
    to_pubkey,
    vault_address,
)
from .gateway import LedgerGateway, load_keypair
from .instructions import (
    TOKEN_PROGRAM_ID,
    encode_initialize_campaign,
    initialize_campaign_instruction,
)

__all__ = [
    "RECEIPT_ACCOUNT_SIZE",
    "ReceiptAccount",
    "decode_receipt",
    "campaign_address",
    "receipt_address",
    "to_pubkey",
    "vault_address",
    "LedgerGateway",
    "load_keypair",
    "TOKEN_PROGRAM_ID",
    "encode_initialize_campaign",
    "initialize_campaign_instruction",
]
