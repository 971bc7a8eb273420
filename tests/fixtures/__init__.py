"""
Test fixtures package for PackVault tests.

- common.py: factories, well-known keys and the FakeRpcClient ledger double

Usage:
    from fixtures.common import FakeRpcClient, make_tiers
"""

from .common import (
    AUTHORITY,
    BUYER,
    FEE_RECIPIENT,
    OTHER_BUYER,
    PROGRAM_ID,
    REWARD_MINT,
    FakeRpcClient,
    encode_receipt,
    expected_campaign_address,
    make_ledger_config,
    make_pack,
    make_runtime_config,
    make_signature,
    make_tiers,
)

__all__ = [
    "AUTHORITY",
    "BUYER",
    "FEE_RECIPIENT",
    "OTHER_BUYER",
    "PROGRAM_ID",
    "REWARD_MINT",
    "FakeRpcClient",
    "encode_receipt",
    "expected_campaign_address",
    "make_ledger_config",
    "make_pack",
    "make_runtime_config",
    "make_signature",
    "make_tiers",
]
