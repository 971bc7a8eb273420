"""
Common Test Fixtures

Factory functions and an in-process ledger double shared by all tests.

The FakeRpcClient mimics the subset of solana-py's AsyncClient used by the
ledger gateway; responses are SimpleNamespace objects shaped like solana-py
responses (``resp.value...``).
"""

from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace
from typing import Any, Optional

from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from core.config.runtime import LedgerConfig, RuntimeConfig
from core.ledger.addresses import campaign_address, receipt_address
from core.schemas.campaign import Pack, Tier
from core.schemas.encoding import u32_le, u64_le


PROGRAM_ID = Pubkey(bytes([7] * 32))
AUTHORITY = Pubkey(bytes([1] * 32))
REWARD_MINT = Pubkey(bytes([2] * 32))
BUYER = Pubkey(bytes([3] * 32))
OTHER_BUYER = Pubkey(bytes([4] * 32))

FEE_RECIPIENT = Keypair.from_seed(bytes([5] * 32))
FEE_RECIPIENT_SECRET = json.dumps(list(bytes(FEE_RECIPIENT)))

BLOCKHASH = Hash(bytes([9] * 32))


def make_signature(n: int = 0) -> str:
    """A well-formed base58 transaction signature, distinct per ``n``."""
    return str(FEE_RECIPIENT.sign_message(f"tx-{n}".encode()))


def make_tiers() -> list[Tier]:
    return [
        Tier(name="common", probability=0.7, min=100, max=200),
        Tier(name="rare", probability=0.25, min=500, max=1000),
        Tier(name="legendary", probability=0.05, min=5000, max=10000),
    ]


def make_pack(index: int, reward_amount: int = 100, salt_byte: Optional[int] = None) -> Pack:
    fill = index % 256 if salt_byte is None else salt_byte
    return Pack(index=index, tier="common", reward_amount=reward_amount, salt=bytes([fill] * 32))


def make_ledger_config(**overrides: Any) -> LedgerConfig:
    values: dict[str, Any] = {
        "program_id": str(PROGRAM_ID),
        "rpc_url": "http://localhost:8899",
        "fee_recipient_secret": FEE_RECIPIENT_SECRET,
    }
    values.update(overrides)
    return LedgerConfig(**values)


def make_runtime_config(**ledger_overrides: Any) -> RuntimeConfig:
    return RuntimeConfig(ledger=make_ledger_config(**ledger_overrides))


def encode_receipt(
    campaign: Pubkey,
    buyer: Pubkey,
    pack_index: int,
    nonce: int,
    is_claimed: bool = False,
    discriminator: int = 1,
) -> bytes:
    """Serialize a receipt account the way the on-chain program lays it out."""
    return (
        bytes([discriminator])
        + bytes(campaign)
        + bytes(buyer)
        + u32_le(pack_index)
        + bytes([1 if is_claimed else 0])
        + u64_le(nonce)
    )


class FakeRpcClient:
    """
    In-memory stand-in for ``solana.rpc.async_api.AsyncClient``.

    Accounts are keyed by address; transactions by signature string.
    Set ``fail`` to make every call raise, simulating an unreachable node.
    """

    def __init__(self) -> None:
        self.accounts: dict[Pubkey, bytes] = {}
        self.transactions: dict[str, Optional[dict[str, Any]]] = {}
        self.fail = False
        self.closed = False
        self.calls: list[str] = []

    # --- helpers used by tests ---

    def put_receipt(
        self,
        campaign: Pubkey,
        buyer: Pubkey,
        nonce: int,
        pack_index: int,
        is_claimed: bool = False,
    ) -> Pubkey:
        address, _ = receipt_address(PROGRAM_ID, campaign, buyer, nonce)
        self.accounts[address] = encode_receipt(campaign, buyer, pack_index, nonce, is_claimed)
        return address

    def put_transaction(self, signature: str, err: Optional[dict[str, Any]] = None) -> None:
        self.transactions[signature] = err

    def _check(self, name: str) -> None:
        self.calls.append(name)
        if self.fail:
            raise ConnectionError("RPC node unreachable")

    # --- AsyncClient surface ---

    async def get_account_info(self, pubkey: Pubkey, commitment: Any = None) -> SimpleNamespace:
        await asyncio.sleep(0)
        self._check("get_account_info")
        data = self.accounts.get(pubkey)
        if data is None:
            return SimpleNamespace(value=None)
        return SimpleNamespace(value=SimpleNamespace(data=data))

    async def get_transaction(
        self,
        signature: Signature,
        commitment: Any = None,
        max_supported_transaction_version: Optional[int] = None,
    ) -> SimpleNamespace:
        await asyncio.sleep(0)
        self._check("get_transaction")
        key = str(signature)
        if key not in self.transactions:
            return SimpleNamespace(value=None)
        meta = SimpleNamespace(err=self.transactions[key])
        return SimpleNamespace(value=SimpleNamespace(transaction=SimpleNamespace(meta=meta)))

    async def get_latest_blockhash(self, commitment: Any = None) -> SimpleNamespace:
        self._check("get_latest_blockhash")
        return SimpleNamespace(value=SimpleNamespace(blockhash=BLOCKHASH, last_valid_block_height=1))

    async def close(self) -> None:
        self.closed = True


def expected_campaign_address(seed: int) -> Pubkey:
    address, _ = campaign_address(PROGRAM_ID, seed)
    return address
