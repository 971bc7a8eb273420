"""
Ledger Gateway Unit Tests
Tests for core/ledger/gateway.py against the in-process RPC double.

Read failures normalize to None/False; only activation-tx building raises.
"""
import asyncio
import base64

import pytest
from solders.signature import Signature
from solders.transaction import Transaction

from core.ledger.addresses import campaign_address
from core.ledger.gateway import LedgerGateway, load_keypair
from core.schemas.errors import (
    LedgerConfigurationException,
    LedgerUnavailableException,
)

from fixtures.common import (
    AUTHORITY,
    BLOCKHASH,
    BUYER,
    FEE_RECIPIENT,
    FEE_RECIPIENT_SECRET,
    PROGRAM_ID,
    REWARD_MINT,
    FakeRpcClient,
    make_ledger_config,
    make_signature,
)


CAMPAIGN, _ = campaign_address(PROGRAM_ID, 11)


class TestKeypairLoading:
    def test_loads_json_array(self):
        assert load_keypair(FEE_RECIPIENT_SECRET).pubkey() == FEE_RECIPIENT.pubkey()

    @pytest.mark.parametrize("secret", ["not json", "[1, 2, 3]", "{}"])
    def test_invalid_secret_is_config_error(self, secret):
        with pytest.raises(LedgerConfigurationException):
            load_keypair(secret)

    def test_gateway_exposes_fee_recipient(self, gateway):
        assert gateway.fee_recipient == FEE_RECIPIENT.pubkey()
        assert gateway.program_id == PROGRAM_ID


class TestGetReceipt:
    """Receipt lookups."""

    def test_existing_receipt_decoded(self, gateway, rpc_client):
        rpc_client.put_receipt(CAMPAIGN, BUYER, nonce=4, pack_index=2)

        receipt = asyncio.run(gateway.get_receipt(CAMPAIGN, BUYER, 4))

        assert receipt is not None
        assert receipt.pack_index == 2
        assert receipt.buyer == BUYER
        assert receipt.nonce == 4
        assert receipt.is_claimed is False

    def test_missing_account_is_none(self, gateway):
        assert asyncio.run(gateway.get_receipt(CAMPAIGN, BUYER, 0)) is None

    def test_other_nonce_not_found(self, gateway, rpc_client):
        rpc_client.put_receipt(CAMPAIGN, BUYER, nonce=1, pack_index=0)
        assert asyncio.run(gateway.get_receipt(CAMPAIGN, BUYER, 2)) is None

    def test_rpc_failure_is_none(self, gateway, rpc_client):
        rpc_client.put_receipt(CAMPAIGN, BUYER, nonce=1, pack_index=0)
        rpc_client.fail = True
        assert asyncio.run(gateway.get_receipt(CAMPAIGN, BUYER, 1)) is None

    def test_truncated_account_is_none(self, gateway, rpc_client):
        address = rpc_client.put_receipt(CAMPAIGN, BUYER, nonce=1, pack_index=0)
        rpc_client.accounts[address] = rpc_client.accounts[address][:40]
        assert asyncio.run(gateway.get_receipt(CAMPAIGN, BUYER, 1)) is None


class TestVerifyTransaction:
    """Finality checks."""

    def test_successful_transaction(self, gateway, rpc_client):
        sig = make_signature(1)
        rpc_client.put_transaction(sig)
        assert asyncio.run(gateway.verify_transaction(sig)) is True

    def test_failed_transaction(self, gateway, rpc_client):
        sig = make_signature(2)
        rpc_client.put_transaction(sig, err={"InstructionError": [0, "Custom"]})
        assert asyncio.run(gateway.verify_transaction(sig)) is False

    def test_unknown_transaction(self, gateway):
        assert asyncio.run(gateway.verify_transaction(make_signature(3))) is False

    def test_malformed_signature(self, gateway, rpc_client):
        assert asyncio.run(gateway.verify_transaction("0" * 88)) is False
        assert rpc_client.calls == []

    def test_rpc_failure(self, gateway, rpc_client):
        sig = make_signature(4)
        rpc_client.put_transaction(sig)
        rpc_client.fail = True
        assert asyncio.run(gateway.verify_transaction(sig)) is False


class TestActivationTransaction:
    """Partially-signed initialize_campaign transaction."""

    def test_fee_recipient_signature_only(self, gateway):
        encoded = asyncio.run(
            gateway.build_initialize_campaign_tx(
                authority=AUTHORITY,
                reward_mint=REWARD_MINT,
                seed=11,
                merkle_root=b"\x05" * 32,
                pack_price=1000,
                total_packs=8,
            )
        )
        tx = Transaction.from_bytes(base64.b64decode(encoded))

        keys = tx.message.account_keys
        assert keys[0] == AUTHORITY
        assert keys[1] == FEE_RECIPIENT.pubkey()
        assert tx.message.recent_blockhash == BLOCKHASH
        assert tx.signatures[0] == Signature.default()
        assert tx.signatures[1] != Signature.default()

    def test_missing_fee_recipient_is_config_error(self, rpc_client):
        gateway = LedgerGateway(make_ledger_config(fee_recipient_secret=None), client=rpc_client)
        assert gateway.fee_recipient is None
        with pytest.raises(LedgerConfigurationException):
            asyncio.run(
                gateway.build_initialize_campaign_tx(AUTHORITY, REWARD_MINT, 1, b"\x00" * 32, 1, 1)
            )

    def test_blockhash_failure_is_unavailable(self, gateway, rpc_client):
        rpc_client.fail = True
        with pytest.raises(LedgerUnavailableException) as exc_info:
            asyncio.run(
                gateway.build_initialize_campaign_tx(AUTHORITY, REWARD_MINT, 1, b"\x00" * 32, 1, 1)
            )
        assert exc_info.value.retryable is True


def test_close_closes_client():
    client = FakeRpcClient()
    gateway = LedgerGateway(make_ledger_config(), client=client)
    asyncio.run(gateway.close())
    assert client.closed
