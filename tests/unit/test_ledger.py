"""
Ledger Unit Tests
Tests for core/ledger/addresses.py, accounts.py and instructions.py
"""
import pytest
from solders.pubkey import Pubkey
from solders.system_program import ID as SYS_PROGRAM_ID

from core.ledger.accounts import RECEIPT_ACCOUNT_SIZE, decode_receipt
from core.ledger.addresses import (
    campaign_address,
    receipt_address,
    to_pubkey,
    vault_address,
)
from core.ledger.instructions import (
    INITIALIZE_CAMPAIGN_SIZE,
    TOKEN_PROGRAM_ID,
    encode_initialize_campaign,
    initialize_campaign_instruction,
)

from fixtures.common import (
    AUTHORITY,
    BUYER,
    FEE_RECIPIENT,
    OTHER_BUYER,
    PROGRAM_ID,
    REWARD_MINT,
    encode_receipt,
)


class TestAddresses:
    """Program-derived addresses."""

    def test_campaign_address_matches_seed_layout(self):
        expected = Pubkey.find_program_address(
            [b"campaign", (42).to_bytes(8, "little")], PROGRAM_ID
        )
        assert campaign_address(PROGRAM_ID, 42) == expected

    def test_campaign_address_is_deterministic_and_seed_specific(self):
        assert campaign_address(PROGRAM_ID, 1) == campaign_address(PROGRAM_ID, 1)
        assert campaign_address(PROGRAM_ID, 1)[0] != campaign_address(PROGRAM_ID, 2)[0]

    def test_receipt_address_depends_on_buyer_and_nonce(self):
        campaign, _ = campaign_address(PROGRAM_ID, 1)
        base, _ = receipt_address(PROGRAM_ID, campaign, BUYER, 0)

        assert receipt_address(PROGRAM_ID, campaign, BUYER, 1)[0] != base
        assert receipt_address(PROGRAM_ID, campaign, OTHER_BUYER, 0)[0] != base

    def test_receipt_address_seed_layout(self):
        campaign, _ = campaign_address(PROGRAM_ID, 1)
        expected = Pubkey.find_program_address(
            [b"receipt", bytes(campaign), bytes(BUYER), (9).to_bytes(8, "little")],
            PROGRAM_ID,
        )
        assert receipt_address(PROGRAM_ID, campaign, BUYER, 9) == expected

    def test_vault_address_seed_layout(self):
        campaign, _ = campaign_address(PROGRAM_ID, 1)
        expected = Pubkey.find_program_address([b"vault", bytes(campaign)], PROGRAM_ID)
        assert vault_address(PROGRAM_ID, campaign) == expected

    def test_to_pubkey(self):
        assert to_pubkey(str(AUTHORITY)) == AUTHORITY
        assert to_pubkey(AUTHORITY) is AUTHORITY
        with pytest.raises(ValueError, match="Invalid address"):
            to_pubkey("not-an-address")


class TestReceiptDecoding:
    """Fixed 78-byte receipt layout."""

    def test_decode_full_receipt(self):
        campaign, _ = campaign_address(PROGRAM_ID, 3)
        data = encode_receipt(campaign, BUYER, pack_index=17, nonce=2**40, is_claimed=True)
        assert len(data) == RECEIPT_ACCOUNT_SIZE

        receipt = decode_receipt(data)
        assert receipt is not None
        assert receipt.discriminator == 1
        assert receipt.campaign == campaign
        assert receipt.buyer == BUYER
        assert receipt.pack_index == 17
        assert receipt.is_claimed is True
        assert receipt.nonce == 2**40

    def test_trailing_bytes_ignored(self):
        campaign, _ = campaign_address(PROGRAM_ID, 3)
        data = encode_receipt(campaign, BUYER, 1, 1) + b"\x00" * 10
        assert decode_receipt(data).pack_index == 1

    def test_short_buffer_decodes_to_none(self):
        campaign, _ = campaign_address(PROGRAM_ID, 3)
        data = encode_receipt(campaign, BUYER, 1, 1)
        assert decode_receipt(data[:-1]) is None
        assert decode_receipt(b"") is None


class TestInitializeCampaignInstruction:
    """initialize_campaign payload and account list."""

    def test_payload_layout(self):
        root = bytes(range(32))
        data = encode_initialize_campaign(seed=5, merkle_root=root, pack_price=1_000_000, total_packs=300)

        assert len(data) == INITIALIZE_CAMPAIGN_SIZE
        assert data[0] == 0
        assert data[1:9] == (5).to_bytes(8, "little")
        assert data[9:41] == root
        assert data[41:49] == (1_000_000).to_bytes(8, "little")
        assert data[49:53] == (300).to_bytes(4, "little")

    def test_root_length_enforced(self):
        with pytest.raises(ValueError):
            encode_initialize_campaign(1, b"\x00" * 31, 1, 1)

    def test_accounts_in_program_order(self):
        ix = initialize_campaign_instruction(
            program_id=PROGRAM_ID,
            authority=AUTHORITY,
            fee_recipient=FEE_RECIPIENT.pubkey(),
            reward_mint=REWARD_MINT,
            seed=5,
            merkle_root=b"\x01" * 32,
            pack_price=10,
            total_packs=4,
        )
        campaign, _ = campaign_address(PROGRAM_ID, 5)
        vault, _ = vault_address(PROGRAM_ID, campaign)

        metas = [(m.pubkey, m.is_signer, m.is_writable) for m in ix.accounts]
        assert metas == [
            (AUTHORITY, True, True),
            (FEE_RECIPIENT.pubkey(), True, True),
            (campaign, False, True),
            (REWARD_MINT, False, False),
            (vault, False, True),
            (SYS_PROGRAM_ID, False, False),
            (TOKEN_PROGRAM_ID, False, False),
        ]
        assert ix.program_id == PROGRAM_ID
        assert bytes(ix.data) == encode_initialize_campaign(5, b"\x01" * 32, 10, 4)
