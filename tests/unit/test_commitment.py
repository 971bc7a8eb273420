"""
Pack Commitment Unit Tests
Tests for core/merkle/commitment.py
"""
import hashlib

import pytest

from core.merkle.commitment import (
    LEAF_SIZE,
    PackCommitment,
    commit_packs,
    encode_leaf,
    pack_leaf,
    verify_pack,
)
from core.merkle.merkle_tree import ZERO_LEAF, merkle_parent
from core.schemas.campaign import Pack

from fixtures.common import make_pack


class TestLeafEncoding:
    """The 44-byte leaf preimage."""

    def test_layout(self):
        salt = bytes(range(32))
        encoded = encode_leaf(5, 1000, salt)

        assert len(encoded) == LEAF_SIZE
        assert encoded[:4] == (5).to_bytes(4, "little")
        assert encoded[4:12] == (1000).to_bytes(8, "little")
        assert encoded[12:] == salt

    def test_leaf_is_sha256_of_preimage(self):
        salt = b"\x11" * 32
        assert pack_leaf(0, 7, salt) == hashlib.sha256(encode_leaf(0, 7, salt)).digest()

    def test_salt_must_be_32_bytes(self):
        with pytest.raises(ValueError):
            encode_leaf(0, 1, b"short")


class TestFourPackScenario:
    """A four-pack campaign end to end."""

    def setup_method(self):
        self.packs = [make_pack(i, reward_amount=100 * (i + 1)) for i in range(4)]
        self.commitment = PackCommitment(self.packs)

    def test_root_matches_manual_construction(self):
        leaves = [pack_leaf(p.index, p.reward_amount, p.salt) for p in self.packs]
        expected = merkle_parent(
            merkle_parent(leaves[0], leaves[1]),
            merkle_parent(leaves[2], leaves[3]),
        )
        assert self.commitment.root == expected
        assert commit_packs(self.packs) == expected

    def test_each_proof_verifies(self):
        for pack in self.packs:
            proof = self.commitment.proof(pack.index)
            assert len(proof.siblings) == 2
            assert verify_pack(pack, proof.siblings, self.commitment.root)

    def test_changed_amount_fails(self):
        proof = self.commitment.proof(2)
        forged = self.packs[2].model_copy(update={"reward_amount": 999_999})
        assert not self.commitment.verify(forged, proof.siblings)

    def test_changed_salt_fails(self):
        proof = self.commitment.proof(1)
        forged = self.packs[1].model_copy(update={"salt": b"\x00" * 32})
        assert not self.commitment.verify(forged, proof.siblings)

    def test_changed_index_fails(self):
        proof = self.commitment.proof(2)
        for index in (0, 3):
            forged = self.packs[2].model_copy(update={"index": index})
            assert not self.commitment.verify(forged, proof.siblings)
            assert not verify_pack(forged, proof.siblings, self.commitment.root)

    def test_proof_for_other_index_fails(self):
        proof = self.commitment.proof(0)
        assert not self.commitment.verify(self.packs[1], proof.siblings)

    def test_input_order_does_not_matter(self):
        shuffled = [self.packs[2], self.packs[0], self.packs[3], self.packs[1]]
        assert PackCommitment(shuffled).root == self.commitment.root


class TestCommitmentValidation:
    """Pack sets that cannot be committed."""

    def test_empty_rejected(self):
        with pytest.raises(ValueError, match="empty"):
            PackCommitment([])

    def test_gap_rejected(self):
        with pytest.raises(ValueError, match="contiguous"):
            PackCommitment([make_pack(0), make_pack(2)])

    def test_duplicate_rejected(self):
        with pytest.raises(ValueError):
            PackCommitment([make_pack(0), make_pack(0), make_pack(1)])

    def test_proof_beyond_real_packs_raises(self):
        commitment = PackCommitment([make_pack(i) for i in range(3)])
        with pytest.raises(IndexError):
            commitment.proof(3)

    def test_single_pack_has_zero_sibling(self):
        pack = make_pack(0)
        commitment = PackCommitment([pack])
        proof = commitment.proof(0)
        assert proof.siblings == [ZERO_LEAF]
        assert commitment.pack_count == 1

    def test_salt_length_enforced_on_pack(self):
        with pytest.raises(ValueError):
            Pack(index=0, tier="common", reward_amount=1, salt=b"\x01" * 31)
