"""
Module 02 - Pack Commitment
Salted pack leaves and the campaign commitment built over them.

Leaf layout (44 bytes, hashed with SHA-256):
    [0..4]   pack index, u32 little-endian
    [4..12]  reward amount, u64 little-endian
    [12..44] salt, 32 bytes

The on-chain program recomputes this leaf on claim, so byte order and field
order are part of the wire contract.
"""
from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import sha256
from core.merkle.merkle_tree import (
    MerkleProof,
    build_merkle_levels,
    build_merkle_proof,
    verify_merkle_proof,
)
from core.schemas.campaign import Pack
from core.schemas.encoding import u32_le, u64_le


LEAF_SIZE = 44


def encode_leaf(index: int, reward_amount: int, salt: bytes) -> bytes:
    """Serialize the committed fields of a pack into the 44-byte leaf preimage."""
    if len(salt) != 32:
        raise ValueError(f"Salt must be 32 bytes, got {len(salt)}")
    return u32_le(index) + u64_le(reward_amount) + salt


def pack_leaf(index: int, reward_amount: int, salt: bytes) -> bytes:
    """Leaf hash: sha256(index_le32 || amount_le64 || salt)."""
    return sha256(encode_leaf(index, reward_amount, salt))


class PackCommitment:
    """
    Merkle commitment over a campaign's packs.

    Packs must cover indices 0..n-1 with no gaps or duplicates; they are
    ordered by index before hashing. All levels are kept in memory so
    proofs can be derived; only the root is meant to be persisted.

    Example:
        >>> commitment = PackCommitment(packs)
        >>> proof = commitment.proof(2)
        >>> commitment.verify(packs[2], proof.siblings)
        True
    """

    def __init__(self, packs: Sequence[Pack]) -> None:
        if len(packs) == 0:
            raise ValueError("Cannot commit to an empty pack set")

        ordered = sorted(packs, key=lambda p: p.index)
        for expected, pack in enumerate(ordered):
            if pack.index != expected:
                raise ValueError(
                    f"Pack indices must be contiguous from 0; "
                    f"expected {expected}, found {pack.index}"
                )

        self._packs = ordered
        self._levels = build_merkle_levels(
            [pack_leaf(p.index, p.reward_amount, p.salt) for p in ordered]
        )

    @property
    def root(self) -> bytes:
        return self._levels[-1][0]

    @property
    def levels(self) -> list[list[bytes]]:
        return self._levels

    @property
    def pack_count(self) -> int:
        return len(self._packs)

    def proof(self, index: int) -> MerkleProof:
        """
        Inclusion proof for the pack at ``index``.

        Raises:
            IndexError: If no pack has this index
        """
        if index < 0 or index >= len(self._packs):
            raise IndexError(
                f"Pack index {index} out of range for {len(self._packs)} packs"
            )
        return build_merkle_proof(self._levels, index)

    def verify(self, pack: Pack, siblings: Sequence[bytes]) -> bool:
        """Check a pack and sibling path against this commitment's root."""
        return verify_pack(pack, siblings, self.root)


def verify_pack(pack: Pack, siblings: Sequence[bytes], root: bytes) -> bool:
    """
    Verify a pack against a root the way the on-chain program does it.

    The leaf is recomputed from the pack's committed fields, so any change
    to index, amount or salt fails verification.
    """
    proof = MerkleProof(
        leaf=pack_leaf(pack.index, pack.reward_amount, pack.salt),
        index=pack.index,
        siblings=list(siblings),
        root=root,
    )
    return verify_merkle_proof(proof)


def commit_packs(packs: Sequence[Pack]) -> bytes:
    """Compute the commitment root for a pack set."""
    return PackCommitment(packs).root


__all__ = [
    "LEAF_SIZE",
    "encode_leaf",
    "pack_leaf",
    "PackCommitment",
    "verify_pack",
    "commit_packs",
]
