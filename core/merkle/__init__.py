"""
Module 02 - Merkle Tree and Pack Commitments
Power-of-two Merkle tree + salted pack leaves.

This module provides:
- MerkleProof: Dataclass representing a Merkle inclusion proof
- build_merkle_levels / build_merkle_root: Tree construction
- build_merkle_proof / verify_merkle_proof: Inclusion proofs
- PackCommitment: Commitment over a campaign's packs

Canonical Commitment Rules:
1. Leaf hashing: sha256(index_le32 || amount_le64 || salt32)
2. Parent hashing: sha256(left + right)
3. Padding: zero leaves up to the next power of two (minimum 2)
4. Empty tree: rejected

Usage:
    from core.merkle import PackCommitment, verify_pack

    commitment = PackCommitment(packs)
    root = commitment.root
    proof = commitment.proof(2)
    assert verify_pack(packs[2], proof.siblings, root)
"""
from .merkle_tree import (
    ZERO_LEAF,
    MerkleProof,
    merkle_parent,
    padded_leaf_count,
    build_merkle_levels,
    build_merkle_root,
    build_merkle_proof,
    verify_merkle_proof,
    compute_tree_depth,
)

from .commitment import (
    LEAF_SIZE,
    encode_leaf,
    pack_leaf,
    PackCommitment,
    verify_pack,
    commit_packs,
)


__all__ = [
    # Core types
    "MerkleProof",
    "ZERO_LEAF",
    "LEAF_SIZE",
    # Tree functions
    "merkle_parent",
    "padded_leaf_count",
    "build_merkle_levels",
    "build_merkle_root",
    "build_merkle_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Pack commitment
    "encode_leaf",
    "pack_leaf",
    "PackCommitment",
    "verify_pack",
    "commit_packs",
]
