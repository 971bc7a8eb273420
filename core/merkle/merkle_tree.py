"""
Module 02 - Merkle Tree Implementation
Power-of-two Merkle tree construction, proof generation, and verification.

This module provides:
- Level-by-level tree construction with zero-leaf padding
- Merkle proof generation for any leaf index
- Merkle proof verification

Canonical Commitment Rules (Hard Contracts):
1. Parent hashing: parent = sha256(left + right)
2. Padding rule: right-pad the leaf level with 32 zero bytes up to the next
   power of two, never fewer than two leaves
3. Empty leaves: rejected, there is no defined root
4. Proof length: log2(padded leaf count), at least one element

The on-chain program recomputes roots with exactly these rules, so none of
them may change without a program upgrade.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from core.crypto.hashing import hash_concat


# Padding leaf: 32 zero bytes
ZERO_LEAF: bytes = bytes(32)


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf in a Merkle tree.

    Attributes:
        leaf: The leaf hash being proven (32 bytes)
        index: The 0-based index of the leaf in the original leaf list
        siblings: List of sibling hashes from bottom to top of tree
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: list[bytes]
    root: bytes

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


def merkle_parent(left: bytes, right: bytes) -> bytes:
    """Compute the parent hash of two child nodes: sha256(left + right)."""
    return hash_concat(left, right)


def padded_leaf_count(num_leaves: int) -> int:
    """
    Number of leaves after padding: the next power of two, minimum 2.

    A single leaf still gets a zero sibling so every proof has at least
    one element.
    """
    if num_leaves <= 0:
        raise ValueError(f"Leaf count must be positive, got {num_leaves}")
    padded = 2
    while padded < num_leaves:
        padded *= 2
    return padded


def build_merkle_levels(leaves: Sequence[bytes]) -> list[list[bytes]]:
    """
    Build every level of the tree, leaves first and root last.

    Args:
        leaves: Sequence of 32-byte leaf hashes. Order matters and is preserved.

    Returns:
        List of levels; levels[0] is the padded leaf level,
        levels[-1] is [root]

    Raises:
        ValueError: If leaves is empty
    """
    if len(leaves) == 0:
        raise ValueError("Cannot build a Merkle tree from an empty leaf list")

    current_level: list[bytes] = list(leaves)
    current_level.extend([ZERO_LEAF] * (padded_leaf_count(len(leaves)) - len(leaves)))

    levels = [current_level]
    while len(current_level) > 1:
        next_level: list[bytes] = []
        for i in range(0, len(current_level), 2):
            next_level.append(merkle_parent(current_level[i], current_level[i + 1]))
        levels.append(next_level)
        current_level = next_level

    return levels


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """Build a Merkle root from a sequence of leaf hashes."""
    return build_merkle_levels(leaves)[-1][0]


def build_merkle_proof(levels: Sequence[Sequence[bytes]], index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Algorithm:
    1. Start at the target leaf index
    2. At each level below the root:
       - Record the sibling hash (index XOR 1)
       - Move up: index = index // 2

    Args:
        levels: Tree levels as returned by build_merkle_levels
        index: 0-based index of the leaf to prove

    Raises:
        IndexError: If index is outside the padded leaf level
    """
    if index < 0 or index >= len(levels[0]):
        raise IndexError(
            f"Leaf index {index} out of range for {len(levels[0])} leaves"
        )

    siblings: list[bytes] = []
    current_index = index
    for level in levels[:-1]:
        siblings.append(level[current_index ^ 1])
        current_index //= 2

    return MerkleProof(
        leaf=levels[0][index],
        index=index,
        siblings=siblings,
        root=levels[-1][0],
    )


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """
    Verify a Merkle proof.

    The parity of the running index decides whether the current hash is
    the left (even) or right (odd) child at each step.
    """
    current_hash = proof.leaf
    current_index = proof.index

    for sibling in proof.siblings:
        if current_index % 2 == 0:
            current_hash = merkle_parent(current_hash, sibling)
        else:
            current_hash = merkle_parent(sibling, current_hash)
        current_index //= 2

    return current_hash == proof.root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of hashing levels above the leaves, equal to the proof length.

    Example: 1 or 2 leaves -> 1, 3 or 4 leaves -> 2, 5 leaves -> 3.
    """
    return padded_leaf_count(num_leaves).bit_length() - 1


__all__ = [
    "ZERO_LEAF",
    "MerkleProof",
    "merkle_parent",
    "padded_leaf_count",
    "build_merkle_levels",
    "build_merkle_root",
    "build_merkle_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
