"""
CLI Commit and Prove Commands

Offline commitment tooling over a pack file.

Pack file format (JSON array):
    [
      {"index": 0, "tier": "common", "reward_amount": "100", "salt": "<64 hex chars>"},
      ...
    ]

``reward_amount`` may be an integer or a decimal string; ``salt`` may be hex
or an array of 32 ints.

Usage:
    packvault commit packs.json [--proofs] [--expect-root HEX] [--json]
    packvault prove packs.json --index N [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from core.crypto.hashing import from_hex, to_hex
from core.merkle.commitment import PackCommitment
from core.schemas.campaign import Pack
from core.schemas.encoding import parse_u64


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def _parse_salt(value: Any) -> bytes:
    if isinstance(value, str):
        return from_hex(value)
    return bytes(value)


def load_packs(path: Path) -> list[Pack]:
    """
    Load packs from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If an entry is malformed
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError("Pack file must contain a JSON array")

    packs = []
    for i, entry in enumerate(data):
        try:
            packs.append(
                Pack(
                    index=entry["index"],
                    tier=entry.get("tier", ""),
                    reward_amount=parse_u64(entry["reward_amount"]),
                    salt=_parse_salt(entry["salt"]),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid pack entry at position {i}: {e}") from e
    return packs


def _proof_dict(commitment: PackCommitment, index: int) -> dict[str, Any]:
    proof = commitment.proof(index)
    return {
        "index": index,
        "leaf": to_hex(proof.leaf),
        "siblings": [to_hex(s) for s in proof.siblings],
    }


def commit_cmd(args: Namespace) -> int:
    """
    Compute the commitment root of a pack file.

    Returns EXIT_VERIFICATION_FAILED when ``--expect-root`` is given and
    does not match.
    """
    try:
        packs = load_packs(Path(args.packs_file))
        commitment = PackCommitment(packs)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    root_hex = to_hex(commitment.root)
    result: dict[str, Any] = {
        "pack_count": commitment.pack_count,
        "root": root_hex,
    }
    if args.proofs:
        result["proofs"] = [_proof_dict(commitment, p.index) for p in packs]

    matches = True
    if args.expect_root:
        matches = from_hex(args.expect_root) == commitment.root
        result["matches_expected"] = matches

    if args.json:
        print(json.dumps(result, indent=2))
    else:
        print(f"packs: {commitment.pack_count}")
        print(f"root: {root_hex}")
        for proof in result.get("proofs", []):
            print(f"  [{proof['index']}] {', '.join(proof['siblings'])}")
        if args.expect_root:
            print("root matches" if matches else "ROOT MISMATCH")

    return EXIT_SUCCESS if matches else EXIT_VERIFICATION_FAILED


def prove_cmd(args: Namespace) -> int:
    """Print the inclusion proof for one pack and check it against the root."""
    try:
        packs = load_packs(Path(args.packs_file))
        commitment = PackCommitment(packs)
        proof = commitment.proof(args.index)
    except (OSError, ValueError, IndexError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    pack = next(p for p in packs if p.index == args.index)
    valid = commitment.verify(pack, proof.siblings)

    if args.json:
        print(json.dumps({
            **_proof_dict(commitment, args.index),
            "root": to_hex(commitment.root),
            "valid": valid,
        }, indent=2))
    else:
        print(f"index: {args.index}")
        print(f"leaf: {to_hex(proof.leaf)}")
        print(f"root: {to_hex(commitment.root)}")
        print("siblings:")
        for sibling in proof.siblings:
            print(f"  {to_hex(sibling)}")
        print(f"valid: {valid}")

    return EXIT_SUCCESS if valid else EXIT_VERIFICATION_FAILED
