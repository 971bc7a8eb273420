"""
Pack Generation

Weighted tier assignment and reward draws for a new campaign.

Tiers are walked in ascending probability order; a uniform draw in [0, 1)
selects the first tier whose cumulative probability exceeds it, falling back
to the last tier when floating-point rounding leaves the tail uncovered.
Each pack gets a fresh 32-byte salt from the OS CSPRNG.

The campaign seed is NOT an input here; it only feeds address derivation.
"""

from __future__ import annotations

import random
import secrets
from typing import Optional, Sequence

from core.schemas.campaign import (
    MAX_TIERS,
    MAX_TOTAL_PACKS,
    PROBABILITY_TOLERANCE,
    Pack,
    Tier,
)
from core.schemas.errors import ValidationFailureException


def validate_tiers(tiers: Sequence[Tier]) -> list[Tier]:
    """
    Check a tier set before any pack is generated.

    Raises:
        ValidationFailureException: If the set is empty, too large, has
            duplicate names, an inverted range, or probabilities that do
            not sum to 1 within tolerance
    """
    if not 1 <= len(tiers) <= MAX_TIERS:
        raise ValidationFailureException(
            f"Expected between 1 and {MAX_TIERS} tiers, got {len(tiers)}",
            field_path="tiers",
        )

    names = [t.name for t in tiers]
    if len(set(names)) != len(names):
        raise ValidationFailureException("Tier names must be unique", field_path="tiers")

    for i, tier in enumerate(tiers):
        if tier.min > tier.max:
            raise ValidationFailureException(
                f"Tier '{tier.name}' min must be <= max",
                field_path=f"tiers[{i}]",
            )

    total = sum(t.probability for t in tiers)
    if abs(total - 1.0) >= PROBABILITY_TOLERANCE:
        raise ValidationFailureException(
            f"Tier probabilities must sum to 1, got {total:.6f}",
            field_path="tiers",
            details={"sum": total},
        )

    return list(tiers)


def validate_total_packs(total_packs: int) -> int:
    if not 1 <= total_packs <= MAX_TOTAL_PACKS:
        raise ValidationFailureException(
            f"total_packs must be between 1 and {MAX_TOTAL_PACKS}, got {total_packs}",
            field_path="total_packs",
        )
    return total_packs


def select_tier(sorted_tiers: Sequence[Tier], roll: float) -> Tier:
    """Pick the first tier whose cumulative probability exceeds ``roll``."""
    cumulative = 0.0
    for tier in sorted_tiers:
        cumulative += tier.probability
        if roll < cumulative:
            return tier
    return sorted_tiers[-1]


def generate_packs(
    total_packs: int,
    tiers: Sequence[Tier],
    *,
    rng: Optional[random.Random] = None,
) -> list[Pack]:
    """
    Generate ``total_packs`` packs with indices 0..total_packs-1.

    Args:
        total_packs: Number of packs (1..10000)
        tiers: Validated tier set
        rng: Source for tier draws and amounts; defaults to SystemRandom.
             Salts always come from ``secrets`` regardless of rng.
    """
    validate_total_packs(total_packs)
    validate_tiers(tiers)

    rng = rng or random.SystemRandom()
    sorted_tiers = sorted(tiers, key=lambda t: t.probability)

    packs: list[Pack] = []
    for index in range(total_packs):
        tier = select_tier(sorted_tiers, rng.random())
        packs.append(
            Pack(
                index=index,
                tier=tier.name,
                reward_amount=rng.randint(tier.min, tier.max),
                salt=secrets.token_bytes(32),
            )
        )
    return packs


__all__ = [
    "validate_tiers",
    "validate_total_packs",
    "select_tier",
    "generate_packs",
]
