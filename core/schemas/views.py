"""
Read Views

Results returned by the campaign controller. They hold native Python values
(int, bytes); the API layer renders them with the precision-safe encoding.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RevealResult(BaseModel):
    """Secret pack data plus the inclusion proof needed to claim on-chain."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    pack_index: int
    tier: str
    reward_amount: int
    salt: bytes
    proof: list[bytes]
    merkle_root: bytes


class PackHistoryEntry(BaseModel):
    """
    Per-pack snapshot.

    reward_amount is only filled for claimed packs; an unclaimed amount is
    still secret.
    """

    model_config = ConfigDict(extra="forbid")

    index: int
    tier: str
    reward_amount: Optional[int] = None
    buyer: Optional[str] = None
    is_purchased: bool = False
    is_claimed: bool = False


class CampaignHistory(BaseModel):
    campaign_id: str
    total_packs: int
    packs: list[PackHistoryEntry] = Field(default_factory=list)


class AnalyticsOverview(BaseModel):
    total_packs: int
    packs_sold: int
    packs_claimed: int
    packs_remaining: int
    lamports_collected: int
    claim_rate: str = Field(..., description="Percentage of sold packs claimed, one decimal")
    unverified_purchases: int = Field(
        default=0,
        description="Recorded purchases whose receipt is no longer visible on-chain",
    )


class TierBreakdown(BaseModel):
    tier: str
    total_packs: int
    sold_packs: int = 0
    claimed_packs: int = 0
    tokens_distributed: int = 0


class CampaignAnalytics(BaseModel):
    """Eventually-consistent snapshot; not authoritative state."""

    campaign_id: str
    overview: AnalyticsOverview
    tier_breakdown: list[TierBreakdown] = Field(default_factory=list)


__all__ = [
    "RevealResult",
    "PackHistoryEntry",
    "CampaignHistory",
    "AnalyticsOverview",
    "TierBreakdown",
    "CampaignAnalytics",
]
