"""
API Response Models

Pydantic models for API response serialization.

64-bit integers are rendered as decimal strings and byte buffers as arrays of
ints. Conversion from the core models happens in the ``from_*`` constructors
so route handlers stay thin.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from core.schemas.campaign import Campaign, Purchase
from core.schemas.encoding import bytes_to_list
from core.schemas.views import CampaignAnalytics, CampaignHistory, RevealResult


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "packvault-api"
    version: str = "v1"


class CampaignResponse(BaseModel):
    """A campaign as seen by clients. Pack secrets are never included."""

    id: str
    seed: str
    authority: str
    reward_mint: str
    pack_price: str
    total_packs: int
    merkle_root: list[int]
    status: str
    address: Optional[str] = None
    created_at: datetime
    confirmed_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None

    @classmethod
    def from_campaign(cls, campaign: Campaign) -> "CampaignResponse":
        return cls(
            id=campaign.id,
            seed=str(campaign.seed),
            authority=campaign.authority,
            reward_mint=campaign.reward_mint,
            pack_price=str(campaign.pack_price),
            total_packs=campaign.total_packs,
            merkle_root=bytes_to_list(campaign.merkle_root),
            status=campaign.status.value,
            address=campaign.address,
            created_at=campaign.created_at,
            confirmed_at=campaign.confirmed_at,
            closed_at=campaign.closed_at,
        )


class CampaignListResponse(BaseModel):
    campaigns: list[CampaignResponse] = Field(default_factory=list)


class ActivationTxResponse(BaseModel):
    """Partially-signed activation transaction for the authority to co-sign."""

    campaign_id: str
    transaction: str = Field(..., description="Base64-encoded serialized transaction")


class PurchaseResponse(BaseModel):
    id: str
    campaign_id: str
    buyer: str
    nonce: str
    pack_index: int
    signature: str
    created_at: datetime

    @classmethod
    def from_purchase(cls, purchase: Purchase) -> "PurchaseResponse":
        return cls(
            id=purchase.id,
            campaign_id=purchase.campaign_id,
            buyer=purchase.buyer,
            nonce=str(purchase.nonce),
            pack_index=purchase.pack_index,
            signature=purchase.signature,
            created_at=purchase.created_at,
        )


class RevealResponse(BaseModel):
    """Everything the buyer needs to submit a claim."""

    pack_index: int
    tier: str
    reward_amount: str
    salt: list[int]
    proof: list[list[int]]
    merkle_root: list[int]

    @classmethod
    def from_result(cls, result: RevealResult) -> "RevealResponse":
        return cls(
            pack_index=result.pack_index,
            tier=result.tier,
            reward_amount=str(result.reward_amount),
            salt=bytes_to_list(result.salt),
            proof=[bytes_to_list(node) for node in result.proof],
            merkle_root=bytes_to_list(result.merkle_root),
        )


class PackHistoryItem(BaseModel):
    index: int
    tier: str
    reward_amount: Optional[str] = None
    buyer: Optional[str] = None
    is_purchased: bool
    is_claimed: bool


class HistoryResponse(BaseModel):
    campaign_id: str
    total_packs: int
    packs: list[PackHistoryItem]

    @classmethod
    def from_history(cls, history: CampaignHistory) -> "HistoryResponse":
        return cls(
            campaign_id=history.campaign_id,
            total_packs=history.total_packs,
            packs=[
                PackHistoryItem(
                    index=p.index,
                    tier=p.tier,
                    reward_amount=str(p.reward_amount) if p.reward_amount is not None else None,
                    buyer=p.buyer,
                    is_purchased=p.is_purchased,
                    is_claimed=p.is_claimed,
                )
                for p in history.packs
            ],
        )


class AnalyticsOverviewItem(BaseModel):
    total_packs: int
    packs_sold: int
    packs_claimed: int
    packs_remaining: int
    lamports_collected: str = Field(..., description="u64 as a decimal string")
    claim_rate: str
    unverified_purchases: int


class TierBreakdownItem(BaseModel):
    tier: str
    total_packs: int
    sold_packs: int
    claimed_packs: int
    tokens_distributed: str = Field(..., description="u64 as a decimal string")


class AnalyticsResponse(BaseModel):
    campaign_id: str
    overview: AnalyticsOverviewItem
    tier_breakdown: list[TierBreakdownItem]

    @classmethod
    def from_analytics(cls, analytics: CampaignAnalytics) -> "AnalyticsResponse":
        o = analytics.overview
        return cls(
            campaign_id=analytics.campaign_id,
            overview=AnalyticsOverviewItem(
                total_packs=o.total_packs,
                packs_sold=o.packs_sold,
                packs_claimed=o.packs_claimed,
                packs_remaining=o.packs_remaining,
                lamports_collected=str(o.lamports_collected),
                claim_rate=o.claim_rate,
                unverified_purchases=o.unverified_purchases,
            ),
            tier_breakdown=[
                TierBreakdownItem(
                    tier=t.tier,
                    total_packs=t.total_packs,
                    sold_packs=t.sold_packs,
                    claimed_packs=t.claimed_packs,
                    tokens_distributed=str(t.tokens_distributed),
                )
                for t in analytics.tier_breakdown
            ],
        )


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
