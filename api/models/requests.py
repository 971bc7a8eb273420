"""
API Request Models

Pydantic models for API request validation.

64-bit quantities (seed, price, nonce, tier bounds) are accepted either as
JSON integers or as decimal strings, so that JavaScript clients never have to
round-trip them through a double.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.schemas.campaign import MAX_TIERS, MAX_TOTAL_PACKS, Tier
from core.schemas.encoding import parse_u64


SIGNATURE_MIN_LENGTH = 64
SIGNATURE_MAX_LENGTH = 128


class TierRequest(BaseModel):
    """One reward tier of a campaign being prepared."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=32)
    probability: float = Field(..., ge=0.0, le=1.0)
    min: int = Field(..., description="Minimum reward amount (u64)")
    max: int = Field(..., description="Maximum reward amount (u64)")

    @field_validator("min", "max", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> int:
        return parse_u64(value)

    def to_tier(self) -> Tier:
        return Tier(name=self.name, probability=self.probability, min=self.min, max=self.max)


class PrepareCampaignRequest(BaseModel):
    """Request body for POST /campaigns/prepare."""

    model_config = ConfigDict(extra="forbid")

    seed: int = Field(..., description="Campaign seed (u64)")
    authority: str = Field(..., min_length=32, max_length=44, description="Authority wallet")
    reward_mint: str = Field(..., min_length=32, max_length=44, description="Reward token mint")
    pack_price: int = Field(..., description="Pack price in lamports (u64, >= 1)")
    total_packs: int = Field(..., ge=1, le=MAX_TOTAL_PACKS)
    tiers: list[TierRequest] = Field(..., min_length=1, max_length=MAX_TIERS)

    @field_validator("seed", "pack_price", mode="before")
    @classmethod
    def _parse_u64(cls, value: Any) -> int:
        return parse_u64(value)


class SignatureRequest(BaseModel):
    """Request body carrying a transaction signature (confirm, close)."""

    model_config = ConfigDict(extra="forbid")

    signature: str = Field(
        ...,
        min_length=SIGNATURE_MIN_LENGTH,
        max_length=SIGNATURE_MAX_LENGTH,
        description="Base58 transaction signature",
    )


class ConfirmCampaignRequest(SignatureRequest):
    """Request body for POST /campaigns/{id}/confirm."""


class CloseCampaignRequest(SignatureRequest):
    """Request body for POST /campaigns/{id}/close."""


class RecordPurchaseRequest(BaseModel):
    """Request body for POST /campaigns/{id}/purchase."""

    model_config = ConfigDict(extra="forbid")

    buyer: str = Field(..., min_length=32, max_length=44)
    nonce: int = Field(..., description="Purchase nonce (u64)")
    pack_index: int = Field(..., ge=0)
    signature: str = Field(
        ...,
        min_length=SIGNATURE_MIN_LENGTH,
        max_length=SIGNATURE_MAX_LENGTH,
    )

    @field_validator("nonce", mode="before")
    @classmethod
    def _parse_nonce(cls, value: Any) -> int:
        return parse_u64(value)
