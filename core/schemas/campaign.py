"""
Campaign Domain Models

Pydantic models for tiers, packs, campaigns and purchases.

Packs are frozen: once a campaign root is committed, an index, amount or
salt that changes would no longer match the published root.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.schemas.encoding import U32_MAX, U64_MAX


MAX_TOTAL_PACKS = 10_000
MAX_TIERS = 10
PROBABILITY_TOLERANCE = 0.001


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class CampaignStatus(str, Enum):
    """Lifecycle states. Transitions only move forward; CLOSED is terminal."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


class Tier(BaseModel):
    """A reward tier: selection probability plus an inclusive amount range."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1, max_length=32)
    probability: float = Field(..., ge=0.0, le=1.0)
    min: int = Field(..., ge=0, le=U64_MAX)
    max: int = Field(..., ge=0, le=U64_MAX)

    @model_validator(mode="after")
    def _check_range(self) -> "Tier":
        if self.min > self.max:
            raise ValueError(f"Tier '{self.name}' min must be <= max")
        return self


class Pack(BaseModel):
    """One committed pack. Immutable after creation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int = Field(..., ge=0, le=U32_MAX)
    tier: str
    reward_amount: int = Field(..., ge=0, le=U64_MAX)
    salt: bytes

    @field_validator("salt")
    @classmethod
    def _check_salt(cls, value: bytes) -> bytes:
        if len(value) != 32:
            raise ValueError(f"Salt must be 32 bytes, got {len(value)}")
        return value


class Campaign(BaseModel):
    """
    A campaign and its commitment.

    The address stays None until the activation transaction is confirmed.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=_new_id)
    seed: int = Field(..., ge=0, le=U64_MAX)
    authority: str
    reward_mint: str
    pack_price: int = Field(..., ge=1, le=U64_MAX)
    total_packs: int = Field(..., ge=1, le=MAX_TOTAL_PACKS)
    merkle_root: bytes
    status: CampaignStatus = CampaignStatus.PENDING
    address: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    confirmed_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None

    @field_validator("merkle_root")
    @classmethod
    def _check_root(cls, value: bytes) -> bytes:
        if len(value) != 32:
            raise ValueError(f"Merkle root must be 32 bytes, got {len(value)}")
        return value


class Purchase(BaseModel):
    """Off-chain index entry for an on-chain receipt. Not a source of truth."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(default_factory=_new_id)
    campaign_id: str
    buyer: str
    nonce: int = Field(..., ge=0, le=U64_MAX)
    pack_index: int = Field(..., ge=0, le=U32_MAX)
    signature: str
    created_at: datetime = Field(default_factory=_utcnow)


__all__ = [
    "MAX_TOTAL_PACKS",
    "MAX_TIERS",
    "PROBABILITY_TOLERANCE",
    "CampaignStatus",
    "Tier",
    "Pack",
    "Campaign",
    "Purchase",
]
