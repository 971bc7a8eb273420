"""
Campaign Store

Storage boundary for campaigns, packs and purchases, plus an in-memory
implementation.

The store is a cache/index of off-chain facts. Purchase rows never authorize
anything on their own; the controller re-reads the ledger before trusting one.
Status changes go through ``transition_status``, a single conditional write,
so two concurrent confirmations cannot both win.
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable, Optional, Protocol, Sequence

from core.schemas.campaign import Campaign, CampaignStatus, Pack, Purchase


class CampaignStore(Protocol):
    """Persistence operations required by the campaign controller."""

    async def create_campaign(self, campaign: Campaign, packs: Sequence[Pack]) -> Campaign:
        ...

    async def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        ...

    async def list_campaigns(self) -> list[Campaign]:
        ...

    async def list_packs(self, campaign_id: str) -> list[Pack]:
        """Packs of a campaign, ordered by index ascending."""
        ...

    async def get_pack(self, campaign_id: str, index: int) -> Optional[Pack]:
        ...

    async def transition_status(
        self,
        campaign_id: str,
        from_statuses: Iterable[CampaignStatus],
        to_status: CampaignStatus,
        **changes: Any,
    ) -> Optional[Campaign]:
        """
        Set status to ``to_status`` only if it is currently in ``from_statuses``.

        Returns the updated campaign, or None if the condition did not hold.
        """
        ...

    async def add_purchase(self, purchase: Purchase) -> Optional[Purchase]:
        """Insert unless (campaign_id, buyer, nonce) already exists; None on conflict."""
        ...

    async def find_purchase(
        self,
        campaign_id: str,
        *,
        buyer: str,
        pack_index: Optional[int] = None,
        nonce: Optional[int] = None,
    ) -> Optional[Purchase]:
        ...

    async def list_purchases(self, campaign_id: str) -> list[Purchase]:
        ...


class InMemoryCampaignStore:
    """
    Process-local store.

    All writes take one asyncio lock, which makes conditional updates atomic
    within the event loop.
    """

    def __init__(self) -> None:
        self._campaigns: dict[str, Campaign] = {}
        self._packs: dict[str, dict[int, Pack]] = {}
        self._purchases: dict[str, list[Purchase]] = {}
        self._lock = asyncio.Lock()

    async def create_campaign(self, campaign: Campaign, packs: Sequence[Pack]) -> Campaign:
        by_index = {p.index: p for p in packs}
        if len(by_index) != len(packs):
            raise ValueError("Duplicate pack index in campaign")

        async with self._lock:
            if campaign.id in self._campaigns:
                raise ValueError(f"Campaign {campaign.id} already exists")
            self._campaigns[campaign.id] = campaign.model_copy()
            self._packs[campaign.id] = by_index
            self._purchases[campaign.id] = []
        return campaign

    async def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        campaign = self._campaigns.get(campaign_id)
        return campaign.model_copy() if campaign is not None else None

    async def list_campaigns(self) -> list[Campaign]:
        ordered = sorted(self._campaigns.values(), key=lambda c: c.created_at)
        return [c.model_copy() for c in ordered]

    async def list_packs(self, campaign_id: str) -> list[Pack]:
        packs = self._packs.get(campaign_id, {})
        return [packs[i] for i in sorted(packs)]

    async def get_pack(self, campaign_id: str, index: int) -> Optional[Pack]:
        return self._packs.get(campaign_id, {}).get(index)

    async def transition_status(
        self,
        campaign_id: str,
        from_statuses: Iterable[CampaignStatus],
        to_status: CampaignStatus,
        **changes: Any,
    ) -> Optional[Campaign]:
        allowed = set(from_statuses)
        async with self._lock:
            current = self._campaigns.get(campaign_id)
            if current is None or current.status not in allowed:
                return None
            updated = current.model_copy(update={"status": to_status, **changes})
            self._campaigns[campaign_id] = updated
        return updated.model_copy()

    async def add_purchase(self, purchase: Purchase) -> Optional[Purchase]:
        async with self._lock:
            rows = self._purchases.setdefault(purchase.campaign_id, [])
            for row in rows:
                if row.buyer == purchase.buyer and row.nonce == purchase.nonce:
                    return None
            rows.append(purchase)
        return purchase

    async def find_purchase(
        self,
        campaign_id: str,
        *,
        buyer: str,
        pack_index: Optional[int] = None,
        nonce: Optional[int] = None,
    ) -> Optional[Purchase]:
        for row in self._purchases.get(campaign_id, []):
            if row.buyer != buyer:
                continue
            if pack_index is not None and row.pack_index != pack_index:
                continue
            if nonce is not None and row.nonce != nonce:
                continue
            return row
        return None

    async def list_purchases(self, campaign_id: str) -> list[Purchase]:
        return list(self._purchases.get(campaign_id, []))


__all__ = [
    "CampaignStore",
    "InMemoryCampaignStore",
]
