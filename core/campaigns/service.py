"""
Campaign Lifecycle Controller

Owns campaign, pack and purchase state transitions:

    prepare  -> PENDING
    confirm  PENDING -> ACTIVE          (activation tx must be final)
    close    PENDING|ACTIVE -> CLOSED   (close tx must be final; terminal)

Purchases and reveals are only legal while ACTIVE, and both are checked
against the on-chain receipt at request time. Secret pack data (amount, salt)
leaves this module only through ``reveal``, after the receipt proves the
caller owns an unclaimed pack.
"""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import Optional, Sequence

from solders.pubkey import Pubkey

from core.campaigns.generation import generate_packs, validate_tiers, validate_total_packs
from core.campaigns.store import CampaignStore
from core.ledger.accounts import ReceiptAccount
from core.ledger.addresses import to_pubkey
from core.ledger.gateway import LedgerGateway
from core.merkle.commitment import PackCommitment, commit_packs
from core.schemas.campaign import Campaign, CampaignStatus, Pack, Purchase, Tier
from core.schemas.encoding import U64_MAX
from core.schemas.errors import (
    CommitmentMismatchException,
    InvalidStateException,
    LedgerInconsistencyException,
    NotFoundException,
    ValidationFailureException,
)
from core.schemas.views import (
    AnalyticsOverview,
    CampaignAnalytics,
    CampaignHistory,
    PackHistoryEntry,
    RevealResult,
    TierBreakdown,
)


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_address(value: str, field_path: str) -> Pubkey:
    try:
        return to_pubkey(value)
    except ValueError as e:
        raise ValidationFailureException(str(e), field_path=field_path) from e


def _check_u64(value: int, field_path: str, minimum: int = 0) -> int:
    if not minimum <= value <= U64_MAX:
        raise ValidationFailureException(
            f"{field_path} must be between {minimum} and {U64_MAX}, got {value}",
            field_path=field_path,
        )
    return value


class CampaignService:
    """
    Campaign lifecycle over a store and the ledger gateway.

    Holds no mutable state of its own; every request reads the store and,
    where trust matters, the ledger.
    """

    def __init__(
        self,
        store: CampaignStore,
        gateway: LedgerGateway,
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Args:
            store: Campaign/pack/purchase persistence
            gateway: Ledger gateway used to corroborate claims
            rng: Random source for tier draws (default: SystemRandom)
        """
        self.store = store
        self.gateway = gateway
        self._rng = rng

    # ------------------------------------------------------------------
    # Creation and reads
    # ------------------------------------------------------------------

    async def prepare(
        self,
        *,
        seed: int,
        authority: str,
        reward_mint: str,
        pack_price: int,
        total_packs: int,
        tiers: Sequence[Tier],
    ) -> Campaign:
        """
        Create a PENDING campaign: generate packs, commit, persist.

        Raises:
            ValidationFailureException: On any invalid input; nothing is stored
        """
        _check_u64(seed, "seed")
        _check_u64(pack_price, "pack_price", minimum=1)
        _parse_address(authority, "authority")
        _parse_address(reward_mint, "reward_mint")
        validate_total_packs(total_packs)
        validate_tiers(tiers)

        packs = generate_packs(total_packs, tiers, rng=self._rng)
        root = commit_packs(packs)

        campaign = Campaign(
            seed=seed,
            authority=authority,
            reward_mint=reward_mint,
            pack_price=pack_price,
            total_packs=total_packs,
            merkle_root=root,
        )
        await self.store.create_campaign(campaign, packs)

        logger.info(
            f"Prepared campaign {campaign.id}: {total_packs} packs, root={root.hex()[:16]}..."
        )
        return campaign

    async def find_one(self, campaign_id: str) -> Campaign:
        return await self._get_campaign(campaign_id)

    async def find_all(self) -> list[Campaign]:
        return await self.store.list_campaigns()

    async def build_activation_transaction(self, campaign_id: str) -> str:
        """
        Build the partially-signed initialize_campaign transaction.

        Only PENDING campaigns can be activated.
        """
        campaign = await self._get_campaign(campaign_id)
        if campaign.status != CampaignStatus.PENDING:
            raise InvalidStateException(
                "Campaign already confirmed", status=campaign.status.value
            )

        return await self.gateway.build_initialize_campaign_tx(
            authority=to_pubkey(campaign.authority),
            reward_mint=to_pubkey(campaign.reward_mint),
            seed=campaign.seed,
            merkle_root=campaign.merkle_root,
            pack_price=campaign.pack_price,
            total_packs=campaign.total_packs,
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def confirm(self, campaign_id: str, signature: str) -> Campaign:
        """
        PENDING -> ACTIVE once the activation transaction is final.

        Raises:
            NotFoundException: Unknown campaign
            InvalidStateException: Campaign is not PENDING (including a
                concurrent confirmation that won the race)
            LedgerInconsistencyException: Transaction not found or failed
        """
        campaign = await self._get_campaign(campaign_id)
        if campaign.status != CampaignStatus.PENDING:
            raise InvalidStateException(
                "Campaign already confirmed", status=campaign.status.value
            )

        if not await self.gateway.verify_transaction(signature):
            raise LedgerInconsistencyException(
                "Invalid transaction", details={"signature": signature}
            )

        address = self.gateway.campaign_address(campaign.seed)
        updated = await self.store.transition_status(
            campaign_id,
            {CampaignStatus.PENDING},
            CampaignStatus.ACTIVE,
            address=str(address),
            confirmed_at=_utcnow(),
        )
        if updated is None:
            raise InvalidStateException("Campaign already confirmed")

        logger.info(f"Campaign {campaign_id} ACTIVE at {address}")
        return updated

    async def close(self, campaign_id: str, signature: str) -> Campaign:
        """
        Any non-CLOSED status -> CLOSED once the close transaction is final.

        Raises:
            NotFoundException: Unknown campaign
            InvalidStateException: Campaign already CLOSED
            LedgerInconsistencyException: Transaction not found or failed
        """
        campaign = await self._get_campaign(campaign_id)
        if campaign.status == CampaignStatus.CLOSED:
            raise InvalidStateException(
                "Campaign already closed", status=campaign.status.value
            )

        if not await self.gateway.verify_transaction(signature):
            raise LedgerInconsistencyException(
                "Invalid transaction", details={"signature": signature}
            )

        updated = await self.store.transition_status(
            campaign_id,
            {CampaignStatus.PENDING, CampaignStatus.ACTIVE},
            CampaignStatus.CLOSED,
            closed_at=_utcnow(),
        )
        if updated is None:
            raise InvalidStateException("Campaign already closed")

        logger.info(f"Campaign {campaign_id} CLOSED")
        return updated

    # ------------------------------------------------------------------
    # Purchases and reveals
    # ------------------------------------------------------------------

    async def record_purchase(
        self,
        campaign_id: str,
        *,
        buyer: str,
        nonce: int,
        pack_index: int,
        signature: str,
    ) -> Purchase:
        """
        Index a purchase after confirming its receipt exists on-chain.

        Raises:
            NotFoundException: Unknown campaign or pack index
            InvalidStateException: Campaign not ACTIVE, or purchase already recorded
            LedgerInconsistencyException: No receipt, or its pack index differs
        """
        campaign = await self._get_active_campaign(campaign_id)
        buyer_key = _parse_address(buyer, "buyer")
        _check_u64(nonce, "nonce")
        if not 0 <= pack_index < campaign.total_packs:
            raise NotFoundException(
                "Pack not found", details={"pack_index": pack_index}
            )

        receipt = await self.gateway.get_receipt(
            self._campaign_pubkey(campaign), buyer_key, nonce
        )
        if receipt is None:
            raise LedgerInconsistencyException(
                "Receipt not found on-chain", details={"buyer": buyer, "nonce": str(nonce)}
            )
        if receipt.pack_index != pack_index:
            raise LedgerInconsistencyException(
                "Pack index mismatch",
                details={"claimed": pack_index, "on_chain": receipt.pack_index},
            )

        purchase = Purchase(
            campaign_id=campaign_id,
            buyer=buyer,
            nonce=nonce,
            pack_index=pack_index,
            signature=signature,
        )
        stored = await self.store.add_purchase(purchase)
        if stored is None:
            raise InvalidStateException(
                "Purchase already recorded", details={"buyer": buyer, "nonce": str(nonce)}
            )

        logger.info(f"Recorded purchase of pack {pack_index} in {campaign_id} by {buyer}")
        return stored

    async def reveal(self, campaign_id: str, pack_index: int, wallet: str) -> RevealResult:
        """
        Return a purchased pack's amount, salt and inclusion proof.

        The receipt must exist, belong to ``wallet`` with the recorded nonce
        and pack index, and be unclaimed. The tree is rebuilt from the stored
        packs and must reproduce the committed root.

        Raises:
            NotFoundException: Unknown campaign, pack, or no purchase by wallet
            InvalidStateException: Campaign not ACTIVE
            LedgerInconsistencyException: Receipt missing, foreign, mismatched
                or already claimed
            CommitmentMismatchException: Stored packs no longer match the root
        """
        campaign = await self._get_active_campaign(campaign_id)
        wallet_key = _parse_address(wallet, "wallet")

        pack = await self.store.get_pack(campaign_id, pack_index)
        if pack is None:
            raise NotFoundException("Pack not found", details={"pack_index": pack_index})

        purchase = await self.store.find_purchase(
            campaign_id, buyer=wallet, pack_index=pack_index
        )
        if purchase is None:
            raise NotFoundException(
                "Pack not purchased", details={"pack_index": pack_index, "wallet": wallet}
            )

        receipt = await self.gateway.get_receipt(
            self._campaign_pubkey(campaign), wallet_key, purchase.nonce
        )
        self._check_reveal_receipt(receipt, wallet_key, purchase)

        commitment = await self._rebuild_commitment(campaign)
        proof = commitment.proof(pack_index)

        logger.info(f"Revealed pack {pack_index} of {campaign_id} to {wallet}")
        return RevealResult(
            pack_index=pack.index,
            tier=pack.tier,
            reward_amount=pack.reward_amount,
            salt=pack.salt,
            proof=proof.siblings,
            merkle_root=campaign.merkle_root,
        )

    @staticmethod
    def _check_reveal_receipt(
        receipt: Optional[ReceiptAccount],
        wallet_key: Pubkey,
        purchase: Purchase,
    ) -> None:
        if receipt is None:
            raise LedgerInconsistencyException("Receipt not found on-chain")
        if receipt.buyer != wallet_key:
            raise LedgerInconsistencyException(
                "Receipt belongs to a different wallet",
                details={"on_chain_buyer": str(receipt.buyer)},
            )
        if receipt.nonce != purchase.nonce:
            raise LedgerInconsistencyException(
                "Receipt nonce mismatch",
                details={"recorded": str(purchase.nonce), "on_chain": str(receipt.nonce)},
            )
        if receipt.pack_index != purchase.pack_index:
            raise LedgerInconsistencyException(
                "Pack index mismatch",
                details={"claimed": purchase.pack_index, "on_chain": receipt.pack_index},
            )
        if receipt.is_claimed:
            raise LedgerInconsistencyException("Already claimed")

    # ------------------------------------------------------------------
    # Integrity and analytics
    # ------------------------------------------------------------------

    async def audit_commitment(self, campaign_id: str) -> bytes:
        """
        Recompute the root from stored packs and compare to the committed one.

        Returns:
            The verified root

        Raises:
            CommitmentMismatchException: If they differ
        """
        campaign = await self._get_campaign(campaign_id)
        commitment = await self._rebuild_commitment(campaign)
        return commitment.root

    async def history(self, campaign_id: str) -> CampaignHistory:
        """
        Per-pack purchase/claim snapshot, re-read from the ledger.

        Amounts are reported for claimed packs only.
        """
        campaign = await self._get_campaign(campaign_id)
        campaign_key = self._campaign_pubkey(campaign)

        packs = await self.store.list_packs(campaign_id)
        purchases = await self.store.list_purchases(campaign_id)
        receipts = await self._lookup_receipts(campaign_key, purchases)

        by_index: dict[int, tuple[Purchase, Optional[ReceiptAccount]]] = {
            p.pack_index: (p, r) for p, r in zip(purchases, receipts)
        }

        entries: list[PackHistoryEntry] = []
        for pack in packs:
            purchase, receipt = by_index.get(pack.index, (None, None))
            if purchase is None or receipt is None:
                entries.append(PackHistoryEntry(index=pack.index, tier=pack.tier))
                continue

            entries.append(
                PackHistoryEntry(
                    index=pack.index,
                    tier=pack.tier,
                    reward_amount=pack.reward_amount if receipt.is_claimed else None,
                    buyer=purchase.buyer,
                    is_purchased=True,
                    is_claimed=receipt.is_claimed,
                )
            )

        return CampaignHistory(
            campaign_id=campaign.id,
            total_packs=campaign.total_packs,
            packs=entries,
        )

    async def analytics(self, campaign_id: str) -> CampaignAnalytics:
        """
        Sold/claimed counts, lamports collected and per-tier totals.

        A purchase counts as sold only if its receipt is still visible on-chain.
        """
        campaign = await self._get_campaign(campaign_id)
        campaign_key = self._campaign_pubkey(campaign)

        packs = await self.store.list_packs(campaign_id)
        purchases = await self.store.list_purchases(campaign_id)
        receipts = await self._lookup_receipts(campaign_key, purchases)

        pack_by_index = {p.index: p for p in packs}
        tiers: dict[str, TierBreakdown] = {}
        for pack in packs:
            breakdown = tiers.setdefault(pack.tier, TierBreakdown(tier=pack.tier, total_packs=0))
            breakdown.total_packs += 1

        sold = claimed = unverified = 0
        for purchase, receipt in zip(purchases, receipts):
            pack = pack_by_index.get(purchase.pack_index)
            if receipt is None or pack is None:
                unverified += 1
                continue
            sold += 1
            breakdown = tiers[pack.tier]
            breakdown.sold_packs += 1
            if receipt.is_claimed:
                claimed += 1
                breakdown.claimed_packs += 1
                breakdown.tokens_distributed += pack.reward_amount

        claim_rate = f"{claimed / sold * 100:.1f}" if sold else "0"

        return CampaignAnalytics(
            campaign_id=campaign.id,
            overview=AnalyticsOverview(
                total_packs=campaign.total_packs,
                packs_sold=sold,
                packs_claimed=claimed,
                packs_remaining=campaign.total_packs - sold,
                lamports_collected=sold * campaign.pack_price,
                claim_rate=claim_rate,
                unverified_purchases=unverified,
            ),
            tier_breakdown=list(tiers.values()),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_campaign(self, campaign_id: str) -> Campaign:
        campaign = await self.store.get_campaign(campaign_id)
        if campaign is None:
            raise NotFoundException("Campaign not found", details={"campaign_id": campaign_id})
        return campaign

    async def _get_active_campaign(self, campaign_id: str) -> Campaign:
        campaign = await self._get_campaign(campaign_id)
        if campaign.status != CampaignStatus.ACTIVE:
            raise InvalidStateException("Campaign not active", status=campaign.status.value)
        return campaign

    @staticmethod
    def _campaign_pubkey(campaign: Campaign) -> Pubkey:
        if campaign.address is None:
            raise InvalidStateException(
                "Campaign has no on-chain address", status=campaign.status.value
            )
        return to_pubkey(campaign.address)

    async def _rebuild_commitment(self, campaign: Campaign) -> PackCommitment:
        packs: list[Pack] = await self.store.list_packs(campaign.id)
        try:
            commitment = PackCommitment(packs)
        except ValueError as e:
            raise CommitmentMismatchException(
                f"Stored packs cannot be committed: {e}", campaign_id=campaign.id
            ) from e

        if commitment.root != campaign.merkle_root:
            logger.error(f"Root mismatch for campaign {campaign.id}")
            raise CommitmentMismatchException(
                "Stored packs do not reproduce the committed root",
                campaign_id=campaign.id,
                details={
                    "committed": campaign.merkle_root.hex(),
                    "recomputed": commitment.root.hex(),
                },
            )
        return commitment

    async def _lookup_receipts(
        self,
        campaign_key: Pubkey,
        purchases: Sequence[Purchase],
    ) -> list[Optional[ReceiptAccount]]:
        """One receipt lookup per purchase, issued concurrently."""
        return list(
            await asyncio.gather(
                *(
                    self.gateway.get_receipt(campaign_key, to_pubkey(p.buyer), p.nonce)
                    for p in purchases
                )
            )
        )


__all__ = [
    "CampaignService",
]
