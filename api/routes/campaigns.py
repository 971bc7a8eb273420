"""
Campaign Routes

HTTP surface of the campaign lifecycle. Handlers only translate between wire
models and the campaign service; every rule lives in the service.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError

from api.deps import get_campaign_service
from api.models.requests import (
    CloseCampaignRequest,
    ConfirmCampaignRequest,
    PrepareCampaignRequest,
    RecordPurchaseRequest,
)
from api.models.responses import (
    ActivationTxResponse,
    AnalyticsResponse,
    CampaignListResponse,
    CampaignResponse,
    HistoryResponse,
    PurchaseResponse,
    RevealResponse,
)
from core.campaigns import CampaignService
from core.schemas.campaign import Tier
from core.schemas.errors import ValidationFailureException


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


def _to_tiers(request: PrepareCampaignRequest) -> list[Tier]:
    tiers = []
    for i, tier in enumerate(request.tiers):
        try:
            tiers.append(tier.to_tier())
        except ValidationError as e:
            raise ValidationFailureException(
                f"Invalid tier '{tier.name}': {e.errors()[0]['msg']}",
                field_path=f"tiers[{i}]",
            ) from e
    return tiers


@router.post("/prepare", response_model=CampaignResponse)
async def prepare_campaign(
    request: PrepareCampaignRequest,
    service: CampaignService = Depends(get_campaign_service),
) -> CampaignResponse:
    """
    Generate packs, commit them, and store a PENDING campaign.

    The response carries the Merkle root; pack contents stay server-side.
    """
    campaign = await service.prepare(
        seed=request.seed,
        authority=request.authority,
        reward_mint=request.reward_mint,
        pack_price=request.pack_price,
        total_packs=request.total_packs,
        tiers=_to_tiers(request),
    )
    return CampaignResponse.from_campaign(campaign)


@router.get("", response_model=CampaignListResponse)
async def list_campaigns(
    service: CampaignService = Depends(get_campaign_service),
) -> CampaignListResponse:
    campaigns = await service.find_all()
    return CampaignListResponse(
        campaigns=[CampaignResponse.from_campaign(c) for c in campaigns]
    )


@router.get("/{campaign_id}", response_model=CampaignResponse)
async def get_campaign(
    campaign_id: str,
    service: CampaignService = Depends(get_campaign_service),
) -> CampaignResponse:
    return CampaignResponse.from_campaign(await service.find_one(campaign_id))


@router.get("/{campaign_id}/activation-tx", response_model=ActivationTxResponse)
async def get_activation_transaction(
    campaign_id: str,
    service: CampaignService = Depends(get_campaign_service),
) -> ActivationTxResponse:
    """Partially-signed initialize_campaign transaction for a PENDING campaign."""
    tx = await service.build_activation_transaction(campaign_id)
    return ActivationTxResponse(campaign_id=campaign_id, transaction=tx)


@router.post("/{campaign_id}/confirm", response_model=CampaignResponse)
async def confirm_campaign(
    campaign_id: str,
    request: ConfirmCampaignRequest,
    service: CampaignService = Depends(get_campaign_service),
) -> CampaignResponse:
    campaign = await service.confirm(campaign_id, request.signature)
    return CampaignResponse.from_campaign(campaign)


@router.post("/{campaign_id}/close", response_model=CampaignResponse)
async def close_campaign(
    campaign_id: str,
    request: CloseCampaignRequest,
    service: CampaignService = Depends(get_campaign_service),
) -> CampaignResponse:
    campaign = await service.close(campaign_id, request.signature)
    return CampaignResponse.from_campaign(campaign)


@router.post("/{campaign_id}/purchase", response_model=PurchaseResponse)
async def record_purchase(
    campaign_id: str,
    request: RecordPurchaseRequest,
    service: CampaignService = Depends(get_campaign_service),
) -> PurchaseResponse:
    purchase = await service.record_purchase(
        campaign_id,
        buyer=request.buyer,
        nonce=request.nonce,
        pack_index=request.pack_index,
        signature=request.signature,
    )
    return PurchaseResponse.from_purchase(purchase)


@router.get("/{campaign_id}/reveal/{pack_index}", response_model=RevealResponse)
async def reveal_pack(
    campaign_id: str,
    pack_index: int,
    wallet: str = Query(..., min_length=32, max_length=44, description="Buyer wallet"),
    service: CampaignService = Depends(get_campaign_service),
) -> RevealResponse:
    """
    Reveal a purchased pack's contents and inclusion proof.

    Only succeeds for the wallet holding an unclaimed on-chain receipt.
    """
    result = await service.reveal(campaign_id, pack_index, wallet)
    return RevealResponse.from_result(result)


@router.get("/{campaign_id}/history", response_model=HistoryResponse)
async def campaign_history(
    campaign_id: str,
    service: CampaignService = Depends(get_campaign_service),
) -> HistoryResponse:
    return HistoryResponse.from_history(await service.history(campaign_id))


@router.get("/{campaign_id}/analytics", response_model=AnalyticsResponse)
async def campaign_analytics(
    campaign_id: str,
    service: CampaignService = Depends(get_campaign_service),
) -> AnalyticsResponse:
    return AnalyticsResponse.from_analytics(await service.analytics(campaign_id))
