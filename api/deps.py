"""
API Dependencies

Dependency injection for the API. The app factory builds the campaign
service once and parks it on ``app.state``; handlers receive it through
``get_campaign_service``.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request

from core.campaigns import CampaignService, CampaignStore, InMemoryCampaignStore
from core.config.runtime import RuntimeConfig
from core.ledger import LedgerGateway

logger = logging.getLogger(__name__)


def build_campaign_service(
    config: RuntimeConfig,
    *,
    store: Optional[CampaignStore] = None,
    gateway: Optional[LedgerGateway] = None,
) -> CampaignService:
    """
    Assemble the campaign service from configuration.

    Missing collaborators are created from ``config``; an in-memory store is
    used when none is supplied.
    """
    if store is None:
        logger.info("No campaign store supplied, using in-memory store")
        store = InMemoryCampaignStore()
    if gateway is None:
        gateway = LedgerGateway(config.ledger)
    return CampaignService(store, gateway)


def get_campaign_service(request: Request) -> CampaignService:
    return request.app.state.campaign_service
