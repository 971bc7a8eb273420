"""
Campaign Lifecycle Module

Pack generation, the storage boundary and the lifecycle controller.
"""

from .generation import generate_packs, select_tier, validate_tiers, validate_total_packs
from .service import CampaignService
from .store import CampaignStore, InMemoryCampaignStore

__all__ = [
    "generate_packs",
    "select_tier",
    "validate_tiers",
    "validate_total_packs",
    "CampaignService",
    "CampaignStore",
    "InMemoryCampaignStore",
]
