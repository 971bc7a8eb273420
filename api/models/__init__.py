"""API request and response models."""

from api.models.requests import (
    CloseCampaignRequest,
    ConfirmCampaignRequest,
    PrepareCampaignRequest,
    RecordPurchaseRequest,
    TierRequest,
)
from api.models.responses import (
    ActivationTxResponse,
    AnalyticsOverviewItem,
    AnalyticsResponse,
    CampaignListResponse,
    CampaignResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    HistoryResponse,
    PackHistoryItem,
    TierBreakdownItem,
    PurchaseResponse,
    RevealResponse,
)

__all__ = [
    "CloseCampaignRequest",
    "ConfirmCampaignRequest",
    "PrepareCampaignRequest",
    "RecordPurchaseRequest",
    "TierRequest",
    "ActivationTxResponse",
    "AnalyticsOverviewItem",
    "AnalyticsResponse",
    "CampaignListResponse",
    "CampaignResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "HistoryResponse",
    "PackHistoryItem",
    "TierBreakdownItem",
    "PurchaseResponse",
    "RevealResponse",
]
