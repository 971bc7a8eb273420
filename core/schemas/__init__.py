"""
Schemas

Purpose: Export the public API for the schemas module.
Domain models, read views, integer encoding and the error taxonomy.
"""

# Domain models
from .campaign import (
    MAX_TIERS,
    MAX_TOTAL_PACKS,
    PROBABILITY_TOLERANCE,
    Campaign,
    CampaignStatus,
    Pack,
    Purchase,
    Tier,
)

# Integer encoding
from .encoding import (
    U32_MAX,
    U64_MAX,
    bytes_to_list,
    parse_u64,
    read_u32_le,
    read_u64_le,
    u32_le,
    u64_le,
)

# Error models and exceptions
from .errors import (
    CommitmentMismatchException,
    ErrorCodes,
    InvalidStateException,
    LedgerConfigurationException,
    LedgerInconsistencyException,
    LedgerUnavailableException,
    NotFoundException,
    PackVaultError,
    PackVaultException,
    ValidationFailureException,
)

# Read views
from .views import (
    AnalyticsOverview,
    CampaignAnalytics,
    CampaignHistory,
    PackHistoryEntry,
    RevealResult,
    TierBreakdown,
)

__all__ = [
    # Domain
    "MAX_TIERS",
    "MAX_TOTAL_PACKS",
    "PROBABILITY_TOLERANCE",
    "Campaign",
    "CampaignStatus",
    "Pack",
    "Purchase",
    "Tier",
    # Encoding
    "U32_MAX",
    "U64_MAX",
    "bytes_to_list",
    "parse_u64",
    "read_u32_le",
    "read_u64_le",
    "u32_le",
    "u64_le",
    # Errors
    "CommitmentMismatchException",
    "ErrorCodes",
    "InvalidStateException",
    "LedgerConfigurationException",
    "LedgerInconsistencyException",
    "LedgerUnavailableException",
    "NotFoundException",
    "PackVaultError",
    "PackVaultException",
    "ValidationFailureException",
    # Views
    "AnalyticsOverview",
    "CampaignAnalytics",
    "CampaignHistory",
    "PackHistoryEntry",
    "RevealResult",
    "TierBreakdown",
]
