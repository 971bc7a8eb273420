"""
Runtime Configuration Module

Provides configuration loading for the ledger gateway and the HTTP API.
"""

from .runtime import ApiConfig, LedgerConfig, RuntimeConfig, load_runtime_config

__all__ = [
    "ApiConfig",
    "LedgerConfig",
    "RuntimeConfig",
    "load_runtime_config",
]
