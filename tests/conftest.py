"""
Pytest configuration and shared fixtures for PackVault tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_common = importlib.import_module("fixtures.common")

FakeRpcClient = _common.FakeRpcClient
make_ledger_config = _common.make_ledger_config
make_runtime_config = _common.make_runtime_config
make_tiers = _common.make_tiers


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def rpc_client():
    """Fresh in-memory ledger double."""
    return FakeRpcClient()


@pytest.fixture
def gateway(rpc_client):
    """LedgerGateway wired to the ledger double, with a fee recipient key."""
    from core.ledger import LedgerGateway

    return LedgerGateway(make_ledger_config(), client=rpc_client)


@pytest.fixture
def store():
    from core.campaigns import InMemoryCampaignStore

    return InMemoryCampaignStore()


@pytest.fixture
def service(store, gateway):
    from core.campaigns import CampaignService

    return CampaignService(store, gateway)


@pytest.fixture
def tiers():
    return make_tiers()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep developer environment variables out of config-sensitive tests."""
    for name in (
        "PACKVAULT_RPC_URL",
        "SOLANA_RPC_URL",
        "PACKVAULT_PROGRAM_ID",
        "PROGRAM_ID",
        "FEE_RECIPIENT_PRIVATE_KEY",
        "PACKVAULT_COMMITMENT",
        "PACKVAULT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
