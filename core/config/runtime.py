"""
Runtime Configuration

Central configuration for the ledger gateway and the HTTP API.

Configuration objects are frozen: they are built once at startup and passed
explicitly to the components that need them. There is no module-level
default instance.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


DEFAULT_RPC_URL = "https://api.devnet.solana.com"


@dataclass(frozen=True)
class LedgerConfig:
    """
    Configuration for the ledger gateway.

    Attributes:
        rpc_url: Solana JSON-RPC endpoint
        program_id: Base58 address of the pack program
        fee_recipient_secret: 64-byte secret key of the fee recipient,
            as a JSON array string. Only needed to build activation transactions.
        commitment: Commitment level for reads
    """
    program_id: str
    rpc_url: str = DEFAULT_RPC_URL
    fee_recipient_secret: Optional[str] = field(default=None, repr=False)
    commitment: str = "confirmed"


@dataclass(frozen=True)
class ApiConfig:
    """Configuration for the HTTP API."""
    prefix: str = "/api"
    cors_origins: tuple[str, ...] = ("*",)


@dataclass(frozen=True)
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML or JSON file
    - Programmatic construction
    """
    ledger: LedgerConfig
    api: ApiConfig = field(default_factory=ApiConfig)
    log_level: str = "INFO"

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - PACKVAULT_RPC_URL: Solana RPC endpoint (also checks SOLANA_RPC_URL)
        - PACKVAULT_PROGRAM_ID: Program address (also checks PROGRAM_ID)
        - FEE_RECIPIENT_PRIVATE_KEY: Fee recipient secret key (JSON array)
        - PACKVAULT_COMMITMENT: Read commitment level
        - PACKVAULT_LOG_LEVEL: Log level
        """
        overrides: dict[str, Any] = {}

        rpc_url = os.getenv("PACKVAULT_RPC_URL") or os.getenv("SOLANA_RPC_URL")
        if rpc_url:
            overrides.setdefault("ledger", {})["rpc_url"] = rpc_url
        program_id = os.getenv("PACKVAULT_PROGRAM_ID") or os.getenv("PROGRAM_ID")
        if program_id:
            overrides.setdefault("ledger", {})["program_id"] = program_id
        if os.getenv("FEE_RECIPIENT_PRIVATE_KEY"):
            overrides.setdefault("ledger", {})["fee_recipient_secret"] = os.getenv(
                "FEE_RECIPIENT_PRIVATE_KEY"
            )
        if os.getenv("PACKVAULT_COMMITMENT"):
            overrides.setdefault("ledger", {})["commitment"] = os.getenv("PACKVAULT_COMMITMENT")

        if os.getenv("PACKVAULT_LOG_LEVEL"):
            overrides["log_level"] = os.getenv("PACKVAULT_LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Raises:
            ValueError: If no program id is configured
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """
        Load configuration from a dictionary (supports partial data).

        Raises:
            ValueError: If ledger.program_id is missing
        """
        ledger_data = dict(data.get("ledger") or {})
        api_data = dict(data.get("api") or {})

        if not ledger_data.get("program_id"):
            raise ValueError(
                "ledger.program_id is required (set PACKVAULT_PROGRAM_ID or PROGRAM_ID)"
            )

        if "cors_origins" in api_data:
            api_data["cors_origins"] = tuple(api_data["cors_origins"])

        return cls(
            ledger=LedgerConfig(**ledger_data),
            api=ApiConfig(**api_data) if api_data else ApiConfig(),
            log_level=data.get("log_level", "INFO"),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        ledger = self.ledger
        if "ledger" in overrides:
            ledger = replace(ledger, **overrides["ledger"])

        return replace(
            self,
            ledger=ledger,
            log_level=overrides.get("log_level", self.log_level),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary. The fee recipient secret is never included."""
        return {
            "ledger": {
                "rpc_url": self.ledger.rpc_url,
                "program_id": self.ledger.program_id,
                "commitment": self.ledger.commitment,
                "fee_recipient_configured": self.ledger.fee_recipient_secret is not None,
            },
            "api": {
                "prefix": self.api.prefix,
                "cors_origins": list(self.api.cors_origins),
            },
            "log_level": self.log_level,
        }


def load_runtime_config(path: str | Path | None = None) -> RuntimeConfig:
    """
    Load RuntimeConfig from a config file, then overlay environment variables.

    Search order when no path is given:
      1. ./packvault.yaml
      2. ./packvault.json
      3. ~/.config/packvault/config.yaml

    Falls back to environment variables alone when no file exists.
    """
    if path is not None:
        candidates = [Path(path)]
    else:
        candidates = [
            Path.cwd() / "packvault.yaml",
            Path.cwd() / "packvault.json",
            Path.home() / ".config" / "packvault" / "config.yaml",
        ]

    data: dict[str, Any] = {}
    for candidate in candidates:
        if candidate.exists():
            with open(candidate) as f:
                if candidate.suffix == ".json":
                    data = json.load(f)
                else:
                    import yaml
                    data = yaml.safe_load(f) or {}
            break
    else:
        if path is not None:
            raise FileNotFoundError(f"Config file not found: {path}")

    # Environment variables ALWAYS override file values
    overrides = RuntimeConfig._get_env_overrides()
    merged = dict(data)
    merged["ledger"] = {**(data.get("ledger") or {}), **overrides.get("ledger", {})}
    if "log_level" in overrides:
        merged["log_level"] = overrides["log_level"]

    return RuntimeConfig.from_dict(merged)
