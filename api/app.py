"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:create_app --factory --reload

    # Or through the CLI
    python -m packvault_cli serve
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.deps import build_campaign_service
from api.errors import (
    generic_error_handler,
    packvault_error_handler,
)
from api.routes import campaigns, health
from core.campaigns import CampaignStore
from core.config.runtime import RuntimeConfig, load_runtime_config
from core.ledger import LedgerGateway
from core.schemas.errors import PackVaultException


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def create_app(
    config: Optional[RuntimeConfig] = None,
    *,
    store: Optional[CampaignStore] = None,
    gateway: Optional[LedgerGateway] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Runtime configuration (default: config file + environment)
        store: Campaign store (default: in-memory)
        gateway: Ledger gateway (default: built from config.ledger)
    """
    if config is None:
        config = load_runtime_config()
    configure_logging(config.log_level)

    service = build_campaign_service(config, store=store, gateway=gateway)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await service.gateway.close()

    app = FastAPI(
        title="PackVault API",
        description="""
HTTP API for committed mystery-pack reward campaigns.

## Lifecycle

- **POST /campaigns/prepare** - Generate and commit packs (PENDING)
- **GET /campaigns/{id}/activation-tx** - Partially-signed activation transaction
- **POST /campaigns/{id}/confirm** - Activate once the transaction is final (ACTIVE)
- **POST /campaigns/{id}/purchase** - Index an on-chain purchase
- **GET /campaigns/{id}/reveal/{pack_index}** - Reveal a purchased pack with its proof
- **POST /campaigns/{id}/close** - Close the campaign (CLOSED)

64-bit integers are decimal strings; byte buffers are arrays of ints.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.campaign_service = service

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.api.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(PackVaultException, packvault_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router, prefix=config.api.prefix)
    app.include_router(campaigns.router, prefix=config.api.prefix)

    return app
