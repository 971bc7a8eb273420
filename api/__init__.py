"""
PackVault HTTP API (FastAPI)

- POST /api/campaigns/prepare - Create a committed campaign
- POST /api/campaigns/{id}/confirm - Activate after the on-chain transaction
- POST /api/campaigns/{id}/purchase - Record a purchase
- GET  /api/campaigns/{id}/reveal/{pack_index} - Reveal a purchased pack
- GET  /api/health - Health check

Usage:
    uvicorn api.app:create_app --factory --reload
"""

__version__ = "0.1.0"
