"""
CLI Serve Command

Run the HTTP API under uvicorn.
"""

from __future__ import annotations

import logging
from argparse import Namespace

import uvicorn

from api.app import create_app
from core.config.runtime import load_runtime_config


logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0


def serve_cmd(args: Namespace) -> int:
    config = load_runtime_config(args.config)
    logger.info(f"Serving PackVault API on {args.host}:{args.port} (rpc={config.ledger.rpc_url})")
    uvicorn.run(create_app(config), host=args.host, port=args.port)
    return EXIT_SUCCESS
