"""
CLI Address Command

Derive program addresses without touching the network.

Usage:
    packvault address campaign --seed 42 [--program-id ID]
    packvault address receipt --campaign C --buyer B --nonce N [--program-id ID]
    packvault address vault --campaign C [--program-id ID]

The program id defaults to the configured one (PACKVAULT_PROGRAM_ID).
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.config.runtime import load_runtime_config
from core.ledger.addresses import (
    campaign_address,
    receipt_address,
    to_pubkey,
    vault_address,
)
from core.schemas.encoding import parse_u64


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def _resolve_program_id(args: Namespace) -> str:
    if args.program_id:
        return args.program_id
    return load_runtime_config(args.config).ledger.program_id


def address_cmd(args: Namespace) -> int:
    """Print a derived address and its bump."""
    try:
        program_id = to_pubkey(_resolve_program_id(args))

        if args.kind == "campaign":
            address, bump = campaign_address(program_id, parse_u64(args.seed))
        elif args.kind == "receipt":
            address, bump = receipt_address(
                program_id,
                to_pubkey(args.campaign),
                to_pubkey(args.buyer),
                parse_u64(args.nonce),
            )
        else:
            address, bump = vault_address(program_id, to_pubkey(args.campaign))
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps({"kind": args.kind, "address": str(address), "bump": bump}))
    else:
        print(f"{args.kind}: {address} (bump {bump})")
    return EXIT_SUCCESS
