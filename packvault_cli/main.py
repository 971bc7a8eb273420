"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m packvault_cli commit <packs.json> [--proofs] [--expect-root HEX] [--json]
    python -m packvault_cli prove <packs.json> --index N [--json]
    python -m packvault_cli address campaign --seed S
    python -m packvault_cli address receipt --campaign C --buyer B --nonce N
    python -m packvault_cli address vault --campaign C
    python -m packvault_cli serve [--host HOST] [--port PORT]

Environment Variables:
    PACKVAULT_PROGRAM_ID        Program address (also PROGRAM_ID)
    PACKVAULT_RPC_URL           Solana RPC endpoint (also SOLANA_RPC_URL)
    FEE_RECIPIENT_PRIVATE_KEY   Fee recipient secret key, JSON array of 64 ints
    PACKVAULT_LOG_LEVEL         Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import traceback
from pathlib import Path
from typing import Sequence

from packvault_cli.commands import address, commit


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def serve_cmd(args: argparse.Namespace) -> int:
    # Imported lazily so offline commands do not pull in the web stack
    from packvault_cli.commands.serve import serve_cmd as _serve

    return _serve(args)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="packvault",
        description="PackVault CLI - Commit pack sets, derive addresses, and run the API.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./packvault.yaml or ~/.config/packvault/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides PACKVAULT_LOG_LEVEL)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on error",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- commit command ---
    commit_parser = subparsers.add_parser(
        "commit",
        help="Compute the commitment root of a pack file",
        description="Build the Merkle commitment over a JSON pack file and print its root.",
    )
    commit_parser.add_argument("packs_file", type=str, help="Path to pack JSON file")
    commit_parser.add_argument(
        "--proofs",
        action="store_true",
        default=False,
        help="Also print the inclusion proof of every pack",
    )
    commit_parser.add_argument(
        "--expect-root",
        type=str,
        default=None,
        help="Hex root to compare against (exit 2 on mismatch)",
    )
    commit_parser.add_argument("--json", action="store_true", help="JSON output")
    commit_parser.set_defaults(func=commit.commit_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Print the inclusion proof of one pack",
    )
    prove_parser.add_argument("packs_file", type=str, help="Path to pack JSON file")
    prove_parser.add_argument("--index", "-i", type=int, required=True, help="Pack index")
    prove_parser.add_argument("--json", action="store_true", help="JSON output")
    prove_parser.set_defaults(func=commit.prove_cmd)

    # --- address command ---
    address_parser = subparsers.add_parser(
        "address",
        help="Derive program addresses",
        description="Derive campaign, receipt and vault addresses offline.",
    )
    address_subparsers = address_parser.add_subparsers(dest="kind", help="Address kind")

    addr_campaign = address_subparsers.add_parser("campaign", help="Campaign account")
    addr_campaign.add_argument("--seed", type=str, required=True, help="Campaign seed (u64)")

    addr_receipt = address_subparsers.add_parser("receipt", help="Purchase receipt account")
    addr_receipt.add_argument("--campaign", type=str, required=True, help="Campaign address")
    addr_receipt.add_argument("--buyer", type=str, required=True, help="Buyer wallet")
    addr_receipt.add_argument("--nonce", type=str, required=True, help="Purchase nonce (u64)")

    addr_vault = address_subparsers.add_parser("vault", help="Campaign SOL vault")
    addr_vault.add_argument("--campaign", type=str, required=True, help="Campaign address")

    for sub in (addr_campaign, addr_receipt, addr_vault):
        sub.add_argument("--program-id", type=str, default=None, help="Program id (overrides config)")
        sub.add_argument("--json", action="store_true", help="JSON output")
        sub.set_defaults(func=address.address_cmd)

    address_parser.set_defaults(func=lambda args: address_parser.print_help() or EXIT_RUNTIME_ERROR)

    # --- serve command ---
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API",
    )
    serve_parser.add_argument("--host", type=str, default="127.0.0.1", help="Bind host")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")
    serve_parser.set_defaults(func=serve_cmd)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    setup_logging(level=args.log_level or os.getenv("PACKVAULT_LOG_LEVEL", "INFO"))

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
