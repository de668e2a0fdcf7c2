#!/usr/bin/env python3
"""
Persona Protocol CLI: analyze one wallet from a JSON file.

Reads {"walletAddress": ..., "transactions": [...]} from the given file and
prints the persona JSON to stdout. Errors go to stderr with exit code 1.

Usage:
  persona-protocol examples/wallet1.json
  persona-protocol wallet.json --now 2024-06-01T00:00:00Z --pretty
  py -m persona_protocol.tools.analyze_wallet wallet.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from persona_protocol.analysis_engine.models import parse_timestamp
from persona_protocol.errors import WalletAnalysisError
from persona_protocol.persona_logging import get_logger
from persona_protocol.wallet_analysis import analyze_wallet

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="persona-protocol",
        description="Persona Protocol - Web3 wallet analysis. Prints a persona JSON for one wallet.",
    )
    ap.add_argument("input", nargs="?", type=Path, help="Path to JSON file containing wallet data")
    ap.add_argument(
        "--now",
        help="Evaluation instant (ISO-8601) for recent-activity and open-ended holds; default: current time",
    )
    ap.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    return ap


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.input is None:
        ap.print_help(sys.stderr)
        return 1

    now = None
    if args.now:
        now = parse_timestamp(args.now)
        if now is None:
            print(f"Error: --now is not a valid ISO-8601 date: {args.now}", file=sys.stderr)
            return 1

    path = args.input.resolve()
    if not path.is_file():
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        return 1

    try:
        output = analyze_wallet(path.read_bytes(), now=now, indent=2 if args.pretty else None)
    except WalletAnalysisError as e:
        logger.error("cli_analysis_failed", path=str(path), error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
