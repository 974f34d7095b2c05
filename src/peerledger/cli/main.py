#!/usr/bin/env python3
"""
PeerLedger CLI - trust & governance ledger operated from the shell.

Commands:
  peerledger fund <principal> <amount>       Credit a balance
  peerledger advance [blocks]                Advance the block clock
  peerledger authority bind <module> <p>     Bind a module authority
  peerledger user register <role> <hash> <stake>
  peerledger reputation vote <target> <score>
  peerledger dispute raise <target> <type>
  peerledger review submit ...
  peerledger config set <key> <value>

State is persisted to a JSON snapshot after every committed operation.
"""

from __future__ import annotations

import argparse
import logging
import sys

from ..core.logging import configure_logging
from .commands import COMMAND_MODULES
from .config import CLIConfig, set_cli_config

logger = logging.getLogger(__name__)


def app() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="peerledger",
        description="Identity, reputation and dispute ledger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  peerledger fund alice 5000                          Genesis funding
  peerledger --caller admin authority bind identity admin
  peerledger --caller alice user register author <64-char-hash> 1000
  peerledger --caller bob reputation vote alice 80
  peerledger --caller admin reputation finalize alice
  peerledger --caller carol dispute raise alice plagiarism
  peerledger --json user show alice                   JSON output
        """,
    )

    parser.add_argument("--state", help="State snapshot file (default: PEERLEDGER_STATE_FILE)")
    parser.add_argument("--caller", help="Acting principal (default: PEERLEDGER_CALLER)")
    parser.add_argument(
        "--output",
        "-o",
        choices=["json", "text"],
        default=None,
        help="Output format (default: text)",
    )
    parser.add_argument("--json", action="store_const", const="json", dest="output", help="Shorthand for --output json")
    parser.add_argument("--log-level", default=None, help="Logging level (default: PEERLEDGER_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for module in COMMAND_MODULES:
        module.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = app()
    args = parser.parse_args(argv)

    set_cli_config(CLIConfig.load(state_file=args.state, caller=args.caller, output=args.output))
    configure_logging(level=args.log_level)

    handler = getattr(args, "func", None)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
