"""Ledger-wide commands: funding, clock, status, operation log."""

from __future__ import annotations

import argparse

from ...core.exceptions import LedgerException
from ..config import get_cli_config
from ..output import output_error, output_result
from ..utils import load_system, show


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register ledger-wide commands on the CLI parser."""
    fund_parser = subparsers.add_parser("fund", help="Credit a principal's balance (genesis funding)")
    fund_parser.add_argument("principal", help="Principal to credit")
    fund_parser.add_argument("amount", type=int, help="Amount to credit")
    fund_parser.set_defaults(func=cmd_fund)

    advance_parser = subparsers.add_parser("advance", help="Advance the block clock")
    advance_parser.add_argument("blocks", type=int, nargs="?", default=1, help="Blocks to advance (default 1)")
    advance_parser.set_defaults(func=cmd_advance)

    status_parser = subparsers.add_parser("status", help="Show height, authorities and counters")
    status_parser.set_defaults(func=cmd_status)

    log_parser = subparsers.add_parser("log", help="Show committed operations")
    log_parser.add_argument("-n", "--limit", type=int, default=20, help="Most recent operations to show")
    log_parser.set_defaults(func=cmd_log)

    balance_parser = subparsers.add_parser("balance", help="Show a principal's balance")
    balance_parser.add_argument("principal", help="Principal to inspect")
    balance_parser.set_defaults(func=cmd_balance)


def cmd_fund(args: argparse.Namespace) -> int:
    system = load_system()
    response = system.credit(args.principal, args.amount)
    if not response.success:
        output_error(response.error or "credit failed", response.code)
        return 1
    system.save(get_cli_config().state_file)
    output_result(response.to_dict())
    return 0


def cmd_advance(args: argparse.Namespace) -> int:
    system = load_system()
    try:
        height = system.advance(args.blocks)
    except LedgerException as e:
        output_error(e.message, e.code.value)
        return 1
    system.save(get_cli_config().state_file)
    output_result({"height": height})
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    return show(
        lambda system: {
            "height": system.height,
            "authorities": {module: binding.principal for module, binding in system.authorities.items()},
            "users": system.store.count("users"),
            "disputes": system.dispute_count(),
            "reviews": system.review_count(),
            "custody": system.custody_balance(),
            "operations": len(system.operations()),
        }
    )


def cmd_log(args: argparse.Namespace) -> int:
    return show(lambda system: system.operations()[-args.limit :] if args.limit > 0 else [])


def cmd_balance(args: argparse.Namespace) -> int:
    return show(lambda system: {"principal": args.principal, "balance": system.balance(args.principal)})
