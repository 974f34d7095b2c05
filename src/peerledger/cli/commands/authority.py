"""Authority binding commands."""

from __future__ import annotations

import argparse

from ..utils import show, submit

MODULES = ("identity", "governance", "reviews")


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``authority`` command tree."""
    authority_parser = subparsers.add_parser("authority", help="Bind or inspect module authorities")
    authority_sub = authority_parser.add_subparsers(dest="authority_command", required=True)

    bind_p = authority_sub.add_parser("bind", help="Bind a module's authority (once, irreversibly)")
    bind_p.add_argument("module", choices=MODULES, help="Module to bind")
    bind_p.add_argument("principal", help="Principal that will control the module")
    bind_p.set_defaults(func=cmd_authority_bind)

    show_p = authority_sub.add_parser("show", help="Show bound authorities")
    show_p.set_defaults(func=cmd_authority_show)


def cmd_authority_bind(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.bind_authority(caller, args.module, args.principal))


def cmd_authority_show(args: argparse.Namespace) -> int:
    return show(lambda system: {module: system.get_authority(module) for module in MODULES})
