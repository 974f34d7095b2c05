"""Dispute commands."""

from __future__ import annotations

import argparse

from ..utils import parse_vote, show, submit


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``dispute`` command tree."""
    dispute_parser = subparsers.add_parser("dispute", help="Raise, vote on and resolve disputes")
    dispute_sub = dispute_parser.add_subparsers(dest="dispute_command", required=True)

    raise_p = dispute_sub.add_parser("raise", help="Raise a dispute (trusted principals only)")
    raise_p.add_argument("target", help="Principal the dispute is against")
    raise_p.add_argument("dispute_type", help="Dispute type tag, e.g. plagiarism")
    raise_p.set_defaults(func=cmd_dispute_raise)

    vote_p = dispute_sub.add_parser("vote", help="Cast a yes/no ballot")
    vote_p.add_argument("dispute_id", type=int, help="Dispute id")
    vote_p.add_argument("ballot", type=parse_vote, help="yes or no")
    vote_p.set_defaults(func=cmd_dispute_vote)

    resolve_p = dispute_sub.add_parser("resolve", help="Close a dispute by majority")
    resolve_p.add_argument("dispute_id", type=int, help="Dispute id")
    resolve_p.set_defaults(func=cmd_dispute_resolve)

    show_p = dispute_sub.add_parser("show", help="Show a dispute")
    show_p.add_argument("dispute_id", type=int, help="Dispute id")
    show_p.set_defaults(func=cmd_dispute_show)


def cmd_dispute_raise(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.raise_dispute(caller, args.target, args.dispute_type))


def cmd_dispute_vote(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.vote_on_dispute(caller, args.dispute_id, args.ballot))


def cmd_dispute_resolve(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.resolve_dispute(caller, args.dispute_id))


def cmd_dispute_show(args: argparse.Namespace) -> int:
    return show(lambda system: system.get_dispute(args.dispute_id), missing=f"Dispute not found: {args.dispute_id}")
