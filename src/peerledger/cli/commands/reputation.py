"""Reputation voting and finalization commands."""

from __future__ import annotations

import argparse

from ..utils import show, submit


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``reputation`` command tree."""
    rep_parser = subparsers.add_parser("reputation", help="Vote on and finalize reputation")
    rep_sub = rep_parser.add_subparsers(dest="reputation_command", required=True)

    vote_p = rep_sub.add_parser("vote", help="Score a target (0-100), once per target")
    vote_p.add_argument("target", help="Principal being scored")
    vote_p.add_argument("score", type=int, help="Score 0-100")
    vote_p.set_defaults(func=cmd_reputation_vote)

    finalize_p = rep_sub.add_parser("finalize", help="Add in-window votes to reputation (identity authority)")
    finalize_p.add_argument("target", help="Principal to finalize")
    finalize_p.set_defaults(func=cmd_reputation_finalize)

    show_p = rep_sub.add_parser("show", help="Show votes and windowed total for a target")
    show_p.add_argument("target", help="Principal to inspect")
    show_p.set_defaults(func=cmd_reputation_show)


def cmd_reputation_vote(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.vote_on_reputation(caller, args.target, args.score))


def cmd_reputation_finalize(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.finalize_reputation(caller, args.target))


def cmd_reputation_show(args: argparse.Namespace) -> int:
    def read(system):
        user = system.get_user(args.target)
        return {
            "target": args.target,
            "reputation": user.reputation if user else None,
            "windowed_total": system.reputation.windowed_total(args.target),
            "votes": system.reputation.votes_for(args.target),
        }

    return show(read)
