"""Authority-gated configuration commands.

Usage::

    peerledger --caller admin config set min-stake 2000
    peerledger config show
"""

from __future__ import annotations

import argparse

from ..utils import show, submit

# key -> (setter name on LedgerSystem, help)
SETTERS = {
    "min-stake": ("set_min_stake", "Minimum registration stake (identity)"),
    "max-reputation": ("set_max_reputation", "Reputation cap (identity)"),
    "voting-period": ("set_voting_period", "Reputation vote window in blocks (identity)"),
    "ledger-trust-threshold": ("set_ledger_trust_threshold", "Identity ledger trust threshold (identity)"),
    "trust-threshold": ("set_trust_threshold", "Reputation needed to raise disputes (governance)"),
    "dispute-vote-period": ("set_dispute_vote_period", "Dispute ballot window in blocks (governance)"),
    "dispute-penalty": ("set_dispute_penalty", "Reputation penalty for upheld disputes (governance)"),
    "review-fee": ("set_review_fee", "Review submission fee (reviews)"),
    "max-reviews": ("set_max_reviews", "Review registry capacity (reviews)"),
}


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``config`` command tree."""
    config_parser = subparsers.add_parser("config", help="Show or change ledger configuration")
    config_sub = config_parser.add_subparsers(dest="config_command", required=True, metavar="SUBCOMMAND")

    show_p = config_sub.add_parser("show", help="Show current configuration values")
    show_p.set_defaults(func=cmd_config_show)

    set_p = config_sub.add_parser("set", help="Set a configuration value (module authority only)")
    set_p.add_argument("key", choices=sorted(SETTERS), help="Configuration key")
    set_p.add_argument("value", type=int, help="New value")
    set_p.set_defaults(func=cmd_config_set)

    range_p = config_sub.add_parser("score-range", help="Set the review score range (reviews authority)")
    range_p.add_argument("min_score", type=int)
    range_p.add_argument("max_score", type=int)
    range_p.set_defaults(func=cmd_config_score_range)

    toggle_p = config_sub.add_parser("toggle-reviews", help="Enable or disable review submissions")
    toggle_p.set_defaults(func=cmd_config_toggle_reviews)


def cmd_config_set(args: argparse.Namespace) -> int:
    setter, _ = SETTERS[args.key]
    return submit(lambda system, caller: getattr(system, setter)(caller, args.value))


def cmd_config_score_range(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.set_score_range(caller, args.min_score, args.max_score))


def cmd_config_toggle_reviews(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.toggle_review_registry(caller))


def cmd_config_show(args: argparse.Namespace) -> int:
    def read(system):
        low, high = system.reviews.score_range
        return {
            "min-stake": system.identity.min_stake,
            "max-reputation": system.identity.max_reputation,
            "voting-period": system.identity.voting_period,
            "ledger-trust-threshold": system.identity.trust_threshold,
            "trust-threshold": system.disputes.trust_threshold,
            "dispute-vote-period": system.disputes.vote_period,
            "dispute-penalty": system.disputes.penalty,
            "dispute-window-mode": system.disputes.window_mode,
            "review-fee": system.reviews.fee,
            "max-reviews": system.store.get_scalar("reviews.max_reviews"),
            "review-score-range": [low, high],
            "reviews-enabled": system.reviews.enabled,
        }

    return show(read)
