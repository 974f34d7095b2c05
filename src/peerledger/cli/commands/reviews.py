"""Review registry commands."""

from __future__ import annotations

import argparse

from ...reviews.registry import REVIEW_TYPES
from ..utils import show, submit


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``review`` command tree."""
    review_parser = subparsers.add_parser("review", help="Submit and validate peer reviews")
    review_sub = review_parser.add_subparsers(dest="review_command", required=True)

    submit_p = review_sub.add_parser("submit", help="Submit a review (pays the review fee)")
    submit_p.add_argument("paper_author", help="Author principal of the paper")
    submit_p.add_argument("paper_id", type=int, help="Paper id")
    submit_p.add_argument("review_hash", help="Review content hash")
    submit_p.add_argument("score", type=int, help="Review score")
    submit_p.add_argument("--category", default="general", help="Review category")
    submit_p.add_argument("--type", dest="review_type", default="peer", help=f"One of {', '.join(REVIEW_TYPES)}")
    submit_p.set_defaults(func=cmd_review_submit)

    update_p = review_sub.add_parser("update", help="Update your own review")
    update_p.add_argument("review_id", type=int, help="Review id")
    update_p.add_argument("score", type=int, help="New score")
    update_p.add_argument("review_hash", help="New content hash")
    update_p.set_defaults(func=cmd_review_update)

    validate_p = review_sub.add_parser("validate", help="Mark a review validated (reviews authority)")
    validate_p.add_argument("review_id", type=int, help="Review id")
    validate_p.set_defaults(func=cmd_review_validate)

    show_p = review_sub.add_parser("show", help="Show a review")
    show_p.add_argument("review_id", type=int, help="Review id")
    show_p.set_defaults(func=cmd_review_show)

    history_p = review_sub.add_parser("history", help="Show a review's revision history")
    history_p.add_argument("review_id", type=int, help="Review id")
    history_p.set_defaults(func=cmd_review_history)


def cmd_review_submit(args: argparse.Namespace) -> int:
    return submit(
        lambda system, caller: system.submit_review(
            caller,
            args.paper_author,
            args.paper_id,
            args.review_hash,
            args.score,
            args.category,
            args.review_type,
        )
    )


def cmd_review_update(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.update_review(caller, args.review_id, args.score, args.review_hash))


def cmd_review_validate(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.validate_review(caller, args.review_id))


def cmd_review_show(args: argparse.Namespace) -> int:
    return show(lambda system: system.get_review(args.review_id), missing=f"Review not found: {args.review_id}")


def cmd_review_history(args: argparse.Namespace) -> int:
    return show(lambda system: system.get_review_updates(args.review_id))
