"""Identity & stake commands."""

from __future__ import annotations

import argparse

from ...identity.ledger import ROLES
from ..utils import show, submit


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``user`` command tree."""
    user_parser = subparsers.add_parser("user", help="Register principals and manage stake")
    user_sub = user_parser.add_subparsers(dest="user_command", required=True)

    register_p = user_sub.add_parser("register", help="Register the caller with a locked stake")
    register_p.add_argument("role", help=f"Initial role ({', '.join(ROLES)})")
    register_p.add_argument("profile_hash", help="Profile content hash")
    register_p.add_argument("stake", type=int, help="Stake to lock")
    register_p.set_defaults(func=cmd_user_register)

    role_p = user_sub.add_parser("add-role", help="Add a role to the caller")
    role_p.add_argument("role", help=f"Role to add ({', '.join(ROLES)})")
    role_p.set_defaults(func=cmd_user_add_role)

    profile_p = user_sub.add_parser("update-profile", help="Replace the caller's profile hash")
    profile_p.add_argument("profile_hash", help="New profile content hash")
    profile_p.set_defaults(func=cmd_user_update_profile)

    toggle_p = user_sub.add_parser("toggle", help="Flip a user's active flag (identity authority only)")
    toggle_p.add_argument("target", help="Principal to toggle")
    toggle_p.set_defaults(func=cmd_user_toggle)

    withdraw_p = user_sub.add_parser("withdraw", help="Withdraw the caller's stake (inactive users only)")
    withdraw_p.set_defaults(func=cmd_user_withdraw)

    show_p = user_sub.add_parser("show", help="Show a user record")
    show_p.add_argument("principal", help="Principal to show")
    show_p.set_defaults(func=cmd_user_show)

    trusted_p = user_sub.add_parser("trusted", help="Check both trust predicates for a principal")
    trusted_p.add_argument("principal", help="Principal to check")
    trusted_p.set_defaults(func=cmd_user_trusted)


def cmd_user_register(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.register(caller, args.role, args.profile_hash, args.stake))


def cmd_user_add_role(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.add_role(caller, args.role))


def cmd_user_update_profile(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.update_profile(caller, args.profile_hash))


def cmd_user_toggle(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.toggle_active(caller, args.target))


def cmd_user_withdraw(args: argparse.Namespace) -> int:
    return submit(lambda system, caller: system.withdraw_stake(caller))


def cmd_user_show(args: argparse.Namespace) -> int:
    return show(lambda system: system.get_user(args.principal), missing=f"User not found: {args.principal}")


def cmd_user_trusted(args: argparse.Namespace) -> int:
    return show(
        lambda system: {
            "principal": args.principal,
            "trusted": system.is_trusted(args.principal),
            "trusted_user": system.is_trusted_user(args.principal),
        }
    )
