"""CLI command modules for PeerLedger.

Each module exposes a ``register(subparsers)`` function that wires up
its argparse sub-commands and sets ``parser.set_defaults(func=handler)``.
"""

from . import authority, disputes, ledger, reputation, reviews, settings, users

# All command modules with register() functions, in registration order.
COMMAND_MODULES = [
    ledger,
    authority,
    users,
    reputation,
    disputes,
    reviews,
    settings,
]

__all__ = ["COMMAND_MODULES"]
