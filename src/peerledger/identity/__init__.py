"""Identity & stake ledger: registered principals, roles, locked stake."""

from .ledger import MAX_ROLES, ROLES, IdentityLedger, User

__all__ = ["IdentityLedger", "User", "ROLES", "MAX_ROLES"]
