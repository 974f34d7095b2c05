# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Identity & stake ledger.

Registers principals against a locked stake, tracks their role set,
profile reference and reputation, and exposes the trust predicates other
modules gate on.

Stake lifecycle:
- ``register`` moves the stake from the caller into the identity custody
  account and creates the User record.
- The authority deactivates a user with ``toggle_active``; stake stays locked.
- ``withdraw_stake`` on an inactive user returns the full stake and zeroes
  it. Calling it again transfers nothing and still succeeds.

Two trust thresholds exist and are configured independently: the ledger's
own ``is_trusted_user`` (default 5000 on a 0..10000 scale) and whatever
threshold a caller passes to ``is_trusted`` (the dispute registry uses its
own, default 50).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from ..core.authority import AuthorityBinding
from ..core.config import LedgerSettings
from ..core.exceptions import (
    AuthorizationException,
    CapacityError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    ValidationException,
)
from ..core.funds import Funds, custody_account
from ..core.store import StateStore

logger = logging.getLogger(__name__)

MODULE = "identity"
USERS = "users"
ROLES = ("author", "reviewer", "verifier")
MAX_ROLES = 3


@dataclass(frozen=True)
class User:
    """A registered principal."""

    roles: tuple[str, ...]
    reputation: int
    stake: int
    profile_hash: str
    registered_at: int
    active: bool

    @property
    def role(self) -> str:
        """Role given at registration."""
        return self.roles[0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "roles": list(self.roles),
            "reputation": self.reputation,
            "stake": self.stake,
            "profile_hash": self.profile_hash,
            "registered_at": self.registered_at,
            "active": self.active,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        return cls(
            roles=tuple(data["roles"]),
            reputation=data["reputation"],
            stake=data["stake"],
            profile_hash=data["profile_hash"],
            registered_at=data["registered_at"],
            active=data["active"],
        )


class IdentityLedger:
    """Users, roles, custody of stake, and reputation counters."""

    def __init__(self, store: StateStore, clock, funds: Funds, settings: LedgerSettings):
        self.store = store
        self.clock = clock
        self.funds = funds
        self.hash_length = settings.profile_hash_length
        self.authority = AuthorityBinding(store, MODULE, settings.null_principal)
        self.custody = custody_account(MODULE)

        store.define_table(USERS, User)
        store.seed_scalar("identity.min_stake", settings.min_stake)
        store.seed_scalar("identity.max_reputation", settings.max_reputation)
        store.seed_scalar("identity.voting_period", settings.voting_period)
        store.seed_scalar("identity.trust_threshold", settings.ledger_trust_threshold)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def min_stake(self) -> int:
        return self.store.get_scalar("identity.min_stake")

    @property
    def max_reputation(self) -> int:
        return self.store.get_scalar("identity.max_reputation")

    @property
    def voting_period(self) -> int:
        return self.store.get_scalar("identity.voting_period")

    @property
    def trust_threshold(self) -> int:
        return self.store.get_scalar("identity.trust_threshold")

    def _set_positive(self, caller: str, name: str, value: int, code: ErrorCode) -> int:
        self.authority.require(caller)
        if value <= 0:
            raise ValidationException(f"{name} must be positive", code=code, field=name, value=value)
        self.store.set_scalar(f"identity.{name}", value)
        logger.info("identity.%s set to %d", name, value)
        return value

    def set_min_stake(self, caller: str, value: int) -> int:
        return self._set_positive(caller, "min_stake", value, ErrorCode.INSUFFICIENT_STAKE)

    def set_max_reputation(self, caller: str, value: int) -> int:
        return self._set_positive(caller, "max_reputation", value, ErrorCode.INVALID_REPUTATION)

    def set_voting_period(self, caller: str, value: int) -> int:
        return self._set_positive(caller, "voting_period", value, ErrorCode.INVALID_PARAMETER)

    def set_trust_threshold(self, caller: str, value: int) -> int:
        return self._set_positive(caller, "trust_threshold", value, ErrorCode.INVALID_PARAMETER)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_user(self, principal: str) -> User | None:
        return self.store.get(USERS, principal)

    def get_roles(self, principal: str) -> tuple[str, ...]:
        user = self.get_user(principal)
        return user.roles if user else ()

    def is_registered(self, principal: str) -> bool:
        return self.store.contains(USERS, principal)

    def is_trusted(self, principal: str, threshold: int) -> bool:
        """Active and reputation at or above ``threshold``."""
        user = self.get_user(principal)
        return user is not None and user.active and user.reputation >= threshold

    def is_trusted_user(self, principal: str) -> bool:
        """``is_trusted`` against the ledger's own threshold."""
        return self.is_trusted(principal, self.trust_threshold)

    def custody_balance(self) -> int:
        return self.funds.balance(self.custody)

    def require_user(self, principal: str) -> User:
        """Return the principal's record or fail with NotAuthorized."""
        user = self.get_user(principal)
        if user is None:
            raise AuthorizationException(
                f"{principal} is not registered",
                code=ErrorCode.NOT_AUTHORIZED,
                principal=principal,
            )
        return user

    def require_active(self, principal: str) -> User:
        user = self.require_user(principal)
        if not user.active:
            raise ConflictError(f"{principal} is not active", ErrorCode.NOT_ACTIVE, existing_id=principal)
        return user

    def _validate_role(self, role: str) -> None:
        if role not in ROLES:
            raise ValidationException(
                f"Unknown role {role!r}; expected one of {', '.join(ROLES)}",
                code=ErrorCode.INVALID_ROLE,
                field="role",
                value=role,
            )

    def _validate_hash(self, profile_hash: str) -> None:
        if not isinstance(profile_hash, str) or len(profile_hash) != self.hash_length:
            raise ValidationException(
                f"Profile hash must be exactly {self.hash_length} characters",
                code=ErrorCode.INVALID_PROFILE,
                field="profile_hash",
                value=profile_hash,
            )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def register(self, caller: str, role: str, profile_hash: str, stake_amount: int) -> User:
        if self.is_registered(caller):
            raise ConflictError(f"{caller} is already registered", ErrorCode.ALREADY_REGISTERED, existing_id=caller)
        self._validate_role(role)
        self._validate_hash(profile_hash)
        if stake_amount < self.min_stake:
            raise ValidationException(
                f"Stake {stake_amount} is below the minimum of {self.min_stake}",
                code=ErrorCode.INSUFFICIENT_STAKE,
                field="stake_amount",
                value=stake_amount,
            )

        self.funds.transfer(caller, self.custody, stake_amount)
        user = User(
            roles=(role,),
            reputation=0,
            stake=stake_amount,
            profile_hash=profile_hash,
            registered_at=self.clock.now(),
            active=True,
        )
        self.store.put(USERS, caller, user)
        logger.info("Registered %s as %s with stake %d", caller, role, stake_amount)
        return user

    def add_role(self, caller: str, role: str) -> tuple[str, ...]:
        user = self.require_active(caller)
        self._validate_role(role)
        if len(user.roles) >= MAX_ROLES or role in user.roles:
            raise CapacityError(
                f"{caller} cannot add role {role!r} to {list(user.roles)}",
                ErrorCode.ROLE_LIMIT_REACHED,
                limit=MAX_ROLES,
            )
        roles = user.roles + (role,)
        self.store.put(USERS, caller, replace(user, roles=roles))
        return roles

    def update_profile(self, caller: str, new_hash: str) -> User:
        user = self.require_active(caller)
        self._validate_hash(new_hash)
        updated = replace(user, profile_hash=new_hash, registered_at=self.clock.now())
        self.store.put(USERS, caller, updated)
        return updated

    def toggle_active(self, caller: str, target: str) -> bool:
        self.authority.require(caller)
        user = self.require_user(target)
        updated = replace(user, active=not user.active)
        self.store.put(USERS, target, updated)
        logger.info("%s is now %s", target, "active" if updated.active else "inactive")
        return updated.active

    def withdraw_stake(self, caller: str) -> int:
        """Return the caller's locked stake. Returns the amount transferred."""
        user = self.require_user(caller)
        if user.active:
            raise ConflictError(
                f"{caller} must be inactive to withdraw stake",
                ErrorCode.STILL_ACTIVE,
                existing_id=caller,
            )
        amount = user.stake
        self.funds.transfer(self.custody, caller, amount)
        self.store.put(USERS, caller, replace(user, stake=0))
        logger.info("Released stake of %d to %s", amount, caller)
        return amount

    # ------------------------------------------------------------------
    # Cross-module calls
    # ------------------------------------------------------------------

    def set_reputation(self, principal: str, reputation: int) -> User:
        """Overwrite a principal's reputation. Caller validates the bound."""
        user = self.get_user(principal)
        if user is None:
            raise NotFoundError("User", principal)
        updated = replace(user, reputation=reputation)
        self.store.put(USERS, principal, updated)
        return updated

    def apply_penalty(self, principal: str, amount: int) -> int:
        """Subtract ``amount`` from reputation, clamping at zero. Returns the new value."""
        if amount < 0:
            raise ValidationException("Penalty cannot be negative", field="amount", value=amount)
        user = self.get_user(principal)
        if user is None:
            raise NotFoundError("User", principal)
        new_reputation = max(0, user.reputation - amount)
        self.store.put(USERS, principal, replace(user, reputation=new_reputation))
        logger.info("Penalized %s by %d: %d -> %d", principal, amount, user.reputation, new_reputation)
        return new_reputation
