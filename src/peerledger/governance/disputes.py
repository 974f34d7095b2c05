# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Dispute registry, ballots and majority-vote resolution.

Lifecycle: ``Open`` -> ``Resolved``. There is no cancelled or expired
state; a dispute nobody resolves stays open.

- ``raise_dispute``: only principals trusted at the governance threshold,
  against a registered target.  Ids come from a sequence owned by the registry, starting at 0.
- ``vote``: yes/no ballots while the dispute is open and its window allows.
- ``resolve``: closes the dispute once. If yes-votes outnumber no-votes the
  target's reputation is reduced by the penalty (clamped at zero) through
  the identity ledger, inside the same transaction: if the penalty call
  fails, the dispute stays open.

Ballot window modes:

- ``raised``: ballots are accepted while ``now < raised_at + period``.
- ``epoch``: the legacy gate. It takes ``epoch_start = now - now % period``
  and accepts only when ``now - epoch_start > period``. The difference is
  always below the period, so this mode rejects every ballot.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from enum import StrEnum
from typing import Any

from ..core.authority import AuthorityBinding
from ..core.config import LedgerSettings
from ..core.exceptions import (
    AuthorizationException,
    ConflictError,
    ErrorCode,
    NotFoundError,
    ValidationException,
)
from ..core.store import StateStore
from ..identity.ledger import IdentityLedger

logger = logging.getLogger(__name__)

MODULE = "governance"
DISPUTES = "disputes"
BALLOTS = "dispute_ballots"
MAX_DISPUTE_TYPE_LENGTH = 50
WINDOW_MODES = ("raised", "epoch")


class DisputeStatus(StrEnum):
    OPEN = "open"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class Dispute:
    """A dispute raised against a principal."""

    id: int
    target: str
    dispute_type: str
    raised_by: str
    raised_at: int
    votes_yes: int = 0
    votes_no: int = 0
    resolved: bool = False
    resolved_at: int | None = None
    penalty_applied: int = 0

    @property
    def status(self) -> DisputeStatus:
        return DisputeStatus.RESOLVED if self.resolved else DisputeStatus.OPEN

    @property
    def upheld(self) -> bool:
        return self.votes_yes > self.votes_no

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Dispute:
        return cls(**data)


@dataclass(frozen=True)
class Ballot:
    """One ballot cast on a dispute."""

    vote_yes: bool
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Ballot:
        return cls(**data)


class DisputeRegistry:
    """Owns disputes, their id sequence and the governance configuration."""

    def __init__(self, store: StateStore, clock, identity: IdentityLedger, settings: LedgerSettings):
        if settings.dispute_window_mode not in WINDOW_MODES:
            raise ValidationException(
                f"Unknown dispute window mode {settings.dispute_window_mode!r}",
                field="dispute_window_mode",
                value=settings.dispute_window_mode,
            )
        self.store = store
        self.clock = clock
        self.identity = identity
        self.window_mode = settings.dispute_window_mode
        self.single_ballot = settings.dispute_single_ballot
        self.authority = AuthorityBinding(store, MODULE, settings.null_principal)

        store.define_table(DISPUTES, Dispute)
        store.define_table(BALLOTS, Ballot)
        store.seed_scalar("governance.next_dispute_id", 0)
        store.seed_scalar("governance.trust_threshold", settings.trust_threshold)
        store.seed_scalar("governance.vote_period", settings.dispute_vote_period)
        store.seed_scalar("governance.penalty", settings.dispute_penalty)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def trust_threshold(self) -> int:
        return self.store.get_scalar("governance.trust_threshold")

    @property
    def vote_period(self) -> int:
        return self.store.get_scalar("governance.vote_period")

    @property
    def penalty(self) -> int:
        return self.store.get_scalar("governance.penalty")

    def set_trust_threshold(self, caller: str, value: int) -> int:
        self.authority.require(caller)
        if value < 0:
            raise ValidationException("Trust threshold cannot be negative", field="trust_threshold", value=value)
        self.store.set_scalar("governance.trust_threshold", value)
        return value

    def set_vote_period(self, caller: str, value: int) -> int:
        self.authority.require(caller)
        if value <= 0:
            raise ValidationException("Vote period must be positive", field="vote_period", value=value)
        self.store.set_scalar("governance.vote_period", value)
        return value

    def set_penalty(self, caller: str, value: int) -> int:
        self.authority.require(caller)
        if value < 0:
            raise ValidationException("Penalty cannot be negative", field="penalty", value=value)
        self.store.set_scalar("governance.penalty", value)
        return value

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_dispute(self, dispute_id: int) -> Dispute | None:
        return self.store.get(DISPUTES, dispute_id)

    def dispute_count(self) -> int:
        return self.store.get_scalar("governance.next_dispute_id")

    def get_ballot(self, dispute_id: int, voter: str) -> Ballot | None:
        return self.store.get(BALLOTS, (dispute_id, voter))

    def _require_open(self, dispute_id: int) -> Dispute:
        dispute = self.get_dispute(dispute_id)
        if dispute is None:
            raise NotFoundError("Dispute", dispute_id)
        if dispute.resolved:
            raise ConflictError(
                f"Dispute {dispute_id} is already resolved",
                ErrorCode.ALREADY_RESOLVED,
                existing_id=str(dispute_id),
            )
        return dispute

    def ballot_window_open(self, dispute: Dispute) -> bool:
        now = self.clock.now()
        period = self.vote_period
        if self.window_mode == "epoch":
            epoch_start = now - now % period
            return now - epoch_start > period
        return now < dispute.raised_at + period

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def raise_dispute(self, caller: str, target: str, dispute_type: str) -> int:
        if not self.identity.is_trusted(caller, self.trust_threshold):
            raise AuthorizationException(
                f"{caller} is not trusted to raise disputes",
                code=ErrorCode.NOT_AUTHORIZED,
                principal=caller,
            )
        if not dispute_type or len(dispute_type) > MAX_DISPUTE_TYPE_LENGTH:
            raise ValidationException(
                f"Dispute type must be 1-{MAX_DISPUTE_TYPE_LENGTH} characters",
                code=ErrorCode.INVALID_DISPUTE_TYPE,
                field="dispute_type",
                value=dispute_type,
            )
        if not self.identity.is_registered(target):
            raise NotFoundError("User", target)

        dispute_id = self.store.get_scalar("governance.next_dispute_id")
        dispute = Dispute(
            id=dispute_id,
            target=target,
            dispute_type=dispute_type,
            raised_by=caller,
            raised_at=self.clock.now(),
        )
        self.store.put(DISPUTES, dispute_id, dispute)
        self.store.set_scalar("governance.next_dispute_id", dispute_id + 1)
        logger.info("Dispute %d (%s) raised by %s against %s", dispute_id, dispute_type, caller, target)
        return dispute_id

    def vote(self, caller: str, dispute_id: int, vote_yes: bool) -> Dispute:
        dispute = self._require_open(dispute_id)
        if not self.ballot_window_open(dispute):
            raise ConflictError(
                f"Ballot window for dispute {dispute_id} is closed",
                ErrorCode.VOTING_CLOSED,
                existing_id=str(dispute_id),
            )
        key = (dispute_id, caller)
        if self.single_ballot and self.store.contains(BALLOTS, key):
            raise ConflictError(
                f"{caller} has already voted on dispute {dispute_id}",
                ErrorCode.ALREADY_VOTED,
                existing_id=str(dispute_id),
            )

        if vote_yes:
            updated = replace(dispute, votes_yes=dispute.votes_yes + 1)
        else:
            updated = replace(dispute, votes_no=dispute.votes_no + 1)
        self.store.put(DISPUTES, dispute_id, updated)
        self.store.put(BALLOTS, key, Ballot(vote_yes=vote_yes, timestamp=self.clock.now()))
        return updated

    def resolve(self, caller: str, dispute_id: int) -> Dispute:
        dispute = self._require_open(dispute_id)

        penalty = 0
        if dispute.upheld:
            before = self.identity.get_user(dispute.target)
            after = self.identity.apply_penalty(dispute.target, self.penalty)
            penalty = before.reputation - after

        resolved = replace(dispute, resolved=True, resolved_at=self.clock.now(), penalty_applied=penalty)
        self.store.put(DISPUTES, dispute_id, resolved)
        logger.info(
            "Dispute %d resolved by %s: %d yes / %d no, penalty %d",
            dispute_id,
            caller,
            dispute.votes_yes,
            dispute.votes_no,
            penalty,
        )
        return resolved
