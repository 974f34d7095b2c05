# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Reputation votes and their aggregation into a principal's reputation.

Votes are keyed by (target, voter) and written once. They are never
pruned: a vote older than the voting period simply stops counting.

Aggregation is an unbounded accumulation, not an average. ``finalize``
adds the current windowed sum to the target's existing reputation, so two
consecutive calls over the same in-window votes add the sum twice. If the
new total would exceed the reputation cap the whole call is rejected and
reputation is left untouched.

A per-target voter index keeps the fold proportional to the votes cast on
that target instead of the whole vote table.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from ..core.exceptions import (
    AuthorizationException,
    CapacityError,
    ConflictError,
    ErrorCode,
    ValidationException,
)
from ..core.store import StateStore
from ..identity.ledger import IdentityLedger

logger = logging.getLogger(__name__)

VOTES = "reputation_votes"
VOTERS_BY_TARGET = "reputation_voters"
MAX_VOTE_SCORE = 100


@dataclass(frozen=True)
class ReputationVote:
    """One voter's score for one target."""

    score: int
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReputationVote:
        return cls(**data)


def in_window(now: int, timestamp: int, period: int) -> bool:
    """Whether a vote cast at ``timestamp`` still counts at height ``now``."""
    return now - timestamp <= period


class ReputationBook:
    """Vote store plus the admin-triggered finalize step.

    Shares the identity module's authority binding and voting period.
    """

    def __init__(self, store: StateStore, clock, identity: IdentityLedger):
        self.store = store
        self.clock = clock
        self.identity = identity
        store.define_table(VOTES, ReputationVote)
        store.define_table(VOTERS_BY_TARGET)

    def get_vote(self, target: str, voter: str) -> ReputationVote | None:
        return self.store.get(VOTES, (target, voter))

    def voters_for(self, target: str) -> tuple[str, ...]:
        return self.store.get(VOTERS_BY_TARGET, target, ())

    def votes_for(self, target: str) -> dict[str, ReputationVote]:
        return {voter: self.store.get(VOTES, (target, voter)) for voter in self.voters_for(target)}

    def windowed_total(self, target: str) -> int:
        """Sum of scores on ``target`` cast within the voting period."""
        now = self.clock.now()
        period = self.identity.voting_period
        return sum(
            vote.score
            for vote in self.votes_for(target).values()
            if in_window(now, vote.timestamp, period)
        )

    def vote(self, caller: str, target: str, score: int) -> ReputationVote:
        self.identity.require_user(target)
        self.identity.require_user(caller)
        self.identity.require_active(target)
        self.identity.require_active(caller)
        if score < 0 or score > MAX_VOTE_SCORE:
            raise ValidationException(
                f"Score must be between 0 and {MAX_VOTE_SCORE}",
                code=ErrorCode.INVALID_REPUTATION,
                field="score",
                value=score,
            )
        key = (target, caller)
        if self.store.contains(VOTES, key):
            raise ConflictError(
                f"{caller} has already voted on {target}",
                ErrorCode.ALREADY_VOTED,
                existing_id=f"{target}:{caller}",
            )
        vote = ReputationVote(score=score, timestamp=self.clock.now())
        self.store.put(VOTES, key, vote)
        self.store.put(VOTERS_BY_TARGET, target, self.voters_for(target) + (caller,))
        logger.debug("%s voted %d on %s", caller, score, target)
        return vote

    def finalize(self, caller: str, target: str) -> int:
        """Add the windowed vote sum to ``target``'s reputation. Returns the new value."""
        self.identity.authority.require(caller)
        user = self.identity.require_user(target)
        if not user.active:
            raise AuthorizationException(
                f"{target} is not active and cannot be finalized",
                code=ErrorCode.NOT_AUTHORIZED,
                principal=target,
            )

        total = self.windowed_total(target)
        new_reputation = user.reputation + total
        cap = self.identity.max_reputation
        if new_reputation > cap:
            raise CapacityError(
                f"Finalizing {target} would raise reputation to {new_reputation}, above {cap}",
                ErrorCode.REPUTATION_OVERFLOW,
                limit=cap,
            )
        self.identity.set_reputation(target, new_reputation)
        logger.info("Finalized %s: +%d -> %d", target, total, new_reputation)
        return new_reputation
