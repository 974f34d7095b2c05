# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""The ledger system: every module wired to one store and one executor.

``LedgerSystem`` is the in-process command surface. Each state-changing
method submits exactly one operation to the executor and returns a
``LedgerResponse``; read methods return plain values. Reads take the
executor lock too, so they never observe a transaction that is still open.

All modules share a single ``StateStore``, so a cross-module call (dispute
resolution applying a reputation penalty, registration moving stake into
custody) commits or rolls back together with the operation that made it.

Usage::

    system = LedgerSystem()
    system.credit("alice", 5000)
    resp = system.register("alice", "author", "a" * 64, 1000)
    if not resp.success:
        print(resp.code)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .core.authority import AuthorityBinding
from .core.clock import BlockClock
from .core.config import LedgerSettings, get_config
from .core.exceptions import NotFoundError
from .core.executor import OperationRecord, TransactionExecutor
from .core.funds import Funds
from .core.response import LedgerResponse, err
from .core.store import StateStore
from .governance.disputes import Ballot, Dispute, DisputeRegistry
from .identity.ledger import IdentityLedger, User
from .reputation.votes import ReputationBook, ReputationVote
from .reviews.registry import Review, ReviewRegistry, ReviewUpdate

logger = logging.getLogger(__name__)

GENESIS = "genesis"
SNAPSHOT_VERSION = 1


class LedgerSystem:
    """Identity, reputation, governance and review modules under one executor."""

    def __init__(self, settings: LedgerSettings | None = None, height: int = 0):
        self.settings = settings or get_config()
        self.store = StateStore()
        self.clock = BlockClock(height)
        self.executor = TransactionExecutor(self.store, self.clock)
        self.funds = Funds(self.store, self.clock)
        self.identity = IdentityLedger(self.store, self.clock, self.funds, self.settings)
        self.reputation = ReputationBook(self.store, self.clock, self.identity)
        self.disputes = DisputeRegistry(self.store, self.clock, self.identity, self.settings)
        self.reviews = ReviewRegistry(self.store, self.clock, self.funds, self.settings)

    @property
    def authorities(self) -> dict[str, AuthorityBinding]:
        return {
            "identity": self.identity.authority,
            "governance": self.disputes.authority,
            "reviews": self.reviews.authority,
        }

    def _binding(self, module: str) -> AuthorityBinding:
        try:
            return self.authorities[module]
        except KeyError:
            raise NotFoundError("Module", module) from None

    # ------------------------------------------------------------------
    # Clock & funds
    # ------------------------------------------------------------------

    @property
    def height(self) -> int:
        with self.executor.lock:
            return self.clock.now()

    def advance(self, blocks: int = 1) -> int:
        with self.executor.lock:
            return self.clock.advance(blocks)

    def credit(self, principal: str, amount: int) -> LedgerResponse:
        return self.executor.execute(
            "credit",
            GENESIS,
            lambda: self.funds.credit(principal, amount),
            {"principal": principal, "amount": amount},
        )

    def balance(self, principal: str) -> int:
        with self.executor.lock:
            return self.funds.balance(principal)

    def custody_balance(self) -> int:
        with self.executor.lock:
            return self.identity.custody_balance()

    # ------------------------------------------------------------------
    # Authority binding
    # ------------------------------------------------------------------

    def bind_authority(self, caller: str, module: str, principal: str) -> LedgerResponse:
        try:
            binding = self._binding(module)
        except NotFoundError as exc:
            return err(exc)
        return self.executor.execute(
            "bind-authority",
            caller,
            lambda: binding.bind(principal),
            {"module": module, "principal": principal},
        )

    def get_authority(self, module: str) -> str | None:
        with self.executor.lock:
            return self._binding(module).principal

    # ------------------------------------------------------------------
    # Identity & stake
    # ------------------------------------------------------------------

    def register(self, caller: str, role: str, profile_hash: str, stake_amount: int) -> LedgerResponse:
        return self.executor.execute(
            "register",
            caller,
            lambda: self.identity.register(caller, role, profile_hash, stake_amount),
            {"role": role, "profile_hash": profile_hash, "stake_amount": stake_amount},
        )

    def add_role(self, caller: str, role: str) -> LedgerResponse:
        return self.executor.execute("add-role", caller, lambda: self.identity.add_role(caller, role), {"role": role})

    def update_profile(self, caller: str, new_hash: str) -> LedgerResponse:
        return self.executor.execute(
            "update-profile", caller, lambda: self.identity.update_profile(caller, new_hash), {"new_hash": new_hash}
        )

    def toggle_active(self, caller: str, target: str) -> LedgerResponse:
        return self.executor.execute(
            "toggle-active", caller, lambda: self.identity.toggle_active(caller, target), {"target": target}
        )

    def withdraw_stake(self, caller: str) -> LedgerResponse:
        return self.executor.execute("withdraw-stake", caller, lambda: self.identity.withdraw_stake(caller))

    def set_min_stake(self, caller: str, value: int) -> LedgerResponse:
        return self.executor.execute(
            "set-min-stake", caller, lambda: self.identity.set_min_stake(caller, value), {"value": value}
        )

    def set_max_reputation(self, caller: str, value: int) -> LedgerResponse:
        return self.executor.execute(
            "set-max-reputation", caller, lambda: self.identity.set_max_reputation(caller, value), {"value": value}
        )

    def set_voting_period(self, caller: str, value: int) -> LedgerResponse:
        return self.executor.execute(
            "set-voting-period", caller, lambda: self.identity.set_voting_period(caller, value), {"value": value}
        )

    def set_ledger_trust_threshold(self, caller: str, value: int) -> LedgerResponse:
        return self.executor.execute(
            "set-ledger-trust-threshold",
            caller,
            lambda: self.identity.set_trust_threshold(caller, value),
            {"value": value},
        )

    def get_user(self, principal: str) -> User | None:
        with self.executor.lock:
            return self.identity.get_user(principal)

    def get_roles(self, principal: str) -> tuple[str, ...]:
        with self.executor.lock:
            return self.identity.get_roles(principal)

    def get_min_stake(self) -> int:
        with self.executor.lock:
            return self.identity.min_stake

    def is_trusted(self, principal: str) -> bool:
        """Trusted at the governance threshold (the one gating disputes)."""
        with self.executor.lock:
            return self.identity.is_trusted(principal, self.disputes.trust_threshold)

    def is_trusted_user(self, principal: str) -> bool:
        """Trusted at the identity ledger's own threshold."""
        with self.executor.lock:
            return self.identity.is_trusted_user(principal)

    # ------------------------------------------------------------------
    # Reputation
    # ------------------------------------------------------------------

    def vote_on_reputation(self, caller: str, target: str, score: int) -> LedgerResponse:
        return self.executor.execute(
            "vote-on-reputation",
            caller,
            lambda: self.reputation.vote(caller, target, score),
            {"target": target, "score": score},
        )

    def finalize_reputation(self, caller: str, target: str) -> LedgerResponse:
        return self.executor.execute(
            "finalize-reputation", caller, lambda: self.reputation.finalize(caller, target), {"target": target}
        )

    def get_vote(self, target: str, voter: str) -> ReputationVote | None:
        with self.executor.lock:
            return self.reputation.get_vote(target, voter)

    # ------------------------------------------------------------------
    # Disputes
    # ------------------------------------------------------------------

    def raise_dispute(self, caller: str, target: str, dispute_type: str) -> LedgerResponse:
        return self.executor.execute(
            "raise-dispute",
            caller,
            lambda: self.disputes.raise_dispute(caller, target, dispute_type),
            {"target": target, "dispute_type": dispute_type},
        )

    def vote_on_dispute(self, caller: str, dispute_id: int, vote_yes: bool) -> LedgerResponse:
        return self.executor.execute(
            "vote-on-dispute",
            caller,
            lambda: self.disputes.vote(caller, dispute_id, vote_yes),
            {"dispute_id": dispute_id, "vote_yes": vote_yes},
        )

    def resolve_dispute(self, caller: str, dispute_id: int) -> LedgerResponse:
        return self.executor.execute(
            "resolve-dispute", caller, lambda: self.disputes.resolve(caller, dispute_id), {"dispute_id": dispute_id}
        )

    def set_trust_threshold(self, caller: str, value: int) -> LedgerResponse:
        return self.executor.execute(
            "set-trust-threshold", caller, lambda: self.disputes.set_trust_threshold(caller, value), {"value": value}
        )

    def set_dispute_vote_period(self, caller: str, value: int) -> LedgerResponse:
        return self.executor.execute(
            "set-dispute-vote-period", caller, lambda: self.disputes.set_vote_period(caller, value), {"value": value}
        )

    def set_dispute_penalty(self, caller: str, value: int) -> LedgerResponse:
        return self.executor.execute(
            "set-dispute-penalty", caller, lambda: self.disputes.set_penalty(caller, value), {"value": value}
        )

    def get_dispute(self, dispute_id: int) -> Dispute | None:
        with self.executor.lock:
            return self.disputes.get_dispute(dispute_id)

    def dispute_count(self) -> int:
        with self.executor.lock:
            return self.disputes.dispute_count()

    def get_ballot(self, dispute_id: int, voter: str) -> Ballot | None:
        with self.executor.lock:
            return self.disputes.get_ballot(dispute_id, voter)

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    def submit_review(
        self,
        caller: str,
        paper_author: str,
        paper_id: int,
        review_hash: str,
        score: int,
        category: str,
        review_type: str,
    ) -> LedgerResponse:
        return self.executor.execute(
            "submit-review",
            caller,
            lambda: self.reviews.submit_review(
                caller, paper_author, paper_id, review_hash, score, category, review_type
            ),
            {
                "paper_author": paper_author,
                "paper_id": paper_id,
                "review_hash": review_hash,
                "score": score,
                "category": category,
                "review_type": review_type,
            },
        )

    def update_review(self, caller: str, review_id: int, score: int, review_hash: str) -> LedgerResponse:
        return self.executor.execute(
            "update-review",
            caller,
            lambda: self.reviews.update_review(caller, review_id, score, review_hash),
            {"review_id": review_id, "score": score, "review_hash": review_hash},
        )

    def validate_review(self, caller: str, review_id: int) -> LedgerResponse:
        return self.executor.execute(
            "validate-review", caller, lambda: self.reviews.validate_review(caller, review_id), {"review_id": review_id}
        )

    def set_review_fee(self, caller: str, fee: int) -> LedgerResponse:
        return self.executor.execute(
            "set-review-fee", caller, lambda: self.reviews.set_review_fee(caller, fee), {"fee": fee}
        )

    def set_max_reviews(self, caller: str, max_reviews: int) -> LedgerResponse:
        return self.executor.execute(
            "set-max-reviews",
            caller,
            lambda: self.reviews.set_max_reviews(caller, max_reviews),
            {"max_reviews": max_reviews},
        )

    def set_score_range(self, caller: str, min_score: int, max_score: int) -> LedgerResponse:
        return self.executor.execute(
            "set-score-range",
            caller,
            lambda: self.reviews.set_score_range(caller, min_score, max_score),
            {"min_score": min_score, "max_score": max_score},
        )

    def toggle_review_registry(self, caller: str) -> LedgerResponse:
        return self.executor.execute("toggle-review-registry", caller, lambda: self.reviews.toggle_registry(caller))

    def get_review(self, review_id: int) -> Review | None:
        with self.executor.lock:
            return self.reviews.get(review_id)

    def get_review_updates(self, review_id: int) -> list[ReviewUpdate]:
        with self.executor.lock:
            return self.reviews.updates_for(review_id)

    def review_exists(self, paper_author: str, paper_id: int, reviewer: str) -> bool:
        with self.executor.lock:
            return self.reviews.exists(paper_author, paper_id, reviewer)

    def review_count(self) -> int:
        with self.executor.lock:
            return self.reviews.count()

    # ------------------------------------------------------------------
    # Operation log & persistence
    # ------------------------------------------------------------------

    def operations(self) -> list[OperationRecord]:
        with self.executor.lock:
            return self.executor.operations()

    def to_snapshot(self) -> dict[str, Any]:
        with self.executor.lock:
            return {
                "version": SNAPSHOT_VERSION,
                "height": self.clock.now(),
                "state": self.store.to_snapshot(),
            }

    @classmethod
    def from_snapshot(cls, snapshot: dict[str, Any], settings: LedgerSettings | None = None) -> LedgerSystem:
        version = snapshot.get("version")
        if version != SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported snapshot version: {version}")
        system = cls(settings=settings, height=snapshot.get("height", 0))
        system.store.load_snapshot(snapshot["state"])
        return system

    def save(self, path: str | Path) -> None:
        path = Path(path)
        tmp_path = path.with_name(path.name + ".tmp")
        with open(tmp_path, "w") as f:
            json.dump(self.to_snapshot(), f, indent=2, sort_keys=True)
        tmp_path.replace(path)
        logger.debug("Saved ledger state to %s", path)

    @classmethod
    def load(cls, path: str | Path, settings: LedgerSettings | None = None) -> LedgerSystem:
        """Load a system from ``path``; a missing file yields a fresh system."""
        path = Path(path)
        if not path.exists():
            logger.info("No state at %s; starting a fresh ledger", path)
            return cls(settings=settings)
        with open(path) as f:
            return cls.from_snapshot(json.load(f), settings=settings)
