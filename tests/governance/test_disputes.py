"""Tests for peerledger.governance.disputes - dispute lifecycle.

Tests cover:
- Raising: trust gate, type validation, id sequence
- Ballots: window modes, resolved disputes, optional single-ballot rule
- Resolution: majority rule, penalty clamp, atomic failure
"""

from __future__ import annotations

import pytest

from peerledger.core.exceptions import ValidationException
from peerledger.governance.disputes import DISPUTES, Ballot, Dispute, DisputeRegistry, DisputeStatus


def _trust(system, *principals, reputation=100):
    system.store.begin()
    for principal in principals:
        system.identity.set_reputation(principal, reputation)
    system.store.commit()


@pytest.fixture
def trusted(ledger):
    _trust(ledger, "alice", "bob")
    return ledger


# ============================================================================
# Raise
# ============================================================================


class TestRaiseDispute:
    def test_ids_are_sequential(self, trusted):
        assert trusted.raise_dispute("alice", "carol", "plagiarism").data == 0
        assert trusted.raise_dispute("bob", "carol", "fraud").data == 1
        assert trusted.dispute_count() == 2

    def test_record(self, trusted):
        trusted.advance(9)
        trusted.raise_dispute("alice", "carol", "plagiarism")

        dispute = trusted.get_dispute(0)
        assert dispute.target == "carol"
        assert dispute.raised_by == "alice"
        assert dispute.raised_at == 9
        assert (dispute.votes_yes, dispute.votes_no) == (0, 0)
        assert dispute.status == DisputeStatus.OPEN

    def test_untrusted_caller(self, trusted):
        resp = trusted.raise_dispute("carol", "alice", "plagiarism")

        assert resp.code == "NotAuthorized"
        assert trusted.dispute_count() == 0

    def test_threshold_boundary(self, ledger):
        _trust(ledger, "alice", reputation=50)
        _trust(ledger, "bob", reputation=49)

        assert ledger.raise_dispute("alice", "carol", "x").success
        assert ledger.raise_dispute("bob", "carol", "x").code == "NotAuthorized"

    @pytest.mark.parametrize("dispute_type", ["", "x" * 51])
    def test_invalid_type(self, trusted, dispute_type):
        assert trusted.raise_dispute("alice", "carol", dispute_type).code == "InvalidDisputeType"

    def test_unregistered_target_rejected(self, trusted):
        resp = trusted.raise_dispute("alice", "ghost", "fraud")

        assert resp.code == "NotFound"
        assert trusted.dispute_count() == 0

    def test_threshold_configurable(self, trusted):
        assert trusted.set_trust_threshold("admin", 0).success
        assert trusted.raise_dispute("carol", "alice", "x").success


# ============================================================================
# Ballots
# ============================================================================


class TestDisputeVote:
    def test_counts(self, trusted):
        trusted.raise_dispute("alice", "carol", "plagiarism")

        trusted.vote_on_dispute("alice", 0, True)
        trusted.vote_on_dispute("bob", 0, False)
        resp = trusted.vote_on_dispute("carol", 0, True)

        assert (resp.data.votes_yes, resp.data.votes_no) == (2, 1)

    def test_unknown_dispute(self, trusted):
        assert trusted.vote_on_dispute("alice", 7, True).code == "NotFound"

    def test_window_closes(self, trusted):
        trusted.raise_dispute("alice", "carol", "plagiarism")
        trusted.advance(143)
        assert trusted.vote_on_dispute("bob", 0, True).success

        trusted.advance(1)
        assert trusted.vote_on_dispute("bob", 0, True).code == "VotingClosed"

    def test_epoch_mode_rejects_every_ballot(self, make_system, bootstrap, enroll):
        system = bootstrap(make_system(dispute_window_mode="epoch"))
        enroll(system, "alice")
        enroll(system, "bob")
        _trust(system, "alice")
        system.raise_dispute("alice", "bob", "fraud")

        for _ in range(3):
            assert system.vote_on_dispute("alice", 0, True).code == "VotingClosed"
            system.advance(50)

    def test_ballot_recorded(self, trusted):
        trusted.raise_dispute("alice", "carol", "plagiarism")
        trusted.advance(2)
        trusted.vote_on_dispute("bob", 0, False)

        assert trusted.get_ballot(0, "bob") == Ballot(vote_yes=False, timestamp=2)
        assert trusted.get_ballot(0, "alice") is None

    def test_repeat_ballots_counted_by_default(self, trusted):
        trusted.raise_dispute("alice", "carol", "plagiarism")
        trusted.vote_on_dispute("bob", 0, True)
        trusted.vote_on_dispute("bob", 0, True)

        assert trusted.get_dispute(0).votes_yes == 2

    def test_single_ballot_mode(self, make_system, bootstrap, enroll):
        system = bootstrap(make_system(dispute_single_ballot=True))
        enroll(system, "alice")
        enroll(system, "bob")
        _trust(system, "alice")
        system.raise_dispute("alice", "bob", "fraud")

        assert system.vote_on_dispute("alice", 0, True).success
        assert system.vote_on_dispute("alice", 0, False).code == "AlreadyVoted"
        assert system.get_dispute(0).votes_no == 0

    def test_vote_after_resolution(self, trusted):
        trusted.raise_dispute("alice", "carol", "plagiarism")
        trusted.resolve_dispute("alice", 0)

        assert trusted.vote_on_dispute("bob", 0, True).code == "AlreadyResolved"

    def test_unknown_window_mode(self, ledger, settings):
        with pytest.raises(ValidationException):
            DisputeRegistry(
                ledger.store,
                ledger.clock,
                ledger.identity,
                settings.model_copy(update={"dispute_window_mode": "forever"}),
            )


# ============================================================================
# Resolution
# ============================================================================


class TestResolveDispute:
    def test_upheld_applies_penalty(self, trusted):
        _trust(trusted, "carol", reputation=30)
        trusted.raise_dispute("alice", "carol", "plagiarism")
        for voter, ballot in (("alice", True), ("bob", True), ("admin", True), ("carol", False)):
            trusted.vote_on_dispute(voter, 0, ballot)

        resp = trusted.resolve_dispute("anyone", 0)

        assert resp.success
        assert resp.data.resolved
        assert resp.data.penalty_applied == 10
        assert trusted.get_user("carol").reputation == 20

    def test_tie_not_upheld(self, trusted):
        _trust(trusted, "carol", reputation=30)
        trusted.raise_dispute("alice", "carol", "plagiarism")
        trusted.vote_on_dispute("alice", 0, True)
        trusted.vote_on_dispute("bob", 0, False)

        resp = trusted.resolve_dispute("alice", 0)

        assert resp.data.penalty_applied == 0
        assert trusted.get_user("carol").reputation == 30

    def test_penalty_clamps_at_zero(self, trusted):
        _trust(trusted, "carol", reputation=5)
        trusted.raise_dispute("alice", "carol", "plagiarism")
        trusted.vote_on_dispute("alice", 0, True)

        resp = trusted.resolve_dispute("alice", 0)

        assert resp.data.penalty_applied == 5
        assert trusted.get_user("carol").reputation == 0

    def test_resolve_twice(self, trusted):
        trusted.raise_dispute("alice", "carol", "plagiarism")
        trusted.resolve_dispute("alice", 0)

        assert trusted.resolve_dispute("alice", 0).code == "AlreadyResolved"

    def test_resolve_unknown(self, trusted):
        assert trusted.resolve_dispute("alice", 3).code == "NotFound"

    def test_missing_target_keeps_dispute_open(self, trusted):
        # Only reachable through state loaded from an older snapshot
        with trusted.store.transaction():
            trusted.store.put(DISPUTES, 0, Dispute(0, "ghost", "fraud", "alice", 0, votes_yes=1))
            trusted.store.set_scalar("governance.next_dispute_id", 1)

        resp = trusted.resolve_dispute("alice", 0)

        assert resp.code == "NotFound"
        assert trusted.get_dispute(0).status == DisputeStatus.OPEN

    def test_penalty_configurable(self, trusted):
        _trust(trusted, "carol", reputation=30)
        trusted.set_dispute_penalty("admin", 25)
        trusted.raise_dispute("alice", "carol", "plagiarism")
        trusted.vote_on_dispute("alice", 0, True)
        trusted.resolve_dispute("alice", 0)

        assert trusted.get_user("carol").reputation == 5

    def test_governance_setters(self, trusted):
        assert trusted.set_dispute_vote_period("admin", 0).code == "InvalidParameter"
        assert trusted.set_dispute_penalty("admin", -1).code == "InvalidParameter"
        assert trusted.set_trust_threshold("alice", 1).code == "NotAuthorized"
        assert trusted.set_dispute_vote_period("admin", 10).data == 10
