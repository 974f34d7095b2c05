"""End-to-end tests for peerledger.system.LedgerSystem.

Tests cover:
- A full identity -> reputation -> dispute scenario
- Authority binding through the facade
- Snapshot save/load
- Concurrent submissions
"""

from __future__ import annotations

import json
import threading

import pytest

from peerledger.core.config import NULL_PRINCIPAL
from peerledger.core.exceptions import ConflictError, ErrorCode
from peerledger.system import LedgerSystem

HASH_A = "a" * 64


class TestAuthorityBinding:
    def test_first_bind_wins(self, system):
        assert system.bind_authority("anyone", "identity", "admin").success
        assert system.bind_authority("admin", "identity", "other").code == "AlreadyBound"
        assert system.get_authority("identity") == "admin"

    def test_null_principal_rejected(self, system):
        assert system.bind_authority("x", "governance", NULL_PRINCIPAL).code == "InvalidPrincipal"
        assert system.get_authority("governance") is None

    def test_unknown_module(self, system):
        assert system.bind_authority("x", "payments", "admin").code == "NotFound"


class TestScenario:
    def test_register_vote_finalize_dispute(self, system, bootstrap, enroll):
        bootstrap(system)
        enroll(system, "X", role="author")
        enroll(system, "Y", role="reviewer")

        system.vote_on_reputation("Y", "X", 60)
        assert system.finalize_reputation("admin", "X").data == 60
        assert system.is_trusted("X")

        assert system.raise_dispute("X", "Y", "plagiarism").data == 0
        system.vote_on_dispute("X", 0, True)
        dispute = system.resolve_dispute("X", 0).data

        assert dispute.resolved
        assert system.get_user("Y").reputation == 0
        assert [op.operation for op in system.operations()][-4:] == [
            "finalize-reputation",
            "raise-dispute",
            "vote-on-dispute",
            "resolve-dispute",
        ]

    def test_failed_operations_not_logged(self, system):
        before = len(system.operations())
        system.register("ghost", "author", HASH_A, 1000)
        assert len(system.operations()) == before


class TestPersistence:
    def test_save_and_load(self, ledger, settings, tmp_path):
        ledger.vote_on_reputation("bob", "alice", 40)
        ledger.advance(12)
        path = tmp_path / "state.json"

        ledger.save(path)
        restored = LedgerSystem.load(path, settings=settings)

        assert restored.height == 12
        assert restored.get_user("alice") == ledger.get_user("alice")
        assert restored.get_vote("alice", "bob") == ledger.get_vote("alice", "bob")
        assert restored.reputation.voters_for("alice") == ("bob",)
        assert restored.get_authority("identity") == "admin"
        assert restored.operations() == ledger.operations()
        assert restored.finalize_reputation("admin", "alice").data == 40

    def test_snapshot_is_json(self, ledger):
        snapshot = ledger.to_snapshot()
        assert json.loads(json.dumps(snapshot)) == snapshot

    def test_load_missing_file(self, settings, tmp_path):
        system = LedgerSystem.load(tmp_path / "nope.json", settings=settings)
        assert system.height == 0
        assert system.operations() == []

    def test_unsupported_version(self, settings):
        with pytest.raises(ValueError, match="version"):
            LedgerSystem.from_snapshot({"version": 99, "state": {}}, settings=settings)


class TestConcurrency:
    def test_parallel_votes_serialize(self, system, bootstrap, enroll):
        bootstrap(system)
        enroll(system, "target")
        voters = [f"voter{i}" for i in range(20)]
        for voter in voters:
            enroll(system, voter)

        results = []

        def cast(voter):
            results.append(system.vote_on_reputation(voter, "target", 5))
            results.append(system.vote_on_reputation(voter, "target", 5))

        threads = [threading.Thread(target=cast, args=(v,)) for v in voters]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(r.success for r in results) == 20
        assert sorted(r.code for r in results if not r.success) == ["AlreadyVoted"] * 20
        assert system.reputation.windowed_total("target") == 100


class TestConservation:
    def test_funds_conserved_through_register_and_withdraw(self, ledger):
        def total():
            return sum(ledger.balance(p) for p in ("alice", "bob", "carol")) + ledger.custody_balance()

        before = total()
        ledger.toggle_active("admin", "alice")
        ledger.withdraw_stake("alice")
        ledger.register("bob", "author", HASH_A, 1000)

        assert total() == before == 15000

    def test_concurrent_registration_of_one_principal(self, system):
        system.credit("alice", 10000)
        results = []
        threads = [
            threading.Thread(target=lambda: results.append(system.register("alice", "author", HASH_A, 1000)))
            for _ in range(10)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(r.success for r in results) == 1
        assert system.custody_balance() == 1000
        assert system.balance("alice") == 9000


class TestReadIsolation:
    def test_reads_wait_for_open_transaction(self, system):
        system.credit("alice", 5000)
        inside = threading.Event()
        release = threading.Event()

        def register_then_abort():
            system.identity.register("alice", "author", HASH_A, 1000)
            inside.set()
            release.wait(5)
            raise ConflictError("aborted", ErrorCode.ALREADY_REGISTERED)

        writer = threading.Thread(
            target=lambda: system.executor.execute("register", "alice", register_then_abort)
        )
        writer.start()
        assert inside.wait(5)

        seen = {}

        def read():
            seen["user"] = system.get_user("alice")
            seen["custody"] = system.custody_balance()
            seen["balance"] = system.balance("alice")

        reader = threading.Thread(target=read)
        reader.start()
        reader.join(0.2)
        assert reader.is_alive()

        release.set()
        writer.join(5)
        reader.join(5)

        assert seen == {"user": None, "custody": 0, "balance": 5000}

    def test_reads_see_committed_state(self, ledger):
        assert ledger.get_user("alice").stake == 1000
        assert ledger.custody_balance() == 3000
        assert ledger.dispute_count() == 0
