"""Tests for peerledger.core.funds - balances and custody transfers."""

from __future__ import annotations

import pytest

from peerledger.core.clock import BlockClock
from peerledger.core.exceptions import CapacityError, ErrorCode, ValidationException
from peerledger.core.funds import Funds, Transfer, custody_account
from peerledger.core.store import StateStore


@pytest.fixture
def funds() -> Funds:
    store = StateStore()
    f = Funds(store, BlockClock(7))
    with store.transaction():
        f.credit("alice", 1000)
    return f


class TestFunds:
    def test_custody_account_name(self):
        assert custody_account("identity") == "custody:identity"

    def test_credit(self, funds):
        assert funds.balance("alice") == 1000
        assert funds.balance("nobody") == 0

    def test_credit_must_be_positive(self, funds):
        with funds.store.transaction(), pytest.raises(ValidationException):
            funds.credit("alice", 0)

    def test_transfer_moves_balance_and_logs(self, funds):
        with funds.store.transaction():
            funds.transfer("alice", "bob", 300)
        assert funds.balance("alice") == 700
        assert funds.balance("bob") == 300
        assert funds.transfers() == [Transfer(300, "alice", "bob", 7)]

    def test_zero_transfer_is_noop(self, funds):
        with funds.store.transaction():
            funds.transfer("alice", "bob", 0)
        assert funds.transfers() == []
        assert funds.balance("alice") == 1000

    def test_insufficient_funds(self, funds):
        funds.store.begin()
        with pytest.raises(CapacityError) as exc_info:
            funds.transfer("alice", "bob", 1001)
        funds.store.rollback()
        assert exc_info.value.code == ErrorCode.INSUFFICIENT_FUNDS
        assert funds.balance("alice") == 1000

    def test_negative_transfer_rejected(self, funds):
        funds.store.begin()
        with pytest.raises(ValidationException):
            funds.transfer("alice", "bob", -1)
        funds.store.rollback()
