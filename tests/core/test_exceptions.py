"""Tests for peerledger.core.exceptions module."""

from __future__ import annotations

import pytest

from peerledger.core.exceptions import (
    AuthorizationException,
    CapacityError,
    ConflictError,
    ErrorCode,
    LedgerException,
    NotFoundError,
    ValidationException,
)

# ============================================================================
# LedgerException Tests
# ============================================================================


class TestLedgerException:
    """Tests for base LedgerException class."""

    def test_default_code(self):
        exc = LedgerException("Something failed")
        assert exc.message == "Something failed"
        assert exc.code == ErrorCode.INVALID_PARAMETER
        assert exc.details == {}
        assert str(exc) == "Something failed"

    def test_to_dict(self):
        exc = LedgerException("Bad", ErrorCode.NOT_FOUND, {"key": "value"})
        assert exc.to_dict() == {
            "error": "LedgerException",
            "category": "LedgerError",
            "code": "NotFound",
            "message": "Bad",
            "details": {"key": "value"},
        }

    def test_is_exception(self):
        with pytest.raises(LedgerException):
            raise LedgerException("Test")


# ============================================================================
# Subclass Tests
# ============================================================================


class TestValidationException:
    def test_field_and_value(self):
        exc = ValidationException("Bad score", code=ErrorCode.INVALID_SCORE, field="score", value=11)
        assert exc.category == "ValidationError"
        assert exc.code == ErrorCode.INVALID_SCORE
        assert exc.details == {"field": "score", "value": "11"}
        assert exc.value == 11

    def test_zero_value_kept(self):
        exc = ValidationException("Zero", field="amount", value=0)
        assert exc.details["value"] == "0"


class TestAuthorizationException:
    def test_defaults(self):
        exc = AuthorizationException("Nope", principal="mallory")
        assert exc.code == ErrorCode.NOT_AUTHORIZED
        assert exc.category == "AuthorizationError"
        assert exc.details == {"principal": "mallory"}


class TestConflictAndCapacity:
    def test_conflict(self):
        exc = ConflictError("Twice", ErrorCode.ALREADY_VOTED, existing_id="alice:bob")
        assert exc.category == "StateConflict"
        assert exc.details == {"existing_id": "alice:bob"}

    def test_capacity_limit_zero_kept(self):
        exc = CapacityError("Broke", ErrorCode.INSUFFICIENT_FUNDS, limit=0)
        assert exc.details == {"limit": 0}


class TestNotFoundError:
    def test_message_and_details(self):
        exc = NotFoundError("Dispute", 7)
        assert exc.message == "Dispute not found: 7"
        assert exc.code == ErrorCode.NOT_FOUND
        assert exc.details == {"resource_type": "Dispute", "resource_id": "7"}
        assert isinstance(exc, LedgerException)


class TestErrorCode:
    def test_codes_are_strings(self):
        assert ErrorCode.REPUTATION_OVERFLOW == "ReputationOverflow"
        assert ErrorCode.VOTING_CLOSED.value == "VotingClosed"
