# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Custom exception hierarchy for PeerLedger.

Every failure an operation can report belongs to one of five categories:

- ``ValidationException``: malformed input (hash length, score range, role tag)
- ``AuthorizationException``: caller lacks the required binding, role or trust
- ``ConflictError``: the request conflicts with existing state
- ``CapacityError``: a limit would be exceeded (reputation cap, role count)
- ``NotFoundError``: unknown id or key

Each exception carries a stable ``ErrorCode`` so the command surface can
report a named failure without parsing messages.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Named failure codes returned by ledger operations."""

    # Identity & stake
    ALREADY_REGISTERED = "AlreadyRegistered"
    INVALID_ROLE = "InvalidRole"
    INVALID_PROFILE = "InvalidProfile"
    INSUFFICIENT_STAKE = "InsufficientStake"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    NOT_ACTIVE = "NotActive"
    STILL_ACTIVE = "StillActive"
    ROLE_LIMIT_REACHED = "RoleLimitReached"

    # Reputation
    INVALID_REPUTATION = "InvalidReputation"
    ALREADY_VOTED = "AlreadyVoted"
    REPUTATION_OVERFLOW = "ReputationOverflow"

    # Disputes
    INVALID_DISPUTE_TYPE = "InvalidDisputeType"
    ALREADY_RESOLVED = "AlreadyResolved"
    VOTING_CLOSED = "VotingClosed"

    # Authority
    NOT_AUTHORIZED = "NotAuthorized"
    AUTHORITY_NOT_SET = "AuthorityNotSet"
    ALREADY_BOUND = "AlreadyBound"
    INVALID_PRINCIPAL = "InvalidPrincipal"

    # Reviews
    REVIEW_EXISTS = "ReviewExists"
    INVALID_SCORE = "InvalidScore"
    INVALID_HASH = "InvalidHash"
    INVALID_CATEGORY = "InvalidCategory"
    INVALID_REVIEW_TYPE = "InvalidReviewType"
    MAX_REVIEWS_EXCEEDED = "MaxReviewsExceeded"
    REGISTRY_DISABLED = "RegistryDisabled"

    # Generic
    INVALID_PARAMETER = "InvalidParameter"
    NOT_FOUND = "NotFound"


class LedgerException(Exception):  # noqa: N818
    """Base exception for all PeerLedger errors.

    All PeerLedger-specific exceptions should inherit from this class.
    """

    category = "LedgerError"

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_PARAMETER,
        details: dict | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "category": self.category,
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(LedgerException):
    """Exception for malformed input.

    Raised when:
    - A profile or review hash has the wrong length
    - A score is out of range
    - A role, review type or dispute type tag is unknown
    - A configuration value is out of range
    """

    category = "ValidationError"

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_PARAMETER,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, code, details)
        self.field = field
        self.value = value


class AuthorizationException(LedgerException):
    """Exception for callers lacking a role, binding or trust level."""

    category = "AuthorizationError"

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.NOT_AUTHORIZED,
        principal: str | None = None,
    ):
        details = {}
        if principal:
            details["principal"] = principal
        super().__init__(message, code, details)
        self.principal = principal


class ConflictError(LedgerException):
    """Exception for state conflicts.

    Raised when:
    - A principal registers twice
    - A voter votes twice on the same target
    - A resolved dispute is voted on or resolved again
    - An authority binding is already set
    """

    category = "StateConflict"

    def __init__(self, message: str, code: ErrorCode, existing_id: str | None = None):
        details = {}
        if existing_id:
            details["existing_id"] = existing_id
        super().__init__(message, code, details)
        self.existing_id = existing_id


class CapacityError(LedgerException):
    """Exception for exceeded limits (reputation cap, role count, balances)."""

    category = "CapacityError"

    def __init__(self, message: str, code: ErrorCode, limit: int | None = None):
        details = {}
        if limit is not None:
            details["limit"] = limit
        super().__init__(message, code, details)
        self.limit = limit


class NotFoundError(LedgerException):
    """Exception for unknown ids or keys."""

    category = "NotFoundError"

    def __init__(self, resource_type: str, resource_id: Any):
        message = f"{resource_type} not found: {resource_id}"
        details = {
            "resource_type": resource_type,
            "resource_id": str(resource_id),
        }
        super().__init__(message, ErrorCode.NOT_FOUND, details)
        self.resource_type = resource_type
        self.resource_id = resource_id
