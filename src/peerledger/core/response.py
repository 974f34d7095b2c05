# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Standard response envelope for ledger operations.

Every operation submitted through the executor returns a ``LedgerResponse``
so callers always receive a consistent ``{success, data, error, code}``
structure: either the operation's value, or a named failure code.

Usage::

    from peerledger.core.response import ok, err, LedgerResponse

    # Success
    return ok(data=0)

    # Failure
    return err(exc)  # exc is a LedgerException
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .exceptions import LedgerException


@dataclass
class LedgerResponse:
    """Unified response envelope for all public ledger operations.

    Attributes:
        success:  True when the operation committed.
        data:     Value returned on success. None for void operations.
        error:    Human-readable error message on failure.
        code:     Named failure code (``ErrorCode`` value) on failure.
        category: Failure category (ValidationError, StateConflict, ...).
    """

    success: bool
    data: Any = None
    error: str | None = None
    code: str | None = None
    category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict, keeping only keys that carry information."""
        d: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            d["data"] = self.data
        if self.error:
            d["error"] = self.error
        if self.code:
            d["code"] = self.code
        if self.category:
            d["category"] = self.category
        return d

    def unwrap(self) -> Any:
        """Return ``data`` or raise ``RuntimeError`` if the operation failed."""
        if not self.success:
            raise RuntimeError(f"{self.code}: {self.error}")
        return self.data


def ok(data: Any = None) -> LedgerResponse:
    """Create a successful LedgerResponse."""
    return LedgerResponse(success=True, data=data)


def err(exc: LedgerException) -> LedgerResponse:
    """Create a failed LedgerResponse from a ledger exception."""
    return LedgerResponse(
        success=False,
        error=exc.message,
        code=exc.code.value,
        category=exc.category,
    )
