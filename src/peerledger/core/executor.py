# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Serialized, all-or-nothing transaction executor.

Every public ledger operation runs through ``TransactionExecutor.execute``:

1. The system-wide lock is taken, so exactly one operation runs at a time.
2. A store transaction is opened and a transaction ID is bound to logging.
3. The operation runs, including any nested cross-module calls it makes.
4. On success the operation is appended to the operation log and the
   transaction commits. On a ``LedgerException`` every write is rolled back
   and the failure is returned as a response value. Any other exception is
   rolled back and re-raised.

Operations never suspend, so the lock is held for the full call.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .exceptions import LedgerException
from .logging import operation_logger, transaction_context
from .response import LedgerResponse, err, ok
from .store import StateStore

logger = logging.getLogger(__name__)

OPERATIONS = "operations"


@dataclass(frozen=True)
class OperationRecord:
    """A committed operation, in acceptance order."""

    seq: int
    height: int
    caller: str
    operation: str
    arguments: dict[str, Any] = field(default_factory=dict)
    transaction_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "seq": self.seq,
            "height": self.height,
            "caller": self.caller,
            "operation": self.operation,
            "arguments": dict(self.arguments),
            "transaction_id": self.transaction_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OperationRecord:
        return cls(**data)


class TransactionExecutor:
    """Runs operations one at a time, each as a single atomic transaction."""

    def __init__(self, store: StateStore, clock):
        self.store = store
        self.clock = clock
        self._lock = threading.RLock()
        store.define_table(OPERATIONS, OperationRecord)

    @property
    def lock(self) -> threading.RLock:
        """The sequencer lock; hold it for any out-of-band state change."""
        return self._lock

    def execute(
        self,
        operation: str,
        caller: str,
        fn: Callable[[], Any],
        arguments: dict[str, Any] | None = None,
    ) -> LedgerResponse:
        """Run ``fn`` atomically on behalf of ``caller``.

        Args:
            operation: Operation name, recorded in the operation log.
            caller: Principal invoking the operation.
            fn: Zero-argument callable performing the state transition.
            arguments: JSON-compatible arguments, recorded in the log.

        Returns:
            ``ok(value)`` if ``fn`` returned, ``err(exc)`` if it raised a
            ``LedgerException``.
        """
        arguments = arguments or {}
        with self._lock, transaction_context() as tid:
            operation_logger.log_call(operation, caller, arguments)
            start = time.perf_counter()
            try:
                with self.store.transaction():
                    result = fn()
                    seq = self.store.count(OPERATIONS)
                    self.store.put(
                        OPERATIONS,
                        seq,
                        OperationRecord(
                            seq=seq,
                            height=self.clock.now(),
                            caller=caller,
                            operation=operation,
                            arguments=arguments,
                            transaction_id=tid,
                        ),
                    )
            except LedgerException as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                operation_logger.log_result(operation, False, duration_ms, code=exc.code.value)
                logger.info("%s by %s rejected: %s", operation, caller, exc.code.value)
                return err(exc)
            except BaseException:
                logger.exception("%s by %s failed unexpectedly; rolled back", operation, caller)
                raise
            duration_ms = (time.perf_counter() - start) * 1000
            operation_logger.log_result(operation, True, duration_ms)
            return ok(result)

    def operations(self) -> list[OperationRecord]:
        """Committed operations in acceptance order."""
        return [record for _, record in sorted(self.store.items(OPERATIONS), key=lambda kv: kv[0])]
