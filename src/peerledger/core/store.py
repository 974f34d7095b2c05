# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Typed key-value state with an undo journal.

The store holds every piece of ledger state: one keyed table per entity
type plus a flat namespace of scalar values (configuration knobs, sequence
counters, authority bindings).

Writes are only accepted inside a transaction. Each write records the value
it replaced so that ``rollback()`` restores the exact pre-transaction state,
including writes made by nested cross-module calls. Records are immutable
dataclasses, so the journal never needs deep copies.
"""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any, Protocol

logger = logging.getLogger(__name__)

_MISSING = object()


class TransactionError(RuntimeError):
    """Raised on misuse of the transaction protocol (e.g. write outside a transaction)."""


class Record(Protocol):
    """Protocol for table records that can round-trip through a snapshot."""

    def to_dict(self) -> dict[str, Any]: ...

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Record: ...


def _encode_key(key: Any) -> Any:
    return list(key) if isinstance(key, tuple) else key


def _decode_key(key: Any) -> Any:
    return tuple(key) if isinstance(key, list) else key


class StateStore:
    """Keyed tables and scalars with transactional writes."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[Any, Any]] = {}
        self._record_types: dict[str, type | None] = {}
        self._scalars: dict[str, Any] = {}
        self._journal: list[tuple[str, str, Any, Any]] | None = None

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def define_table(self, name: str, record_type: type | None = None) -> None:
        """Declare a table. ``record_type`` is used to decode snapshots."""
        if name in self._tables:
            return
        self._tables[name] = {}
        self._record_types[name] = record_type

    def seed_scalar(self, name: str, value: Any) -> None:
        """Set an initial scalar value if it is absent. Allowed outside transactions."""
        self._scalars.setdefault(name, value)

    def _table(self, name: str) -> dict[Any, Any]:
        try:
            return self._tables[name]
        except KeyError:
            raise KeyError(f"Unknown table: {name}") from None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, table: str, key: Any, default: Any = None) -> Any:
        return self._table(table).get(key, default)

    def contains(self, table: str, key: Any) -> bool:
        return key in self._table(table)

    def items(self, table: str) -> Iterator[tuple[Any, Any]]:
        return iter(list(self._table(table).items()))

    def count(self, table: str) -> int:
        return len(self._table(table))

    def get_scalar(self, name: str, default: Any = None) -> Any:
        return self._scalars.get(name, default)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _require_transaction(self) -> list[tuple[str, str, Any, Any]]:
        if self._journal is None:
            raise TransactionError("State writes are only allowed inside a transaction")
        return self._journal

    def put(self, table: str, key: Any, value: Any) -> None:
        journal = self._require_transaction()
        rows = self._table(table)
        journal.append(("table", table, key, rows.get(key, _MISSING)))
        rows[key] = value

    def set_scalar(self, name: str, value: Any) -> None:
        journal = self._require_transaction()
        journal.append(("scalar", name, None, self._scalars.get(name, _MISSING)))
        self._scalars[name] = value

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @property
    def in_transaction(self) -> bool:
        return self._journal is not None

    def begin(self) -> None:
        if self._journal is not None:
            raise TransactionError("A transaction is already open")
        self._journal = []

    def commit(self) -> int:
        """Close the transaction, keeping its writes. Returns the number of writes."""
        journal = self._require_transaction()
        self._journal = None
        return len(journal)

    def rollback(self) -> int:
        """Undo every write of the open transaction, newest first."""
        journal = self._require_transaction()
        for kind, name, key, previous in reversed(journal):
            target = self._tables[name] if kind == "table" else self._scalars
            slot = key if kind == "table" else name
            if previous is _MISSING:
                target.pop(slot, None)
            else:
                target[slot] = previous
        self._journal = None
        logger.debug("Rolled back %d writes", len(journal))
        return len(journal)

    @contextmanager
    def transaction(self) -> Generator[StateStore, None, None]:
        """Run a block atomically: commit on success, roll back on any exception."""
        self.begin()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        else:
            self.commit()

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def to_snapshot(self) -> dict[str, Any]:
        if self._journal is not None:
            raise TransactionError("Cannot snapshot while a transaction is open")
        tables: dict[str, list[list[Any]]] = {}
        for name, rows in self._tables.items():
            has_records = self._record_types.get(name) is not None
            tables[name] = [
                [_encode_key(key), value.to_dict() if has_records else _encode_key(value)]
                for key, value in rows.items()
            ]
        return {"tables": tables, "scalars": dict(self._scalars)}

    def load_snapshot(self, snapshot: dict[str, Any]) -> None:
        """Replace table contents and scalars with a snapshot's."""
        if self._journal is not None:
            raise TransactionError("Cannot load a snapshot while a transaction is open")
        for name, rows in snapshot.get("tables", {}).items():
            self.define_table(name)
            record_type = self._record_types.get(name)
            decoded: dict[Any, Any] = {}
            for key, value in rows:
                decoded[_decode_key(key)] = (
                    record_type.from_dict(value) if record_type is not None else _decode_key(value)
                )
            self._tables[name] = decoded
        self._scalars = dict(snapshot.get("scalars", {}))
