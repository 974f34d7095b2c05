# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Logging for PeerLedger, keyed by transaction.

Every executor call binds a transaction ID to the running context.
``TransactionFilter`` stamps that ID on each record emitted while the call
runs, so a single operation's log lines (including those from nested
cross-module calls) can be grouped together. Operation fields recorded by
``OperationLogger`` (operation, caller, outcome code, duration) travel as
record attributes and are emitted as top-level keys in JSON output.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

_transaction_id: ContextVar[str | None] = ContextVar("transaction_id", default=None)

# Record attributes set by OperationLogger, copied into JSON output when present
OPERATION_FIELDS = ("operation", "caller", "arguments", "success", "code", "duration_ms")

TEXT_FORMAT = "%(asctime)s [%(tx)s] %(name)s %(levelname)s: %(message)s"
NO_TRANSACTION = "--------"


def get_transaction_id() -> str | None:
    """ID of the transaction running in this context, if any."""
    return _transaction_id.get()


def generate_transaction_id() -> str:
    return str(uuid.uuid4())


@contextmanager
def transaction_context(transaction_id: str | None = None) -> Generator[str, None, None]:
    """Bind a transaction ID (a fresh one unless given) for the enclosed block."""
    tid = transaction_id or generate_transaction_id()
    token = _transaction_id.set(tid)
    try:
        yield tid
    finally:
        _transaction_id.reset(token)


class TransactionFilter(logging.Filter):
    """Stamp the current transaction ID on records.

    Sets ``transaction_id`` (full ID or None) and ``tx`` (first eight
    characters, or a placeholder outside any transaction).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        tid = get_transaction_id()
        record.transaction_id = tid
        record.tx = tid[:8] if tid else NO_TRANSACTION
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with transaction and operation fields lifted to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        tid = getattr(record, "transaction_id", None) or get_transaction_id()
        if tid:
            log_data["transaction_id"] = tid
        for name in OPERATION_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Single-line text with the short transaction ID after the timestamp."""

    def __init__(self) -> None:
        super().__init__(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "tx"):
            TransactionFilter().filter(record)
        return super().format(record)


def configure_logging(
    level: str | int | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure the root logger from arguments, falling back to settings.

    Environment variables (through ``LedgerSettings``):
        PEERLEDGER_LOG_LEVEL: Default log level
        PEERLEDGER_LOG_FORMAT: "json" or "text"; auto-detected from the terminal if unset
        PEERLEDGER_LOG_FILE: Also write JSON lines to this file
    """
    from .config import get_config

    config = get_config()

    if level is None:
        level = config.log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_format is None:
        fmt = config.log_format.lower()
        json_format = fmt == "json" if fmt in ("json", "text") else not sys.stderr.isatty()

    log_file = config.log_file if log_file is None else log_file

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(JSONFormatter() if json_format else TextFormatter())
    console_handler.addFilter(TransactionFilter())
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        file_handler.addFilter(TransactionFilter())
        root_logger.addHandler(file_handler)


class OperationLogger:
    """Records each executor call and its outcome on ``peerledger.operations``."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("peerledger.operations")

    def log_call(self, operation: str, caller: str, arguments: dict[str, Any]) -> None:
        self.logger.debug(
            "%s called by %s",
            operation,
            caller,
            extra={"operation": operation, "caller": caller, "arguments": arguments},
        )

    def log_result(
        self,
        operation: str,
        success: bool,
        duration_ms: float,
        code: str | None = None,
    ) -> None:
        outcome = "committed" if success else f"aborted ({code})"
        self.logger.debug(
            "%s %s in %.1fms",
            operation,
            outcome,
            duration_ms,
            extra={"operation": operation, "success": success, "code": code, "duration_ms": duration_ms},
        )


operation_logger = OperationLogger()
