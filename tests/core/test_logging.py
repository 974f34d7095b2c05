"""Tests for peerledger.core.logging module."""

from __future__ import annotations

import json
import logging

import pytest

# ============================================================================
# Transaction ID Tests
# ============================================================================


class TestTransactionId:
    """Tests for transaction ID context handling."""

    def test_default_none(self):
        from peerledger.core.logging import get_transaction_id

        assert get_transaction_id() is None

    def test_generate_unique(self):
        from peerledger.core.logging import generate_transaction_id

        id1 = generate_transaction_id()
        id2 = generate_transaction_id()

        assert id1 != id2
        assert len(id1) == 36  # UUID format

    def test_context_generates_id(self):
        from peerledger.core.logging import get_transaction_id, transaction_context

        with transaction_context() as tid:
            assert len(tid) == 36
            assert get_transaction_id() == tid

        assert get_transaction_id() is None

    def test_nested_contexts(self):
        from peerledger.core.logging import get_transaction_id, transaction_context

        with transaction_context("outer"):
            with transaction_context("inner"):
                assert get_transaction_id() == "inner"
            assert get_transaction_id() == "outer"

        assert get_transaction_id() is None


# ============================================================================
# Formatter Tests
# ============================================================================


def _record(msg: str = "Test message", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestJSONFormatter:
    def test_format_basic_message(self):
        from peerledger.core.logging import JSONFormatter

        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "test.logger"
        assert data["message"] == "Test message"
        assert "transaction_id" not in data

    def test_includes_transaction_id(self):
        from peerledger.core.logging import JSONFormatter, transaction_context

        with transaction_context("tx-123"):
            data = json.loads(JSONFormatter().format(_record()))

        assert data["transaction_id"] == "tx-123"

    def test_stamped_id_wins_over_context(self):
        from peerledger.core.logging import JSONFormatter, TransactionFilter, transaction_context

        record = _record()
        with transaction_context("tx-emitted"):
            TransactionFilter().filter(record)
        with transaction_context("tx-later"):
            data = json.loads(JSONFormatter().format(record))

        assert data["transaction_id"] == "tx-emitted"

    def test_operation_fields_lifted(self):
        from peerledger.core.logging import JSONFormatter

        record = _record()
        record.operation = "register"
        record.code = "InsufficientStake"
        data = json.loads(JSONFormatter().format(record))

        assert data["operation"] == "register"
        assert data["code"] == "InsufficientStake"
        assert "caller" not in data


class TestTextFormatter:
    def test_short_transaction_id(self):
        from peerledger.core.logging import TextFormatter, transaction_context

        with transaction_context("abcdef0123456789"):
            output = TextFormatter().format(_record())

        assert "[abcdef01] test.logger INFO: Test message" in output

    def test_placeholder_outside_transaction(self):
        from peerledger.core.logging import NO_TRANSACTION, TextFormatter

        output = TextFormatter().format(_record())

        assert f"[{NO_TRANSACTION}]" in output


# ============================================================================
# configure_logging / OperationLogger Tests
# ============================================================================


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_json_format(self, clean_env):
        from peerledger.core.logging import JSONFormatter, TransactionFilter, configure_logging

        configure_logging(level="DEBUG", json_format=True)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert any(isinstance(f, TransactionFilter) for f in root.handlers[0].filters)

    def test_reads_settings(self, clean_env, monkeypatch):
        from peerledger.core.logging import TextFormatter, configure_logging

        monkeypatch.setenv("PEERLEDGER_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("PEERLEDGER_LOG_FORMAT", "text")

        configure_logging()

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_log_file(self, clean_env, tmp_path):
        from peerledger.core.logging import configure_logging

        configure_logging(level="INFO", json_format=False, log_file=str(tmp_path / "ledger.log"))

        assert len(logging.getLogger().handlers) == 2


class TestOperationLogger:
    def test_log_call_and_result(self, caplog):
        from peerledger.core.logging import OperationLogger

        op_logger = OperationLogger(logging.getLogger("test.ops"))
        with caplog.at_level(logging.DEBUG, logger="test.ops"):
            op_logger.log_call("register", "alice", {"role": "author"})
            op_logger.log_result("register", False, 1.5, code="InsufficientStake")

        assert caplog.records[0].message == "register called by alice"
        assert caplog.records[0].arguments == {"role": "author"}
        assert caplog.records[1].message == "register aborted (InsufficientStake) in 1.5ms"
        assert caplog.records[1].success is False
