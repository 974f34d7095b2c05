"""PeerLedger Core - state, time, execution and ambient primitives."""

from .authority import AuthorityBinding
from .clock import BlockClock
from .config import LedgerSettings, clear_config_cache, get_config
from .exceptions import (
    AuthorizationException,
    CapacityError,
    ConflictError,
    ErrorCode,
    LedgerException,
    NotFoundError,
    ValidationException,
)
from .executor import OperationRecord, TransactionExecutor
from .funds import Funds, Transfer, custody_account
from .logging import (
    OperationLogger,
    TransactionFilter,
    configure_logging,
    operation_logger,
    transaction_context,
)
from .response import LedgerResponse, err, ok
from .store import StateStore, TransactionError

__all__ = [
    # Authority
    "AuthorityBinding",
    # Clock
    "BlockClock",
    # Config
    "LedgerSettings",
    "get_config",
    "clear_config_cache",
    # Exceptions
    "ErrorCode",
    "LedgerException",
    "ValidationException",
    "AuthorizationException",
    "ConflictError",
    "CapacityError",
    "NotFoundError",
    # Execution
    "OperationRecord",
    "TransactionExecutor",
    # Funds
    "Funds",
    "Transfer",
    "custody_account",
    # Logging
    "OperationLogger",
    "TransactionFilter",
    "configure_logging",
    "operation_logger",
    "transaction_context",
    # Responses
    "LedgerResponse",
    "ok",
    "err",
    # State
    "StateStore",
    "TransactionError",
]
