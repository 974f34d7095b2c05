"""Helpers shared by CLI command modules."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable
from typing import Any

from ..core.response import LedgerResponse
from ..system import LedgerSystem
from .config import get_cli_config
from .output import output_error, output_result

logger = logging.getLogger(__name__)


def load_system() -> LedgerSystem:
    """Load the ledger from the configured state file."""
    return LedgerSystem.load(get_cli_config().state_file)


def require_caller() -> str | None:
    caller = get_cli_config().caller
    if not caller:
        output_error("No caller principal set. Use --caller or PEERLEDGER_CALLER.")
        return None
    return caller


def submit(operation: Callable[[LedgerSystem, str], LedgerResponse]) -> int:
    """Run one operation as the configured caller and persist on success.

    Returns the process exit code: 0 on commit, 1 on a named failure.
    """
    caller = require_caller()
    if caller is None:
        return 1
    system = load_system()
    response = operation(system, caller)
    if not response.success:
        logger.debug("Operation by %s failed with %s; state not saved", caller, response.code)
        output_error(response.error or "operation failed", response.code)
        return 1
    system.save(get_cli_config().state_file)
    output_result(response.to_dict())
    return 0


def show(read: Callable[[LedgerSystem], Any], missing: str | None = None) -> int:
    """Print the result of a read. ``missing`` is reported when the read returns None."""
    system = load_system()
    value = read(system)
    if value is None and missing:
        output_error(missing, "NotFound")
        return 1
    output_result(value)
    return 0


def parse_vote(value: str) -> bool:
    """argparse type for yes/no ballots."""
    lowered = value.lower()
    if lowered in ("yes", "y", "true", "1"):
        return True
    if lowered in ("no", "n", "false", "0"):
        return False
    raise argparse.ArgumentTypeError(f"expected yes or no, got {value!r}")
