"""Block clock: the ledger's logical time source.

All windows (reputation voting period, dispute ballot period) are measured
in block units. The clock only moves forward.
"""

from __future__ import annotations

import logging

from .exceptions import ErrorCode, ValidationException

logger = logging.getLogger(__name__)


class BlockClock:
    """Monotonically increasing block counter."""

    def __init__(self, height: int = 0):
        if height < 0:
            raise ValidationException("Block height cannot be negative", field="height", value=height)
        self._height = height

    @property
    def height(self) -> int:
        return self._height

    def now(self) -> int:
        """Current block height."""
        return self._height

    def advance(self, blocks: int = 1) -> int:
        """Move the clock forward by ``blocks`` and return the new height."""
        if blocks < 0:
            raise ValidationException(
                "Clock cannot move backwards",
                code=ErrorCode.INVALID_PARAMETER,
                field="blocks",
                value=blocks,
            )
        self._height += blocks
        logger.debug("Block height advanced to %d", self._height)
        return self._height
