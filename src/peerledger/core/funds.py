"""Principal balances and custody transfers.

Stands in for the host ledger's native token: registration moves stake from
the caller's balance into a module custody account, withdrawal moves it back,
and review fees move from reviewer to authority. Every transfer is appended
to the ``transfers`` table so tests and operators can audit fund movements.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from .exceptions import CapacityError, ErrorCode, ValidationException
from .store import StateStore

logger = logging.getLogger(__name__)

BALANCES = "balances"
TRANSFERS = "transfers"


def custody_account(module: str) -> str:
    """Name of the escrow account owned by ``module``."""
    return f"custody:{module}"


@dataclass(frozen=True)
class Transfer:
    """One recorded fund movement."""

    amount: int
    sender: str
    recipient: str
    height: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transfer:
        return cls(**data)


class Funds:
    """Integer balances keyed by principal."""

    def __init__(self, store: StateStore, clock):
        self.store = store
        self.clock = clock
        store.define_table(BALANCES)
        store.define_table(TRANSFERS, Transfer)

    def balance(self, principal: str) -> int:
        return self.store.get(BALANCES, principal, 0)

    def credit(self, principal: str, amount: int) -> int:
        """Mint ``amount`` into ``principal``'s balance (genesis funding)."""
        if amount <= 0:
            raise ValidationException("Credit amount must be positive", field="amount", value=amount)
        new_balance = self.balance(principal) + amount
        self.store.put(BALANCES, principal, new_balance)
        logger.info("Credited %d to %s", amount, principal)
        return new_balance

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move ``amount`` from sender to recipient. Zero-amount transfers are no-ops."""
        if amount < 0:
            raise ValidationException("Transfer amount cannot be negative", field="amount", value=amount)
        if amount == 0:
            return
        available = self.balance(sender)
        if available < amount:
            raise CapacityError(
                f"{sender} holds {available}, needs {amount}",
                ErrorCode.INSUFFICIENT_FUNDS,
                limit=available,
            )
        self.store.put(BALANCES, sender, available - amount)
        self.store.put(BALANCES, recipient, self.balance(recipient) + amount)
        seq = self.store.count(TRANSFERS)
        self.store.put(TRANSFERS, seq, Transfer(amount, sender, recipient, self.clock.now()))
        logger.debug("Transferred %d from %s to %s", amount, sender, recipient)

    def transfers(self) -> list[Transfer]:
        return [transfer for _, transfer in sorted(self.store.items(TRANSFERS), key=lambda kv: kv[0])]
