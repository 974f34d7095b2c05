# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""PeerLedger - trust & governance engine for academic authorship records.

A deterministic ledger state machine for stake-backed identities, peer
reputation and dispute resolution:

  Identity & stake ledger (registration, roles, custody)
    -> Reputation votes (one per voter/target, windowed aggregation)
    -> Disputes (trusted principals raise, ballots, majority resolution)
    -> Review registry (authority-validated peer reviews)

Every operation runs through a single serialized executor: it either
commits entirely or leaves state untouched and returns a named failure code.

CLI entry point: ``peerledger``
"""

__version__ = "0.1.0"

from .system import LedgerSystem

__all__ = ["LedgerSystem", "__version__"]
