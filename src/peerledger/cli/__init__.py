# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""PeerLedger CLI - one sub-command per ledger operation."""

from .main import app, main

__all__ = ["main", "app"]
