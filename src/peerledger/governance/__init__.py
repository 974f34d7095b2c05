"""Governance: dispute registry, ballots and majority resolution."""

from .disputes import Ballot, Dispute, DisputeRegistry, DisputeStatus

__all__ = ["Ballot", "Dispute", "DisputeRegistry", "DisputeStatus"]
