"""Reputation vote store and windowed aggregator."""

from .votes import MAX_VOTE_SCORE, ReputationBook, ReputationVote

__all__ = ["ReputationBook", "ReputationVote", "MAX_VOTE_SCORE"]
