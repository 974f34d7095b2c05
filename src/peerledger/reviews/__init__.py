"""Peer review registry, consumed by governance as a collaborator store."""

from .registry import REVIEW_TYPES, Review, ReviewRegistry, ReviewUpdate

__all__ = ["Review", "ReviewRegistry", "ReviewUpdate", "REVIEW_TYPES"]
