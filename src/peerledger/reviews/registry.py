"""Peer review registry.

Keyed review records with field validation. The registry's own authority
binding gates its configuration, collects submission fees, and is the only
principal allowed to mark a review validated. Every update by the reviewer
is appended to the review's revision history.

Collaborator interface: ``get(id)``, ``exists(author, paper_id, reviewer)``,
``count()``.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from typing import Any

from ..core.authority import AuthorityBinding
from ..core.config import LedgerSettings
from ..core.exceptions import (
    AuthorizationException,
    CapacityError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    ValidationException,
)
from ..core.funds import Funds
from ..core.store import StateStore

logger = logging.getLogger(__name__)

MODULE = "reviews"
REVIEWS = "reviews"
REVIEW_KEYS = "review_keys"
REVIEW_UPDATES = "review_updates"
REVIEW_TYPES = ("peer", "expert", "community")
MAX_CATEGORY_LENGTH = 50


@dataclass(frozen=True)
class Review:
    paper_author: str
    paper_id: int
    reviewer: str
    review_hash: str
    score: int
    timestamp: int
    category: str
    review_type: str
    validated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Review:
        return cls(**data)


@dataclass(frozen=True)
class ReviewUpdate:
    """One revision of a review, keyed by (review id, revision number)."""

    score: int
    review_hash: str
    timestamp: int
    updater: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReviewUpdate:
        return cls(**data)


class ReviewRegistry:
    """Review records plus the registry's fee and score configuration."""

    def __init__(self, store: StateStore, clock, funds: Funds, settings: LedgerSettings):
        self.store = store
        self.clock = clock
        self.funds = funds
        self.hash_length = settings.profile_hash_length
        self.authority = AuthorityBinding(store, MODULE, settings.null_principal)

        store.define_table(REVIEWS, Review)
        store.define_table(REVIEW_KEYS)
        store.define_table(REVIEW_UPDATES, ReviewUpdate)
        store.seed_scalar("reviews.next_id", 0)
        store.seed_scalar("reviews.fee", settings.review_fee)
        store.seed_scalar("reviews.max_reviews", settings.max_reviews)
        store.seed_scalar("reviews.min_score", settings.review_min_score)
        store.seed_scalar("reviews.max_score", settings.review_max_score)
        store.seed_scalar("reviews.enabled", True)

    @property
    def fee(self) -> int:
        return self.store.get_scalar("reviews.fee")

    @property
    def score_range(self) -> tuple[int, int]:
        return self.store.get_scalar("reviews.min_score"), self.store.get_scalar("reviews.max_score")

    @property
    def enabled(self) -> bool:
        return self.store.get_scalar("reviews.enabled")

    # Collaborator interface

    def get(self, review_id: int) -> Review | None:
        return self.store.get(REVIEWS, review_id)

    def exists(self, paper_author: str, paper_id: int, reviewer: str) -> bool:
        return self.store.contains(REVIEW_KEYS, (paper_author, paper_id, reviewer))

    def count(self) -> int:
        return self.store.get_scalar("reviews.next_id")

    def updates_for(self, review_id: int) -> list[ReviewUpdate]:
        """Revisions of a review, oldest first."""
        updates = []
        while (update := self.store.get(REVIEW_UPDATES, (review_id, len(updates)))) is not None:
            updates.append(update)
        return updates

    # Validation

    def _validate_score(self, score: int) -> None:
        low, high = self.score_range
        if score < low or score > high:
            raise ValidationException(
                f"Score must be between {low} and {high}", code=ErrorCode.INVALID_SCORE, field="score", value=score
            )

    def _validate_hash(self, review_hash: str) -> None:
        if len(review_hash) != self.hash_length:
            raise ValidationException(
                f"Review hash must be exactly {self.hash_length} characters",
                code=ErrorCode.INVALID_HASH,
                field="review_hash",
                value=review_hash,
            )

    # Operations

    def submit_review(
        self,
        caller: str,
        paper_author: str,
        paper_id: int,
        review_hash: str,
        score: int,
        category: str,
        review_type: str,
    ) -> int:
        if not self.enabled:
            raise ConflictError("Review registry is disabled", ErrorCode.REGISTRY_DISABLED)
        max_reviews = self.store.get_scalar("reviews.max_reviews")
        if self.count() >= max_reviews:
            raise CapacityError("Review registry is full", ErrorCode.MAX_REVIEWS_EXCEEDED, limit=max_reviews)
        self._validate_score(score)
        self._validate_hash(review_hash)
        if not category or len(category) > MAX_CATEGORY_LENGTH:
            raise ValidationException(
                f"Category must be 1-{MAX_CATEGORY_LENGTH} characters",
                code=ErrorCode.INVALID_CATEGORY,
                field="category",
                value=category,
            )
        if review_type not in REVIEW_TYPES:
            raise ValidationException(
                f"Unknown review type {review_type!r}",
                code=ErrorCode.INVALID_REVIEW_TYPE,
                field="review_type",
                value=review_type,
            )
        key = (paper_author, paper_id, caller)
        if self.store.contains(REVIEW_KEYS, key):
            raise ConflictError(
                f"{caller} already reviewed paper {paper_id} by {paper_author}",
                ErrorCode.REVIEW_EXISTS,
                existing_id=str(self.store.get(REVIEW_KEYS, key)),
            )
        authority = self.authority.principal
        if authority is None:
            raise AuthorizationException("No reviews authority has been bound", code=ErrorCode.AUTHORITY_NOT_SET)

        self.funds.transfer(caller, authority, self.fee)
        review_id = self.count()
        review = Review(
            paper_author=paper_author,
            paper_id=paper_id,
            reviewer=caller,
            review_hash=review_hash,
            score=score,
            timestamp=self.clock.now(),
            category=category,
            review_type=review_type,
        )
        self.store.put(REVIEWS, review_id, review)
        self.store.put(REVIEW_KEYS, key, review_id)
        self.store.set_scalar("reviews.next_id", review_id + 1)
        logger.info("Review %d submitted by %s for paper %d", review_id, caller, paper_id)
        return review_id

    def _require_review(self, review_id: int) -> Review:
        review = self.get(review_id)
        if review is None:
            raise NotFoundError("Review", review_id)
        return review

    def update_review(self, caller: str, review_id: int, score: int, review_hash: str) -> Review:
        review = self._require_review(review_id)
        if review.reviewer != caller:
            raise AuthorizationException(
                f"Only the reviewer may update review {review_id}", code=ErrorCode.NOT_AUTHORIZED, principal=caller
            )
        self._validate_score(score)
        self._validate_hash(review_hash)
        now = self.clock.now()
        updated = replace(review, score=score, review_hash=review_hash, timestamp=now)
        self.store.put(REVIEWS, review_id, updated)
        revision = len(self.updates_for(review_id))
        self.store.put(REVIEW_UPDATES, (review_id, revision), ReviewUpdate(score, review_hash, now, caller))
        return updated

    def validate_review(self, caller: str, review_id: int) -> Review:
        review = self._require_review(review_id)
        if not self.authority.is_authority(caller):
            raise AuthorizationException(
                f"Only the reviews authority may validate review {review_id}",
                code=ErrorCode.NOT_AUTHORIZED,
                principal=caller,
            )
        updated = replace(review, validated=True)
        self.store.put(REVIEWS, review_id, updated)
        return updated

    # Authority-gated configuration

    def set_review_fee(self, caller: str, fee: int) -> int:
        self.authority.require(caller)
        if fee < 0:
            raise ValidationException("Review fee cannot be negative", field="fee", value=fee)
        self.store.set_scalar("reviews.fee", fee)
        return fee

    def set_max_reviews(self, caller: str, max_reviews: int) -> int:
        self.authority.require(caller)
        if max_reviews <= 0:
            raise ValidationException("Max reviews must be positive", field="max_reviews", value=max_reviews)
        self.store.set_scalar("reviews.max_reviews", max_reviews)
        return max_reviews

    def set_score_range(self, caller: str, min_score: int, max_score: int) -> tuple[int, int]:
        self.authority.require(caller)
        if min_score < 0 or min_score >= max_score:
            raise ValidationException(
                "Score range must satisfy 0 <= min < max", field="score_range", value=(min_score, max_score)
            )
        self.store.set_scalar("reviews.min_score", min_score)
        self.store.set_scalar("reviews.max_score", max_score)
        return min_score, max_score

    def toggle_registry(self, caller: str) -> bool:
        self.authority.require(caller)
        enabled = not self.enabled
        self.store.set_scalar("reviews.enabled", enabled)
        logger.info("Review registry %s", "enabled" if enabled else "disabled")
        return enabled
