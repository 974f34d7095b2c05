"""Core configuration - centralized config for the peerledger package.

All environment-based configuration should flow through this module.
This provides a single source of truth and consistent defaults.

The values here are only the *initial* values of each module's knobs.
Once a ledger is running, privileged setters (gated by the module's
authority binding) change them inside the ledger state itself.

Usage:
    from peerledger.core.config import get_config
    config = get_config()

    min_stake = config.min_stake
    log_level = config.log_level
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NULL_PRINCIPAL = "SP000000000000000000002Q6VF78"


class LedgerSettings(BaseSettings):
    """Core configuration settings for PeerLedger.

    Settings can be configured via environment variables with the
    PEERLEDGER_ prefix, or through a local ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ==========================================================================
    # IDENTITY & STAKE SETTINGS
    # ==========================================================================

    min_stake: int = Field(
        default=1000,
        gt=0,
        description="Minimum stake required to register",
        validation_alias="PEERLEDGER_MIN_STAKE",
    )
    max_reputation: int = Field(
        default=10000,
        gt=0,
        description="Upper bound on a principal's reputation",
        validation_alias="PEERLEDGER_MAX_REPUTATION",
    )
    ledger_trust_threshold: int = Field(
        default=5000,
        ge=0,
        description="Reputation needed for the identity ledger's is-trusted-user check",
        validation_alias="PEERLEDGER_LEDGER_TRUST_THRESHOLD",
    )
    profile_hash_length: int = Field(
        default=64,
        gt=0,
        description="Exact length of profile and review content hashes",
        validation_alias="PEERLEDGER_PROFILE_HASH_LENGTH",
    )

    # ==========================================================================
    # REPUTATION SETTINGS
    # ==========================================================================

    voting_period: int = Field(
        default=1440,
        gt=0,
        description="Trailing window (blocks) in which reputation votes are counted",
        validation_alias="PEERLEDGER_VOTING_PERIOD",
    )

    # ==========================================================================
    # GOVERNANCE SETTINGS
    # ==========================================================================

    trust_threshold: int = Field(
        default=50,
        ge=0,
        description="Reputation needed to raise a dispute",
        validation_alias="PEERLEDGER_TRUST_THRESHOLD",
    )
    dispute_vote_period: int = Field(
        default=144,
        gt=0,
        description="Dispute ballot window length (blocks)",
        validation_alias="PEERLEDGER_DISPUTE_VOTE_PERIOD",
    )
    dispute_penalty: int = Field(
        default=10,
        ge=0,
        description="Reputation subtracted from the target of an upheld dispute",
        validation_alias="PEERLEDGER_DISPUTE_PENALTY",
    )
    dispute_window_mode: Literal["raised", "epoch"] = Field(
        default="raised",
        description="Ballot gate: 'raised' (open until raised_at + period) or 'epoch' (legacy gate)",
        validation_alias="PEERLEDGER_DISPUTE_WINDOW_MODE",
    )
    dispute_single_ballot: bool = Field(
        default=False,
        description="Reject a second ballot from the same voter on one dispute",
        validation_alias="PEERLEDGER_DISPUTE_SINGLE_BALLOT",
    )

    # ==========================================================================
    # REVIEW REGISTRY SETTINGS
    # ==========================================================================

    review_fee: int = Field(
        default=500,
        ge=0,
        description="Fee paid to the review registry authority per submission",
        validation_alias="PEERLEDGER_REVIEW_FEE",
    )
    max_reviews: int = Field(
        default=10000,
        gt=0,
        description="Maximum number of reviews the registry accepts",
        validation_alias="PEERLEDGER_MAX_REVIEWS",
    )
    review_min_score: int = Field(
        default=0,
        ge=0,
        validation_alias="PEERLEDGER_REVIEW_MIN_SCORE",
    )
    review_max_score: int = Field(
        default=10,
        gt=0,
        validation_alias="PEERLEDGER_REVIEW_MAX_SCORE",
    )

    # ==========================================================================
    # AUTHORITY SETTINGS
    # ==========================================================================

    null_principal: str = Field(
        default=NULL_PRINCIPAL,
        description="Reserved burn identity that can never be bound as an authority",
        validation_alias="PEERLEDGER_NULL_PRINCIPAL",
    )

    # ==========================================================================
    # PERSISTENCE SETTINGS
    # ==========================================================================

    state_file: str = Field(
        default="peerledger-state.json",
        description="Path of the JSON snapshot used by the CLI",
        validation_alias="PEERLEDGER_STATE_FILE",
    )

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="PEERLEDGER_LOG_LEVEL",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
        validation_alias="PEERLEDGER_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
        validation_alias="PEERLEDGER_LOG_FILE",
    )


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: LedgerSettings | None = None


def get_config() -> LedgerSettings:
    """Get the global configuration instance.

    Returns:
        The singleton LedgerSettings instance.
    """
    global _config
    if _config is None:
        _config = LedgerSettings()
    return _config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None
