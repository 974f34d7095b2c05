# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""CLI configuration - state file, acting principal, output format.

Loads from ~/.peerledger/cli.toml with environment variable and flag overrides.
Precedence: CLI flags > env vars > config file > defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_DEFAULT_CONFIG_PATH = Path.home() / ".peerledger" / "cli.toml"
_DEFAULT_OUTPUT = "text"
_OUTPUTS = ("json", "text")


def _default_state_file() -> str:
    from ..core.config import get_config

    return get_config().state_file


@dataclass
class CLIConfig:
    """CLI configuration loaded from file, env, and flags."""

    state_file: str = ""
    caller: str = ""
    output: str = _DEFAULT_OUTPUT

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        state_file: str | None = None,
        caller: str | None = None,
        output: str | None = None,
    ) -> CLIConfig:
        """Load config with precedence: flags > env > file > defaults."""
        config = cls(state_file=_default_state_file())

        # 1. Load from file
        path = config_path or _DEFAULT_CONFIG_PATH
        if path.exists():
            config._load_from_file(path)

        # 2. Override from env
        if who := os.environ.get("PEERLEDGER_CALLER"):
            config.caller = who
        if out := os.environ.get("PEERLEDGER_OUTPUT"):
            if out in _OUTPUTS:
                config.output = out

        # 3. Override from flags (highest precedence)
        if state_file is not None:
            config.state_file = state_file
        if caller is not None:
            config.caller = caller
        if output is not None:
            config.output = output

        return config

    def _load_from_file(self, path: Path) -> None:
        """Parse TOML config file."""
        import tomllib

        with open(path, "rb") as f:
            data = tomllib.load(f)
        if "state_file" in data:
            self.state_file = str(data["state_file"])
        if "caller" in data:
            self.caller = str(data["caller"])
        if "output" in data and data["output"] in _OUTPUTS:
            self.output = str(data["output"])


_config: CLIConfig | None = None


def get_cli_config() -> CLIConfig:
    """Get the current CLI config singleton."""
    global _config
    if _config is None:
        _config = CLIConfig.load()
    return _config


def set_cli_config(config: CLIConfig) -> None:
    """Set the CLI config singleton (called from main after parsing args)."""
    global _config
    _config = config


def reset_cli_config() -> None:
    """Reset the config singleton (for testing)."""
    global _config
    _config = None
