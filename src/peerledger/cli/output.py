# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Output formatting for CLI commands.

Handles JSON vs plain-text output based on CLI config.
"""

from __future__ import annotations

import json
import sys
from typing import Any

from .config import get_cli_config


def to_jsonable(value: Any) -> Any:
    """Convert records, tuples and nested containers to JSON-compatible values."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [to_jsonable(v) for v in value]
    return value


def _format_text(data: Any, indent: int = 0) -> list[str]:
    pad = "  " * indent
    if isinstance(data, dict):
        lines = []
        for key, value in data.items():
            if isinstance(value, dict | list) and value:
                lines.append(f"{pad}{key}:")
                lines.extend(_format_text(value, indent + 1))
            else:
                lines.append(f"{pad}{key}: {value}")
        return lines
    if isinstance(data, list):
        lines = []
        for item in data:
            if isinstance(item, dict):
                lines.append(f"{pad}-")
                lines.extend(_format_text(item, indent + 1))
            else:
                lines.append(f"{pad}- {item}")
        return lines
    return [f"{pad}{data}"]


def output_result(data: Any, output_format: str | None = None) -> None:
    """Print a result in the configured output format."""
    fmt = output_format or get_cli_config().output
    data = to_jsonable(data)

    if fmt == "json":
        print(json.dumps(data, indent=2, default=str))
    else:
        print("\n".join(_format_text(data)))


def output_error(message: str, code: str | None = None) -> None:
    """Print error message to stderr."""
    prefix = f"Error [{code}]" if code else "Error"
    print(f"{prefix}: {message}", file=sys.stderr)
