"""Formatting utilities for CLI output.

Handles rich tables, value truncation and JSON envelope wrapping.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

# Bump on breaking changes to the JSON envelope
SCHEMA_VERSION = 1


def _require_rich() -> None:
    """Raise a clear error if rich is not installed."""
    try:
        import rich  # noqa: F401
    except ImportError:
        raise ImportError(
            "The 'rich' package is required for table output. Install it with: pip install 'ownergraph[cli]' or pip install rich"
        ) from None


def json_envelope(command: str, data: Any) -> dict[str, Any]:
    """Wrap data in the standard JSON output envelope."""
    return {
        "schema_version": SCHEMA_VERSION,
        "command": command,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "data": data,
    }


def print_json(command: str, data: Any, output: str | None = None) -> None:
    """Print JSON envelope to stdout or write to file."""
    envelope = json_envelope(command, data)
    text = json.dumps(envelope, indent=2, default=str)

    if output:
        with open(output, "w") as f:
            f.write(text)
        size_kb = len(text.encode()) / 1024
        print(f"Wrote {command} output to {output} ({size_kb:.1f}KB)")
    else:
        print(text)


def truncate_value(value: Any, max_chars: int = 60) -> str:
    """Truncate a value for display."""
    text = json.dumps(value, default=str) if not isinstance(value, str) else value
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "…"


def print_table(title: str, headers: list[str], rows: list[list[str]], numeric: tuple[str, ...] = ()) -> None:
    """Print a rich table. Columns named in ``numeric`` are right-aligned."""
    if not rows:
        return

    _require_rich()
    from rich.console import Console
    from rich.table import Table

    table = Table(title=title, title_justify="left", show_edge=False)
    for header in headers:
        table.add_column(header, justify="right" if header in numeric else "left", overflow="fold")
    for row in rows:
        table.add_row(*row)

    Console(highlight=False).print(table)
