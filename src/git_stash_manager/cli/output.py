"""Output formatting helpers for the CLI.

Every helper returns Rich markup for a single message; nothing here changes
terminal state.
"""

from __future__ import annotations

import json
from typing import Any

from rich.markup import escape

__all__ = [
    "format_error",
    "format_json",
    "format_notice",
    "format_success",
    "format_warning",
]


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Args:
        message: Primary error message.
        details: Optional list of detail lines to include.
        suggestion: Optional suggestion for resolving the error.

    Returns:
        Rich markup with details and suggestion if provided.

    Example:
        >>> format_error("Not a git repository", suggestion="cd into a repo")
        '[red]Error: Not a git repository[/red]\\n[dim]Suggestion: cd into a repo[/dim]'
    """
    lines = [f"[red]Error: {escape(message)}[/red]"]

    if details:
        for detail in details:
            lines.append(f"  {escape(detail)}")

    if suggestion:
        lines.append(f"[dim]Suggestion: {escape(suggestion)}[/dim]")

    return "\n".join(lines)


def format_success(message: str) -> str:
    """Format a success message.

    Example:
        >>> format_success("Dropped stash@{0}")
        '[green]Dropped stash@{0}[/green]'
    """
    return f"[green]{escape(message)}[/green]"


def format_warning(message: str) -> str:
    """Format a warning message."""
    return f"[yellow]Warning: {escape(message)}[/yellow]"


def format_notice(message: str) -> str:
    """Format an informational note (e.g., why the numbered menu is used)."""
    return f"[yellow]Note: {escape(message)}[/yellow]"


def format_json(data: Any) -> str:
    """Format data as indented JSON."""
    return json.dumps(data, indent=2)
