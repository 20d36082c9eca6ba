"""Shared Rich Console instances for git-stash-manager output.

Rich Console handles TTY detection: styled output in terminals, plain text
when piped. Components receive a console as an argument; only the CLI layer
reaches for these module-level instances.
"""

from __future__ import annotations

from rich.console import Console

__all__ = ["console", "err_console"]

console = Console()
err_console = Console(stderr=True)
