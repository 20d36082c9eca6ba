"""Blocking terminal prompts.

The controllers and the preference store ask the operator questions through
the :class:`Prompter` protocol so tests can script the answers.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

import click
from rich.console import Console
from rich.markup import escape

__all__ = ["ConsolePrompter", "Prompter"]


class Prompter(Protocol):
    """Operator input channel."""

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question whose default answer is no."""
        ...

    def ask(self, question: str) -> str:
        """Ask for a line of free text.

        Raises:
            EOFError: If input is closed.
        """
        ...

    def choose(self, question: str, choices: Mapping[str, str], default: str) -> str:
        """Ask for one of ``choices`` (key -> description) by its key."""
        ...


class ConsolePrompter:
    """Prompter that reads from the terminal through a rich Console.

    Confirmations go through :func:`click.confirm`, which asks again on
    anything but y or n. Closed input counts as "no" for confirmations and
    as the default for choices; free-text questions let the EOFError through
    so loops can stop.
    """

    def __init__(self, console: Console) -> None:
        self._console = console

    def confirm(self, question: str) -> bool:
        try:
            return click.confirm(question, default=False)
        except click.Abort:
            self._console.print()
            return False

    def ask(self, question: str) -> str:
        return self._console.input(f"[blue]{escape(question)}[/blue] ").strip()

    def choose(self, question: str, choices: Mapping[str, str], default: str) -> str:
        self._console.print()
        self._console.print(f"[bold]{escape(question)}[/bold]")
        for key, description in choices.items():
            self._console.print(f"  [cyan]{key})[/cyan] {escape(description)}")
        self._console.print()
        keys = "/".join(choices)
        try:
            answer = self._console.input(f"[yellow]Choice \\[{keys}]: [/yellow]")
        except EOFError:
            return default
        answer = answer.strip().lower()
        return answer if answer in choices else default
