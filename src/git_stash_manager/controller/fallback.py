"""Numbered-menu stash browser for terminals without a usable fzf."""

from __future__ import annotations

import re
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape

from git_stash_manager.actions import ActionExecutor, StashAction
from git_stash_manager.git import StashEntry
from git_stash_manager.logging import get_logger
from git_stash_manager.prompts import Prompter

__all__ = ["FallbackController", "MenuChoice", "parse_menu_choice"]

logger = get_logger(__name__)

_NUMBER_PATTERN = re.compile(r"^[0-9]+")
_LETTER_PATTERN = re.compile(r"[a-zA-Z]$")

MENU_ACTIONS: dict[str, StashAction] = {
    "v": StashAction.VIEW,
    "a": StashAction.APPLY,
    "p": StashAction.POP,
    "d": StashAction.DROP,
    "r": StashAction.RENAME,
}

_LEGEND = (
    "[bold]Actions:[/bold] [green]v[/green]=view [green]a[/green]=apply "
    "[green]p[/green]=pop [red]d[/red]=drop [blue]r[/blue]=rename [yellow]q[/yellow]=quit"
)


@dataclass(frozen=True, slots=True)
class MenuChoice:
    """A parsed ``<number><letter>`` menu answer (number is 1-based)."""

    number: int
    letter: str


def parse_menu_choice(text: str) -> MenuChoice | None:
    """Split input such as "2d" or "12v" into number and action letter.

    The number is the leading run of digits and the letter the trailing
    alphabetic character; anything may sit between them.

    Returns:
        The parsed choice, or None if either part is missing.
    """
    text = text.strip()
    number = _NUMBER_PATTERN.match(text)
    letter = _LETTER_PATTERN.search(text)
    if number is None or letter is None:
        return None
    return MenuChoice(number=int(number.group(0)), letter=letter.group(0))


class FallbackController:
    """Print a numbered list and read ``<number><action>`` commands.

    Args:
        executor: Runs actions (apply, pop and drop ask for confirmation).
        prompter: Reads the operator's commands.
        console: Terminal output.
    """

    def __init__(
        self,
        executor: ActionExecutor,
        prompter: Prompter,
        console: Console,
    ) -> None:
        self._executor = executor
        self._prompter = prompter
        self._console = console

    def run(self) -> None:
        """Loop until the operator quits or no stashes remain."""
        while True:
            entries = self._executor.entries()
            if not entries:
                self._console.print("[yellow]No stashes found[/yellow]")
                return

            self.render(entries)
            try:
                answer = self._prompter.ask(
                    f"Enter number (1-{len(entries)}) then action key, or q to quit:"
                )
            except EOFError:
                return

            if answer in ("q", "Q"):
                return
            self.dispatch(answer, entries)

    def render(self, entries: list[StashEntry]) -> None:
        self._console.print()
        self._console.print("[bold]=== Git Stashes ===[/bold]")
        self._console.print()
        for number, entry in enumerate(entries, start=1):
            self._console.print(f"  [blue]\\[{number}][/blue] {escape(entry.raw_line)}")
        self._console.print()
        self._console.print(_LEGEND)
        self._console.print()

    def dispatch(self, answer: str, entries: list[StashEntry]) -> bool:
        """Validate and run one menu answer.

        Returns:
            True if an action ran, False if the input was rejected.
        """
        choice = parse_menu_choice(answer)
        if choice is None:
            self._error("Invalid input. Use format: <number><action> (e.g., 1v, 2d)")
            return False

        if not 1 <= choice.number <= len(entries):
            self._error("Invalid stash number")
            return False

        action = MENU_ACTIONS.get(choice.letter.lower())
        if action is None:
            self._error(f"Unknown action: {choice.letter}")
            return False

        entry = entries[choice.number - 1]
        logger.debug("menu_action", action=action.value, reference=entry.reference)
        try:
            outcome = self._executor.run(action, entry.reference)
        except EOFError:
            return False
        self._executor.report(outcome)
        return True

    def _error(self, message: str) -> None:
        self._console.print(f"[red]{escape(message)}[/red]")
