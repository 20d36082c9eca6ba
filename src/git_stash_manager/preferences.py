"""Persisted default action for the Enter key.

The preference lives in a one-line file, ``default_action=<value>``. It is
read lazily the first time Enter is pressed, written once when absent, and
never rewritten afterwards. Older releases accepted ``rename`` as a value;
that value is deleted on load so the operator is asked again.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from rich.console import Console

from git_stash_manager.logging import get_logger
from git_stash_manager.prompts import Prompter

__all__ = ["DefaultAction", "PreferenceStore"]

logger = get_logger(__name__)

_KEY = "default_action"

#: Value written by older releases that must be migrated away
DEPRECATED_VALUES: frozenset[str] = frozenset({"rename"})


class DefaultAction(str, Enum):
    """Actions the Enter key can be bound to."""

    APPLY = "apply"
    VIEW = "view"
    POP = "pop"


#: Prompt choices, keyed by the letter the operator types
_CHOICES: dict[str, tuple[DefaultAction, str]] = {
    "a": (DefaultAction.APPLY, "Apply stash"),
    "v": (DefaultAction.VIEW, "View full diff in pager"),
    "p": (DefaultAction.POP, "Pop stash (apply + remove)"),
}


class PreferenceStore:
    """Load and save the default Enter action.

    Args:
        path: Location of the preference file.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._cached: DefaultAction | None = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> DefaultAction | None:
        """Read the stored action.

        Returns:
            The stored action, or None when the file is missing, has no
            ``default_action`` line, holds an unknown value, or held the
            deprecated ``rename`` value (the file is then removed).
        """
        try:
            text = self._path.read_text()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("preference_read_failed", path=str(self._path), error=str(e))
            return None

        value = None
        for line in text.splitlines():
            key, sep, raw = line.partition("=")
            if sep and key.strip() == _KEY:
                value = raw.strip()
                break

        if value is None:
            return None

        if value in DEPRECATED_VALUES:
            logger.info("preference_migrated", path=str(self._path), value=value)
            self.clear()
            return None

        try:
            return DefaultAction(value)
        except ValueError:
            logger.warning("preference_invalid", path=str(self._path), value=value)
            return None

    def save(self, action: DefaultAction) -> None:
        """Persist ``action``, creating the config directory if needed."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(f"{_KEY}={action.value}\n")
        self._cached = action
        logger.debug("preference_saved", path=str(self._path), value=action.value)

    def clear(self) -> None:
        """Forget the stored action."""
        self._path.unlink(missing_ok=True)
        self._cached = None

    def resolve(self, prompter: Prompter, console: Console | None = None) -> DefaultAction:
        """Return the stored action, asking the operator on first use.

        The answer is cached for the lifetime of the store.

        Args:
            prompter: Where to ask when nothing is stored.
            console: Where to confirm the saved choice, if anywhere.

        Returns:
            The action Enter should perform.
        """
        if self._cached is not None:
            return self._cached

        action = self.load()
        if action is None:
            letter = prompter.choose(
                "What should Enter do by default?",
                {key: description for key, (_, description) in _CHOICES.items()},
                default="a",
            )
            action = _CHOICES.get(letter, _CHOICES["a"])[0]
            self.save(action)
            if console is not None:
                console.print(
                    f"[green]Saved '{action.value}' as default Enter action[/green]"
                )

        self._cached = action
        return action
