"""Controller modes.

Exactly one mode is active at a time. Modes are immutable values carrying
their own payload: Rename and Confirm capture the target entry when they are
entered, so later list changes cannot redirect the operation.
"""

from __future__ import annotations

from dataclasses import dataclass

from git_stash_manager.actions import StashAction
from git_stash_manager.constants import (
    ACTION_HEADER,
    ACTION_KEYS,
    CONFIRM_HEADER,
    CONFIRM_KEYS,
    DEFAULT_PROMPT,
    RENAME_HEADER,
    RENAME_KEYS,
    SEARCH_HEADER,
    SEARCH_KEYS,
)
from git_stash_manager.git import StashEntry

__all__ = [
    "ActionMode",
    "ConfirmMode",
    "ControllerMode",
    "PendingConfirmation",
    "RenameMode",
    "SearchMode",
]


@dataclass(frozen=True, slots=True)
class PendingConfirmation:
    """A destructive action waiting for y/n.

    Attributes:
        operation: apply, pop or drop.
        target: Entry captured when the confirmation was requested.
    """

    operation: StashAction
    target: StashEntry

    @property
    def target_reference(self) -> str:
        return self.target.reference


@dataclass(frozen=True, slots=True)
class ActionMode:
    """Single keys map to actions."""

    name = "action"
    header = ACTION_HEADER
    keys = ACTION_KEYS

    @property
    def prompt(self) -> str:
        return DEFAULT_PROMPT


@dataclass(frozen=True, slots=True)
class SearchMode:
    """Typing filters the list; no action keys are bound."""

    name = "search"
    header = SEARCH_HEADER
    keys = SEARCH_KEYS

    @property
    def prompt(self) -> str:
        return DEFAULT_PROMPT


@dataclass(frozen=True, slots=True)
class RenameMode:
    """The query line edits the target's message."""

    target: StashEntry

    name = "rename"
    header = RENAME_HEADER
    keys = RENAME_KEYS

    @property
    def prompt(self) -> str:
        return f"Rename {self.target.reference}: "


@dataclass(frozen=True, slots=True)
class ConfirmMode:
    """y runs the pending action; n or Esc cancels it."""

    pending: PendingConfirmation

    name = "confirm"
    header = CONFIRM_HEADER
    keys = CONFIRM_KEYS

    @property
    def prompt(self) -> str:
        verb = self.pending.operation.value.capitalize()
        return f"{verb} {self.pending.target_reference}? "


ControllerMode = ActionMode | SearchMode | RenameMode | ConfirmMode
