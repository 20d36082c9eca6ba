"""Stash actions with confirmation and uniform outcome reporting.

:class:`ActionExecutor` is shared by the interactive and the numbered-menu
controllers. Each method performs at most one logical operation and turns
every backend failure into a failed :class:`ActionOutcome`; nothing here
raises for a failed git command and nothing is retried.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from enum import Enum

from rich.console import Console
from rich.markup import escape

from git_stash_manager.config import RenameStrategy
from git_stash_manager.exceptions import StashError
from git_stash_manager.git import StashEntry, StashRepository
from git_stash_manager.git.repository import STASH_REF_PATTERN
from git_stash_manager.logging import get_logger
from git_stash_manager.prompts import Prompter
from git_stash_manager.viewer import DiffViewer

__all__ = [
    "ActionExecutor",
    "ActionOutcome",
    "OutcomeStatus",
    "StashAction",
]

logger = get_logger(__name__)


class StashAction(str, Enum):
    """Operations the operator can perform on one entry."""

    APPLY = "apply"
    POP = "pop"
    DROP = "drop"
    RENAME = "rename"
    VIEW = "view"

    @property
    def needs_confirmation(self) -> bool:
        return self in (StashAction.APPLY, StashAction.POP, StashAction.DROP)

    @property
    def removes_entry(self) -> bool:
        return self in (StashAction.POP, StashAction.DROP, StashAction.RENAME)


#: Confirmation questions, formatted with the reference
CONFIRM_QUESTIONS: dict[StashAction, str] = {
    StashAction.APPLY: "Apply {reference}?",
    StashAction.POP: "Pop {reference}? (will remove from stash list)",
    StashAction.DROP: "Drop {reference}? (PERMANENTLY DELETES)",
}

_PAST_TENSE: dict[StashAction, str] = {
    StashAction.APPLY: "Applied",
    StashAction.POP: "Popped",
    StashAction.DROP: "Dropped",
    StashAction.RENAME: "Renamed",
    StashAction.VIEW: "Viewed",
}


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """Result of one action.

    Attributes:
        action: What was attempted.
        reference: The entry's address at the time the action started.
        status: Succeeded, failed, or cancelled by the operator.
        detail: Failure reason or extra context.
    """

    action: StashAction
    reference: str
    status: OutcomeStatus
    detail: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.SUCCEEDED

    @property
    def mutated(self) -> bool:
        """True if the stash list may have changed."""
        return self.succeeded and self.action is not StashAction.VIEW

    def describe(self) -> str:
        """One-line, markup-free summary naming the entry."""
        if self.status is OutcomeStatus.CANCELLED:
            return f"Cancelled{f' ({self.detail})' if self.detail else ''}"
        if self.status is OutcomeStatus.FAILED:
            reason = f": {self.detail}" if self.detail else ""
            return f"Failed to {self.action.value} {self.reference}{reason}"
        text = f"{_PAST_TENSE[self.action]} {self.reference}"
        return f"{text} {self.detail}" if self.detail else text


def _shifted_reference(reference: str, offset: int) -> str | None:
    match = STASH_REF_PATTERN.fullmatch(reference)
    if match is None:
        return None
    return f"stash@{{{int(match.group(1)) + offset}}}"


class ActionExecutor:
    """Run stash actions against a repository.

    Args:
        repository: Stash backend.
        viewer: Diff viewer used by the view action.
        prompter: Operator input for confirmations and rename messages.
        console: Where :meth:`report` prints outcomes.
        rename_strategy: Order of the store and drop calls of a rename.
    """

    def __init__(
        self,
        repository: StashRepository,
        viewer: DiffViewer,
        prompter: Prompter,
        console: Console,
        *,
        rename_strategy: RenameStrategy = RenameStrategy.STORE_FIRST,
    ) -> None:
        self._repository = repository
        self._viewer = viewer
        self._prompter = prompter
        self._console = console
        self._rename_strategy = rename_strategy

    @property
    def rename_strategy(self) -> RenameStrategy:
        return self._rename_strategy

    def entries(self) -> list[StashEntry]:
        """Fetch the current stash list."""
        return self._repository.list()

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def run(
        self,
        action: StashAction,
        reference: str,
        *,
        confirmed: bool = False,
    ) -> ActionOutcome:
        """Perform ``action`` on ``reference``.

        Args:
            action: Action to perform.
            reference: Entry to act on.
            confirmed: Skip the yes/no prompt of apply, pop and drop because
                the caller already obtained confirmation.
        """
        if action is StashAction.VIEW:
            return self.view(reference)
        if action is StashAction.RENAME:
            return self.rename(reference)
        return self._mutate(action, reference, confirmed=confirmed)

    def apply(self, reference: str, *, confirmed: bool = False) -> ActionOutcome:
        return self._mutate(StashAction.APPLY, reference, confirmed=confirmed)

    def pop(self, reference: str, *, confirmed: bool = False) -> ActionOutcome:
        return self._mutate(StashAction.POP, reference, confirmed=confirmed)

    def drop(self, reference: str, *, confirmed: bool = False) -> ActionOutcome:
        return self._mutate(StashAction.DROP, reference, confirmed=confirmed)

    def _mutate(
        self,
        action: StashAction,
        reference: str,
        *,
        confirmed: bool,
    ) -> ActionOutcome:
        if not confirmed:
            question = CONFIRM_QUESTIONS[action].format(reference=reference)
            if not self._prompter.confirm(question):
                logger.debug("action_declined", action=action.value, reference=reference)
                return ActionOutcome(action, reference, OutcomeStatus.CANCELLED)

        operation = getattr(self._repository, action.value)
        try:
            operation(reference)
        except StashError as e:
            return self._failed(action, reference, e)

        logger.info("action_succeeded", action=action.value, reference=reference)
        return ActionOutcome(action, reference, OutcomeStatus.SUCCEEDED)

    # -------------------------------------------------------------------------
    # View
    # -------------------------------------------------------------------------

    def view(self, reference: str) -> ActionOutcome:
        """Open the full diff of ``reference`` in the pager."""
        try:
            self._viewer.view(reference)
        except StashError as e:
            return self._failed(StashAction.VIEW, reference, e)
        return ActionOutcome(StashAction.VIEW, reference, OutcomeStatus.SUCCEEDED)

    # -------------------------------------------------------------------------
    # Rename
    # -------------------------------------------------------------------------

    def rename(self, reference: str, new_message: str | None = None) -> ActionOutcome:
        """Relabel ``reference`` by storing its commit under a new message.

        git has no rename primitive, so this is a store and a drop. The
        order follows :attr:`rename_strategy`.

        Args:
            reference: Entry to relabel.
            new_message: New label; the operator is asked when None. An empty
                label cancels without touching the repository.
        """
        if new_message is None:
            new_message = self._prompter.ask("Enter new message:")
        new_message = new_message.strip()
        if not new_message:
            return ActionOutcome(
                StashAction.RENAME, reference, OutcomeStatus.CANCELLED, "empty message"
            )

        try:
            commit = self._repository.resolve_commit(reference)
        except StashError:
            return ActionOutcome(
                StashAction.RENAME,
                reference,
                OutcomeStatus.FAILED,
                "failed to resolve stash commit",
            )

        log = logger.bind(
            reference=reference,
            commit=commit,
            strategy=self._rename_strategy.value,
        )
        log.debug("rename_started")

        if self._rename_strategy is RenameStrategy.DROP_FIRST:
            return self._rename_drop_first(reference, commit, new_message)
        return self._rename_store_first(reference, commit, new_message)

    def _rename_store_first(
        self, reference: str, commit: str, new_message: str
    ) -> ActionOutcome:
        before = self._repository.list()
        stored = commit
        try:
            # git ignores a store of the commit that is already on top
            if before and before[0].commit == commit:
                stored = self._repository.copy_commit(commit, new_message)
            self._repository.store(new_message, stored)
        except StashError as e:
            return self._failed(StashAction.RENAME, reference, e, "failed to store renamed stash")

        after = self._repository.list()
        if len(after) != len(before) + 1 or after[0].commit != stored:
            logger.warning("rename_store_ignored", reference=reference, commit=stored)
            return ActionOutcome(
                StashAction.RENAME,
                reference,
                OutcomeStatus.FAILED,
                "store did not add a new entry; nothing was changed",
            )

        # The new entry sits on top, so the original moved down by one.
        original = self._locate_original(reference, commit, after)
        if original is None:
            return ActionOutcome(
                StashAction.RENAME,
                reference,
                OutcomeStatus.FAILED,
                "renamed copy stored as stash@{0}, but the original entry is gone",
            )

        try:
            self._repository.drop(original)
        except StashError as e:
            return self._failed(
                StashAction.RENAME,
                reference,
                e,
                f"renamed copy stored as stash@{{0}}, but dropping the original "
                f"({original}) failed; both entries kept",
            )

        logger.info("stash_renamed", reference=reference, message=new_message)
        return ActionOutcome(
            StashAction.RENAME, reference, OutcomeStatus.SUCCEEDED, f"to '{new_message}'"
        )

    def _rename_drop_first(
        self, reference: str, commit: str, new_message: str
    ) -> ActionOutcome:
        try:
            self._repository.drop(reference)
        except StashError as e:
            return self._failed(StashAction.RENAME, reference, e, "failed to drop stash")

        try:
            self._repository.store(new_message, commit)
        except StashError as e:
            recovery = f"git stash store -m {shlex.quote(new_message)} {commit}"
            logger.error("rename_lost_entry", reference=reference, commit=commit)
            return self._failed(
                StashAction.RENAME,
                reference,
                e,
                f"failed to store renamed stash; recover with: {recovery}",
            )

        logger.info("stash_renamed", reference=reference, message=new_message)
        return ActionOutcome(
            StashAction.RENAME, reference, OutcomeStatus.SUCCEEDED, f"to '{new_message}'"
        )

    def _locate_original(
        self, reference: str, commit: str, entries: list[StashEntry]
    ) -> str | None:
        """Find the pre-rename entry after a store pushed everything down."""
        expected = _shifted_reference(reference, 1)
        candidates = [
            entry for entry in entries if entry.index > 0 and entry.commit == commit
        ]
        for entry in candidates:
            if entry.reference == expected:
                return entry.reference
        return candidates[0].reference if candidates else None

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def _failed(
        self,
        action: StashAction,
        reference: str,
        error: StashError,
        detail: str | None = None,
    ) -> ActionOutcome:
        logger.warning(
            "action_failed",
            action=action.value,
            reference=reference,
            error=type(error).__name__,
            stderr=error.stderr,
        )
        return ActionOutcome(
            action, reference, OutcomeStatus.FAILED, detail or error.message
        )

    def report(self, outcome: ActionOutcome) -> None:
        """Print ``outcome`` in the color matching its status."""
        if outcome.action is StashAction.VIEW and outcome.succeeded:
            return
        # A declined confirmation is silent
        if outcome.status is OutcomeStatus.CANCELLED and not outcome.detail:
            return
        style = {
            OutcomeStatus.SUCCEEDED: "green",
            OutcomeStatus.FAILED: "red",
            OutcomeStatus.CANCELLED: "yellow",
        }[outcome.status]
        self._console.print(f"[{style}]{escape(outcome.describe())}[/{style}]")
