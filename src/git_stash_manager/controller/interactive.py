"""Interactive stash browser driven by a fuzzy selector.

The controller is a small state machine over :mod:`.modes`. Each cycle it
re-lists the stashes, asks the selector to show them for the current mode,
and turns the key that ended the selector into the next mode:

    Action --a/p/d--> Confirm --y--> (run action) --> Action
                              --n/esc-----------> Action
    Action --r------> Rename  --enter--> (rename) --> Action
                              --esc------------> Action
    Action --/------> Search  --esc-------------> Action
    Action --v------> (view) -----------------> Action
    Action --enter--> default action (view, or Confirm for apply/pop)
    Action --q------> exit

Every return to Action rebuilds the Action request from scratch, so its
keys and header are always restored.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape

from git_stash_manager.actions import (
    ActionExecutor,
    ActionOutcome,
    OutcomeStatus,
    StashAction,
)
from git_stash_manager.controller.modes import (
    ActionMode,
    ConfirmMode,
    ControllerMode,
    PendingConfirmation,
    RenameMode,
    SearchMode,
)
from git_stash_manager.git import StashEntry, parse_stash_ref
from git_stash_manager.logging import get_logger
from git_stash_manager.preferences import DefaultAction, PreferenceStore
from git_stash_manager.prompts import Prompter
from git_stash_manager.selector import Selector, SelectorRequest, SelectorResult

__all__ = ["InteractiveController", "Transition", "clamp_position"]

logger = get_logger(__name__)

_KEY_ACTIONS: dict[str, StashAction] = {
    "a": StashAction.APPLY,
    "p": StashAction.POP,
    "d": StashAction.DROP,
}

_DEFAULT_TO_ACTION: dict[DefaultAction, StashAction] = {
    DefaultAction.APPLY: StashAction.APPLY,
    DefaultAction.POP: StashAction.POP,
    DefaultAction.VIEW: StashAction.VIEW,
}


def clamp_position(position: int, length: int) -> int:
    """Clamp a cursor position to a list of ``length`` entries."""
    if length <= 0:
        return 0
    return max(0, min(position, length - 1))


@dataclass(frozen=True, slots=True)
class Transition:
    """Outcome of handling one selector result.

    Attributes:
        mode: Next mode, or None to leave the controller.
        position: Cursor position for the next render, before clamping.
        notice: One-line status shown above the next header.
    """

    mode: ControllerMode | None
    position: int = 0
    notice: str = ""


def _notice_for(outcome: ActionOutcome) -> str:
    if outcome.status is OutcomeStatus.FAILED:
        return f"✗ {outcome.describe()}"
    if outcome.status is OutcomeStatus.CANCELLED:
        return outcome.describe() if outcome.detail else ""
    if outcome.action is StashAction.VIEW:
        return ""
    return f"✓ {outcome.describe()}"


class InteractiveController:
    """Modal stash browser.

    Args:
        executor: Runs actions and lists entries.
        selector: Shows the list and reports keys.
        preferences: Default Enter action, resolved on first use.
        prompter: Asks for the default action when none is stored.
        console: Terminal output outside the selector.
    """

    def __init__(
        self,
        executor: ActionExecutor,
        selector: Selector,
        preferences: PreferenceStore,
        prompter: Prompter,
        console: Console,
    ) -> None:
        self._executor = executor
        self._selector = selector
        self._preferences = preferences
        self._prompter = prompter
        self._console = console

    def run(self) -> None:
        """Loop until the operator quits or no stashes remain."""
        mode: ControllerMode = ActionMode()
        position = 0
        notice = ""

        while True:
            entries = self._executor.entries()
            if not entries:
                if notice:
                    self._console.print(escape(notice))
                self._console.print("[yellow]No stashes found[/yellow]")
                return

            position = clamp_position(position, len(entries))
            result = self._selector.select(
                self.build_request(mode, entries, position, notice)
            )
            transition = self.handle(mode, result, entries, position)

            if transition.mode is None:
                logger.debug("controller_exited", mode=mode.name)
                return
            if transition.mode.name != mode.name:
                logger.debug(
                    "mode_changed", previous=mode.name, current=transition.mode.name
                )
            mode = transition.mode
            position = transition.position
            notice = transition.notice

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def build_request(
        self,
        mode: ControllerMode,
        entries: list[StashEntry],
        position: int,
        notice: str = "",
    ) -> SelectorRequest:
        """Describe the selector invocation for ``mode``."""
        header = f"  {notice}\n{mode.header}" if notice else mode.header
        query = mode.target.message if isinstance(mode, RenameMode) else ""
        if isinstance(mode, RenameMode):
            position = self._index_of(mode.target, entries, position)
        elif isinstance(mode, ConfirmMode):
            position = self._index_of(mode.pending.target, entries, position)
        return SelectorRequest(
            lines=tuple(entry.raw_line for entry in entries),
            header=header,
            keys=mode.keys,
            prompt=mode.prompt,
            search=isinstance(mode, SearchMode),
            query=query,
            position=clamp_position(position, len(entries)),
        )

    @staticmethod
    def _index_of(target: StashEntry, entries: list[StashEntry], fallback: int) -> int:
        for entry in entries:
            if entry.reference == target.reference:
                return entry.index
        return fallback

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def handle(
        self,
        mode: ControllerMode,
        result: SelectorResult,
        entries: list[StashEntry],
        position: int = 0,
    ) -> Transition:
        """Apply one selector result to ``mode``.

        Args:
            mode: Mode the selector was shown in.
            result: How the selector ended.
            entries: Entries that were shown.
            position: Cursor position the selector was opened at.

        Returns:
            The next mode and cursor position.
        """
        if isinstance(mode, ActionMode):
            return self._handle_action(result, entries, position)
        if isinstance(mode, SearchMode):
            return self._handle_search(result, entries)
        if isinstance(mode, RenameMode):
            return self._handle_rename(mode, result)
        return self._handle_confirm(mode, result)

    def _handle_action(
        self,
        result: SelectorResult,
        entries: list[StashEntry],
        position: int,
    ) -> Transition:
        if result.aborted or result.key == "q":
            return Transition(mode=None)

        entry = self._entry_for(result.line, entries)
        if entry is None:
            return Transition(ActionMode(), position)

        key = result.key
        if key in _KEY_ACTIONS:
            return self._begin_confirm(_KEY_ACTIONS[key], entry)
        if key == "r":
            return Transition(RenameMode(entry), entry.index)
        if key == "v":
            return self._view(entry)
        if key == "/":
            return Transition(SearchMode(), entry.index)
        if key == "enter":
            default = self._preferences.resolve(self._prompter, self._console)
            action = _DEFAULT_TO_ACTION[default]
            if action is StashAction.VIEW:
                return self._view(entry)
            return self._begin_confirm(action, entry)

        return Transition(ActionMode(), entry.index)

    def _handle_search(
        self,
        result: SelectorResult,
        entries: list[StashEntry],
    ) -> Transition:
        if result.aborted:
            return Transition(mode=None)
        entry = self._entry_for(result.line, entries)
        return Transition(ActionMode(), entry.index if entry else 0)

    def _handle_rename(self, mode: RenameMode, result: SelectorResult) -> Transition:
        target = mode.target
        if result.key != "enter" or not result.query.strip():
            return Transition(ActionMode(), target.index)

        outcome = self._executor.rename(target.reference, result.query)
        next_position = target.index + 1 if outcome.succeeded else target.index
        return Transition(ActionMode(), next_position, _notice_for(outcome))

    def _handle_confirm(self, mode: ConfirmMode, result: SelectorResult) -> Transition:
        pending = mode.pending
        if result.key != "y":
            return Transition(ActionMode(), pending.target.index)

        outcome = self._executor.run(
            pending.operation, pending.target_reference, confirmed=True
        )
        return Transition(ActionMode(), 0, _notice_for(outcome))

    def _begin_confirm(self, action: StashAction, entry: StashEntry) -> Transition:
        return Transition(
            ConfirmMode(PendingConfirmation(operation=action, target=entry)),
            entry.index,
        )

    def _view(self, entry: StashEntry) -> Transition:
        outcome = self._executor.view(entry.reference)
        return Transition(ActionMode(), entry.index + 1, _notice_for(outcome))

    @staticmethod
    def _entry_for(line: str | None, entries: list[StashEntry]) -> StashEntry | None:
        if not line:
            return None
        reference = parse_stash_ref(line)
        for entry in entries:
            if entry.reference == reference:
                return entry
        return None
