"""Tests for the fzf-driven InteractiveController state machine."""

from __future__ import annotations

from pathlib import Path

import pytest
from rich.console import Console

from git_stash_manager.actions import ActionExecutor, StashAction
from git_stash_manager.constants import (
    ACTION_HEADER,
    ACTION_KEYS,
    CONFIRM_KEYS,
    RENAME_KEYS,
    SEARCH_KEYS,
)
from git_stash_manager.controller import InteractiveController
from git_stash_manager.controller.interactive import clamp_position
from git_stash_manager.controller.modes import (
    ActionMode,
    ConfirmMode,
    PendingConfirmation,
    RenameMode,
    SearchMode,
)
from git_stash_manager.preferences import DefaultAction, PreferenceStore
from git_stash_manager.selector import SelectorResult
from tests.fakes import FakeStashRepository, ScriptedPrompter, ScriptedSelector, press


@pytest.fixture
def preferences(tmp_path: Path) -> PreferenceStore:
    return PreferenceStore(tmp_path / "config")


def make_controller(
    executor: ActionExecutor,
    selector: ScriptedSelector,
    preferences: PreferenceStore,
    prompter: ScriptedPrompter,
    console: Console,
) -> InteractiveController:
    return InteractiveController(executor, selector, preferences, prompter, console)


def line_of(repo: FakeStashRepository, index: int) -> str:
    return repo.list()[index].raw_line


class TestClampPosition:
    @pytest.mark.parametrize(
        ("position", "length", "expected"),
        [(0, 3, 0), (2, 3, 2), (3, 3, 2), (10, 1, 0), (-1, 3, 0), (5, 0, 0)],
    )
    def test_clamp(self, position: int, length: int, expected: int) -> None:
        assert clamp_position(position, length) == expected


class TestModes:
    """Tests for the per-mode key sets and prompts."""

    def test_key_sets(self) -> None:
        assert ActionMode().keys == ACTION_KEYS
        assert SearchMode().keys == SEARCH_KEYS
        assert "enter" not in SearchMode().keys

    def test_rename_prompt_names_target(self, fake_repo: FakeStashRepository) -> None:
        mode = RenameMode(fake_repo.list()[1])

        assert mode.prompt == "Rename stash@{1}: "
        assert mode.keys == RENAME_KEYS

    def test_confirm_prompt(self, fake_repo: FakeStashRepository) -> None:
        mode = ConfirmMode(
            PendingConfirmation(StashAction.DROP, fake_repo.list()[0])
        )

        assert mode.prompt == "Drop stash@{0}? "
        assert mode.keys == CONFIRM_KEYS


class TestBuildRequest:
    def test_action_request(
        self,
        executor: ActionExecutor,
        fake_repo: FakeStashRepository,
        preferences: PreferenceStore,
        prompter: ScriptedPrompter,
        console: Console,
    ) -> None:
        controller = make_controller(
            executor, ScriptedSelector([]), preferences, prompter, console
        )

        request = controller.build_request(ActionMode(), fake_repo.list(), 1)

        assert request.lines == ("stash@{0}: A", "stash@{1}: B", "stash@{2}: C")
        assert request.header == ACTION_HEADER
        assert request.keys == ACTION_KEYS
        assert request.position == 1
        assert not request.search

    def test_notice_prepended_to_header(
        self,
        executor: ActionExecutor,
        fake_repo: FakeStashRepository,
        preferences: PreferenceStore,
        prompter: ScriptedPrompter,
        console: Console,
    ) -> None:
        controller = make_controller(
            executor, ScriptedSelector([]), preferences, prompter, console
        )

        request = controller.build_request(
            ActionMode(), fake_repo.list(), 0, "✓ Dropped stash@{0}"
        )

        assert request.header.startswith("  ✓ Dropped stash@{0}\n")
        assert request.header.endswith(ACTION_HEADER)

    def test_rename_request_prefills_message(
        self,
        executor: ActionExecutor,
        fake_repo: FakeStashRepository,
        preferences: PreferenceStore,
        prompter: ScriptedPrompter,
        console: Console,
    ) -> None:
        controller = make_controller(
            executor, ScriptedSelector([]), preferences, prompter, console
        )
        target = fake_repo.list()[2]

        request = controller.build_request(RenameMode(target), fake_repo.list(), 0)

        assert request.query == "C"
        assert request.position == 2
        assert request.prompt == "Rename stash@{2}: "

    def test_search_request(
        self,
        executor: ActionExecutor,
        fake_repo: FakeStashRepository,
        preferences: PreferenceStore,
        prompter: ScriptedPrompter,
        console: Console,
    ) -> None:
        controller = make_controller(
            executor, ScriptedSelector([]), preferences, prompter, console
        )

        request = controller.build_request(SearchMode(), fake_repo.list(), 0)

        assert request.search
        assert request.keys == ("esc",)


class TestTransitions:
    """Tests for InteractiveController.handle."""

    @pytest.fixture
    def controller(
        self,
        executor: ActionExecutor,
        preferences: PreferenceStore,
        prompter: ScriptedPrompter,
        console: Console,
    ) -> InteractiveController:
        return make_controller(
            executor, ScriptedSelector([]), preferences, prompter, console
        )

    def test_quit(
        self, controller: InteractiveController, fake_repo: FakeStashRepository
    ) -> None:
        result = SelectorResult(key="q", line=line_of(fake_repo, 0))

        assert controller.handle(ActionMode(), result, fake_repo.list()).mode is None

    def test_abort_in_action_mode_quits(
        self, controller: InteractiveController, fake_repo: FakeStashRepository
    ) -> None:
        result = SelectorResult(key=None)

        assert controller.handle(ActionMode(), result, fake_repo.list()).mode is None

    @pytest.mark.parametrize(
        ("key", "operation"),
        [("a", StashAction.APPLY), ("p", StashAction.POP), ("d", StashAction.DROP)],
    )
    def test_action_key_enters_confirm(
        self,
        controller: InteractiveController,
        fake_repo: FakeStashRepository,
        key: str,
        operation: StashAction,
    ) -> None:
        """Test a/p/d capture the highlighted entry without running anything."""
        result = SelectorResult(key=key, line=line_of(fake_repo, 1))

        transition = controller.handle(ActionMode(), result, fake_repo.list())

        assert isinstance(transition.mode, ConfirmMode)
        assert transition.mode.pending.operation is operation
        assert transition.mode.pending.target_reference == "stash@{1}"
        assert transition.position == 1
        assert fake_repo.calls == []

    def test_rename_key_captures_target(
        self, controller: InteractiveController, fake_repo: FakeStashRepository
    ) -> None:
        result = SelectorResult(key="r", line=line_of(fake_repo, 2))

        transition = controller.handle(ActionMode(), result, fake_repo.list())

        assert isinstance(transition.mode, RenameMode)
        assert transition.mode.target.reference == "stash@{2}"
        assert transition.mode.target.message == "C"

    def test_view_advances_cursor(
        self, controller: InteractiveController, fake_repo: FakeStashRepository
    ) -> None:
        result = SelectorResult(key="v", line=line_of(fake_repo, 1))

        transition = controller.handle(ActionMode(), result, fake_repo.list())

        assert isinstance(transition.mode, ActionMode)
        assert transition.position == 2
        assert fake_repo.calls == [("show", "stash@{1}")]

    def test_slash_enters_search(
        self, controller: InteractiveController, fake_repo: FakeStashRepository
    ) -> None:
        result = SelectorResult(key="/", line=line_of(fake_repo, 0))

        transition = controller.handle(ActionMode(), result, fake_repo.list())

        assert isinstance(transition.mode, SearchMode)

    def test_esc_leaves_search_on_highlighted_entry(
        self, controller: InteractiveController, fake_repo: FakeStashRepository
    ) -> None:
        result = SelectorResult(key="esc", query="c", line=line_of(fake_repo, 2))

        transition = controller.handle(SearchMode(), result, fake_repo.list())

        assert isinstance(transition.mode, ActionMode)
        assert transition.position == 2

    def test_esc_cancels_rename(
        self, controller: InteractiveController, fake_repo: FakeStashRepository
    ) -> None:
        target = fake_repo.list()[1]
        result = SelectorResult(key="esc", query="typed", line=target.raw_line)

        transition = controller.handle(RenameMode(target), result, fake_repo.list())

        assert isinstance(transition.mode, ActionMode)
        assert transition.position == 1
        assert fake_repo.calls == []

    def test_empty_rename_is_cancelled(
        self, controller: InteractiveController, fake_repo: FakeStashRepository
    ) -> None:
        target = fake_repo.list()[0]
        result = SelectorResult(key="enter", query="   ", line=target.raw_line)

        transition = controller.handle(RenameMode(target), result, fake_repo.list())

        assert isinstance(transition.mode, ActionMode)
        assert fake_repo.calls == []

    @pytest.mark.parametrize("key", ["n", "esc", None])
    def test_confirm_declined(
        self,
        controller: InteractiveController,
        fake_repo: FakeStashRepository,
        key: str | None,
    ) -> None:
        target = fake_repo.list()[2]
        mode = ConfirmMode(PendingConfirmation(StashAction.DROP, target))

        transition = controller.handle(
            mode, SelectorResult(key=key, line=target.raw_line), fake_repo.list()
        )

        assert isinstance(transition.mode, ActionMode)
        assert transition.position == 2
        assert fake_repo.messages == ["A", "B", "C"]

    def test_confirm_acts_on_captured_target(
        self, controller: InteractiveController, fake_repo: FakeStashRepository
    ) -> None:
        """Test y runs on the captured entry, not on the highlighted line."""
        target = fake_repo.list()[1]
        mode = ConfirmMode(PendingConfirmation(StashAction.DROP, target))

        transition = controller.handle(
            mode,
            SelectorResult(key="y", line=line_of(fake_repo, 0)),
            fake_repo.list(),
        )

        assert fake_repo.messages == ["A", "C"]
        assert transition.position == 0
        assert transition.notice == "✓ Dropped stash@{1}"


class TestDefaultAction:
    """Tests for Enter in Action mode."""

    def test_first_enter_asks_and_saves(
        self,
        executor: ActionExecutor,
        fake_repo: FakeStashRepository,
        preferences: PreferenceStore,
        console: Console,
    ) -> None:
        prompter = ScriptedPrompter(choices=["v"])
        controller = make_controller(
            executor, ScriptedSelector([]), preferences, prompter, console
        )
        result = SelectorResult(key="enter", line=line_of(fake_repo, 0))

        transition = controller.handle(ActionMode(), result, fake_repo.list())

        assert preferences.path.read_text() == "default_action=view\n"
        assert isinstance(transition.mode, ActionMode)
        assert transition.position == 1
        assert fake_repo.calls == [("show", "stash@{0}")]

    def test_stored_pop_enters_confirm(
        self,
        executor: ActionExecutor,
        fake_repo: FakeStashRepository,
        preferences: PreferenceStore,
        prompter: ScriptedPrompter,
        console: Console,
    ) -> None:
        preferences.save(DefaultAction.POP)
        controller = make_controller(
            executor, ScriptedSelector([]), preferences, prompter, console
        )
        result = SelectorResult(key="enter", line=line_of(fake_repo, 2))

        transition = controller.handle(ActionMode(), result, fake_repo.list())

        assert isinstance(transition.mode, ConfirmMode)
        assert transition.mode.pending.operation is StashAction.POP
        assert prompter.questions == []


class TestRun:
    """End-to-end runs with a scripted selector."""

    def test_drop_top_entry(
        self,
        preferences: PreferenceStore,
        prompter: ScriptedPrompter,
        console: Console,
    ) -> None:
        """Test d then y on stash@{0} leaves one entry and a notice."""
        repo = FakeStashRepository(["A", "B"])
        executor = ActionExecutor(
            repo,  # type: ignore[arg-type]
            None,  # type: ignore[arg-type]
            prompter,
            console,
        )
        selector = ScriptedSelector([press("d"), press("y")])
        controller = make_controller(executor, selector, preferences, prompter, console)

        controller.run()

        assert repo.messages == ["B"]
        confirm_request = selector.requests[1]
        assert confirm_request.keys == CONFIRM_KEYS
        assert confirm_request.prompt == "Drop stash@{0}? "
        final_request = selector.requests[2]
        assert final_request.lines == ("stash@{0}: B",)
        assert final_request.header.startswith("  ✓ Dropped stash@{0}")
        assert final_request.keys == ACTION_KEYS

    def test_view_moves_cursor_down(
        self,
        executor: ActionExecutor,
        preferences: PreferenceStore,
        prompter: ScriptedPrompter,
        console: Console,
    ) -> None:
        selector = ScriptedSelector(
            [
                press("v"),
                press("v"),
                press("v"),
                press("q"),
            ]
        )
        controller = make_controller(executor, selector, preferences, prompter, console)

        controller.run()

        positions = [request.position for request in selector.requests]
        assert positions == [0, 1, 2, 2]

    def test_rename_flow(
        self,
        executor: ActionExecutor,
        fake_repo: FakeStashRepository,
        preferences: PreferenceStore,
        prompter: ScriptedPrompter,
        console: Console,
    ) -> None:
        selector = ScriptedSelector(
            [
                SelectorResult(key="r", line="stash@{1}: B"),
                press("enter", query="fix"),
                press("q"),
            ]
        )
        controller = make_controller(executor, selector, preferences, prompter, console)

        controller.run()

        assert fake_repo.messages == ["fix", "A", "C"]
        rename_request = selector.requests[1]
        assert rename_request.query == "B"
        assert rename_request.keys == RENAME_KEYS
        after = selector.requests[2]
        assert after.position == 2
        assert after.header.startswith("  ✓ Renamed stash@{1} to 'fix'")

    def test_search_then_escape_restores_action_keys(
        self,
        executor: ActionExecutor,
        preferences: PreferenceStore,
        prompter: ScriptedPrompter,
        console: Console,
    ) -> None:
        selector = ScriptedSelector(
            [
                press("/"),
                SelectorResult(key="esc", query="C", line="stash@{2}: C"),
                press("q"),
            ]
        )
        controller = make_controller(executor, selector, preferences, prompter, console)

        controller.run()

        assert selector.requests[1].search
        assert selector.requests[2].keys == ACTION_KEYS
        assert not selector.requests[2].search
        assert selector.requests[2].position == 2

    def test_stops_when_list_empties(
        self,
        preferences: PreferenceStore,
        prompter: ScriptedPrompter,
        console: Console,
    ) -> None:
        repo = FakeStashRepository(["only"])
        executor = ActionExecutor(
            repo,  # type: ignore[arg-type]
            None,  # type: ignore[arg-type]
            prompter,
            console,
        )
        selector = ScriptedSelector([press("p"), press("y")])
        controller = make_controller(executor, selector, preferences, prompter, console)

        controller.run()

        assert repo.messages == []
        assert len(selector.requests) == 2
        output = console.export_text()
        assert "Popped stash@{0}" in output
        assert "No stashes found" in output

    def test_no_stashes(
        self,
        preferences: PreferenceStore,
        prompter: ScriptedPrompter,
        console: Console,
    ) -> None:
        repo = FakeStashRepository()
        executor = ActionExecutor(
            repo,  # type: ignore[arg-type]
            None,  # type: ignore[arg-type]
            prompter,
            console,
        )
        selector = ScriptedSelector([])
        controller = make_controller(executor, selector, preferences, prompter, console)

        controller.run()

        assert selector.requests == []
        assert "No stashes found" in console.export_text()
