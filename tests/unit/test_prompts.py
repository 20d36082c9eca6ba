"""Tests for ConsolePrompter."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from git_stash_manager.prompts import ConsolePrompter


def make_prompter(monkeypatch: pytest.MonkeyPatch, text: str) -> tuple[ConsolePrompter, Console]:
    monkeypatch.setattr("sys.stdin", io.StringIO(text))
    console = Console(file=io.StringIO(), color_system=None, width=120)
    return ConsolePrompter(console), console


class TestConfirm:
    @pytest.mark.parametrize(("answer", "expected"), [
        ("y\n", True),
        ("YES\n", True),
        ("n\n", False),
        ("\n", False),
        ("maybe\ny\n", True),
    ])
    def test_answers(
        self, monkeypatch: pytest.MonkeyPatch, answer: str, expected: bool
    ) -> None:
        prompter, _ = make_prompter(monkeypatch, answer)

        assert prompter.confirm("Drop stash@{0}?") is expected

    def test_closed_input_is_no(self, monkeypatch: pytest.MonkeyPatch) -> None:
        prompter, _ = make_prompter(monkeypatch, "")

        assert prompter.confirm("Apply stash@{0}?") is False

    def test_invalid_then_closed_input_is_no(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test an unrecognised answer asks again instead of counting as no."""
        prompter, _ = make_prompter(monkeypatch, "maybe\n")

        assert prompter.confirm("Pop stash@{0}?") is False
        assert capsys.readouterr().out.count("Pop stash@{0}? [y/N]") == 2


class TestAsk:
    def test_strips_answer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        prompter, _ = make_prompter(monkeypatch, "  new label \n")

        assert prompter.ask("Enter new message:") == "new label"

    def test_closed_input_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        prompter, _ = make_prompter(monkeypatch, "")

        with pytest.raises(EOFError):
            prompter.ask("Enter new message:")


class TestChoose:
    def test_valid_choice(self, monkeypatch: pytest.MonkeyPatch) -> None:
        prompter, console = make_prompter(monkeypatch, "V\n")

        choice = prompter.choose("Pick", {"a": "Apply", "v": "View"}, default="a")

        assert choice == "v"
        assert "v) View" in console.file.getvalue()  # type: ignore[attr-defined]

    def test_invalid_choice_uses_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        prompter, _ = make_prompter(monkeypatch, "z\n")

        assert prompter.choose("Pick", {"a": "Apply"}, default="a") == "a"

    def test_closed_input_uses_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        prompter, _ = make_prompter(monkeypatch, "")

        assert prompter.choose("Pick", {"a": "Apply", "p": "Pop"}, default="p") == "p"
