from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Generator, Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from git import Repo
from rich.console import Console

from git_stash_manager.actions import ActionExecutor
from tests.fakes import FakeStashRepository, FakeViewer, ScriptedPrompter

if TYPE_CHECKING:
    from click.testing import CliRunner


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for the test environment.

    Logs go to stderr at WARNING so they never mix with stdout assertions.
    """
    from git_stash_manager.logging import clear_context, configure_logging

    configure_logging(level=logging.WARNING)
    yield
    clear_context()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point Path.home() at a scratch directory so no real config is touched."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    return home


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory and restore the cwd afterwards."""
    import tempfile

    original_cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
    os.chdir(original_cwd)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove all GIT_STASH_MANAGER_ environment variables for clean testing."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("GIT_STASH_MANAGER_"):
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def console() -> Console:
    """Recording console with no terminal styling."""
    return Console(record=True, width=120, color_system=None, force_terminal=False)


@pytest.fixture
def fake_repo() -> FakeStashRepository:
    return FakeStashRepository(["A", "B", "C"])


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def executor(
    fake_repo: FakeStashRepository,
    prompter: ScriptedPrompter,
    console: Console,
) -> ActionExecutor:
    return ActionExecutor(fake_repo, FakeViewer(fake_repo), prompter, console)  # type: ignore[arg-type]


def _git(repo_path: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo_path, check=True, capture_output=True)


@pytest.fixture
def temp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with an initial commit."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()

    repo = Repo.init(repo_path)
    repo.config_writer().set_value("user", "email", "test@example.com").release()
    repo.config_writer().set_value("user", "name", "Test User").release()

    readme = repo_path / "README.md"
    readme.write_text("# Test Repo\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")
    return repo_path


@pytest.fixture
def stashed_repo(temp_git_repo: Path) -> Path:
    """Repository with two stashes: stash@{0} "second", stash@{1} "first"."""
    readme = temp_git_repo / "README.md"
    readme.write_text("# Test Repo\nfirst change\n")
    _git(temp_git_repo, "stash", "push", "-m", "first")
    readme.write_text("# Test Repo\nsecond change\n")
    _git(temp_git_repo, "stash", "push", "-m", "second")
    return temp_git_repo
