"""``git-stash-manager browse`` command (also the default command)."""

from __future__ import annotations

import shlex
import sys
from pathlib import Path

import click
from rich.console import Console

from git_stash_manager.actions import ActionExecutor
from git_stash_manager.cli.common import cli_error_handler
from git_stash_manager.cli.console import console as default_console
from git_stash_manager.cli.context import CLIContext
from git_stash_manager.cli.output import format_notice
from git_stash_manager.controller import FallbackController, InteractiveController
from git_stash_manager.exceptions import (
    SelectorError,
    SelectorTooOldError,
    SelectorUnavailableError,
)
from git_stash_manager.git import StashRepository
from git_stash_manager.logging import bind_context, get_logger
from git_stash_manager.preferences import PreferenceStore
from git_stash_manager.prompts import ConsolePrompter
from git_stash_manager.selector import FzfSelector, detect_selector
from git_stash_manager.viewer import DiffViewer

__all__ = ["browse", "build_preview_command", "run_manager"]

logger = get_logger(__name__)


def build_preview_command(config_path: Path | None = None) -> str:
    """Shell command fzf runs for the preview pane.

    fzf substitutes ``{}`` with the highlighted line, already quoted.
    """
    argv = [sys.executable, "-m", "git_stash_manager"]
    if config_path is not None:
        argv += ["--config", str(config_path)]
    argv += ["preview", "--"]
    return f"{shlex.join(argv)} {{}}"


def _interactive_selector(cli_ctx: CLIContext, console: Console) -> FzfSelector | None:
    settings = cli_ctx.config.selector
    try:
        capabilities = detect_selector(settings.command, settings.min_version)
    except SelectorTooOldError as e:
        logger.info("selector_too_old", found=e.found, required=e.required)
        console.print(
            format_notice(
                f"{e.command} {e.required}+ required for interactive mode "
                "(found older version)"
            )
        )
        console.print()
        return None
    except SelectorUnavailableError as e:
        logger.info("selector_unavailable", command=e.command)
        console.print(
            format_notice(f"Install {e.command} for a better experience (brew install fzf)")
        )
        console.print()
        return None

    return FzfSelector(
        capabilities,
        preview_command=build_preview_command(cli_ctx.config_path),
        preview_window=settings.preview_window,
    )


def run_manager(
    cli_ctx: CLIContext,
    *,
    simple: bool = False,
    path: Path | None = None,
    console: Console | None = None,
) -> None:
    """Check the repository, pick a controller, and run it.

    Args:
        cli_ctx: Global options and configuration.
        simple: Use the numbered menu even if fzf is usable.
        path: Directory inside the repository (default: cwd).
        console: Terminal output (default: the shared stdout console).

    Raises:
        NotARepositoryError: If ``path`` is not inside a git working tree.
    """
    console = console or default_console
    config = cli_ctx.config

    repository = StashRepository(path)
    bind_context(repo=str(repository.path))

    prompter = ConsolePrompter(console)
    viewer = DiffViewer(
        repository,
        console,
        renderer=config.diff.renderer,
        pager=config.diff.pager,
    )
    executor = ActionExecutor(
        repository,
        viewer,
        prompter,
        console,
        rename_strategy=config.rename_strategy,
    )

    selector = None
    if not simple and config.selector.enabled:
        selector = _interactive_selector(cli_ctx, console)

    if selector is not None:
        controller = InteractiveController(
            executor,
            selector,
            PreferenceStore(config.preferences_path),
            prompter,
            console,
        )
        try:
            controller.run()
            return
        except SelectorError as e:
            logger.warning("selector_failed", error=e.message)
            console.print(format_notice(f"{e.message}; switching to the numbered menu"))

    FallbackController(executor, prompter, console).run()


@click.command()
@click.option(
    "--simple",
    is_flag=True,
    default=False,
    help="Use the numbered menu even when fzf is available.",
)
@click.pass_context
def browse(ctx: click.Context, simple: bool) -> None:
    """Browse, apply, pop, drop, rename and view stashes.

    Examples:
        git-stash-manager
        git-stash-manager browse --simple
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    with cli_error_handler():
        run_manager(cli_ctx, simple=simple or cli_ctx.simple)
