"""Hidden ``preview`` command run by fzf for the preview pane."""

from __future__ import annotations

import click

from git_stash_manager.cli.console import console
from git_stash_manager.cli.context import CLIContext
from git_stash_manager.exceptions import GitError
from git_stash_manager.git import StashRepository, parse_stash_ref
from git_stash_manager.viewer import DiffViewer


@click.command(hidden=True)
@click.argument("line", required=False, default="")
@click.pass_context
def preview(ctx: click.Context, line: str) -> None:
    """Render the diff of the stash named in LINE.

    Always exits 0 so a stale entry only blanks the preview pane.
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    reference = parse_stash_ref(line)
    if reference is None:
        return

    try:
        repository = StashRepository()
    except GitError as e:
        click.echo(e.message)
        return

    DiffViewer(
        repository,
        console,
        renderer=cli_ctx.config.diff.renderer,
        pager=cli_ctx.config.diff.pager,
    ).preview(reference)
