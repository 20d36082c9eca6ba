"""CLI entry point for git-stash-manager.

This module defines the Click-based command-line interface. Running the
program without a subcommand opens the stash browser.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from git_stash_manager import __version__
from git_stash_manager.cli.commands.browse import browse
from git_stash_manager.cli.commands.config import config
from git_stash_manager.cli.commands.doctor import doctor
from git_stash_manager.cli.commands.preview import preview
from git_stash_manager.cli.console import err_console
from git_stash_manager.cli.context import CLIContext, ExitCode
from git_stash_manager.cli.output import format_error
from git_stash_manager.config import load_config
from git_stash_manager.exceptions import ConfigError
from git_stash_manager.logging import configure_logging

_VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="git-stash-manager")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=str),
    default=None,
    help="Path to a YAML settings file (overrides the user settings).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress non-essential output (ERROR level only).",
)
@click.option(
    "--simple",
    is_flag=True,
    default=False,
    help="Use the numbered menu even when fzf is available.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    verbose: int,
    quiet: bool,
    simple: bool,
) -> None:
    """Git Stash Manager - interactive browser for git stashes."""
    ctx.ensure_object(dict)

    config_path = Path(config_file) if config_file else None
    try:
        config = load_config(config_path)
    except ConfigError as e:
        details = []
        if e.field:
            details.append(f"Field: {e.field}")
        if e.value is not None:
            details.append(f"Value: {e.value}")
        err_console.print(format_error(e.message, details=details or None))
        ctx.exit(ExitCode.FAILURE)

    cli_ctx = CLIContext(
        config=config,
        config_path=config_path,
        verbosity=verbose,
        quiet=quiet,
        simple=simple,
    )
    ctx.obj["cli_ctx"] = cli_ctx

    # Priority: quiet > verbose > config
    if quiet:
        level = logging.ERROR
    elif verbose > 0:
        level = logging.INFO if verbose == 1 else logging.DEBUG
    else:
        level = _VERBOSITY_LEVELS.get(config.verbosity, logging.WARNING)

    configure_logging(level=level)

    if ctx.invoked_subcommand is None:
        ctx.invoke(browse, simple=simple)


cli.add_command(browse)
cli.add_command(config)
cli.add_command(doctor)
cli.add_command(preview)

if __name__ == "__main__":
    cli()
