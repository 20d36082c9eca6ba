"""``git-stash-manager doctor`` command."""

from __future__ import annotations

import click
from rich.table import Table

from git_stash_manager.cli.console import console
from git_stash_manager.cli.context import CLIContext, ExitCode
from git_stash_manager.cli.output import format_error, format_success, format_warning
from git_stash_manager.cli.validators import (
    check_dependencies,
    detect_package_manager,
    install_hint,
)
from git_stash_manager.exceptions import SelectorError
from git_stash_manager.selector import detect_selector


@click.command()
@click.pass_context
def doctor(ctx: click.Context) -> None:
    """Check git, fzf and delta and suggest how to install what is missing.

    Only reports; nothing is installed.
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    config = cli_ctx.config
    tools = ["git", config.selector.command]
    if config.diff.renderer:
        tools.append(config.diff.renderer)

    statuses = check_dependencies(tools)
    manager = detect_package_manager()

    table = Table(show_lines=False)
    table.add_column("Tool")
    table.add_column("Status")
    table.add_column("Version / Install")
    for status in statuses:
        if status.available:
            table.add_row(status.name, "[green]found[/green]", status.version or "")
        else:
            table.add_row(
                status.name, "[red]missing[/red]", install_hint(status.name, manager)
            )
    console.print(table)

    selector_found = any(s.available for s in statuses if s.name == config.selector.command)
    if selector_found:
        try:
            capabilities = detect_selector(
                config.selector.command, config.selector.min_version
            )
            console.print(
                format_success(
                    f"Interactive mode available ({capabilities.command} "
                    f"{capabilities.version_string})"
                )
            )
        except SelectorError as e:
            console.print(format_warning(f"{e.message}; the numbered menu will be used"))
    else:
        console.print(
            format_warning(
                f"{config.selector.command} not found; the numbered menu will be used"
            )
        )

    if not statuses[0].available:
        console.print(format_error("git is required"))
        ctx.exit(ExitCode.FAILURE)
