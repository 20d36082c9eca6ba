from __future__ import annotations

import click

from git_stash_manager.cli.console import console
from git_stash_manager.cli.context import CLIContext
from git_stash_manager.cli.output import format_json, format_success
from git_stash_manager.preferences import DefaultAction, PreferenceStore


def _store(ctx: click.Context) -> PreferenceStore:
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    return PreferenceStore(cli_ctx.config.preferences_path)


@click.group()
def config() -> None:
    """Manage git-stash-manager configuration."""
    pass


@config.command("show")
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    help="Output format (yaml or json).",
)
@click.pass_context
def config_show(ctx: click.Context, fmt: str) -> None:
    """Display current configuration.

    Shows the merged settings from all sources (defaults, user settings file,
    --config file, environment variables) plus the stored default action.

    Examples:
        git-stash-manager config show
        git-stash-manager config show --format json
    """
    import yaml

    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    config_dict = cli_ctx.config.model_dump(mode="json")
    stored = _store(ctx).load()
    config_dict["default_action"] = stored.value if stored else None

    if fmt == "json":
        click.echo(format_json(config_dict))
    else:
        click.echo(yaml.safe_dump(config_dict, default_flow_style=False, sort_keys=False))


@config.command("default-action")
@click.argument(
    "action",
    required=False,
    type=click.Choice([a.value for a in DefaultAction]),
)
@click.pass_context
def config_default_action(ctx: click.Context, action: str | None) -> None:
    """Show or set what Enter does in the interactive browser.

    Examples:
        git-stash-manager config default-action
        git-stash-manager config default-action view
    """
    store = _store(ctx)
    if action is None:
        stored = store.load()
        click.echo(stored.value if stored else "not set (asked on first Enter)")
        return

    store.save(DefaultAction(action))
    console.print(format_success(f"Saved '{action}' as default Enter action"))


@config.command("reset")
@click.pass_context
def config_reset(ctx: click.Context) -> None:
    """Forget the default Enter action so it is asked again."""
    store = _store(ctx)
    store.clear()
    console.print(format_success(f"Removed {store.path}"))
