from __future__ import annotations

import logging
from typing import Any, cast

import click
import typer
from rich.logging import RichHandler

from .. import __version__
from . import auth, chat, conversations, doctor, profile, users
from .common import err_console

APP_NAME = "slack"

APP_HELP = """A tiny, practical Slack CLI.

Primary capabilities:

- Initialize and validate a user token (stored in the system keyring).

- Explore your workspace: whoami, channels, users, and recent messages.

- Send messages (including threaded replies) and open DMs/MPDMs.

To see detailed help for every command at once, run `slack --help`.
To see help for just one command, use `slack <command> --help`.
"""

EXAMPLES = (
    "init",
    "whoami",
    "channels --types public_channel,im --limit 20",
    "find-person --query Jane",
    'open --users U123,U456 --text "Hello"',
    "msgs --channel C12345678 --limit 5",
    'send --channel C12345678 --text "Hi"',
    'send --channel C12345678 --text "Reply" --thread-ts 1712345678.000100',
)


def _print_full_help(ctx: typer.Context, value: bool) -> None:
    """Print the top-level help, examples and every command's help, then exit."""

    if not value or ctx.resilient_parsing:
        return

    typer.echo(f"{APP_NAME} {__version__}")
    typer.echo()
    typer.echo(ctx.get_help())

    typer.echo("\nEXAMPLES:")
    for example in EXAMPLES:
        typer.echo(f"  {APP_NAME} {example}")

    typer.echo("\nCOMMAND DETAILS:")
    group = cast(click.Group, ctx.command)
    for name in group.list_commands(ctx):
        command = group.get_command(ctx, name)
        if command is None or command.hidden:
            continue
        typer.echo(f"\n== {name} ==")
        sub_ctx = typer.Context(command, info_name=name, parent=ctx)
        typer.echo(command.get_help(sub_ctx))
    raise typer.Exit()


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"{APP_NAME} {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


# Subcommand contexts inherit these names, so `slack <command> -h` is scoped help.
COMMAND_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

app = typer.Typer(
    help=APP_HELP,
    add_help_option=False,
    no_args_is_help=True,
    context_settings=COMMAND_CONTEXT_SETTINGS,
)


@app.callback(add_help_option=False)
def common(
    ctx: typer.Context,
    profile_name: str | None = typer.Option(
        None,
        "--profile",
        "-p",
        envvar="SLACKCLI_PROFILE",
        help="Token profile to use (defaults to the configured default, then 'user')",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
    version: bool = typer.Option(
        False,
        "--version",
        is_eager=True,
        callback=_print_version,
        help="Show the version and exit.",
    ),
    full_help: bool = typer.Option(
        False,
        "--help",
        "-h",
        is_eager=True,
        callback=_print_full_help,
        help="Show help for every command and exit.",
    ),
) -> None:
    """Initialize shared Typer context state."""

    _configure_logging(verbose)
    ctx_obj = cast(dict[str, Any], ctx.ensure_object(dict))
    ctx_obj.setdefault("profile_name", profile_name)


auth.register(app)
conversations.register(app)
chat.register(app)
users.register(app)
doctor.register(app)
app.add_typer(profile.app, name="profile")


def main() -> None:
    app(prog_name=APP_NAME)


__all__ = ["app", "main"]
