"""Commands for inspecting and mutating keyring profiles."""

from __future__ import annotations

import typer
from rich import print
from rich.markup import escape

from ..config import DEFAULT_PROFILE, ConfigStore, Profile
from ..secrets import build_keyring_ref
from .common import handle_cli_errors

app = typer.Typer(help="Token profiles & configuration")


@app.command("list")
@handle_cli_errors
def profile_list() -> None:
    """Show built-in and saved profiles, highlighting the default profile."""

    cfg = ConfigStore().load()
    default = cfg.default_profile or DEFAULT_PROFILE
    for name, profile in sorted(cfg.all_profiles().items()):
        star = "*" if name == default else " "
        ref = build_keyring_ref(profile.service, profile.account)
        typer.echo(f"{star} {name}\t{ref}")


@app.command("show")
@handle_cli_errors
def profile_show(name: str = typer.Argument(..., help="Profile name")) -> None:
    """Display where a profile keeps its token."""

    profile = ConfigStore().load().all_profiles().get(name)
    if not profile:
        raise typer.BadParameter(f"Profile '{name}' not found")
    typer.echo(f"name: {profile.name}")
    typer.echo(f"service: {profile.service}")
    typer.echo(f"account: {profile.account}")
    typer.echo(f"token_hint: {profile.token_hint}")


@app.command("add")
@handle_cli_errors
def profile_add(
    name: str = typer.Argument(..., help="Profile name"),
    service: str = typer.Option(..., "--service", help="Keyring service name"),
    account: str = typer.Option("token", "--account", help="Keyring account name"),
    token_hint: str = typer.Option(
        "xoxp-…", "--token-hint", help="Token prefix shown in the prompt"
    ),
    set_default: bool = typer.Option(
        False, "--set-default", help="Make this profile the default"
    ),
) -> None:
    """Create or update a profile pointing at a keyring entry."""

    store = ConfigStore()
    profile = Profile(name=name, service=service, account=account, token_hint=token_hint)
    cfg = store.add_or_update_profile(profile, set_default=set_default)
    print(f"[green]Saved profile[/green] {escape(name)}")
    if cfg.default_profile == name:
        print(f"Default profile set to {escape(name)}")


@app.command("use")
@handle_cli_errors
def profile_use(name: str = typer.Argument(..., help="Profile name")) -> None:
    """Make ``name`` the default profile."""

    ConfigStore().set_default_profile(name)
    print(f"Default profile set to {escape(name)}")


@app.command("set-api-base")
@handle_cli_errors
def profile_set_api_base(
    api_base: str = typer.Argument(..., help="Web API root, e.g. https://slack.com/api"),
) -> None:
    """Persist a Web API root used when SLACK_API_BASE is not set."""

    store = ConfigStore()
    cfg = store.load()
    cfg.api_base = api_base.rstrip("/")
    store.save(cfg)
    print(f"API base set to {escape(cfg.api_base)}")


__all__ = [
    "app",
    "profile_add",
    "profile_list",
    "profile_set_api_base",
    "profile_show",
    "profile_use",
]
