"""Diagnostic command for verifying slackcli configuration."""

from __future__ import annotations

import typer
from rich import print
from rich.markup import escape

from ..auth import TOKEN_ENV_VAR
from ..errors import SlackCliError
from .common import get_session, handle_cli_errors


def register(app: typer.Typer) -> None:
    app.command("doctor")(doctor)


@handle_cli_errors
def doctor(ctx: typer.Context) -> None:
    """Check the API base, active profile and stored token without prompting."""

    session = get_session(ctx)
    credentials = session.credentials
    ok = True

    print(f"[green]API base:[/green] {escape(session.client.base_url)}")
    print(
        f"[green]Profile:[/green] {escape(session.profile.name)} "
        f"({escape(session.profile.service)}:{escape(session.profile.account)})"
    )

    if credentials.env_override():
        print(f"[green]{TOKEN_ENV_VAR} override detected; stored token is not used.[/green]")
        raise typer.Exit(code=0)
    print(f"[yellow]{TOKEN_ENV_VAR} is not set; checking the keyring.[/yellow]")

    try:
        stored = credentials.store.get()
    except SlackCliError as exc:
        print(f"[red]Keyring read failed:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from None

    if not stored:
        print("[yellow]No stored token. Run `slack init` to add one.[/yellow]")
        raise typer.Exit(code=1)

    try:
        identity = session.client.auth_test(stored)
    except SlackCliError as exc:
        print(f"[red]Token check failed:[/red] {escape(str(exc))}")
        ok = False
    else:
        if identity.ok:
            team = identity.team or identity.team_id or "unknown"
            print(f"[green]Stored token is valid for team {escape(team)}.[/green]")
        else:
            error = identity.error or "invalid_auth"
            print(f"[red]Stored token was rejected:[/red] {escape(error)}")
            ok = False

    raise typer.Exit(code=0 if ok else 1)


__all__ = ["register", "doctor"]
