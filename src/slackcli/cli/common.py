from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from typing import Any, ParamSpec, TypeVar, cast

import typer
from rich.console import Console
from rich.markup import escape

from ..auth import CredentialManager, InteractiveTokenPrompt
from ..clients.slack import SlackClient
from ..config import ConfigData, ConfigStore, Profile
from ..errors import ApiError, CredentialError, HttpStatusError, SlackCliError
from ..secrets import KeyringSecretStore

console = Console()
err_console = Console(stderr=True)

_AUTH_ERROR_CODES = {"invalid_auth", "not_authed", "token_revoked", "account_inactive"}
_INIT_HINT = "Run `slack init --force` to store a new token, or export SLACK_TOKEN."


def _render_api_error(exc: ApiError) -> None:
    console.print(f"[red]Error:[/red] {escape(str(exc))}")
    if exc.code in _AUTH_ERROR_CODES:
        console.print(_INIT_HINT)
    needed = exc.details.get("needed")
    if exc.code == "missing_scope" and needed:
        console.print(f"Missing scope: {escape(str(needed))}")


def _render_http_error(exc: HttpStatusError) -> None:
    console.print(f"[red]Error:[/red] {escape(str(exc))}")
    if exc.body:
        console.print(escape(exc.body))


CommandParams = ParamSpec("CommandParams")
CommandReturn = TypeVar("CommandReturn")


def handle_cli_errors(
    func: Callable[CommandParams, CommandReturn],
) -> Callable[CommandParams, CommandReturn]:
    @wraps(func)
    def wrapper(*args: CommandParams.args, **kwargs: CommandParams.kwargs) -> CommandReturn:
        try:
            return func(*args, **kwargs)
        except typer.BadParameter:
            raise
        except typer.Exit:
            raise
        except typer.Abort:
            raise
        except ApiError as exc:
            _render_api_error(exc)
            raise typer.Exit(1) from None
        except HttpStatusError as exc:
            _render_http_error(exc)
            raise typer.Exit(1) from None
        except CredentialError as exc:
            console.print(f"[red]Error:[/red] {escape(str(exc))}")
            console.print(_INIT_HINT)
            raise typer.Exit(1) from None
        except SlackCliError as exc:
            console.print(f"[red]Error:[/red] {escape(str(exc))}")
            raise typer.Exit(1) from None
        except Exception as exc:
            if os.getenv("SLACKCLI_DEBUG"):
                raise
            console.print(f"[red]Error:[/red] Unexpected failure: {escape(str(exc))}")
            console.print("Set SLACKCLI_DEBUG=1 for a stack trace.")
            raise typer.Exit(1) from exc

    return wrapper


def warn(message: str) -> None:
    err_console.print(f"[yellow]{escape(message)}[/yellow]")


@dataclass
class Session:
    """Collaborators shared by the commands of one invocation."""

    profile: Profile
    client: SlackClient
    credentials: CredentialManager

    def token(self) -> str:
        return self.credentials.ensure_token()


def get_config_from_context(ctx: typer.Context, *, store: ConfigStore | None = None) -> ConfigData:
    """Return a cached :class:`ConfigData` instance stored on ``ctx``."""

    ctx_obj = cast(dict[str, Any], ctx.ensure_object(dict))
    existing = ctx_obj.get("config")
    if isinstance(existing, ConfigData):
        return existing
    cfg = (store or ConfigStore()).load()
    ctx_obj["config"] = cfg
    return cfg


def build_session(profile: Profile, *, api_base: str | None = None) -> Session:
    client = SlackClient(base_url=api_base)
    credentials = CredentialManager(
        KeyringSecretStore(profile.service, profile.account),
        client,
        InteractiveTokenPrompt(profile.token_hint),
        warn=warn,
    )
    return Session(profile=profile, client=client, credentials=credentials)


def get_session(ctx: typer.Context) -> Session:
    ctx_obj = cast(dict[str, Any], ctx.ensure_object(dict))
    session = ctx_obj.get("session")
    if isinstance(session, Session):
        return session

    cfg = get_config_from_context(ctx)
    profile = ConfigStore().resolve_profile(ctx_obj.get("profile_name"), config=cfg)
    # SLACK_API_BASE wins over the config file.
    api_base = None if os.getenv("SLACK_API_BASE") else cfg.api_base
    session = build_session(profile, api_base=api_base)
    ctx_obj["session"] = session
    ctx.call_on_close(session.client.close)
    return session


__all__ = [
    "Session",
    "build_session",
    "console",
    "err_console",
    "get_config_from_context",
    "get_session",
    "handle_cli_errors",
    "warn",
]
