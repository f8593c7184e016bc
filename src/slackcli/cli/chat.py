from __future__ import annotations

import typer

from .common import get_session, handle_cli_errors

SEND_HELP = """Post a message to a channel or DM by ID.

Use --thread-ts to reply in an existing thread.

Examples:
  slack send --channel C12345678 --text "Hello from slackcli"
  slack send --channel C12345678 --text "Thread reply" --thread-ts 1712345678.000100
"""


def register(app: typer.Typer) -> None:
    app.command("send", help=SEND_HELP, short_help="Send a message")(send)


@handle_cli_errors
def send(
    ctx: typer.Context,
    channel: str = typer.Option(..., "--channel", help="Channel or DM ID"),
    text: str = typer.Option(..., "--text", help="Message text"),
    thread_ts: str | None = typer.Option(
        None, "--thread-ts", help="Optional thread timestamp (to reply in a thread)"
    ),
) -> None:
    session = get_session(ctx)
    posted = session.client.chat_post_message(
        session.token(), channel, text, thread_ts=thread_ts
    )
    typer.echo(f"sent ok, ts={posted.ts or '-'}")


__all__ = ["register", "send"]
