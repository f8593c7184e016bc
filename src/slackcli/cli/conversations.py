"""Conversation commands: listing, history, joining and opening DMs."""

from __future__ import annotations

import logging

import typer

from ..directory import USERS_PAGE_LIMIT, build_directory, normalize_user_ids
from ..errors import SlackCliError
from ..models.slack import ALL_CONVERSATION_TYPES, ConversationKind
from .common import get_session, handle_cli_errors

logger = logging.getLogger(__name__)

JOIN_HELP = """Join a public channel you know the ID for.

Note: You generally cannot join private channels without an invite.

Examples:
  slack join --channel C12345678
"""

DIRECT_MSGS_HELP = """List your direct message (IM) conversations.

Examples:
  slack directmsgs
  slack directmsgs --limit 50
"""

DIRECT_MP_MSGS_HELP = """List multi-person direct message conversations (MPIMs).

Examples:
  slack directmpmsgs
  slack directmpmsgs --limit 50
"""

OPEN_HELP = """Open a direct message or multi-person DM by user ID(s).

Optionally sends a message immediately to the opened conversation.

Examples:
  slack open --users U12345678
  slack open --users U12345678,U87654321 --text "Hello!"
"""

CHANNELS_HELP = """List conversations visible to you.

Supported types: public_channel, private_channel, mpim, im (comma-separated).

Examples:
  slack channels
  slack channels --types public_channel,im --limit 50
"""

MSGS_HELP = """Show recent messages for a channel or DM by ID.

Examples:
  slack msgs --channel C12345678 --limit 10
  slack msgs --channel D23456789
"""


def register(app: typer.Typer) -> None:
    app.command("join", help=JOIN_HELP, short_help="Join a public channel so you can read/post")(
        join
    )
    app.command(
        "directmsgs", help=DIRECT_MSGS_HELP, short_help="List recent 1:1 DMs you have access to"
    )(direct_msgs)
    app.command("direct-msgs", help=DIRECT_MSGS_HELP, hidden=True)(direct_msgs)
    app.command("list-direct-messages", help=DIRECT_MSGS_HELP, hidden=True)(direct_msgs)
    app.command(
        "directmpmsgs",
        help=DIRECT_MP_MSGS_HELP,
        short_help="List recent multi-person DMs (MPIMs)",
    )(direct_mp_msgs)
    app.command("direct-mp-msgs", help=DIRECT_MP_MSGS_HELP, hidden=True)(direct_mp_msgs)
    app.command("list-multiparty-direct-messages", help=DIRECT_MP_MSGS_HELP, hidden=True)(
        direct_mp_msgs
    )
    app.command(
        "open",
        help=OPEN_HELP,
        short_help="Open a DM/MPDM with one or more users (requires conversations:write)",
    )(open_conversation)
    app.command("channels", help=CHANNELS_HELP, short_help="List channels/DMs you can see")(
        channels
    )
    app.command("list-channels", help=CHANNELS_HELP, hidden=True)(channels)
    app.command("msgs", help=MSGS_HELP, short_help="List recent messages in a channel")(msgs)
    app.command("list-messages", help=MSGS_HELP, hidden=True)(msgs)


@handle_cli_errors
def join(
    ctx: typer.Context,
    channel: str = typer.Option(..., "--channel", help="Channel ID (e.g., C01234567)"),
) -> None:
    session = get_session(ctx)
    joined = session.client.conversations_join(session.token(), channel)
    name = joined.name if joined and joined.name else "(unknown)"
    typer.echo(f"Joined #{name}")


@handle_cli_errors
def direct_msgs(
    ctx: typer.Context,
    limit: int = typer.Option(100, "--limit", min=1, help="Max number of conversations to list"),
) -> None:
    session = get_session(ctx)
    token = session.token()
    ims = session.client.conversations_list(
        token, types=ConversationKind.IM.value, limit=limit
    )
    directory = build_directory(session.client.users_list(token, limit=USERS_PAGE_LIMIT))
    for im in ims:
        entry = directory.get(im.user or "")
        display = entry.display_name if entry else "?"
        real_name = (entry.real_name if entry else None) or ""
        email = (entry.email if entry else None) or ""
        typer.echo(f"{im.id or '-'}\t@{display}\t{real_name}\t{email}")


@handle_cli_errors
def direct_mp_msgs(
    ctx: typer.Context,
    limit: int = typer.Option(100, "--limit", min=1, help="Max number of conversations to list"),
) -> None:
    session = get_session(ctx)
    mpims = session.client.conversations_list(
        session.token(), types=ConversationKind.MPIM.value, limit=limit
    )
    for mpim in mpims:
        typer.echo(f"{mpim.id or '-'}\t#{mpim.name or '(mpdm)'}")


@handle_cli_errors
def open_conversation(
    ctx: typer.Context,
    users: str = typer.Option(
        ..., "--users", help="Comma-separated list of user IDs (e.g., U123,U456)"
    ),
    text: str | None = typer.Option(
        None, "--text", help="Optional text to send immediately in the opened conversation"
    ),
) -> None:
    user_ids = normalize_user_ids(users)
    if not user_ids:
        raise typer.BadParameter("Provide at least one user ID.", param_hint="--users")

    session = get_session(ctx)
    token = session.token()
    opened = session.client.conversations_open(token, user_ids)
    channel_id = opened.id if opened else None
    typer.echo(f"opened channel: {channel_id or '-'}")

    if text is not None and channel_id:
        # Best effort: the conversation is open whether or not this succeeds.
        try:
            session.client.chat_post_message(token, channel_id, text)
        except SlackCliError:
            logger.debug("Follow-up message to %s failed", channel_id, exc_info=True)


@handle_cli_errors
def channels(
    ctx: typer.Context,
    types: str = typer.Option(
        ALL_CONVERSATION_TYPES, "--types", help="conversation types (comma-separated)"
    ),
    limit: int = typer.Option(200, "--limit", min=1, help="Max number of conversations to list"),
) -> None:
    session = get_session(ctx)
    conversations = session.client.conversations_list(session.token(), types=types, limit=limit)
    for conversation in conversations:
        typer.echo(
            f"{conversation.id or '-'}\t#{conversation.display_name}\t({conversation.kind.value})"
        )


@handle_cli_errors
def msgs(
    ctx: typer.Context,
    channel: str = typer.Option(..., "--channel", help="Channel ID (e.g., C123… or D123…)"),
    limit: int = typer.Option(25, "--limit", min=1, help="Max number of messages to show"),
) -> None:
    session = get_session(ctx)
    messages = session.client.conversations_history(session.token(), channel, limit=limit)
    # The API returns newest first; print oldest first.
    for message in reversed(messages):
        typer.echo(f"{message.ts or '-'} {message.author}: {message.text or ''}")


__all__ = [
    "register",
    "channels",
    "direct_msgs",
    "direct_mp_msgs",
    "join",
    "msgs",
    "open_conversation",
]
