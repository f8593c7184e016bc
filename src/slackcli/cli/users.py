from __future__ import annotations

import typer

from ..directory import (
    DM_LOOKUP_LIMIT,
    USERS_PAGE_LIMIT,
    build_directory,
    dm_channels_by_user,
    find_people,
)
from ..models.slack import ConversationKind
from .common import get_session, handle_cli_errors

FIND_PERSON_HELP = """Search for users by display name, real name, email, or user ID.

Outputs: user_id, DM channel (if any), @display_name, real_name, email.

Examples:
  slack find-person --query "Jane Doe"
  slack find-person --query jane@example.com --limit 5
"""


def register(app: typer.Typer) -> None:
    app.command(
        "findperson",
        help=FIND_PERSON_HELP,
        short_help="Find a person by name or email and show IDs",
    )(find_person)
    app.command("find-person", help=FIND_PERSON_HELP, hidden=True)(find_person)


@handle_cli_errors
def find_person(
    ctx: typer.Context,
    query: str = typer.Option(
        ..., "--query", help="Substring to match against display name, real name, email, or user ID"
    ),
    limit: int = typer.Option(50, "--limit", min=0, help="Max matches to show"),
) -> None:
    session = get_session(ctx)
    token = session.token()
    directory = build_directory(session.client.users_list(token, limit=USERS_PAGE_LIMIT))
    ims = session.client.conversations_list(
        token, types=ConversationKind.IM.value, limit=DM_LOOKUP_LIMIT
    )
    matches = find_people(directory, query, limit=limit, dm_channels=dm_channels_by_user(ims))
    for match in matches:
        entry = match.entry
        typer.echo(
            f"{entry.user_id}\t{match.dm_channel or '-'}\t@{entry.display_name}"
            f"\t{entry.real_name or ''}\t{entry.email or ''}"
        )


__all__ = ["register", "find_person"]
