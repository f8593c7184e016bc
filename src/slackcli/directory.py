from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .models.slack import Conversation, Member

USERS_PAGE_LIMIT = 200
DM_LOOKUP_LIMIT = 1000


@dataclass(frozen=True)
class DirectoryEntry:
    user_id: str
    display_name: str
    real_name: str | None = None
    email: str | None = None

    @classmethod
    def from_member(cls, member: Member, user_id: str) -> DirectoryEntry:
        profile = member.profile
        display = profile.display_name or member.name or user_id
        return cls(
            user_id=user_id,
            display_name=display,
            real_name=profile.real_name,
            email=profile.email,
        )

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match over name, real name, email and id."""

        needle = query.lower()
        fields = (self.display_name, self.real_name or "", self.email or "", self.user_id)
        return any(needle in value.lower() for value in fields)


@dataclass(frozen=True)
class PersonMatch:
    entry: DirectoryEntry
    dm_channel: str | None = None


def build_directory(members: Iterable[Member]) -> dict[str, DirectoryEntry]:
    """Map user id to :class:`DirectoryEntry`, keeping the API's member order.

    Members without an id cannot be addressed and are skipped.
    """

    return {
        member.id: DirectoryEntry.from_member(member, member.id) for member in members if member.id
    }


def dm_channels_by_user(conversations: Iterable[Conversation]) -> dict[str, str]:
    """Map user id to the id of an existing 1:1 DM with that user."""

    mapping: dict[str, str] = {}
    for conversation in conversations:
        if conversation.user and conversation.id:
            mapping[conversation.user] = conversation.id
    return mapping


def find_people(
    directory: Mapping[str, DirectoryEntry],
    query: str,
    *,
    limit: int,
    dm_channels: Mapping[str, str] | None = None,
) -> list[PersonMatch]:
    """Return up to ``limit`` entries matching ``query``.

    Filtering happens before truncation so a small limit never drops a match
    in favour of a non-match.
    """

    dm_channels = dm_channels or {}
    matches = [
        PersonMatch(entry=entry, dm_channel=dm_channels.get(user_id))
        for user_id, entry in directory.items()
        if entry.matches(query)
    ]
    return matches[: max(limit, 0)]


def normalize_user_ids(raw: str) -> str:
    """Trim a comma-separated id list and drop empty entries."""

    return ",".join(part.strip() for part in raw.split(",") if part.strip())
