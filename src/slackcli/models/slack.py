from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import UNKNOWN_ERROR


class ConversationKind(str, Enum):
    PUBLIC_CHANNEL = "public_channel"
    PRIVATE_CHANNEL = "private_channel"
    MPIM = "mpim"
    IM = "im"


ALL_CONVERSATION_TYPES = ",".join(kind.value for kind in ConversationKind)


class SlackModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Identity(BaseModel):
    """Result of ``auth.test``; every field may be absent."""

    ok: bool = False
    team: str | None = None
    team_id: str | None = None
    user_id: str | None = None
    bot_id: str | None = None
    error: str | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")


class ApiFailure(SlackModel):
    """Failure variant of the response envelope."""

    error: str | None = None

    @field_validator("error", mode="before")
    @classmethod
    def _string_code_only(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @property
    def code(self) -> str:
        return self.error or UNKNOWN_ERROR


class Conversation(SlackModel):
    """A channel, DM or multi-person DM as returned by ``conversations.*``."""

    id: str | None = None
    name: str | None = None
    name_normalized: str | None = None
    user: str | None = None
    is_im: bool | None = None
    is_mpim: bool | None = None
    is_private: bool | None = None

    @property
    def kind(self) -> ConversationKind:
        if self.is_im:
            return ConversationKind.IM
        if self.is_mpim:
            return ConversationKind.MPIM
        if self.is_private:
            return ConversationKind.PRIVATE_CHANNEL
        return ConversationKind.PUBLIC_CHANNEL

    @property
    def display_name(self) -> str:
        return self.name or self.name_normalized or "(dm or unnamed)"


class Message(SlackModel):
    ts: str | None = None
    user: str | None = None
    bot_id: str | None = None
    text: str | None = None
    thread_ts: str | None = None

    @property
    def author(self) -> str:
        return self.user or self.bot_id or "unknown"


class MemberProfile(SlackModel):
    display_name: str | None = None
    real_name: str | None = None
    email: str | None = None


class Member(SlackModel):
    id: str | None = None
    name: str | None = None
    deleted: bool | None = None
    is_bot: bool | None = None
    profile: MemberProfile = Field(default_factory=MemberProfile)


class ConversationsListResponse(SlackModel):
    channels: list[Conversation] = Field(default_factory=list)


class ConversationsHistoryResponse(SlackModel):
    messages: list[Message] = Field(default_factory=list)
    has_more: bool | None = None


class ConversationResponse(SlackModel):
    """Payload of ``conversations.join`` and ``conversations.open``."""

    channel: Conversation | None = None


class PostedMessage(SlackModel):
    channel: str | None = None
    ts: str | None = None


class UsersListResponse(SlackModel):
    members: list[Member] = Field(default_factory=list)
