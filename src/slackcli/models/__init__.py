"""Re-export typed Slack Web API models."""

from __future__ import annotations

from .slack import (
    ALL_CONVERSATION_TYPES,
    ApiFailure,
    Conversation,
    ConversationKind,
    ConversationResponse,
    ConversationsHistoryResponse,
    ConversationsListResponse,
    Identity,
    Member,
    MemberProfile,
    Message,
    PostedMessage,
    UsersListResponse,
)

__all__ = [
    "ALL_CONVERSATION_TYPES",
    "ApiFailure",
    "Conversation",
    "ConversationKind",
    "ConversationResponse",
    "ConversationsHistoryResponse",
    "ConversationsListResponse",
    "Identity",
    "Member",
    "MemberProfile",
    "Message",
    "PostedMessage",
    "UsersListResponse",
]
