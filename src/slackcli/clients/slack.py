from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, TypeVar, cast

from pydantic import BaseModel, ValidationError

from ..errors import ApiError, DecodeError
from ..http_client import HttpClient
from ..models.slack import (
    ALL_CONVERSATION_TYPES,
    ApiFailure,
    Conversation,
    ConversationResponse,
    ConversationsHistoryResponse,
    ConversationsListResponse,
    Identity,
    Member,
    Message,
    PostedMessage,
    UsersListResponse,
)

logger = logging.getLogger(__name__)

AUTH_TEST_METHOD = "auth.test"

ModelT = TypeVar("ModelT", bound=BaseModel)


class SlackClient:
    """Client for the Slack Web API envelope protocol.

    Every method is a form-encoded ``POST {base_url}/{method}`` carrying the
    token as a bearer credential. Responses share one envelope shape,
    ``{"ok": bool, "error"?: str, ...}``; a failure envelope is raised as
    :class:`~slackcli.errors.ApiError` and a success envelope is decoded into
    the method's payload model.
    """

    def __init__(self, http: HttpClient | None = None, *, base_url: str | None = None) -> None:
        self.http = http or HttpClient(base_url)

    @property
    def base_url(self) -> str:
        return self.http.base_url

    def close(self) -> None:
        """Close the underlying HTTP client."""

        self.http.close()

    def __enter__(self) -> SlackClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _post_json(
        self, method_name: str, token: str, form: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        resp = self.http.post(
            method_name,
            data=form or None,
            headers={"Authorization": f"Bearer {token}"},
        )
        try:
            payload = resp.json()
        except ValueError as exc:
            raise DecodeError(f"{method_name}: response is not valid JSON") from exc
        if not isinstance(payload, dict):
            raise DecodeError(f"{method_name}: expected a JSON object")
        return cast(dict[str, Any], payload)

    @staticmethod
    def _decode(method_name: str, model: type[ModelT], payload: dict[str, Any]) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(f"{method_name}: unexpected response shape: {exc}") from exc

    def call(
        self, method_name: str, token: str, form_parameters: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Invoke ``method_name`` and return the payload of a successful envelope."""

        payload = self._post_json(method_name, token, form_parameters)
        if payload.get("ok") is not True:
            failure = self._decode(method_name, ApiFailure, payload)
            details = {k: v for k, v in payload.items() if k not in {"ok", "error"}}
            logger.debug("%s failed: %s", method_name, failure.code)
            raise ApiError(failure.code, details=details)
        return payload

    def _call_model(
        self,
        method_name: str,
        token: str,
        model: type[ModelT],
        form_parameters: dict[str, Any] | None = None,
    ) -> ModelT:
        return self._decode(method_name, model, self.call(method_name, token, form_parameters))

    def auth_test(self, token: str) -> Identity:
        """Validate ``token``; an ``ok: false`` answer is returned, not raised."""

        payload = self._post_json(AUTH_TEST_METHOD, token)
        return self._decode(AUTH_TEST_METHOD, Identity, payload)

    def conversations_list(
        self, token: str, *, types: str = ALL_CONVERSATION_TYPES, limit: int = 200
    ) -> list[Conversation]:
        resp = self._call_model(
            "conversations.list",
            token,
            ConversationsListResponse,
            {"types": types, "limit": str(limit)},
        )
        return resp.channels

    def conversations_history(self, token: str, channel: str, *, limit: int = 25) -> list[Message]:
        """Return one page of messages, newest first as the API sends them."""

        resp = self._call_model(
            "conversations.history",
            token,
            ConversationsHistoryResponse,
            {"channel": channel, "limit": str(limit)},
        )
        return resp.messages

    def conversations_join(self, token: str, channel: str) -> Conversation | None:
        resp = self._call_model(
            "conversations.join", token, ConversationResponse, {"channel": channel}
        )
        return resp.channel

    def conversations_open(self, token: str, users: str) -> Conversation | None:
        resp = self._call_model("conversations.open", token, ConversationResponse, {"users": users})
        return resp.channel

    def chat_post_message(
        self, token: str, channel: str, text: str, *, thread_ts: str | None = None
    ) -> PostedMessage:
        form = {"channel": channel, "text": text}
        if thread_ts:
            form["thread_ts"] = thread_ts
        return self._call_model("chat.postMessage", token, PostedMessage, form)

    def users_list(self, token: str, *, limit: int = 200) -> list[Member]:
        resp = self._call_model("users.list", token, UsersListResponse, {"limit": str(limit)})
        return resp.members
