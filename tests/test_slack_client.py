from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest

from slackcli.clients.slack import SlackClient
from slackcli.errors import ApiError, DecodeError, HttpStatusError, TransportError
from slackcli.models.slack import ConversationKind


def form_of(route) -> dict[str, list[str]]:
    return parse_qs(route.calls.last.request.content.decode())


def test_call_posts_form_with_bearer_token(respx_mock, api_base) -> None:
    route = respx_mock.post(f"{api_base}/conversations.join").mock(
        return_value=httpx.Response(200, json={"ok": True, "channel": {"name": "general"}})
    )

    payload = SlackClient().call("conversations.join", "xoxp-1", {"channel": "C1"})

    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer xoxp-1"
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert request.headers["User-Agent"].startswith("slackcli/")
    assert form_of(route) == {"channel": ["C1"]}
    assert payload["channel"] == {"name": "general"}


def test_call_raises_api_error_with_code(respx_mock, api_base) -> None:
    respx_mock.post(f"{api_base}/chat.postMessage").mock(
        return_value=httpx.Response(200, json={"ok": False, "error": "channel_not_found"})
    )

    with pytest.raises(ApiError) as exc_info:
        SlackClient().call("chat.postMessage", "xoxp-1", {"channel": "C9", "text": "hi"})

    assert exc_info.value.code == "channel_not_found"
    assert "channel_not_found" in str(exc_info.value)


@pytest.mark.parametrize("body", [{"ok": False}, {"channels": []}, {"ok": "true"}])
def test_call_without_ok_true_is_unknown_error(respx_mock, api_base, body) -> None:
    respx_mock.post(f"{api_base}/conversations.list").mock(
        return_value=httpx.Response(200, json=body)
    )

    with pytest.raises(ApiError) as exc_info:
        SlackClient().call("conversations.list", "xoxp-1")

    assert exc_info.value.code == "unknown_error"


def test_api_error_keeps_extra_fields(respx_mock, api_base) -> None:
    respx_mock.post(f"{api_base}/users.list").mock(
        return_value=httpx.Response(
            200, json={"ok": False, "error": "missing_scope", "needed": "users:read"}
        )
    )

    with pytest.raises(ApiError) as exc_info:
        SlackClient().users_list("xoxp-1")

    assert exc_info.value.details == {"needed": "users:read"}


def test_call_raises_http_status_error(respx_mock, api_base) -> None:
    respx_mock.post(f"{api_base}/auth.test").mock(
        return_value=httpx.Response(500, text="upstream exploded")
    )

    with pytest.raises(HttpStatusError) as exc_info:
        SlackClient().call("auth.test", "xoxp-1")

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == "upstream exploded"


def test_call_raises_transport_error(respx_mock, api_base) -> None:
    respx_mock.post(f"{api_base}/auth.test").mock(side_effect=httpx.ConnectError("refused"))

    with pytest.raises(TransportError):
        SlackClient().call("auth.test", "xoxp-1")


@pytest.mark.parametrize("response", [
    httpx.Response(200, text="<html>not json</html>"),
    httpx.Response(200, json=["not", "an", "object"]),
])
def test_call_raises_decode_error(respx_mock, api_base, response) -> None:
    respx_mock.post(f"{api_base}/auth.test").mock(return_value=response)

    with pytest.raises(DecodeError):
        SlackClient().call("auth.test", "xoxp-1")


def test_typed_payload_mismatch_is_decode_error(respx_mock, api_base) -> None:
    respx_mock.post(f"{api_base}/conversations.list").mock(
        return_value=httpx.Response(200, json={"ok": True, "channels": "nope"})
    )

    with pytest.raises(DecodeError):
        SlackClient().conversations_list("xoxp-1")


def test_auth_test_returns_identity(respx_mock, api_base) -> None:
    route = respx_mock.post(f"{api_base}/auth.test").mock(
        return_value=httpx.Response(
            200,
            json={
                "ok": True,
                "team": "Acme Co",
                "team_id": "T123",
                "user_id": "U234",
                "bot_id": None,
                "url": "https://acme.slack.com/",
            },
        )
    )

    identity = SlackClient().auth_test("xoxp-1")

    assert identity.ok is True
    assert identity.team == "Acme Co"
    assert identity.team_id == "T123"
    assert identity.user_id == "U234"
    assert identity.bot_id is None
    assert route.calls.last.request.content == b""


def test_auth_test_failure_is_returned_not_raised(respx_mock, api_base) -> None:
    respx_mock.post(f"{api_base}/auth.test").mock(
        return_value=httpx.Response(200, json={"ok": False, "error": "invalid_auth"})
    )

    identity = SlackClient().auth_test("xoxp-bad")

    assert identity.ok is False
    assert identity.error == "invalid_auth"


def test_auth_test_tolerates_missing_fields(respx_mock, api_base) -> None:
    respx_mock.post(f"{api_base}/auth.test").mock(return_value=httpx.Response(200, json={}))

    identity = SlackClient().auth_test("xoxp-1")

    assert identity.ok is False
    assert identity.team is None
    assert identity.error is None


def test_conversations_list_sends_types_and_limit(respx_mock, api_base) -> None:
    route = respx_mock.post(f"{api_base}/conversations.list").mock(
        return_value=httpx.Response(
            200,
            json={
                "ok": True,
                "channels": [
                    {"id": "C1", "name": "general", "is_private": False},
                    {"id": "G1", "name": "secret", "is_private": True},
                    {"id": "D1", "is_im": True, "user": "U1"},
                ],
            },
        )
    )

    conversations = SlackClient().conversations_list("xoxp-1", types="public_channel,im", limit=10)

    assert form_of(route) == {"types": ["public_channel,im"], "limit": ["10"]}
    assert [c.kind for c in conversations] == [
        ConversationKind.PUBLIC_CHANNEL,
        ConversationKind.PRIVATE_CHANNEL,
        ConversationKind.IM,
    ]
    assert conversations[2].user == "U1"


def test_conversations_history_keeps_api_order(respx_mock, api_base) -> None:
    respx_mock.post(f"{api_base}/conversations.history").mock(
        return_value=httpx.Response(
            200,
            json={"ok": True, "messages": [{"ts": "2", "text": "new"}, {"ts": "1", "text": "old"}]},
        )
    )

    messages = SlackClient().conversations_history("xoxp-1", "C1", limit=2)

    assert [m.ts for m in messages] == ["2", "1"]


def test_chat_post_message_includes_thread_ts_only_when_given(respx_mock, api_base) -> None:
    route = respx_mock.post(f"{api_base}/chat.postMessage").mock(
        return_value=httpx.Response(200, json={"ok": True, "channel": "C1", "ts": "111.222"})
    )
    client = SlackClient()

    posted = client.chat_post_message("xoxp-1", "C1", "hello")
    assert form_of(route) == {"channel": ["C1"], "text": ["hello"]}
    assert posted.ts == "111.222"

    client.chat_post_message("xoxp-1", "C1", "reply", thread_ts="100.000")
    assert form_of(route)["thread_ts"] == ["100.000"]


def test_conversations_open_returns_channel(respx_mock, api_base) -> None:
    route = respx_mock.post(f"{api_base}/conversations.open").mock(
        return_value=httpx.Response(200, json={"ok": True, "channel": {"id": "G42"}})
    )

    channel = SlackClient().conversations_open("xoxp-1", "U1,U2")

    assert channel is not None and channel.id == "G42"
    assert form_of(route) == {"users": ["U1,U2"]}


def test_users_list_parses_members(respx_mock, api_base) -> None:
    respx_mock.post(f"{api_base}/users.list").mock(
        return_value=httpx.Response(
            200,
            json={
                "ok": True,
                "members": [
                    {
                        "id": "U1",
                        "name": "jane",
                        "profile": {"display_name": "", "real_name": "Jane Doe"},
                    },
                    {"id": "U2"},
                ],
            },
        )
    )

    members = SlackClient().users_list("xoxp-1")

    assert [m.id for m in members] == ["U1", "U2"]
    assert members[0].profile.real_name == "Jane Doe"
    assert members[1].profile.email is None


@pytest.mark.parametrize("error", [{"code": "x"}, 42, ["a"]])
def test_non_string_error_is_still_api_error(respx_mock, api_base, error) -> None:
    respx_mock.post(f"{api_base}/chat.postMessage").mock(
        return_value=httpx.Response(200, json={"ok": False, "error": error})
    )

    with pytest.raises(ApiError) as exc_info:
        SlackClient().chat_post_message("xoxp-1", "C1", "hi")

    assert exc_info.value.code == "unknown_error"


def test_users_list_tolerates_member_without_id(respx_mock, api_base) -> None:
    respx_mock.post(f"{api_base}/users.list").mock(
        return_value=httpx.Response(
            200, json={"ok": True, "members": [{"id": "U1"}, {"name": "ghost"}]}
        )
    )

    members = SlackClient().users_list("xoxp-1")

    assert [m.id for m in members] == ["U1", None]
