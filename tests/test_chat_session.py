from unittest.mock import AsyncMock, Mock

import pytest

from relaychat.chat.session import SERVER_BUFFER, ChannelState, ChatSession, is_channel
from relaychat.config.model import ClientConfig
from relaychat.errors.internal import InvalidOperationError
from relaychat.irc.dispatcher import EventDispatcher
from relaychat.irc.events import (
    ChatMessage,
    Connected,
    ConnectionFailure,
    Disconnected,
    Joined,
    NickChanged,
    Parted,
    ServerText,
    TopicReceived,
    UserListReceived,
)


def make_connection(channels=("#room", "#other")) -> Mock:
    conn = Mock()
    conn.config = ClientConfig(host="irc.example.net", nickname="me", channels=list(channels))
    conn.nickname = "me"
    conn.dispatcher = EventDispatcher()
    conn.set_identity = AsyncMock()
    conn.join = AsyncMock()
    return conn


@pytest.mark.asyncio
async def test_identity_registered_on_connected():
    conn = make_connection()
    ChatSession(conn)
    await conn.dispatcher.publish(Connected("irc.example.net", 6667))
    conn.set_identity.assert_awaited_once_with("me")
    conn.join.assert_not_awaited()


@pytest.mark.asyncio
async def test_autojoin_only_after_first_welcome():
    conn = make_connection()
    session = ChatSession(conn)
    await conn.dispatcher.publish(ServerText("372 me - motd", code=372))
    conn.join.assert_not_awaited()

    await conn.dispatcher.publish(ServerText("me Welcome", code=1))
    await conn.dispatcher.publish(ServerText("me Welcome", code=1))
    assert [c.args for c in conn.join.await_args_list] == [("#room",), ("#other",)]
    assert session.welcomed


@pytest.mark.asyncio
async def test_autojoin_stops_after_rejected_send():
    conn = make_connection()
    conn.join.side_effect = InvalidOperationError("Cannot send Join while disconnected")
    ChatSession(conn)
    await conn.dispatcher.publish(ServerText("me Welcome", code=1))
    assert conn.join.await_count == 1


@pytest.mark.asyncio
async def test_channel_membership_follows_server_events():
    conn = make_connection()
    session = ChatSession(conn)
    publish = conn.dispatcher.publish

    await publish(Joined("#room", "bob"))
    assert session.channels == {}

    await publish(Joined("#room", "me"))
    await publish(UserListReceived("#room", ("me", "alice"), ("me", "@alice")))
    await publish(UserListReceived("#room", ("carol", "alice"), ("+carol", "@alice")))
    await publish(Joined("#room", "dave"))
    await publish(TopicReceived("#room", "Welcome topic"))
    assert session.users("#room") == ["me", "alice", "carol", "dave"]
    assert session.topic("#room") == "Welcome topic"

    await publish(Parted("#room", "alice"))
    await publish(NickChanged("carol", "caroline"))
    assert session.users("#room") == ["me", "caroline", "dave"]

    await publish(Parted("#room", "me"))
    assert "#room" not in session.channels
    assert session.users("#room") == []
    assert session.topic("#room") == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("event", [Disconnected(), ConnectionFailure("reset")])
async def test_connection_end_resets_state(event):
    conn = make_connection()
    session = ChatSession(conn)
    await conn.dispatcher.publish(ServerText("me Welcome", code=1))
    await conn.dispatcher.publish(Joined("#room", "me"))
    await conn.dispatcher.publish(event)
    assert session.channels == {}
    assert not session.welcomed


def test_route_message():
    conn = make_connection()
    session = ChatSession(conn)
    assert session.route_message(ChatMessage("alice", "#room", "hi")) == "#room"
    assert session.route_message(ChatMessage("alice", "me", "hi")) == "alice"
    assert session.route_message(ChatMessage("srv", "*", "hi")) == SERVER_BUFFER


@pytest.mark.asyncio
async def test_detach_stops_tracking():
    conn = make_connection()
    session = ChatSession(conn)
    session.detach()
    await conn.dispatcher.publish(Joined("#room", "me"))
    assert session.channels == {}


def test_channel_state_helpers():
    state = ChannelState("#room")
    state.add_user("a")
    state.add_user("a")
    state.add_user("")
    state.rename_user("a", "b")
    state.remove_user("missing")
    assert state.users == ["b"]


def test_is_channel():
    assert is_channel("#room")
    assert is_channel("&local")
    assert not is_channel("alice")
