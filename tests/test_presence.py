import pytest

from realtime.presence import PresenceRegistry
from realtime.connection import Connection
from realtime.hub import RealtimeHub


def test_lookup_returns_registered_connection(fake_connection):
    registry = PresenceRegistry()
    conn = fake_connection("alice")
    assert registry.on_connect("alice", conn) is True
    assert registry.lookup("alice") is conn
    assert registry.online_user_ids() == ["alice"]


def test_anonymous_connection_is_not_registered(fake_connection):
    registry = PresenceRegistry()
    conn = fake_connection()
    assert registry.on_connect(None, conn) is False
    assert registry.on_connect("", conn) is False
    assert registry.online_user_ids() == []
    assert registry.lookup("") is None
    assert registry.on_disconnect(conn) is None


def test_stale_handle_disconnect_keeps_newer_mapping(fake_connection):
    registry = PresenceRegistry()
    conn_a = fake_connection("alice")
    conn_b = fake_connection("alice")
    registry.on_connect("alice", conn_a)
    registry.on_connect("alice", conn_b)
    assert registry.on_disconnect(conn_a) is None
    assert registry.lookup("alice") is conn_b
    assert registry.on_disconnect(conn_b) == "alice"
    assert registry.lookup("alice") is None


def test_online_users_broadcast_after_disconnect(fake_connection):
    hub = RealtimeHub()
    h1 = fake_connection("u1")
    h2 = fake_connection("u2")
    hub.connect(h1)
    hub.connect(h2)
    hub.disconnect(h1)
    last = h2.events("getOnlineUsers")[-1]
    assert last["data"] == ["u2"]
    # h1 is already gone when the departure is announced
    assert h1.events("getOnlineUsers")[-1]["data"] == ["u1", "u2"]


def test_every_connect_broadcasts_full_online_set(fake_connection):
    hub = RealtimeHub()
    anon = fake_connection()
    hub.connect(anon)
    assert anon.events("getOnlineUsers")[-1]["data"] == []
    h1 = fake_connection("u1")
    hub.connect(h1)
    assert anon.events("getOnlineUsers")[-1]["data"] == ["u1"]
    assert h1.events("getOnlineUsers")[-1]["data"] == ["u1"]


def test_disconnect_leaves_rooms_and_is_idempotent(fake_connection):
    hub = RealtimeHub()
    h1 = fake_connection("u1")
    hub.connect(h1)
    hub.join(h1, "g1")
    hub.disconnect(h1)
    assert hub.rooms.members("g1") == []
    assert h1.rooms == set()
    sent_before = len(h1.sent)
    hub.disconnect(h1)
    assert len(h1.sent) == sent_before
    assert hub.open_connections() == []


def test_connection_base_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Connection("alice")
