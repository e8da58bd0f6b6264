from datetime import datetime

import pytest

from realtime.events import EventName, Scope, ScopeKind
from realtime.hub import RealtimeHub
from schemas.realtime import Location, LocationUpdate


def test_user_scope_offline_recipient_is_silently_dropped(fake_connection):
    hub = RealtimeHub()
    online = fake_connection("u1")
    hub.connect(online)
    assert hub.fanout.dispatch(EventName.NOTIFICATION, {"id": "n1"}, Scope.user("nobody")) == 0
    assert hub.fanout.dispatch(EventName.NOTIFICATION, {"id": "n1"}, Scope.user(None)) == 0
    assert online.events("notification") == []


def test_user_scope_targets_latest_connection(fake_connection):
    hub = RealtimeHub()
    old = fake_connection("alice")
    new = fake_connection("alice")
    hub.connect(old)
    hub.connect(new)
    hub.disconnect(old)
    hub.fanout.dispatch(EventName.NEW_MESSAGE, {"text": "hey"}, "user:alice")
    assert new.events("newMessage") == [{"event": "newMessage", "data": {"text": "hey"}}]
    assert old.events("newMessage") == []


def test_broken_recipient_does_not_stop_broadcast(fake_connection):
    hub = RealtimeHub()
    first = fake_connection("u1")
    broken = fake_connection("u2", fail=True)
    last = fake_connection("u3")
    # connect() itself broadcasts; the broken socket must not break it either
    for conn in (first, broken, last):
        hub.connect(conn)

    delivered = hub.fanout.dispatch(EventName.LOCATION_UPDATE, {"userId": "u1"}, Scope.broadcast())

    assert delivered == 2
    assert first.events("locationUpdate") and last.events("locationUpdate")


def test_broadcast_includes_anonymous_connections(fake_connection):
    hub = RealtimeHub()
    anon = fake_connection()
    hub.connect(anon)
    assert hub.fanout.dispatch(EventName.LOCATION_UPDATE, {}, Scope.broadcast()) == 1
    assert hub.fanout.dispatch(EventName.NOTIFICATION, {}, Scope.user(None)) == 0


def test_pydantic_payload_is_json_encoded_with_aliases(fake_connection):
    hub = RealtimeHub()
    conn = fake_connection("u1")
    hub.connect(conn)
    ts = datetime(2024, 5, 1, 12, 30)
    update = LocationUpdate(user_id="u1", location=Location(coordinates=[2.35, 48.85], address="Paris"), timestamp=ts)

    hub.fanout.dispatch(EventName.LOCATION_UPDATE, update, Scope.broadcast())

    frame = conn.events("locationUpdate")[0]
    assert frame["data"] == {
        "userId": "u1",
        "location": {"coordinates": [2.35, 48.85], "address": "Paris"},
        "timestamp": "2024-05-01T12:30:00",
    }


def test_unknown_event_name_is_rejected():
    hub = RealtimeHub()
    with pytest.raises(ValueError):
        hub.fanout.dispatch("tripUpdate", {}, Scope.broadcast())


@pytest.mark.parametrize("raw,kind,target", [
    ("user:abc", ScopeKind.USER, "abc"),
    ("room:g1", ScopeKind.ROOM, "g1"),
    ("broadcast", ScopeKind.BROADCAST, None),
])
def test_scope_parse(raw, kind, target):
    scope = Scope.parse(raw)
    assert scope.kind is kind
    assert scope.target == target
    assert str(scope) == raw


@pytest.mark.parametrize("raw", ["everyone", "group:g1", "user"])
def test_scope_parse_rejects_garbage(raw):
    with pytest.raises(ValueError):
        Scope.parse(raw)
