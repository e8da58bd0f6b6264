from realtime.events import EventName, Scope
from realtime.hub import RealtimeHub
from realtime.rooms import RoomManager


def test_join_is_idempotent_and_leave_unknown_is_noop(fake_connection):
    rooms = RoomManager()
    conn = fake_connection("u1")
    rooms.join(conn, "g1")
    rooms.join(conn, "g1")
    assert rooms.members("g1") == [conn]
    rooms.leave(conn, "never-joined")
    rooms.leave(conn, "g1")
    rooms.leave(conn, "g1")
    assert rooms.members("g1") == []
    assert conn.rooms == set()


def test_empty_rooms_are_dropped(fake_connection):
    rooms = RoomManager()
    a = fake_connection("a")
    b = fake_connection("b")
    rooms.join(a, "g1")
    rooms.join(b, "g1")
    rooms.join(a, "g2")
    rooms.leave_all(a)
    assert rooms.rooms() == ["g1"]
    assert rooms.members("g1") == [b]


def test_room_dispatch_reaches_members_only(fake_connection):
    hub = RealtimeHub()
    h1 = fake_connection("u1")
    h2 = fake_connection("u2")
    hub.connect(h1)
    hub.connect(h2)
    hub.join(h1, "g1")
    hub.join(h2, "g2")

    delivered = hub.fanout.dispatch(EventName.NEW_GROUP_MESSAGE, {"text": "hi"}, Scope.room("g1"))

    assert delivered == 1
    assert h1.events("newGroupMessage") == [{"event": "newGroupMessage", "data": {"text": "hi"}}]
    assert h2.events("newGroupMessage") == []


def test_members_snapshot_is_not_affected_by_later_joins(fake_connection):
    rooms = RoomManager()
    a = fake_connection("a")
    rooms.join(a, "g1")
    snapshot = rooms.members("g1")
    rooms.join(fake_connection("b"), "g1")
    assert snapshot == [a]
