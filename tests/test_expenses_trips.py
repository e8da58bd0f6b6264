from decimal import Decimal

from models.group import Group
from models.message import Message
from models.notification import Notification


def _group(db, *members):
    group = Group(name="Goa", created_by=members[0].id, members=list(members))
    db.add(group)
    db.commit()
    return group


def _expense(**overrides):
    body = {
        "title": "Dinner",
        "amount": 42.5,
        "category": "food",
        "date": "2024-06-01T19:00:00",
        "type": "group",
    }
    body.update(overrides)
    return body


def _trip(group_id, **overrides):
    body = {
        "title": "Beach week",
        "location": "Goa",
        "coordinates": [73.83, 15.49],
        "startDate": "2024-07-01T00:00:00",
        "endDate": "2024-07-08T00:00:00",
        "budget": 1200,
        "groupId": group_id,
    }
    body.update(overrides)
    return body


def test_group_expense_notifies_others_and_posts_system_message(client, db_session, hub, make_user, headers, fake_connection):
    u1, u2, u3 = make_user(), make_user(), make_user()
    group = _group(db_session, u1, u2, u3)
    room_conn = fake_connection(u2.id)
    hub.connect(room_conn)
    hub.join(room_conn, group.id)

    r = client.post("/api/v1/expenses", json=_expense(groupId=group.id), headers=headers(u1))

    assert r.status_code == 201
    assert r.json()["isGroupExpense"] is True
    records = db_session.query(Notification).all()
    assert {n.user_id for n in records} == {u2.id, u3.id}
    assert all(n.type == "expense" and n.title == "New Group Expense" for n in records)

    db_session.refresh(group)
    assert Decimal(str(group.total_expenses)) == Decimal("42.50")
    system = db_session.query(Message).filter(Message.group_id == group.id).one()
    assert system.type == "expense"
    assert system.text == "New expense added: Dinner - $42.50"
    assert system.meta["expenseId"] == r.json()["id"]

    pushed = room_conn.events("newGroupMessage")
    assert len(pushed) == 1
    assert pushed[0]["data"]["type"] == "expense"
    assert pushed[0]["data"]["metadata"]["amount"] == 42.5
    assert len(room_conn.events("notification")) == 1


def test_personal_expense_notifies_creator(client, db_session, make_user, headers):
    u1 = make_user()
    r = client.post("/api/v1/expenses", json=_expense(type="personal"), headers=headers(u1))
    assert r.status_code == 201
    record = db_session.query(Notification).one()
    assert (record.user_id, record.title) == (u1.id, "Expense Added")
    assert [e["id"] for e in client.get("/api/v1/expenses", headers=headers(u1)).json()] == [r.json()["id"]]


def test_expense_validation(client, db_session, make_user, headers):
    u1, outsider = make_user(), make_user()
    group = _group(db_session, u1)
    h = headers(u1)
    assert client.post("/api/v1/expenses", json=_expense(), headers=h).status_code == 422
    assert client.post("/api/v1/expenses", json=_expense(amount=0, groupId=group.id), headers=h).status_code == 422
    assert client.post("/api/v1/expenses", json=_expense(type="shared", groupId=group.id), headers=h).status_code == 422
    assert client.post("/api/v1/expenses", json=_expense(groupId=group.id), headers=headers(outsider)).status_code == 404
    assert db_session.query(Notification).count() == 0


def test_group_expense_listing_requires_membership(client, db_session, make_user, headers):
    u1, outsider = make_user(), make_user()
    group = _group(db_session, u1)
    client.post("/api/v1/expenses", json=_expense(groupId=group.id), headers=headers(u1))
    assert len(client.get(f"/api/v1/expenses?groupId={group.id}", headers=headers(u1)).json()) == 1
    assert client.get(f"/api/v1/expenses?groupId={group.id}", headers=headers(outsider)).status_code == 404


def test_trip_creation_notifies_other_members(client, db_session, hub, make_user, headers, fake_connection):
    u1, u2 = make_user(), make_user()
    group = _group(db_session, u1, u2)
    conn = fake_connection(u2.id)
    hub.connect(conn)

    r = client.post("/api/v1/trips", json=_trip(group.id), headers=headers(u1))

    assert r.status_code == 201
    assert r.json()["destination"] == "Goa"
    assert r.json()["status"] == "planning"
    record = db_session.query(Notification).one()
    assert (record.user_id, record.type, record.title) == (u2.id, "trip", "New Trip Created")
    assert conn.events("notification")[0]["data"]["message"] == 'A new trip "Beach week" was created in group "Goa".'
    # not joined to the room, so the system message is only stored
    assert conn.events("newGroupMessage") == []
    system = db_session.query(Message).filter(Message.group_id == group.id).one()
    assert system.type == "trip_update"
    assert system.meta["tripDetails"]["budget"] == 1200.0

    trips = client.get("/api/v1/trips", headers=headers(u2)).json()
    assert [t["id"] for t in trips] == [r.json()["id"]]


def test_trip_validation_and_permissions(client, db_session, make_user, headers):
    u1, outsider = make_user(), make_user()
    group = _group(db_session, u1)
    h = headers(u1)
    assert client.post("/api/v1/trips", json=_trip(group.id, coordinates=[1.0]), headers=h).status_code == 422
    assert client.post("/api/v1/trips", json=_trip(group.id, status="someday"), headers=h).status_code == 422
    assert client.post("/api/v1/trips", json=_trip(group.id, endDate="2024-06-01T00:00:00"), headers=h).status_code == 422
    assert client.post("/api/v1/trips", json=_trip("nope"), headers=h).status_code == 404
    assert client.post("/api/v1/trips", json=_trip(group.id), headers=headers(outsider)).status_code == 403
