from models.notification import Notification


def test_friend_request_lifecycle(client, db_session, hub, make_user, headers, fake_connection):
    ana, ben = make_user("Ana"), make_user("Ben")
    conn = fake_connection(ben.id)
    hub.connect(conn)

    r = client.post("/api/v1/friends/requests", json={"to": ben.id}, headers=headers(ana))
    assert r.status_code == 200
    assert client.post("/api/v1/friends/requests", json={"to": ben.id}, headers=headers(ana)).status_code == 400

    pending = client.get("/api/v1/friends/requests", headers=headers(ben)).json()
    assert len(pending) == 1
    assert pending[0]["from"]["id"] == ana.id
    assert pending[0]["status"] == "pending"

    listed = client.get("/api/v1/notifications", headers=headers(ben)).json()
    assert [n["type"] for n in listed] == ["friend_request"]

    r = client.post("/api/v1/friends/requests/accept", json={"from": ana.id}, headers=headers(ben))
    assert r.status_code == 200
    assert [f["id"] for f in client.get("/api/v1/friends", headers=headers(ana)).json()] == [ben.id]
    assert [f["id"] for f in client.get("/api/v1/friends", headers=headers(ben)).json()] == [ana.id]
    assert client.get("/api/v1/friends/requests", headers=headers(ben)).json() == []

    # requests never materialize notifications or live events
    assert db_session.query(Notification).count() == 0
    assert conn.events("notification") == []


def test_friend_request_errors(client, make_user, headers):
    ana = make_user()
    h = headers(ana)
    assert client.post("/api/v1/friends/requests", json={"to": ana.id}, headers=h).status_code == 400
    assert client.post("/api/v1/friends/requests", json={"to": "ghost"}, headers=h).status_code == 404
    assert client.post("/api/v1/friends/requests/accept", json={"from": "ghost"}, headers=h).status_code == 404


def test_search_excludes_self_and_friends(client, make_user, headers):
    ana, ben, bella = make_user("Ana"), make_user("Ben Stone"), make_user("Bella Ray")
    client.post("/api/v1/friends/requests", json={"to": ben.id}, headers=headers(ana))
    client.post("/api/v1/friends/requests/accept", json={"from": ana.id}, headers=headers(ben))

    found = client.get("/api/v1/users/search?name=be", headers=headers(ana)).json()
    assert [u["fullName"] for u in found] == ["Bella Ray"]
