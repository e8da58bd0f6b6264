from decimal import Decimal

from models.group import Group


def _group(db, *members):
    group = Group(name="Goa", created_by=members[0].id, members=list(members))
    db.add(group)
    db.commit()
    return group


def _add(client, user, headers, **overrides):
    body = {
        "title": "Dinner",
        "amount": 100,
        "category": "food",
        "date": "2024-06-01T19:00:00",
        "type": "personal",
    }
    body.update(overrides)
    r = client.post("/api/v1/expenses", json=body, headers=headers(user))
    assert r.status_code == 201
    return r.json()


def test_owner_updates_and_deletes_group_expense(client, db_session, make_user, headers):
    u1, u2, outsider = make_user(), make_user(), make_user()
    group = _group(db_session, u1, u2)
    expense = _add(client, u1, headers, type="group", groupId=group.id, amount=42.5)
    url = f"/api/v1/expenses/{expense['id']}"

    assert client.get(url, headers=headers(u2)).json()["title"] == "Dinner"
    assert client.get(url, headers=headers(outsider)).status_code == 403
    assert client.get("/api/v1/expenses/missing", headers=headers(u1)).status_code == 404

    r = client.put(url, json={"amount": 50}, headers=headers(u2))
    assert r.status_code == 403
    assert r.json()["detail"] == "Not authorized to update this expense"

    r = client.put(url, json={"amount": 50, "title": "Dinner out"}, headers=headers(u1))
    assert r.status_code == 200
    assert (r.json()["title"], r.json()["amount"]) == ("Dinner out", 50.0)
    db_session.refresh(group)
    assert Decimal(str(group.total_expenses)) == Decimal("50.00")

    assert client.delete(url, headers=headers(u2)).status_code == 403
    r = client.delete(url, headers=headers(u1))
    assert r.json() == {"message": "Expense deleted successfully"}
    db_session.refresh(group)
    assert Decimal(str(group.total_expenses)) == Decimal("0.00")
    assert client.get(url, headers=headers(u1)).status_code == 404


def test_split_is_bounded_by_amount_and_visible_to_participants(client, make_user, headers):
    u1, u2, u3 = make_user(), make_user(), make_user()
    expense = _add(client, u1, headers)
    url = f"/api/v1/expenses/{expense['id']}/split"

    r = client.put(url, json={"sharedWith": [{"userId": u2.id, "amount": 60}, {"userId": u3.id, "amount": 50}]}, headers=headers(u1))
    assert r.status_code == 400
    assert r.json()["detail"] == "Total shared amount cannot exceed the expense amount"
    assert client.put(url, json={"sharedWith": [{"userId": "ghost", "amount": 5}]}, headers=headers(u1)).status_code == 404
    assert client.put(url, json={"sharedWith": []}, headers=headers(u2)).status_code == 403

    r = client.put(url, json={"sharedWith": [{"userId": u2.id, "amount": 60}, {"userId": u3.id, "amount": 30}]}, headers=headers(u1))
    assert r.status_code == 200
    assert {(s["userId"], s["amount"], s["status"]) for s in r.json()["sharedWith"]} == {
        (u2.id, 60.0, "pending"),
        (u3.id, 30.0, "pending"),
    }
    assert [e["id"] for e in client.get("/api/v1/expenses", headers=headers(u2)).json()] == [expense["id"]]
    assert client.get(f"/api/v1/expenses/{expense['id']}", headers=headers(u3)).status_code == 200

    # the existing split no longer fits a smaller amount
    r = client.put(f"/api/v1/expenses/{expense['id']}", json={"amount": 80}, headers=headers(u1))
    assert r.status_code == 400

    # resplitting replaces the previous shares
    r = client.put(url, json={"sharedWith": [{"userId": u2.id, "amount": 10, "status": "paid"}]}, headers=headers(u1))
    assert [(s["userId"], s["status"]) for s in r.json()["sharedWith"]] == [(u2.id, "paid")]
    assert client.get("/api/v1/expenses", headers=headers(u3)).json() == []


def test_group_expense_split_stays_within_the_group(client, db_session, make_user, headers):
    u1, u2, outsider = make_user(), make_user(), make_user()
    group = _group(db_session, u1, u2)
    expense = _add(client, u1, headers, type="group", groupId=group.id)
    url = f"/api/v1/expenses/{expense['id']}/split"

    r = client.put(url, json={"sharedWith": [{"userId": outsider.id, "amount": 10}]}, headers=headers(u1))
    assert r.status_code == 400
    assert r.json()["detail"] == "All shares must belong to group members"
    assert client.put(url, json={"sharedWith": [{"userId": u2.id, "amount": 50}]}, headers=headers(u1)).status_code == 200


def test_status_update(client, make_user, headers):
    u1, u2 = make_user(), make_user()
    expense = _add(client, u1, headers)
    url = f"/api/v1/expenses/{expense['id']}/status"

    assert expense["status"] == "pending"
    assert client.put(url, json={"status": "lost"}, headers=headers(u1)).status_code == 422
    assert client.put(url, json={"status": "paid"}, headers=headers(u2)).status_code == 403
    r = client.put(url, json={"status": "paid"}, headers=headers(u1))
    assert r.status_code == 200
    assert r.json()["status"] == "paid"


def test_group_expense_route_lists_only_group_expenses(client, db_session, make_user, headers):
    u1, outsider = make_user(), make_user()
    group = _group(db_session, u1)
    first = _add(client, u1, headers, type="group", groupId=group.id, title="Taxi")
    second = _add(client, u1, headers, type="group", groupId=group.id, title="Hotel")
    _add(client, u1, headers, title="Souvenir")

    r = client.get(f"/api/v1/expenses/group/{group.id}", headers=headers(u1))
    assert r.status_code == 200
    assert {e["id"] for e in r.json()} == {first["id"], second["id"]}
    assert client.get(f"/api/v1/expenses/group/{group.id}", headers=headers(outsider)).status_code == 404
    assert client.get("/api/v1/expenses/group/nope", headers=headers(u1)).status_code == 404
