import logging

import pytest

from endpoints.logs import log_action, log_error, logger_instance


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture()
def captured():
    handler = ListHandler()
    logger_instance.logger.addHandler(handler)
    yield handler.records
    logger_instance.logger.removeHandler(handler)


def test_log_action_carries_user_and_context(captured, make_user):
    user = make_user()
    log_action("group_created", user, "cid-1", {"group_id": "g1"})
    record = captured[-1]
    assert record.getMessage() == "group_created"
    assert record.user_id == user.id
    assert record.correlation_id == "cid-1"
    assert '"group_id": "g1"' in record.context


def test_log_error_includes_stack_trace(captured):
    try:
        raise ValueError("boom")
    except ValueError as e:
        log_error("send_message_failed", e)
    record = captured[-1]
    assert record.levelno == logging.ERROR
    assert record.user_id == "anonymous"
    assert '"error": "boom"' in record.context
    assert "stack_trace" in record.context


def test_request_correlation_id_is_echoed_from_header(captured, client, db_session, make_user, headers):
    u1, u2 = make_user(), make_user()
    h = {**headers(u1), "X-Correlation-ID": "trace-123"}
    client.post(f"/api/v1/messages/send/{u2.id}", json={"text": "hi"}, headers=h)
    assert any(r.getMessage() == "send_message" and r.correlation_id == "trace-123" for r in captured)


def test_root_reports_online_users(client, hub, fake_connection):
    hub.connect(fake_connection("u1"))
    hub.connect(fake_connection())
    assert client.get("/").json() == {"message": "Tripmate backend is running", "online_users": 1}
