import json
import logging

from pesotrack.core.logging import JsonFormatter, RequestContextFilter, owner_id_ctx, request_id_ctx


def _record(msg="hello"):
    return logging.LogRecord("pesotrack.test", logging.INFO, __file__, 1, msg, None, None)


def test_json_formatter_includes_request_context():
    rid = request_id_ctx.set("req-1")
    oid = owner_id_ctx.set("user1")
    try:
        record = _record()
        RequestContextFilter().filter(record)
        payload = json.loads(JsonFormatter().format(record))
    finally:
        owner_id_ctx.reset(oid)
        request_id_ctx.reset(rid)
    assert payload["message"] == "hello"
    assert payload["request_id"] == "req-1"
    assert payload["owner_id"] == "user1"
    assert payload["level"] == "INFO"


def test_filter_defaults_outside_request():
    record = _record()
    RequestContextFilter().filter(record)
    assert record.request_id == "-"
    assert record.owner_id == "-"


def test_each_response_gets_its_own_request_id(client):
    first = client.get("/health").headers["X-Request-ID"]
    second = client.get("/health").headers["X-Request-ID"]
    assert first != second


class _Collect(logging.Handler):
    def __init__(self):
        super().__init__()
        self.addFilter(RequestContextFilter())
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_access_line_carries_owner(client, headers):
    collector = _Collect()
    access = logging.getLogger("pesotrack.access")
    access.addHandler(collector)
    try:
        client.get("/expenses/", headers=headers)
        client.get("/health")
    finally:
        access.removeHandler(collector)
    owners = [(r.path, r.owner_id) for r in collector.records]
    assert owners == [("/expenses/", "user1"), ("/health", "-")]
    assert collector.records[0].status == 200
