import json
import uuid

import pytest
from flask import Flask
from werkzeug.datastructures import Headers

from service_template.middleware import (
    X_REQUEST_ID,
    X_TRACE_ID,
    create_log_context,
    fetch_request_and_trace_ids,
    get_log_context,
    install_logging_middleware,
)


@pytest.fixture
def app(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    application = Flask(__name__)
    install_logging_middleware(application)

    @application.get("/ping")
    def ping():
        return "pong"

    @application.get("/ctx")
    def ctx():
        return dict(get_log_context())

    return application


def _log_lines(text):
    records = []
    for line in text.splitlines():
        try:
            records.append(json.loads(line))
        except ValueError:
            continue
    return records


def test_sets_request_id_header(app):
    resp = app.test_client().get("/ping")
    assert uuid.UUID(resp.headers[X_REQUEST_ID]).version == 4


def test_sets_trace_id_header(app):
    resp = app.test_client().get("/ping")
    assert uuid.UUID(resp.headers[X_TRACE_ID]).version == 4


def test_response_status_ok(app):
    resp = app.test_client().get("/ping")
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "pong"


def test_echoes_given_ids(app):
    resp = app.test_client().get("/ping", headers={X_REQUEST_ID: "rid", X_TRACE_ID: "tid"})
    assert resp.headers[X_REQUEST_ID] == "rid"
    assert resp.headers[X_TRACE_ID] == "tid"


def test_handler_sees_log_context(app):
    resp = app.test_client().get("/ctx")
    assert resp.get_json() == {
        "request-id": resp.headers[X_REQUEST_ID],
        "trace-id": resp.headers[X_TRACE_ID],
    }


def test_logs_start_and_completion(app, capsys):
    capsys.readouterr()
    app.test_client().get("/ping", headers={X_REQUEST_ID: "r1"})
    records = _log_lines(capsys.readouterr().err)
    messages = [r["message"] for r in records]
    assert messages == ["Request started", "Request completed"]
    completed = records[1]
    assert completed["status_code"] == 200
    assert completed["method"] == "GET"
    assert completed["path"] == "/ping"
    assert completed["request-id"] == "r1"


def test_fetch_generates_request_id_when_missing():
    rid, _ = fetch_request_and_trace_ids(Headers())
    assert uuid.UUID(rid).version == 4


def test_fetch_generates_trace_id_when_missing():
    rid, tid = fetch_request_and_trace_ids(Headers())
    assert uuid.UUID(tid).version == 4
    assert rid != tid


def test_fetch_uses_headers_case_insensitively():
    headers = Headers({"x-request-id": "r", "x-trace-id": "t"})
    assert fetch_request_and_trace_ids(headers) == ("r", "t")


def test_fetch_replaces_empty_header():
    rid, tid = fetch_request_and_trace_ids(Headers({X_REQUEST_ID: "", X_TRACE_ID: "t"}))
    assert uuid.UUID(rid).version == 4
    assert tid == "t"


def test_create_log_context_holds_ids():
    assert create_log_context("r", "t") == {"request-id": "r", "trace-id": "t"}


def test_get_log_context_outside_app_is_empty():
    assert dict(get_log_context()) == {}


def test_get_log_context_without_middleware_is_empty():
    with Flask(__name__).app_context():
        assert dict(get_log_context()) == {}