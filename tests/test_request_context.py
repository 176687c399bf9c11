import json

import pytest
from werkzeug.test import EnvironBuilder

from service_template.dto import CheckLimitRequest, CheckLimitResponse, ValidationError
from service_template.request_context import JSON_CONTENT_TYPE, RequestContext


def _request(body=b"", method="POST"):
    return EnvironBuilder(
        method=method, path="/", data=body, content_type="application/json"
    ).get_request()


def test_json_writes_status_and_body():
    ctx = RequestContext(_request(method="GET"))
    ctx.json(200, {"ok": True})
    assert ctx.response.status_code == 200
    assert json.loads(ctx.response.get_data(as_text=True)) == {"ok": True}


def test_json_sets_content_type():
    ctx = RequestContext(_request())
    ctx.json(201, {"a": 1})
    assert ctx.response.headers["Content-Type"] == JSON_CONTENT_TYPE


def test_json_uses_to_dict():
    ctx = RequestContext(_request())
    ctx.json(200, CheckLimitResponse(user_id=7, limit_available=3))
    assert ctx.response.get_data(as_text=True) == '{"userID":7,"limitAvailable":3}'


def test_json_escapes_html_characters():
    ctx = RequestContext(_request())
    ctx.json(200, {"v": "<a&b>"})
    assert ctx.response.get_data(as_text=True) == '{"v":"\\u003ca\\u0026b\\u003e"}'


def test_abort_with_status():
    ctx = RequestContext(_request())
    ctx.abort_with_status(204)
    assert ctx.response.status_code == 204
    assert ctx.aborted is True


def test_not_aborted_initially():
    ctx = RequestContext(_request())
    assert ctx.aborted is False
    assert ctx.response.status_code == 200


def test_request_is_wrapped():
    req = _request()
    assert RequestContext(req).request is req


def test_bind_json_valid():
    ctx = RequestContext(_request(b'{"userID": 123}'))
    assert ctx.bind_json(CheckLimitRequest) == CheckLimitRequest(user_id=123)


def test_bind_json_empty_body():
    ctx = RequestContext(_request(b""))
    with pytest.raises(ValidationError, match="EOF"):
        ctx.bind_json(CheckLimitRequest)


def test_bind_json_malformed():
    ctx = RequestContext(_request(b'{"userID": 123,}'))
    with pytest.raises(ValidationError, match="invalid JSON"):
        ctx.bind_json(CheckLimitRequest)


def test_bind_json_rejects_nan():
    ctx = RequestContext(_request(b'{"userID": NaN}'))
    with pytest.raises(ValidationError):
        ctx.bind_json(CheckLimitRequest)


def test_bind_json_without_request():
    with pytest.raises(ValidationError, match="invalid request"):
        RequestContext(None).bind_json(CheckLimitRequest)


def test_bind_json_validation_failure():
    ctx = RequestContext(_request(b"{}"))
    with pytest.raises(ValidationError, match="required"):
        ctx.bind_json(CheckLimitRequest)