"""Per-request handle that handlers use to read the body and write a response."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any, Optional, TypeVar

from werkzeug.wrappers import Request, Response

from service_template.dto import ValidationError

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}

T = TypeVar("T")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid character {name!r} looking for beginning of value")


_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


def _default(obj: Any) -> Any:
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    raise TypeError(f"cannot encode {type(obj).__name__} as JSON")


def _encode(obj: Any) -> str:
    text = json.dumps(obj, separators=(",", ":"), ensure_ascii=False, default=_default)
    for char, escaped in _ESCAPES.items():
        text = text.replace(char, escaped)
    return text


def _decode_first(text: str) -> Any:
    stripped = text.lstrip(" \t\r\n")
    if not stripped:
        raise ValidationError("EOF")
    try:
        value, _ = _DECODER.raw_decode(stripped)
    except ValueError as exc:
        raise ValidationError(f"invalid JSON: {exc}") from exc
    return value


class RequestContext:
    """Wraps the incoming request and the response being built for it."""

    def __init__(self, request: Optional[Request], response: Optional[Response] = None) -> None:
        self._request = request
        self._response = response if response is not None else Response()
        self._aborted = False

    @property
    def request(self) -> Optional[Request]:
        return self._request

    @property
    def response(self) -> Response:
        return self._response

    @property
    def aborted(self) -> bool:
        return self._aborted

    def json(self, status: int, obj: Any) -> None:
        """Write obj as the JSON body with the given status."""
        self._response.status_code = status
        self._response.set_data(_encode(obj))
        self._response.headers["Content-Type"] = JSON_CONTENT_TYPE

    def bind_json(self, model: type[T]) -> T:
        """Decode the body as JSON and bind it to model; raise ValidationError on failure."""
        if self._request is None:
            raise ValidationError("invalid request")
        data = _decode_first(self._request.get_data(as_text=True))
        return model.from_dict(data)

    def abort_with_status(self, status: int) -> None:
        """Stop handling the request and answer with the given status."""
        self._response.status_code = status
        self._aborted = True