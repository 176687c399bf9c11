"""Structured JSON logging with request and trace identifiers."""

from __future__ import annotations

import inspect
import json
import os
import sys
import traceback
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any, Optional, TextIO

FIELD_SERVICE = "service"
FIELD_REQUEST_ID = "request-id"
FIELD_TRACE_ID = "trace-id"
FIELD_MESSAGE = "message"
FIELD_SEVERITY = "severity"
FIELD_ERROR = "error"
FIELD_DURATION = "duration"
FIELD_METHOD = "method"
FIELD_PATH = "path"
FIELD_STATUS_CODE = "status_code"
FIELD_USER_ID = "user_id"
FIELD_USER_AGENT = "user_agent"
FIELD_IP = "ip"
FIELD_TIMESTAMP = "timestamp"
FIELD_CALLER = "caller"
FIELD_STACKTRACE = "stacktrace"
FIELD_RESPONSE_SIZE = "response_size"

DEBUG_KEY = "debug"
INFO_KEY = "info"
WARN_KEY = "warn"
ERROR_KEY = "error"
LOG_LEVEL_KEY = "LOG_LEVEL"

SERVICE_NAME = "service-template"

_REQUEST_ID_KEYS = ("request-id", "X-Request-ID", "Request-ID")
_TRACE_ID_KEYS = ("trace-id", "X-Trace-ID", "Trace-ID")


class _Level(IntEnum):
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40
    FATAL = 50

    @property
    def label(self) -> str:
        return self.name.lower()


_LEVELS_BY_KEY = {
    DEBUG_KEY: _Level.DEBUG,
    INFO_KEY: _Level.INFO,
    WARN_KEY: _Level.WARN,
    ERROR_KEY: _Level.ERROR,
}


@dataclass(frozen=True)
class Field:
    """A key-value pair attached to a log entry."""

    key: str
    value: Any


def _level_from_env() -> _Level:
    return _LEVELS_BY_KEY.get(os.environ.get(LOG_LEVEL_KEY, "").lower(), _Level.INFO)


def _context_id(ctx: Optional[Mapping], keys: tuple[str, ...]) -> str:
    if ctx is None:
        return ""
    for key in keys:
        value = ctx.get(key)
        if isinstance(value, str):
            return value
    return ""


def _convert(field: Field) -> Field:
    value = field.value
    if isinstance(value, BaseException):
        return Field(FIELD_ERROR, str(value))
    if value is None or isinstance(value, (str, int, float, bool)):
        return field
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return Field(field.key, repr(value))
    return field


def _timestamp() -> str:
    now = datetime.now().astimezone()
    base = now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}"
    if not now.utcoffset():
        return base + "Z"
    return base + now.strftime("%z")


def _caller_frame():
    frame = inspect.currentframe()
    while frame is not None and frame.f_code.co_filename == __file__:
        frame = frame.f_back
    return frame


def _describe(frame) -> str:
    if frame is None:
        return "unknown"
    parts = frame.f_code.co_filename.replace("\\", "/").split("/")
    return f"{'/'.join(parts[-2:])}:{frame.f_lineno}"


class StructuredLogger:
    """Writes one JSON object per log entry to a stream."""

    def __init__(
        self,
        service_name: str,
        stream: Optional[TextIO] = None,
        fields: tuple[Field, ...] = (),
    ) -> None:
        self.service_name = service_name
        self._stream = stream
        self._level = _level_from_env()
        self._fields = list(fields)

    @property
    def _out(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def info(self, ctx: Optional[Mapping], message: str, *args: Field) -> None:
        self._log(_Level.INFO, ctx, message, args)

    def infof(self, ctx: Optional[Mapping], fmt: str, *args: Any) -> None:
        self._log(_Level.INFO, ctx, _format(fmt, args), ())

    def warn(self, ctx: Optional[Mapping], message: str, *args: Field) -> None:
        self._log(_Level.WARN, ctx, message, args)

    def warnf(self, ctx: Optional[Mapping], fmt: str, *args: Any) -> None:
        self._log(_Level.WARN, ctx, _format(fmt, args), ())

    def error(self, ctx: Optional[Mapping], message: str, *args: Field) -> None:
        self._log(_Level.ERROR, ctx, message, args)

    def errorf(self, ctx: Optional[Mapping], fmt: str, *args: Any) -> None:
        self._log(_Level.ERROR, ctx, _format(fmt, args), ())

    def debug(self, ctx: Optional[Mapping], message: str, *args: Field) -> None:
        self._log(_Level.DEBUG, ctx, message, args)

    def debugf(self, ctx: Optional[Mapping], fmt: str, *args: Any) -> None:
        self._log(_Level.DEBUG, ctx, _format(fmt, args), ())

    def fatal(self, ctx: Optional[Mapping], message: str, *args: Field) -> None:
        """Log the message and exit the process with status 1."""
        self._log(_Level.FATAL, ctx, message, args)

    def fatalf(self, ctx: Optional[Mapping], fmt: str, *args: Any) -> None:
        """Log the formatted message and exit the process with status 1."""
        self._log(_Level.FATAL, ctx, _format(fmt, args), ())

    def build_fields(self, ctx: Optional[Mapping], *args: Field) -> list[Field]:
        """Combine the logger's own fields, context identifiers and the given fields."""
        fields = [_convert(f) for f in self._fields]
        request_id = _context_id(ctx, _REQUEST_ID_KEYS)
        if request_id:
            fields.append(Field(FIELD_REQUEST_ID, request_id))
        trace_id = _context_id(ctx, _TRACE_ID_KEYS)
        if trace_id:
            fields.append(Field(FIELD_TRACE_ID, trace_id))
        fields.extend(_convert(f) for f in args)
        return fields

    def sync(self) -> None:
        """Flush buffered entries."""
        self._out.flush()

    def _log(self, level: _Level, ctx: Optional[Mapping], message: str, fields) -> None:
        if level < self._level:
            return
        frame = _caller_frame()
        record: dict[str, Any] = {
            FIELD_SEVERITY: level.label,
            FIELD_TIMESTAMP: _timestamp(),
            FIELD_CALLER: _describe(frame),
            FIELD_MESSAGE: message,
        }
        if level >= _Level.ERROR and frame is not None:
            record[FIELD_STACKTRACE] = "".join(traceback.format_stack(frame))
        record[FIELD_SERVICE] = self.service_name
        for field in self.build_fields(ctx, *fields):
            record[field.key] = field.value
        out = self._out
        out.write(json.dumps(record, default=str, ensure_ascii=False) + "\n")
        if level is _Level.FATAL:
            out.flush()
            raise SystemExit(1)


def _format(fmt: str, args: tuple) -> str:
    return fmt % args if args else fmt


def new_logger(service_name: str, stream: Optional[TextIO] = None) -> StructuredLogger:
    """Create a logger whose level comes from the LOG_LEVEL variable."""
    return StructuredLogger(service_name, stream)


def init_global_logger() -> StructuredLogger:
    """Prepare and return the service-wide logger."""
    return get_global_logger()


def get_global_logger() -> StructuredLogger:
    """Return a fresh logger for the service, writing to standard error."""
    return new_logger(SERVICE_NAME)


def info(ctx: Optional[Mapping], message: str, *args: Field) -> None:
    get_global_logger().info(ctx, message, *args)


def warn(ctx: Optional[Mapping], message: str, *args: Field) -> None:
    get_global_logger().warn(ctx, message, *args)


def error(ctx: Optional[Mapping], message: str, *args: Field) -> None:
    get_global_logger().error(ctx, message, *args)


def debug(ctx: Optional[Mapping], message: str, *args: Field) -> None:
    get_global_logger().debug(ctx, message, *args)


def fatal(ctx: Optional[Mapping], message: str, *args: Field) -> None:
    get_global_logger().fatal(ctx, message, *args)


def infof(ctx: Optional[Mapping], fmt: str, *args: Any) -> None:
    get_global_logger().infof(ctx, fmt, *args)


def warnf(ctx: Optional[Mapping], fmt: str, *args: Any) -> None:
    get_global_logger().warnf(ctx, fmt, *args)


def errorf(ctx: Optional[Mapping], fmt: str, *args: Any) -> None:
    get_global_logger().errorf(ctx, fmt, *args)


def debugf(ctx: Optional[Mapping], fmt: str, *args: Any) -> None:
    get_global_logger().debugf(ctx, fmt, *args)


def fatalf(ctx: Optional[Mapping], fmt: str, *args: Any) -> None:
    get_global_logger().fatalf(ctx, fmt, *args)