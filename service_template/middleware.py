"""Request logging middleware that tags every request with request and trace ids."""

from __future__ import annotations

import time
import uuid
from collections.abc import Mapping
from typing import Any

from flask import Flask, Response, g, has_app_context, request

from service_template import logger
from service_template.logger import Field

X_REQUEST_ID = "X-Request-ID"
X_TRACE_ID = "X-Trace-ID"
REQUEST_ID = "request-id"
TRACE_ID = "trace-id"

_LOG_CONTEXT_ATTR = "log_context"
_IDS_ATTR = "log_request_ids"
_START_ATTR = "log_started"


def install_logging_middleware(app: Flask) -> Flask:
    """Log the start and end of every request and echo the ids in the response."""
    app.before_request(_start_request)
    app.after_request(_finish_request)
    return app


def fetch_request_and_trace_ids(headers: Any) -> tuple[str, str]:
    """Take the ids from the request headers, generating any that are missing."""
    request_id = headers.get(X_REQUEST_ID) or str(uuid.uuid4())
    trace_id = headers.get(X_TRACE_ID) or str(uuid.uuid4())
    return request_id, trace_id


def create_log_context(request_id: str, trace_id: str) -> dict[str, str]:
    """Build the logging context that carries both ids."""
    return {REQUEST_ID: request_id, TRACE_ID: trace_id}


def get_log_context() -> Mapping[str, str]:
    """Return the logging context of the current request, or an empty one."""
    if has_app_context():
        ctx = g.get(_LOG_CONTEXT_ATTR)
        if isinstance(ctx, Mapping):
            return ctx
    return {}


def _client_ip() -> str:
    route = request.access_route
    if route:
        return route[0]
    return request.remote_addr or ""


def _start_request() -> None:
    request_id, trace_id = fetch_request_and_trace_ids(request.headers)
    ctx = create_log_context(request_id, trace_id)
    setattr(g, _LOG_CONTEXT_ATTR, ctx)
    setattr(g, _IDS_ATTR, (request_id, trace_id))
    setattr(g, _START_ATTR, time.perf_counter())

    logger.get_global_logger().info(
        ctx,
        "Request started",
        Field(logger.FIELD_REQUEST_ID, request_id),
        Field(logger.FIELD_TRACE_ID, trace_id),
        Field(logger.FIELD_METHOD, request.method),
        Field(logger.FIELD_PATH, request.path),
        Field(logger.FIELD_IP, _client_ip()),
        Field(logger.FIELD_USER_AGENT, request.headers.get("User-Agent", "")),
    )
    return None


def _finish_request(response: Response) -> Response:
    ids = g.get(_IDS_ATTR)
    if ids is None:
        return response
    request_id, trace_id = ids
    response.headers.setdefault(X_REQUEST_ID, request_id)
    response.headers.setdefault(X_TRACE_ID, trace_id)

    started = g.get(_START_ATTR, time.perf_counter())
    duration_ms = int((time.perf_counter() - started) * 1000)
    size = response.calculate_content_length()

    logger.get_global_logger().info(
        get_log_context(),
        "Request completed",
        Field(logger.FIELD_REQUEST_ID, request_id),
        Field(logger.FIELD_TRACE_ID, trace_id),
        Field(logger.FIELD_METHOD, request.method),
        Field(logger.FIELD_PATH, request.path),
        Field(logger.FIELD_STATUS_CODE, response.status_code),
        Field(logger.FIELD_DURATION, duration_ms),
        Field(logger.FIELD_RESPONSE_SIZE, size if size is not None else -1),
    )
    return response