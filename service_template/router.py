"""Flask application with middleware and the service's routes."""

from __future__ import annotations

from typing import Any, Callable

from flask import Flask, Response, request

from service_template import logger
from service_template.handlers import HealthHandler
from service_template.middleware import install_logging_middleware
from service_template.request_context import RequestContext
from service_template.resolver import ServerContext

CONFIG_KEY = "SERVICE_CONFIG"

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Headers": (
        "Content-Type, Access-Control-Allow-Headers, Authorization, X-Requested-With"
    ),
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
}


def create_router(config: Any) -> Flask:
    """Create the application with logging and CORS middleware installed."""
    logger.info(None, "Setting up endpoints...")
    app = Flask(__name__)
    app.config[CONFIG_KEY] = config
    install_logging_middleware(app)
    install_cors(app)
    return app


def register_routes(app: Flask, server_context: ServerContext) -> Flask:
    """Attach every endpoint to the application."""
    health = HealthHandler()
    routes = [
        ("/health", "health", health.check, "GET"),
        ("/api/v1/limit/check", "limit_check", server_context.limiter_handler.check_limit, "POST"),
        ("/api/v1/limit/reset", "limit_reset", server_context.limiter_handler.reset_limit, "POST"),
        ("/api/v1/user", "user_create", server_context.user_handler.create_user, "POST"),
        ("/api/v1/user/<id>", "user_fetch", server_context.user_handler.fetch_user, "GET"),
    ]
    for rule, endpoint, handler, method in routes:
        app.add_url_rule(rule, endpoint, wrap_context(handler), methods=[method])
    return app


def wrap_context(handler: Callable[[RequestContext], None]) -> Callable[..., Response]:
    """Turn a handler taking a RequestContext into a Flask view."""

    def view(**_route_values: Any) -> Response:
        ctx = RequestContext(request._get_current_object())
        handler(ctx)
        return ctx.response

    return view


def install_cors(app: Flask) -> Flask:
    """Allow cross-origin calls and answer preflight requests with 204."""

    def preflight() -> Response | None:
        if request.method == "OPTIONS":
            return Response(status=204)
        return None

    def add_headers(response: Response) -> Response:
        for name, value in _CORS_HEADERS.items():
            response.headers[name] = value
        return response

    app.before_request(preflight)
    app.after_request(add_headers)
    return app