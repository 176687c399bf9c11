"""The HTTP service application."""

from __future__ import annotations

from socketserver import ThreadingMixIn
from typing import Any, Optional
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from flask import Flask

from service_template import logger
from service_template.config import Config, new_config
from service_template.logger import Field
from service_template.resolver import Resolver
from service_template.router import create_router, register_routes


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _QuietRequestHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:
        # Requests are already logged by the middleware.
        pass


def _handler_class(timeout_seconds: float) -> type[WSGIRequestHandler]:
    class Handler(_QuietRequestHandler):
        timeout = timeout_seconds

    return Handler


class App:
    """Builds the service and serves it over HTTP."""

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config if config is not None else new_config()

    def build(self) -> Flask:
        """Resolve dependencies and return the routed application."""
        server_context = Resolver(self.config).resolve_server_context()
        return register_routes(create_router(self.config), server_context)

    def start(self) -> None:
        """Serve until the process stops; log an error if the server cannot start."""
        app = self.build()
        host, port = self.config.server_host, self.config.server_port
        logger.info(None, "Starting HTTP server", Field("host", host), Field("port", port))

        # One socket timeout covers both reading the request and writing the reply.
        timeout = max(self.config.read_timeout, self.config.write_timeout).total_seconds()
        try:
            server = make_server(
                host,
                int(port),
                app,
                server_class=_ThreadingWSGIServer,
                handler_class=_handler_class(timeout),
            )
        except (OSError, ValueError, OverflowError) as exc:
            logger.error(None, "Error starting server", Field("error", str(exc)))
            return

        with server:
            try:
                server.serve_forever()
            except OSError as exc:
                logger.error(None, "Error starting server", Field("error", str(exc)))