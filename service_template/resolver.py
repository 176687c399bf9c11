"""Wires configuration, providers, repositories and use cases into handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from service_template import logger
from service_template.handlers import LimiterHandler, UserHandler
from service_template.redis_provider import RedisProvider, connect_redis
from service_template.repo import PersistentUserRepo, WebUserAPI
from service_template.usecases import LimitUseCase, UserUseCase


@dataclass
class ServerContext:
    """The handlers the router dispatches to."""

    user_handler: UserHandler
    limiter_handler: LimiterHandler


class Resolver:
    """Builds the server context from a configuration."""

    def __init__(
        self,
        config: Any,
        connect: Callable[[Any], RedisProvider] = connect_redis,
    ) -> None:
        self.config = config
        self._connect = connect
        self.redis_provider: Optional[RedisProvider] = None
        self.user_repo: Optional[PersistentUserRepo] = None
        self.user_web_api: Optional[WebUserAPI] = None

    def resolve_server_context(self) -> ServerContext:
        """Create every dependency; run without Redis when it cannot be reached."""
        if not self._resolve_providers():
            logger.error(None, "Failed to resolve providers - continuing without Redis")

        self.user_repo = PersistentUserRepo(None)
        self.user_web_api = WebUserAPI()

        return ServerContext(
            user_handler=UserHandler(
                UserUseCase(self.redis_provider, self.user_repo, self.user_web_api)
            ),
            limiter_handler=LimiterHandler(LimitUseCase(self.redis_provider)),
        )

    def _resolve_providers(self) -> bool:
        try:
            self.redis_provider = self._connect(self.config)
        except ConnectionError as exc:
            logger.errorf(None, "Failed to create redis provider, Error %s: ", str(exc))
            logger.error(None, "Please check your Redis configuration and ensure Redis is running")
            logger.error(None, "For local development, you can:")
            logger.error(None, "1. Start Redis locally: docker run -d -p 6379:6379 redis:alpine")
            logger.error(None, "2. Or set REDIS_HOST=localhost in your environment")
            return False
        logger.info(None, "Redis provider initialized successfully")
        return True