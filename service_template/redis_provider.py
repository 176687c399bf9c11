"""Connection to the Redis server."""

from __future__ import annotations

from typing import Any

import redis
from redis.backoff import NoBackoff
from redis.retry import Retry

from service_template import logger
from service_template.logger import Field

POOL_SIZE = 10
CONNECT_TIMEOUT_SECONDS = 5.0
_DEFAULT_ADDRESS = ("localhost", 6379)


class RedisProvider:
    """Holds a connected Redis client."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        return self._client

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RedisProvider:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def parse_address(address: str) -> tuple[str, int]:
    """Split "host:port" into its parts; an empty address means localhost:6379."""
    if address == "":
        return _DEFAULT_ADDRESS
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise ValueError(f"address {address}: missing ']' in address")
        host = address[1:end]
        rest = address[end + 1 :]
        if not rest.startswith(":"):
            raise ValueError(f"address {address}: missing port in address")
        port_text = rest[1:]
    else:
        if ":" not in address:
            raise ValueError(f"address {address}: missing port in address")
        host, _, port_text = address.rpartition(":")
        if ":" in host:
            raise ValueError(f"address {address}: too many colons in address")
    if not port_text.isdigit() or not 0 <= int(port_text) <= 65535:
        raise ValueError(f"address {address}: invalid port {port_text!r}")
    return host, int(port_text)


def connect_redis(config: Any) -> RedisProvider:
    """Connect to the configured Redis host and check it answers; raise ConnectionError if not."""
    address = config.redis_host
    logger.info(None, "Connecting to Redis", Field("host", address))
    try:
        host, port = parse_address(address)
    except ValueError as exc:
        raise ConnectionError(f"failed to connect to Redis: {exc}") from exc

    client = redis.Redis(
        host=host,
        port=port,
        max_connections=POOL_SIZE,
        socket_connect_timeout=CONNECT_TIMEOUT_SECONDS,
        socket_timeout=CONNECT_TIMEOUT_SECONDS,
        retry=Retry(NoBackoff(), 0),
    )
    try:
        client.ping()
    except (redis.exceptions.RedisError, OSError) as exc:
        client.close()
        raise ConnectionError(f"failed to connect to Redis: {exc}") from exc
    return RedisProvider(client)