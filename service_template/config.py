"""Service configuration read from environment variables."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from fractions import Fraction

ENV_HOST = "HOST"
ENV_PORT = "PORT"
ENV_READ_TIMEOUT = "READ_TIMEOUT"
ENV_WRITE_TIMEOUT = "WRITE_TIMEOUT"
ENV_REDIS_HOST = "REDIS_HOST"
ENV_ENVIRONMENT = "ENV"
ENV_APP_NAME = "APP_NAME"
ENV_OTLP_ENDPOINT = "OTLP_ENDPOINT"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = "8080"
DEFAULT_READ_TIMEOUT = timedelta(seconds=60)
DEFAULT_WRITE_TIMEOUT = timedelta(seconds=60)
DEFAULT_REDIS_HOST = "localhost"
DEFAULT_APP_NAME = "service-template"
DEFAULT_OTLP_ENDPOINT = "localhost:4317"
DEFAULT_ENV = "local"

_UNIT_NANOS = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_COMPONENT = re.compile(r"(\d*)(?:\.(\d*))?([^\d.]*)")
_MAX_NANOS = 2**63 - 1


@dataclass
class ServerConfig:
    """HTTP server settings."""

    host: str = DEFAULT_HOST
    port: str = DEFAULT_PORT
    read_timeout: timedelta = DEFAULT_READ_TIMEOUT
    write_timeout: timedelta = DEFAULT_WRITE_TIMEOUT
    app_name: str = DEFAULT_APP_NAME
    otlp_endpoint: str = DEFAULT_OTLP_ENDPOINT


@dataclass
class RedisConfig:
    """Redis connection settings."""

    host: str = DEFAULT_REDIS_HOST


@dataclass
class Config:
    """Complete service configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)
    env: str = DEFAULT_ENV

    @property
    def server_host(self) -> str:
        return self.server.host

    @property
    def server_port(self) -> str:
        return self.server.port

    @property
    def read_timeout(self) -> timedelta:
        return self.server.read_timeout

    @property
    def write_timeout(self) -> timedelta:
        return self.server.write_timeout

    @property
    def redis_host(self) -> str:
        return self.redis.host

    @property
    def app_name(self) -> str:
        return self.server.app_name

    @property
    def otlp_endpoint(self) -> str:
        return self.server.otlp_endpoint


def new_config() -> Config:
    """Build a configuration from the environment, falling back to defaults."""
    return Config(
        server=ServerConfig(
            host=get_env(ENV_HOST, DEFAULT_HOST),
            port=get_env(ENV_PORT, DEFAULT_PORT),
            read_timeout=get_env_duration(ENV_READ_TIMEOUT, DEFAULT_READ_TIMEOUT),
            write_timeout=get_env_duration(ENV_WRITE_TIMEOUT, DEFAULT_WRITE_TIMEOUT),
            app_name=get_env(ENV_APP_NAME, DEFAULT_APP_NAME),
            otlp_endpoint=get_env(ENV_OTLP_ENDPOINT, DEFAULT_OTLP_ENDPOINT),
        ),
        redis=RedisConfig(host=get_env(ENV_REDIS_HOST, DEFAULT_REDIS_HOST)),
        env=get_env(ENV_ENVIRONMENT, DEFAULT_ENV),
    )


def get_env(key: str, fallback: str) -> str:
    """Return the variable's value, or the fallback when unset or empty."""
    value = os.environ.get(key, "")
    return value if value != "" else fallback


def get_env_duration(key: str, fallback: timedelta) -> timedelta:
    """Return the variable parsed as a duration, or the fallback."""
    value = os.environ.get(key, "")
    if value == "":
        return fallback
    try:
        return parse_duration(value)
    except ValueError:
        return fallback


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as "300ms", "1.5h" or "2h45m"."""
    if not value:
        raise ValueError(f"invalid duration {value!r}")
    text = value
    negative = text[0] == "-"
    if text[0] in "+-":
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {value!r}")

    total = Fraction(0)
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        whole, frac, unit = match.groups()
        if not whole and not frac:
            raise ValueError(f"invalid duration {value!r}")
        if not unit:
            raise ValueError(f"missing unit in duration {value!r}")
        if unit not in _UNIT_NANOS:
            raise ValueError(f"unknown unit {unit!r} in duration {value!r}")
        number = Fraction(int(whole or "0"))
        if frac:
            number += Fraction(int(frac), 10 ** len(frac))
        total += number * _UNIT_NANOS[unit]
        if total > _MAX_NANOS:
            raise ValueError(f"invalid duration {value!r}")
        pos = match.end()

    delta = timedelta(microseconds=int(total) // 1000)
    return -delta if negative else delta