from datetime import timedelta

import pytest

from service_template import config as cfgmod
from service_template.config import (
    DEFAULT_APP_NAME,
    DEFAULT_ENV,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_REDIS_HOST,
    DEFAULT_WRITE_TIMEOUT,
    DEFAULT_OTLP_ENDPOINT,
    ENV_APP_NAME,
    ENV_ENVIRONMENT,
    ENV_HOST,
    ENV_OTLP_ENDPOINT,
    ENV_PORT,
    ENV_READ_TIMEOUT,
    ENV_REDIS_HOST,
    ENV_WRITE_TIMEOUT,
    get_env,
    get_env_duration,
    new_config,
    parse_duration,
)

ALL_KEYS = [
    ENV_HOST,
    ENV_PORT,
    ENV_READ_TIMEOUT,
    ENV_WRITE_TIMEOUT,
    ENV_REDIS_HOST,
    ENV_ENVIRONMENT,
    ENV_APP_NAME,
    ENV_OTLP_ENDPOINT,
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ALL_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_default_server_host():
    assert new_config().server.host == DEFAULT_HOST


def test_default_server_port():
    assert new_config().server.port == DEFAULT_PORT


def test_default_read_timeout():
    assert new_config().server.read_timeout == DEFAULT_READ_TIMEOUT
    assert DEFAULT_READ_TIMEOUT == timedelta(seconds=60)


def test_default_write_timeout():
    assert new_config().server.write_timeout == DEFAULT_WRITE_TIMEOUT


def test_default_app_name():
    assert new_config().server.app_name == DEFAULT_APP_NAME


def test_default_redis_host():
    assert new_config().redis.host == DEFAULT_REDIS_HOST


def test_default_env():
    assert new_config().env == DEFAULT_ENV


def test_default_otlp_endpoint():
    assert new_config().otlp_endpoint == DEFAULT_OTLP_ENDPOINT


def test_server_host_from_env(clean_env):
    clean_env.setenv(ENV_HOST, "1.2.3.4")
    assert new_config().server.host == "1.2.3.4"


def test_server_port_from_env(clean_env):
    clean_env.setenv(ENV_PORT, "9090")
    assert new_config().server.port == "9090"


def test_read_timeout_from_env(clean_env):
    clean_env.setenv(ENV_READ_TIMEOUT, "5s")
    assert new_config().server.read_timeout == timedelta(seconds=5)


def test_write_timeout_from_env(clean_env):
    clean_env.setenv(ENV_WRITE_TIMEOUT, "7s")
    assert new_config().server.write_timeout == timedelta(seconds=7)


def test_app_name_from_env(clean_env):
    clean_env.setenv(ENV_APP_NAME, "svc")
    assert new_config().server.app_name == "svc"


def test_redis_host_from_env(clean_env):
    clean_env.setenv(ENV_REDIS_HOST, "redis:6379")
    assert new_config().redis.host == "redis:6379"


def test_env_from_env(clean_env):
    clean_env.setenv(ENV_ENVIRONMENT, "stg")
    assert new_config().env == "stg"


def test_empty_variable_uses_default(clean_env):
    clean_env.setenv(ENV_HOST, "")
    assert new_config().server_host == DEFAULT_HOST


def test_provider_server_host_not_empty():
    assert new_config().server_host != ""
    assert new_config().server_host == DEFAULT_HOST


def test_get_env_fallback(clean_env):
    clean_env.delenv("SOME_KEY_THAT_DOESNT_EXIST", raising=False)
    assert get_env("SOME_KEY_THAT_DOESNT_EXIST", "fallback") == "fallback"


def test_get_env_duration_invalid_fallback(clean_env):
    clean_env.setenv(ENV_READ_TIMEOUT, "not-a-duration")
    assert get_env_duration(ENV_READ_TIMEOUT, timedelta(seconds=3)) == timedelta(seconds=3)


def test_get_server_host_value(clean_env):
    clean_env.setenv(ENV_HOST, "h")
    assert new_config().server_host == "h"


def test_get_server_port_value(clean_env):
    clean_env.setenv(ENV_PORT, "p")
    assert new_config().server_port == "p"


def test_get_read_timeout_value(clean_env):
    clean_env.setenv(ENV_READ_TIMEOUT, "2s")
    assert new_config().read_timeout == timedelta(seconds=2)


def test_get_write_timeout_value(clean_env):
    clean_env.setenv(ENV_WRITE_TIMEOUT, "4s")
    assert new_config().write_timeout == timedelta(seconds=4)


def test_get_redis_host_value(clean_env):
    clean_env.setenv(ENV_REDIS_HOST, "r")
    assert new_config().redis_host == "r"


def test_get_env_value(clean_env):
    clean_env.setenv(ENV_ENVIRONMENT, "e")
    assert new_config().env == "e"


def test_get_app_name_value(clean_env):
    clean_env.setenv(ENV_APP_NAME, "a")
    assert new_config().app_name == "a"


def test_get_otlp_endpoint_value(clean_env):
    clean_env.setenv(ENV_OTLP_ENDPOINT, "collector:4317")
    assert new_config().otlp_endpoint == "collector:4317"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("5s", timedelta(seconds=5)),
        ("300ms", timedelta(milliseconds=300)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1.5s", timedelta(milliseconds=1500)),
        ("-2m", timedelta(minutes=-2)),
        ("+3h", timedelta(hours=3)),
        ("0", timedelta(0)),
        ("1500us", timedelta(microseconds=1500)),
        ("2000ns", timedelta(microseconds=2)),
        ("1.s", timedelta(seconds=1)),
        (".5m", timedelta(seconds=30)),
    ],
)
def test_parse_duration_valid(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "5", "abc", "5x", ".s", "+", "1s2", "s"])
def test_parse_duration_invalid(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_parse_duration_overflow():
    with pytest.raises(ValueError):
        parse_duration("9999999999h")


def test_module_env_names():
    assert cfgmod.ENV_OTLP_ENDPOINT == "OTLP_ENDPOINT"
    assert new_config().server.port == "8080"