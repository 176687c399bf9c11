# service_template

A small HTTP service skeleton built on Flask. It serves a health check,
limit endpoints and user endpoints, writes one JSON log line per event to
standard error, and tags every request with a request id and a trace id.

## Install

    pip install .

For running the tests:

    pip install ".[test]"
    pytest

## Run

    service-template

The command takes no options besides `--help`; every setting comes from
environment variables. The server listens on `HOST:PORT` (default
`0.0.0.0:8080`) and handles each connection in its own thread. If the
server cannot bind, the error is logged and the command returns.

At start-up the service tries to connect to Redis and sends a `PING`. If
that fails, the error is logged and the service runs on without Redis.

## Configuration

An empty variable counts as unset.

| Variable        | Default            | Meaning                                          |
|-----------------|--------------------|--------------------------------------------------|
| `HOST`          | `0.0.0.0`          | Address to bind                                  |
| `PORT`          | `8080`             | Port to bind                                     |
| `READ_TIMEOUT`  | `60s`              | Duration such as `5s`, `1m30s`, `250ms`, `1.5h`  |
| `WRITE_TIMEOUT` | `60s`              | Duration, same form                              |
| `REDIS_HOST`    | `localhost`        | Redis address as `host:port` or `[ipv6]:port`    |
| `ENV`           | `local`            | Deployment environment name                      |
| `APP_NAME`      | `service-template` | Application name in the start-up log entry       |
| `OTLP_ENDPOINT` | `localhost:4317`   | Read into the configuration only                 |
| `LOG_LEVEL`     | `info`             | `debug`, `info`, `warn` or `error`               |

If a duration cannot be parsed, the default is used. The server uses one
socket timeout, the larger of the two durations.

`REDIS_HOST` must include a port. The default `localhost` has none, so
with the defaults the Redis connection is reported as failed and the
service runs without it; set `REDIS_HOST=localhost:6379` to connect.

## Endpoints

| Method | Path                  | JSON body                          | Success |
|--------|-----------------------|------------------------------------|---------|
| GET    | `/health`             | —                                  | 200     |
| POST   | `/api/v1/limit/check` | `{"userID": 123}`                  | 200     |
| POST   | `/api/v1/limit/reset` | `{"userID": 123}`                  | 200     |
| POST   | `/api/v1/user`        | `{"id", "name", "email", "age"}`   | 201     |
| GET    | `/api/v1/user/<id>`   | `{"id": 123}`                      | 200     |

`/health` returns:

    {"status":"ok","service":"service-template"}

The limit endpoints return `{"userID": <id>, "limitAvailable": 0}`. The
user endpoints return a user object `{"id", "name", "email", "age"}`.
`GET /api/v1/user/<id>` reads the id from the JSON body; the path segment
is not used.

Binding rules: `userID` and `id` must be non-zero integers; `name` and
`email` must be non-empty; `email` must look like an address such as
`john@example.com`; `age` must be between 1 and 130. Keys match
case-insensitively. A body that is empty, not JSON, of the wrong types or
that breaks a rule gets a 400 with `{"error": "Invalid request body: ..."}`.
An exception raised by a use case gets a 500 with an `error` message.

Every response carries `X-Request-ID` and `X-Trace-ID`. If the client
sends them, they are echoed back; if not, fresh UUIDs are made. CORS
headers are added to every response, and `OPTIONS` requests get
`204 No Content`.

## What it does not do

This is a skeleton. `LimitUseCase` does not count anything: it always
reports `limitAvailable` 0. `UserUseCase.create_user` and `fetch_user`
return an empty `User`, and `PersistentUserRepo` and `WebUserAPI` store
and load nothing. The Redis connection is made but not used by any
endpoint. No traces are exported; `OTLP_ENDPOINT` is only read.

## Use as a library

    from service_template.config import new_config
    from service_template.app import App

    app = App(new_config())
    flask_app = app.build()   # a Flask application with all routes
    app.start()               # build and serve

Pieces can be used on their own:

- `service_template.config`: `new_config()`, `Config`, `parse_duration()`.
- `service_template.dto`: request models with `from_dict()`, raising
  `ValidationError`.
- `service_template.router`: `create_router(config)`,
  `register_routes(app, server_context)`, `wrap_context(handler)`,
  `install_cors(app)`.
- `service_template.middleware`: `install_logging_middleware(app)`,
  `get_log_context()`.
- `service_template.redis_provider`: `connect_redis(config)` raises
  `ConnectionError` when Redis does not answer.

Logging:

    from service_template import logger

    logger.info(None, "Starting", logger.Field("port", "8080"))
    log = logger.new_logger("my-service")
    log.warnf({"request-id": "abc"}, "retry %d", 3)

Each entry holds `severity`, `timestamp`, `caller`, `message`, `service`,
the `request-id` and `trace-id` from the context mapping when present, and
the given fields. Error and fatal entries add a `stacktrace`. `fatal` and
`fatalf` write the entry and raise `SystemExit(1)`.