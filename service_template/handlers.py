"""HTTP handlers for the health, limit and user endpoints."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Callable, Protocol, TypeVar

from service_template import logger
from service_template.dto import (
    CheckLimitRequest,
    CheckLimitResponse,
    CreateUserRequest,
    FetchUserRequest,
    ValidationError,
)
from service_template.logger import (
    FIELD_ERROR,
    FIELD_STATUS_CODE,
    FIELD_USER_ID,
    SERVICE_NAME,
    Field,
)
from service_template.middleware import get_log_context
from service_template.request_context import RequestContext
from service_template.user import User

INVALID_BODY = "Invalid request body"

T = TypeVar("T")


class LimitOperations(Protocol):
    def check_limit(self, request: CheckLimitRequest) -> CheckLimitResponse: ...

    def reset_limit(self, request: CheckLimitRequest) -> CheckLimitResponse: ...


class UserOperations(Protocol):
    def create_user(self, request: CreateUserRequest) -> User: ...

    def fetch_user(self, request: FetchUserRequest) -> User: ...


def _send_error(ctx: RequestContext, status: int, message: str, exc: BaseException) -> None:
    ctx.json(status, {"error": message + str(exc)})


def _bind(ctx: RequestContext, model: type[T], log_ctx: Any) -> T | None:
    """Bind the body to model, answering 400 and returning None on failure."""
    try:
        return ctx.bind_json(model)
    except ValidationError as exc:
        logger.error(log_ctx, INVALID_BODY, Field(FIELD_ERROR, exc))
        _send_error(ctx, HTTPStatus.BAD_REQUEST.value, INVALID_BODY + ": ", exc)
        return None


class HealthHandler:
    """Answers liveness checks."""

    def check(self, ctx: RequestContext) -> None:
        log_ctx = get_log_context()
        logger.info(
            log_ctx, "Health check requested", Field(FIELD_STATUS_CODE, HTTPStatus.OK.value)
        )
        ctx.json(HTTPStatus.OK.value, {"status": "ok", "service": SERVICE_NAME})


class LimiterHandler:
    """Checks and resets per-user limits."""

    def __init__(self, use_case: LimitOperations) -> None:
        self.use_case = use_case

    def check_limit(self, ctx: RequestContext) -> None:
        self._handle(
            ctx,
            "Checking limit",
            self.use_case.check_limit,
            "Limit checked successfully",
            "Failed to fetch limit",
        )

    def reset_limit(self, ctx: RequestContext) -> None:
        self._handle(
            ctx,
            "Resetting limit",
            self.use_case.reset_limit,
            "Limit reset successfully",
            "Failed to reset limit",
        )

    def _handle(
        self,
        ctx: RequestContext,
        start_message: str,
        action: Callable[[CheckLimitRequest], CheckLimitResponse],
        success_message: str,
        failure_message: str,
    ) -> None:
        log_ctx = get_log_context()
        logger.info(log_ctx, start_message)

        request = _bind(ctx, CheckLimitRequest, log_ctx)
        if request is None:
            return

        try:
            response = action(request)
        except Exception as exc:
            logger.error(
                log_ctx, failure_message, Field(FIELD_ERROR, exc), Field(FIELD_USER_ID, request.user_id)
            )
            _send_error(ctx, HTTPStatus.INTERNAL_SERVER_ERROR.value, failure_message + ": ", exc)
            return

        logger.info(
            log_ctx,
            success_message,
            Field(FIELD_USER_ID, request.user_id),
            Field(FIELD_STATUS_CODE, HTTPStatus.OK.value),
            Field("limit_available", response.limit_available),
        )
        ctx.json(HTTPStatus.OK.value, response)


class UserHandler:
    """Creates and fetches users."""

    def __init__(self, use_case: UserOperations) -> None:
        self.use_case = use_case

    def create_user(self, ctx: RequestContext) -> None:
        """Create a user from the request body."""
        self._handle(
            ctx,
            "Creating user",
            CreateUserRequest,
            self.use_case.create_user,
            "User created successfully",
            "Failed to create user",
            HTTPStatus.CREATED.value,
        )

    def fetch_user(self, ctx: RequestContext) -> None:
        """Fetch the user named by the request body."""
        self._handle(
            ctx,
            "Fetching user",
            FetchUserRequest,
            self.use_case.fetch_user,
            "User fetched successfully",
            "Failed to fetch user",
            HTTPStatus.OK.value,
        )

    def _handle(
        self,
        ctx: RequestContext,
        start_message: str,
        model: type,
        action: Callable[[Any], User],
        success_message: str,
        failure_message: str,
        success_status: int,
    ) -> None:
        log_ctx = get_log_context()
        logger.info(log_ctx, start_message)

        request = _bind(ctx, model, log_ctx)
        if request is None:
            return

        try:
            user = action(request)
        except Exception as exc:
            logger.error(
                log_ctx, failure_message, Field(FIELD_ERROR, exc), Field(FIELD_USER_ID, request.id)
            )
            _send_error(ctx, HTTPStatus.INTERNAL_SERVER_ERROR.value, failure_message + ": ", exc)
            return

        logger.info(
            log_ctx,
            success_message,
            Field(FIELD_USER_ID, request.id),
            Field(FIELD_STATUS_CODE, success_status),
        )
        ctx.json(success_status, user)