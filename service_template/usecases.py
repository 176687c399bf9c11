"""Business operations behind the HTTP handlers."""

from __future__ import annotations

from typing import Optional

from service_template.dto import (
    CheckLimitRequest,
    CheckLimitResponse,
    CreateUserRequest,
    FetchUserRequest,
)
from service_template.redis_provider import RedisProvider
from service_template.repo import UserRepository, UserWebAPI
from service_template.user import User


class LimitUseCase:
    """Checks and resets per-user limits."""

    def __init__(self, redis_provider: Optional[RedisProvider] = None) -> None:
        self.redis_provider = redis_provider

    def check_limit(self, request: Optional[CheckLimitRequest]) -> CheckLimitResponse:
        if request is None:
            return CheckLimitResponse()
        return CheckLimitResponse(user_id=request.user_id, limit_available=0)

    def reset_limit(self, request: Optional[CheckLimitRequest]) -> CheckLimitResponse:
        if request is None:
            return CheckLimitResponse()
        return CheckLimitResponse(user_id=request.user_id, limit_available=0)


class UserUseCase:
    """Creates and fetches users."""

    def __init__(
        self,
        redis_provider: Optional[RedisProvider] = None,
        user_repository: Optional[UserRepository] = None,
        user_web_api: Optional[UserWebAPI] = None,
    ) -> None:
        self.redis_provider = redis_provider
        self.user_repository = user_repository
        self.user_web_api = user_web_api

    def create_user(self, request: Optional[CreateUserRequest]) -> User:
        return User()

    def fetch_user(self, request: Optional[FetchUserRequest]) -> User:
        return User()