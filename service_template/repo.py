"""User storage interfaces and their implementations."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from service_template.user import User


@runtime_checkable
class UserRepository(Protocol):
    """Stores and loads users."""

    def save(self, user: User) -> User: ...

    def fetch(self, user_id: int) -> User: ...


@runtime_checkable
class UserWebAPI(Protocol):
    """Saves and loads users through a remote service."""

    def save(self, user: User) -> User: ...

    def fetch(self, user_id: int) -> User: ...


class PersistentUserRepo:
    """User repository backed by a database connection."""

    def __init__(self, database: Any = None) -> None:
        self.database = database

    def fetch(self, user_id: int) -> User:
        return User()

    def save(self, user: User) -> User:
        return User()


class WebUserAPI:
    """User repository backed by a remote web service."""

    def fetch(self, user_id: int) -> User:
        return User()

    def save(self, user: User) -> User:
        return User()