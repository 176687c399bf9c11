"""The user domain entity."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from service_template.dto import CreateUserRequest


@dataclass
class User:
    """A registered user."""

    id: int = 0
    name: str = ""
    email: str = ""
    age: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def create_new_user(request: CreateUserRequest) -> User:
    """Build a user from a creation request."""
    return User(id=request.id, name=request.name, email=request.email, age=request.age)