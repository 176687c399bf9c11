"""Request and response bodies of the HTTP API, with binding rules."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_MISSING = object()
_EMAIL = re.compile(
    r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*$"
)


class ValidationError(ValueError):
    """A request body could not be bound to its model."""


def _json_type(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _require_mapping(data: Any, owner: str) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValidationError(f"cannot unmarshal {_json_type(data)} into value of type {owner}")
    return data


def _lookup(data: Mapping, key: str) -> Any:
    """Find a key exactly or case-insensitively; the last match wins."""
    folded = key.casefold()
    found = _MISSING
    for name, value in data.items():
        if isinstance(name, str) and name.casefold() == folded:
            found = value
    return found


def _int_field(data: Mapping, key: str, owner: str) -> int:
    value = _lookup(data, key)
    if value is _MISSING or value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"cannot unmarshal {_json_type(value)} into field {owner}.{key} of type int"
        )
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValidationError(f"number {value} out of range for field {owner}.{key} of type int")
    return value


def _str_field(data: Mapping, key: str, owner: str) -> str:
    value = _lookup(data, key)
    if value is _MISSING or value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(
            f"cannot unmarshal {_json_type(value)} into field {owner}.{key} of type string"
        )
    return value


def _failure(owner: str, name: str, tag: str) -> str:
    return f"Key: '{owner}.{name}' Error:Field validation for '{name}' failed on the '{tag}' tag"


def _raise_if(failures: list[str]) -> None:
    if failures:
        raise ValidationError("\n".join(failures))


@dataclass(frozen=True)
class CheckLimitRequest:
    """Body of a limit check or reset request."""

    user_id: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> CheckLimitRequest:
        """Bind and validate a decoded JSON body."""
        data = _require_mapping(data, cls.__name__)
        user_id = _int_field(data, "userID", cls.__name__)
        _raise_if([_failure(cls.__name__, "UserID", "required")] if user_id == 0 else [])
        return cls(user_id=user_id)


@dataclass(frozen=True)
class CheckLimitResponse:
    """Remaining limit for a user."""

    user_id: int = 0
    limit_available: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"userID": self.user_id, "limitAvailable": self.limit_available}


@dataclass(frozen=True)
class CreateUserRequest:
    """Body of a user creation request."""

    id: int = 0
    name: str = ""
    email: str = ""
    age: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> CreateUserRequest:
        """Bind and validate a decoded JSON body."""
        owner = cls.__name__
        data = _require_mapping(data, owner)
        user_id = _int_field(data, "id", owner)
        name = _str_field(data, "name", owner)
        email = _str_field(data, "email", owner)
        age = _int_field(data, "age", owner)

        failures = []
        if user_id == 0:
            failures.append(_failure(owner, "ID", "required"))
        if name == "":
            failures.append(_failure(owner, "Name", "required"))
        if email == "":
            failures.append(_failure(owner, "Email", "required"))
        elif not _EMAIL.match(email):
            failures.append(_failure(owner, "Email", "email"))
        if age == 0:
            failures.append(_failure(owner, "Age", "required"))
        elif age < 0:
            failures.append(_failure(owner, "Age", "gte"))
        elif age > 130:
            failures.append(_failure(owner, "Age", "lte"))
        _raise_if(failures)
        return cls(id=user_id, name=name, email=email, age=age)


@dataclass(frozen=True)
class FetchUserRequest:
    """Body of a user fetch request."""

    id: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> FetchUserRequest:
        """Bind and validate a decoded JSON body."""
        data = _require_mapping(data, cls.__name__)
        user_id = _int_field(data, "id", cls.__name__)
        _raise_if([_failure(cls.__name__, "ID", "required")] if user_id == 0 else [])
        return cls(id=user_id)