"""User names and case-folded user ids."""

from __future__ import annotations

import string

_ALLOWED = frozenset((string.ascii_letters + string.digits + "-_").encode("ascii"))
_MAX_LEN = 30


class InvalidUserName(ValueError):
    """Raised for a malformed user name."""


def _validate(data: bytes) -> str:
    if not data or len(data) > _MAX_LEN or any(c not in _ALLOWED for c in data):
        raise InvalidUserName(f"invalid username: {data!r}")
    return data.decode("ascii")


class UserName:
    """A user name as typed, compared without regard to ASCII case."""

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = _validate(name.encode("utf-8"))

    @classmethod
    def from_bytes(cls, data: bytes) -> "UserName":
        return cls(_validate(bytes(data)))

    @classmethod
    def parse(cls, text: str) -> "UserName":
        return cls.from_bytes(text.encode("utf-8"))

    def __bytes__(self) -> bytes:
        return self._name.encode("ascii")

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"UserName({self._name!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (UserName, UserId)):
            return self._name.lower() == str(other).lower()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._name.lower())


class UserId:
    """A lowercased user name."""

    __slots__ = ("_id",)

    def __init__(self, value: str) -> None:
        self._id = _validate(value.encode("utf-8")).lower()

    @classmethod
    def from_name(cls, name: UserName) -> "UserId":
        return cls(str(name))

    def as_lowercase_str(self) -> str:
        return self._id

    def __str__(self) -> str:
        return self._id

    def __repr__(self) -> str:
        return f"UserId({self._id!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UserId):
            return self._id == other._id
        if isinstance(other, UserName):
            return self._id == str(other).lower()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._id)