"""Eight-character base-62 game ids."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import BinaryIO, ClassVar

_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
_LENGTH = 8
_LIMIT = len(_ALPHABET) ** _LENGTH


class InvalidGameId(ValueError):
    """Raised for a malformed game id."""


@dataclass(frozen=True, order=True, repr=False)
class GameId:
    value: int

    SIZE: ClassVar[int] = 6

    def __post_init__(self) -> None:
        if not 0 <= self.value < _LIMIT:
            raise InvalidGameId(f"invalid game id: {self.value}")

    @classmethod
    def parse(cls, text: str) -> "GameId":
        if len(text) != _LENGTH:
            raise InvalidGameId(f"invalid game id: {text!r}")
        n = 0
        for char in reversed(text):
            digit = _ALPHABET.find(char)
            if digit < 0 or len(char) != 1:
                raise InvalidGameId(f"invalid game id: {text!r}")
            n = n * len(_ALPHABET) + digit
        return cls(n)

    def __str__(self) -> str:
        chars = []
        n = self.value
        for _ in range(_LENGTH):
            n, rem = divmod(n, len(_ALPHABET))
            chars.append(_ALPHABET[rem])
        return "".join(chars)

    def __repr__(self) -> str:
        return f"GameId({self})"

    def to_bytes(self) -> bytes:
        return self.value.to_bytes(self.SIZE, "little")

    def write(self, out: BinaryIO) -> None:
        out.write(self.to_bytes())

    @classmethod
    def read(cls, reader: BinaryIO) -> "GameId":
        data = reader.read(cls.SIZE)
        if len(data) != cls.SIZE:
            raise EOFError("unexpected end of data while reading game id")
        return cls(int.from_bytes(data, "little"))