"""Colors, roles, squares and moves in UCI notation, with a packed 16-bit form."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import BinaryIO, TypeVar

T = TypeVar("T")

_FILES = "abcdefgh"
_RANKS = "12345678"
_ROLE_CHARS = "pnbrqk"


class Color(Enum):
    WHITE = "white"
    BLACK = "black"

    def char(self) -> str:
        return "w" if self is Color.WHITE else "b"

    def fold_wb(self, white: T, black: T) -> T:
        return white if self is Color.WHITE else black

    def __str__(self) -> str:
        return self.value


class Role(IntEnum):
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def _char(self) -> str:
        return _ROLE_CHARS[self - 1]


def parse_square(name: str) -> int:
    """Square index (a1 = 0, h8 = 63) of a name such as ``e4``."""
    if len(name) != 2 or name[0] not in _FILES or name[1] not in _RANKS:
        raise ValueError(f"invalid square: {name!r}")
    return _RANKS.index(name[1]) * 8 + _FILES.index(name[0])


def square_name(square: int) -> str:
    if not 0 <= square < 64:
        raise ValueError(f"invalid square index: {square}")
    return _FILES[square & 7] + _RANKS[square >> 3]


def _check_square(square: int) -> int:
    if not 0 <= square < 64:
        raise ValueError(f"invalid square index: {square}")
    return square


@dataclass(frozen=True)
class UciMove:
    """A normal move, a drop (``put``) or the null move."""

    from_square: int | None
    to_square: int | None
    role: Role | None

    @classmethod
    def normal(cls, from_square: int, to_square: int, promotion: Role | None = None) -> "UciMove":
        return cls(_check_square(from_square), _check_square(to_square), promotion)

    @classmethod
    def put(cls, role: Role, to_square: int) -> "UciMove":
        return cls(None, _check_square(to_square), Role(role))

    @classmethod
    def null(cls) -> "UciMove":
        return cls(None, None, None)

    @property
    def is_null(self) -> bool:
        return self.to_square is None

    @property
    def is_put(self) -> bool:
        return self.from_square is None and self.to_square is not None

    @property
    def promotion(self) -> Role | None:
        return None if self.is_put else self.role

    @classmethod
    def parse(cls, text: str) -> "UciMove":
        if text == "0000":
            return cls.null()
        if len(text) == 4 and text[1] == "@":
            piece = text[0]
            if not piece.isupper() or piece.lower() not in _ROLE_CHARS:
                raise ValueError(f"invalid uci: {text!r}")
            return cls.put(Role(_ROLE_CHARS.index(piece.lower()) + 1), parse_square(text[2:]))
        if len(text) in (4, 5):
            try:
                from_square = parse_square(text[0:2])
                to_square = parse_square(text[2:4])
            except ValueError:
                raise ValueError(f"invalid uci: {text!r}") from None
            promotion = None
            if len(text) == 5:
                if text[4] not in _ROLE_CHARS:
                    raise ValueError(f"invalid uci: {text!r}")
                promotion = Role(_ROLE_CHARS.index(text[4]) + 1)
            return cls.normal(from_square, to_square, promotion)
        raise ValueError(f"invalid uci: {text!r}")

    def __str__(self) -> str:
        if self.is_null:
            return "0000"
        if self.is_put:
            return f"{self.role._char.upper()}@{square_name(self.to_square)}"
        suffix = self.role._char if self.role is not None else ""
        return square_name(self.from_square) + square_name(self.to_square) + suffix


@dataclass(frozen=True, repr=False)
class RawUciMove:
    """A move packed into 16 bits: from, to and role."""

    value: int

    @classmethod
    def pack(cls, uci: UciMove) -> "RawUciMove":
        if uci.is_null:
            from_square, to_square, role = 0, 0, None
        elif uci.is_put:
            from_square, to_square, role = uci.to_square, uci.to_square, uci.role
        else:
            from_square, to_square, role = uci.from_square, uci.to_square, uci.role
        return cls(from_square | (to_square << 6) | ((int(role) if role else 0) << 12))

    def unpack(self) -> UciMove:
        from_square = self.value & 63
        to_square = (self.value >> 6) & 63
        role_bits = self.value >> 12
        role = Role(role_bits) if 1 <= role_bits <= 6 else None
        if from_square == to_square:
            return UciMove.put(role, to_square) if role is not None else UciMove.null()
        return UciMove.normal(from_square, to_square, role)

    @classmethod
    def read(cls, reader: BinaryIO) -> "RawUciMove":
        data = reader.read(2)
        if len(data) != 2:
            raise EOFError("unexpected end of data while reading move")
        return cls(int.from_bytes(data, "little"))

    def write(self, out: BinaryIO) -> None:
        out.write(self.value.to_bytes(2, "little"))

    def __repr__(self) -> str:
        return f"RawUciMove({self.unpack()})"