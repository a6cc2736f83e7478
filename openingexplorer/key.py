"""Database keys: a hashed position prefix followed by a month or year."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, SupportsInt

from openingexplorer.date import Month, Year
from openingexplorer.uci import Color
from openingexplorer.user import UserId

_U128_MASK = (1 << 128) - 1


class Variant(Enum):
    CHESS = "chess"
    ANTICHESS = "antichess"
    ATOMIC = "atomic"
    CRAZYHOUSE = "crazyhouse"
    HORDE = "horde"
    KING_OF_THE_HILL = "kingOfTheHill"
    RACING_KINGS = "racingKings"
    THREE_CHECK = "threeCheck"

    @property
    def mask(self) -> int:
        return _VARIANT_MASKS[self]


_VARIANT_MASKS = {
    Variant.CHESS: 0,
    Variant.ANTICHESS: 0x44782FCE075483666C81899CB65921C9,
    Variant.ATOMIC: 0x66CCBD680F655D562689CA333C5E2A42,
    Variant.CRAZYHOUSE: 0x9D04DB38CA4D923D82FF24EB9530E986,
    Variant.HORDE: 0xC29DFB1076AA15186EFFD0D34CC60737,
    Variant.KING_OF_THE_HILL: 0xDFB25D5DF41FC5961E61F6B4BA613FBE,
    Variant.RACING_KINGS: 0x8E72F94307F96710B3910CF7E5808E0D,
    Variant.THREE_CHECK: 0xD19242BAE967B40E7856BD1C71AA4220,
}


@dataclass(frozen=True, order=True)
class Key:
    data: bytes

    SIZE: ClassVar[int] = 14

    def __post_init__(self) -> None:
        if len(self.data) != self.SIZE:
            raise ValueError(f"key must be {self.SIZE} bytes, got {len(self.data)}")

    @classmethod
    def from_bytes(cls, data: bytes) -> "Key":
        return cls(bytes(data))

    def __bytes__(self) -> bytes:
        return self.data

    def month(self) -> Month:
        return Month.from_int(int.from_bytes(self.data[KeyPrefix.SIZE:], "big"))


@dataclass(frozen=True)
class KeyPrefix:
    prefix: bytes

    SIZE: ClassVar[int] = 12

    def _with_suffix(self, value: int) -> Key:
        return Key(self.prefix[: self.SIZE] + value.to_bytes(2, "big"))

    def with_month(self, month: Month) -> Key:
        return self._with_suffix(int(month))

    def with_year(self, year: Year) -> Key:
        return self._with_suffix(int(year))


@dataclass(frozen=True)
class KeyBuilder:
    base: int

    @classmethod
    def player(cls, user: UserId, color: Color) -> "KeyBuilder":
        digest = hashlib.sha1(color.char().encode("ascii") + user.as_lowercase_str().encode("utf-8")).digest()
        return cls(int.from_bytes(digest[:16], "little"))

    @classmethod
    def masters(cls) -> "KeyBuilder":
        return cls(0)

    @classmethod
    def lichess(cls) -> "KeyBuilder":
        return cls(0)

    def with_zobrist(self, variant: Variant, zobrist: SupportsInt) -> KeyPrefix:
        # Zobrist hashes are not cryptographically secure; a crafted position
        # could collide with another player's records. Accepted for now.
        value = (self.base ^ int(zobrist) ^ variant.mask) & _U128_MASK
        return KeyPrefix(value.to_bytes(16, "little"))