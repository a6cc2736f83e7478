"""Time controls of games."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class InvalidSpeed(ValueError):
    """Raised for an unknown speed name."""


@functools.total_ordering
class Speed(Enum):
    ULTRA_BULLET = "ultraBullet"
    BULLET = "bullet"
    BLITZ = "blitz"
    RAPID = "rapid"
    CLASSICAL = "classical"
    CORRESPONDENCE = "correspondence"

    @classmethod
    def parse(cls, text: str) -> "Speed":
        try:
            return cls(text)
        except ValueError:
            raise InvalidSpeed(f"invalid speed: {text!r}") from None

    def highscore(self) -> int:
        """Top rating on the leaderboard of this speed."""
        return _HIGHSCORES[self]

    @property
    def _index(self) -> int:
        return list(type(self)).index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Speed):
            return NotImplemented
        return self._index < other._index

    def __str__(self) -> str:
        return self.value


_HIGHSCORES = {
    Speed.ULTRA_BULLET: 2644,
    Speed.BULLET: 3352,
    Speed.BLITZ: 2974,
    Speed.RAPID: 2949,
    Speed.CLASSICAL: 2533,
    Speed.CORRESPONDENCE: 4000,  # No leaderboard
}


@dataclass
class BySpeed(Generic[T]):
    """One value for each speed."""

    ultra_bullet: T
    bullet: T
    blitz: T
    rapid: T
    classical: T
    correspondence: T

    def get(self, speed: Speed) -> T:
        return getattr(self, _FIELDS[speed])

    def __getitem__(self, speed: Speed) -> T:
        return self.get(speed)

    def __setitem__(self, speed: Speed, value: T) -> None:
        setattr(self, _FIELDS[speed], value)

    def zip_speed(self) -> list[tuple[Speed, T]]:
        return list(zip(Speed, self))

    def __iter__(self) -> Iterator[T]:
        for speed in Speed:
            yield self.get(speed)


_FIELDS = {
    Speed.ULTRA_BULLET: "ultra_bullet",
    Speed.BULLET: "bullet",
    Speed.BLITZ: "blitz",
    Speed.RAPID: "rapid",
    Speed.CLASSICAL: "classical",
    Speed.CORRESPONDENCE: "correspondence",
}