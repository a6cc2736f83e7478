"""Rated and casual games."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class InvalidMode(ValueError):
    """Raised for an unknown mode name."""


class Mode(Enum):
    RATED = "rated"
    CASUAL = "casual"

    @classmethod
    def from_rated(cls, rated: bool) -> "Mode":
        return cls.RATED if rated else cls.CASUAL

    def is_rated(self) -> bool:
        return self is Mode.RATED

    @classmethod
    def parse(cls, text: str) -> "Mode":
        try:
            return cls(text)
        except ValueError:
            raise InvalidMode(f"invalid mode: {text!r}") from None

    def __str__(self) -> str:
        return self.value


@dataclass
class ByMode(Generic[T]):
    """One value for each mode."""

    rated: T
    casual: T

    def get(self, mode: Mode) -> T:
        return self.rated if mode is Mode.RATED else self.casual

    def __getitem__(self, mode: Mode) -> T:
        return self.get(mode)

    def __setitem__(self, mode: Mode, value: T) -> None:
        if mode is Mode.RATED:
            self.rated = value
        else:
            self.casual = value

    def zip_mode(self) -> list[tuple[Mode, T]]:
        return [(Mode.RATED, self.rated), (Mode.CASUAL, self.casual)]

    def __iter__(self) -> Iterator[T]:
        yield self.rated
        yield self.casual