"""Years, months and loosely specified dates."""

from __future__ import annotations

import datetime as _dt
import re
from dataclasses import dataclass
from typing import ClassVar

MIN_YEAR = 1952
MAX_YEAR = 3000  # MAX_YEAR * 12 + 12 < 2**16

_U16_MAX = 0xFFFF
_U8_MAX = 0xFF
_DIGITS = frozenset("0123456789")


class InvalidDate(ValueError):
    """Raised for a year or month that is malformed or out of range."""


def _parse_uint(text: str, limit: int) -> int | None:
    """Parse an unsigned decimal integer no larger than ``limit``, or return None."""
    digits = text[1:] if text.startswith("+") else text
    if not digits or any(c not in _DIGITS for c in digits):
        return None
    value = int(digits)
    return value if value <= limit else None


@dataclass(frozen=True, order=True)
class Year:
    value: int

    def __post_init__(self) -> None:
        if not MIN_YEAR <= self.value <= MAX_YEAR:
            raise InvalidDate("invalid year")

    @classmethod
    def from_int(cls, value: int) -> "Year":
        return cls(value)

    @classmethod
    def parse(cls, text: str) -> "Year":
        value = _parse_uint(text, _U16_MAX)
        if value is None:
            raise InvalidDate("invalid year")
        return cls(value)

    @classmethod
    def min_value(cls) -> "Year":
        return cls(MIN_YEAR)

    @classmethod
    def max_value(cls) -> "Year":
        return cls(MAX_YEAR)

    def add_years_saturating(self, years: int) -> "Year":
        return Year(min(self.value + years, MAX_YEAR))

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"{self.value:04}"


@dataclass(frozen=True, order=True)
class Month:
    """A calendar month, counted as ``year * 12 + (month - 1)``."""

    value: int

    def __post_init__(self) -> None:
        if not MIN_YEAR * 12 <= self.value <= MAX_YEAR * 12 + 11:
            raise InvalidDate("invalid month")

    @classmethod
    def from_int(cls, value: int) -> "Month":
        return cls(value)

    @classmethod
    def parse(cls, text: str) -> "Month":
        parts = re.split(r"[-/]", text, maxsplit=1)
        if len(parts) != 2:
            raise InvalidDate("invalid month")
        year = _parse_uint(parts[0], _U16_MAX)
        month_plus_one = _parse_uint(parts[1], _U16_MAX)
        if (
            year is None
            or month_plus_one is None
            or not MIN_YEAR <= year <= MAX_YEAR
            or not 1 <= month_plus_one <= 12
        ):
            raise InvalidDate("invalid month")
        return cls(year * 12 + month_plus_one - 1)

    @classmethod
    def min_value(cls) -> "Month":
        return cls(MIN_YEAR * 12)

    @classmethod
    def max_value(cls) -> "Month":
        return cls(MAX_YEAR * 12 + 11)

    @classmethod
    def from_datetime_saturating(cls, moment: _dt.datetime | _dt.date) -> "Month":
        year = min(max(moment.year, MIN_YEAR), MAX_YEAR)
        return cls(year * 12 + moment.month - 1)

    def add_months_saturating(self, months: int) -> "Month":
        return Month(min(self.value + months, MAX_YEAR * 12 + 11))

    def year(self) -> Year:
        return Year(self.value // 12)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"{self.value // 12:04}-{self.value % 12 + 1:02}"


class LaxDate:
    """A date whose month and day may be unknown; partially ordered."""

    __slots__ = ("_year", "_month", "_day")

    def __init__(self, year: Year, month: int | None = None, day: int | None = None) -> None:
        if month is not None and not 1 <= month <= 12:
            raise InvalidDate("invalid month")
        if day is not None and not 1 <= day <= 31:
            raise InvalidDate("invalid day")
        self._year = year
        self._month = month
        self._day = day

    @property
    def year(self) -> Year:
        return self._year

    @property
    def day(self) -> int | None:
        return self._day

    @classmethod
    def parse(cls, text: str) -> "LaxDate":
        parts = text.split(".", 2)
        year_value = _parse_uint(parts[0], _U16_MAX)
        if year_value is None:
            raise InvalidDate("invalid year")
        year = Year.from_int(year_value)

        month = _parse_uint(parts[1], _U8_MAX) if len(parts) > 1 else None
        if month is not None and not 1 <= month <= 12:
            month = None
        day = _parse_uint(parts[2], _U8_MAX) if len(parts) > 2 else None
        if day is not None and not 1 <= day <= 31:
            day = None
        return cls(year, month, day)

    @classmethod
    def tomorrow(cls) -> "LaxDate":
        date = _dt.datetime.now(_dt.timezone.utc).date() + _dt.timedelta(days=1)
        return cls(Year.from_int(date.year), date.month, date.day)

    def month(self) -> Month | None:
        if self._month is None:
            return None
        return Month(self._year.value * 12 + self._month - 1)

    def _compare(self, other: "LaxDate") -> int | None:
        if self._year != other._year:
            return -1 if self._year < other._year else 1
        if self._month is None or other._month is None:
            return None
        if self._month != other._month:
            return -1 if self._month < other._month else 1
        if self._day is None or other._day is None:
            return None
        return (self._day > other._day) - (self._day < other._day)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LaxDate):
            return NotImplemented
        return self._compare(other) == 0

    def __lt__(self, other: "LaxDate") -> bool:
        if not isinstance(other, LaxDate):
            return NotImplemented
        return self._compare(other) == -1

    def __le__(self, other: "LaxDate") -> bool:
        if not isinstance(other, LaxDate):
            return NotImplemented
        return self._compare(other) in (-1, 0)

    def __gt__(self, other: "LaxDate") -> bool:
        if not isinstance(other, LaxDate):
            return NotImplemented
        return self._compare(other) == 1

    def __ge__(self, other: "LaxDate") -> bool:
        if not isinstance(other, LaxDate):
            return NotImplemented
        return self._compare(other) in (1, 0)

    __hash__: ClassVar[None] = None  # type: ignore[assignment]

    def __str__(self) -> str:
        month = f"{self._month:02}" if self._month is not None else "??"
        day = f"{self._day:02}" if self._day is not None else "??"
        return f"{self._year.value:04}.{month}.{day}"

    def __repr__(self) -> str:
        return f"LaxDate({self})"