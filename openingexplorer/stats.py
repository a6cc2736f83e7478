"""Win, draw and loss counts with a rating sum, and their binary form."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import BinaryIO

from openingexplorer.uci import Color
from openingexplorer.uint import read_uint, write_uint


@dataclass(frozen=True)
class Outcome:
    """A finished game's result: the winner, or None for a draw."""

    winner: Color | None

    @classmethod
    def from_winner(cls, winner: Color | None) -> "Outcome":
        return cls(winner)

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    def __str__(self) -> str:
        if self.winner is Color.WHITE:
            return "1-0"
        if self.winner is Color.BLACK:
            return "0-1"
        return "1/2-1/2"


# Rating differences by percentage score, from the FIDE rating regulations.
_DELTAS = (
    -800.0, -677.0, -589.0, -538.0, -501.0, -470.0, -444.0, -422.0, -401.0, -383.0, -366.0,
    -351.0, -336.0, -322.0, -309.0, -296.0, -284.0, -273.0, -262.0, -251.0, -240.0, -230.0,
    -220.0, -211.0, -202.0, -193.0, -184.0, -175.0, -166.0, -158.0, -149.0, -141.0, -133.0,
    -125.0, -117.0, -110.0, -102.0, -95.0, -87.0, -80.0, -72.0, -65.0, -57.0, -50.0, -43.0,
    -36.0, -29.0, -21.0, -14.0, -7.0, 0.0, 7.0, 14.0, 21.0, 29.0, 36.0, 43.0, 50.0, 57.0,
    65.0, 72.0, 80.0, 87.0, 95.0, 102.0, 110.0, 117.0, 125.0, 133.0, 141.0, 149.0, 158.0,
    166.0, 175.0, 184.0, 193.0, 202.0, 211.0, 220.0, 230.0, 240.0, 251.0, 262.0, 273.0,
    284.0, 296.0, 309.0, 322.0, 336.0, 351.0, 366.0, 383.0, 401.0, 422.0, 444.0, 470.0,
    501.0, 538.0, 589.0, 677.0, 800.0,
)


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


@dataclass
class Stats:
    rating_sum: int = 0
    white: int = 0
    draws: int = 0
    black: int = 0

    @classmethod
    def new_single(cls, outcome: Outcome, rating: int) -> "Stats":
        return cls(
            rating_sum=rating,
            white=int(outcome.winner is Color.WHITE),
            draws=int(outcome.winner is None),
            black=int(outcome.winner is Color.BLACK),
        )

    def __iadd__(self, other: "Stats") -> "Stats":
        self.rating_sum += other.rating_sum
        self.white += other.white
        self.draws += other.draws
        self.black += other.black
        return self

    def __sub__(self, other: "Stats") -> "Stats":
        result = Stats(
            rating_sum=self.rating_sum - other.rating_sum,
            white=self.white - other.white,
            draws=self.draws - other.draws,
            black=self.black - other.black,
        )
        if min(result.rating_sum, result.white, result.draws, result.black) < 0:
            raise ValueError("stats subtraction underflow")
        return result

    def total(self) -> int:
        return self.white + self.draws + self.black

    def is_empty(self) -> bool:
        return self.total() == 0

    def is_single(self) -> bool:
        return self.total() == 1

    def _average_rating_float(self) -> float | None:
        total = self.total()
        return self.rating_sum / total if total > 0 else None

    def average_rating(self) -> int | None:
        avg = self._average_rating_float()
        return None if avg is None else _round_half_away(avg)

    def performance(self, color: Color) -> int | None:
        avg_opponent_rating = self._average_rating_float()
        if avg_opponent_rating is None:
            return None
        score = 100 * color.fold_wb(self.white, self.black) + 50 * self.draws
        p = score / self.total()
        idx = math.trunc(p)
        fract = p - idx
        upper = _DELTAS[idx + 1] if idx + 1 < len(_DELTAS) else 800.0
        return _round_half_away(avg_opponent_rating + _DELTAS[idx] * (1.0 - fract) + upper * fract)

    def to_dict(self) -> dict[str, int]:
        return {"white": self.white, "draws": self.draws, "black": self.black}

    @classmethod
    def read(cls, reader: BinaryIO) -> "Stats":
        rating_sum = read_uint(reader)
        tag = read_uint(reader)
        if tag == 0:
            return cls(rating_sum, white=1)
        if tag == 1:
            return cls(rating_sum, black=1)
        if tag == 2:
            return cls(rating_sum, draws=1)
        draws = read_uint(reader)
        black = read_uint(reader)
        return cls(rating_sum, white=tag - 3, draws=draws, black=black)

    def write(self, out: BinaryIO) -> None:
        write_uint(out, self.rating_sum)
        counts = (self.white, self.draws, self.black)
        if counts == (1, 0, 0):
            write_uint(out, 0)
        elif counts == (0, 0, 1):
            write_uint(out, 1)
        elif counts == (0, 1, 0):
            write_uint(out, 2)
        else:
            write_uint(out, self.white + 3)
            write_uint(out, self.draws)
            write_uint(out, self.black)