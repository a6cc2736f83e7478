"""Per-position statistics of games played on the site, grouped by speed and rating."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from enum import IntEnum
from typing import BinaryIO, Generic, Iterable, Iterator, Protocol, TypeVar

from openingexplorer.game_id import GameId
from openingexplorer.speed import BySpeed, Speed
from openingexplorer.stats import Outcome, Stats
from openingexplorer.uci import RawUciMove, UciMove
from openingexplorer.uint import read_uint, write_uint
from openingexplorer.util import midpoint, sort_by_key_and_truncate

T = TypeVar("T")

MAX_LICHESS_GAMES = 8
MAX_TOP_GAMES = 4  # <= MAX_LICHESS_GAMES


class RatingGroup(IntEnum):
    """Rating bracket of a game, by the average rating of both players."""

    GROUP_LOW = 0
    GROUP_1000 = 1
    GROUP_1200 = 2
    GROUP_1400 = 3
    GROUP_1600 = 4
    GROUP_1800 = 5
    GROUP_2000 = 6
    GROUP_2200 = 7
    GROUP_2500 = 8
    GROUP_2800 = 9
    GROUP_3200 = 10

    @classmethod
    def select_avg(cls, avg: int) -> "RatingGroup":
        if avg < 1000:
            return cls.GROUP_LOW
        if avg < 1200:
            return cls.GROUP_1000
        if avg < 1400:
            return cls.GROUP_1200
        if avg < 1600:
            return cls.GROUP_1400
        if avg < 1800:
            return cls.GROUP_1600
        if avg < 2000:
            return cls.GROUP_1800
        if avg < 2200:
            return cls.GROUP_2000
        if avg < 2500:
            return cls.GROUP_2200
        if avg < 2800:
            return cls.GROUP_2500
        return cls.GROUP_3200

    @classmethod
    def select(cls, mover_rating: int, opponent_rating: int) -> "RatingGroup":
        return cls.select_avg(midpoint(mover_rating, opponent_rating))

    def lower_bound(self) -> int:
        return _LOWER_BOUNDS[self]

    @classmethod
    def parse(cls, text: str) -> "RatingGroup":
        digits = text[1:] if text.startswith("+") else text
        if not digits or not all(c in "0123456789" for c in digits):
            raise ValueError(f"invalid rating: {text!r}")
        value = int(digits)
        if value > 0xFFFF:
            raise ValueError(f"rating out of range: {text!r}")
        return cls.select_avg(value)


_LOWER_BOUNDS = {
    RatingGroup.GROUP_LOW: 0,
    RatingGroup.GROUP_1000: 1000,
    RatingGroup.GROUP_1200: 1200,
    RatingGroup.GROUP_1400: 1400,
    RatingGroup.GROUP_1600: 1600,
    RatingGroup.GROUP_1800: 1800,
    RatingGroup.GROUP_2000: 2000,
    RatingGroup.GROUP_2200: 2200,
    RatingGroup.GROUP_2500: 2500,
    RatingGroup.GROUP_2800: 2800,
    RatingGroup.GROUP_3200: 3200,
}


class ByRatingGroup(Generic[T]):
    """One value for each rating group."""

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[T]) -> None:
        self._values = list(values)
        if len(self._values) != len(RatingGroup):
            raise ValueError(f"expected {len(RatingGroup)} values, got {len(self._values)}")

    def get(self, rating_group: RatingGroup) -> T:
        return self._values[rating_group]

    def __getitem__(self, rating_group: RatingGroup) -> T:
        return self.get(rating_group)

    def __setitem__(self, rating_group: RatingGroup, value: T) -> None:
        self._values[rating_group] = value

    def zip_rating_group(self) -> list[tuple[RatingGroup, T]]:
        return list(zip(RatingGroup, self._values))

    def __iter__(self) -> Iterator[T]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"ByRatingGroup({self._values!r})"


@dataclass
class LichessGroup:
    stats: Stats = field(default_factory=Stats)
    games: list[tuple[int, GameId]] = field(default_factory=list)


class _QueryFilter(Protocol):
    def contains_speed(self, speed: Speed) -> bool: ...

    def contains_rating_group(self, rating_group: RatingGroup) -> bool: ...

    def top_group(self) -> RatingGroup | None: ...


class _Limits(Protocol):
    moves: int
    top_games: int
    recent_games: int

    def games_wanted(self) -> bool: ...


@dataclass
class PreparedMove:
    uci: UciMove
    stats: Stats
    game: GameId | None = None
    average_rating: int | None = None
    average_opponent_rating: int | None = None
    performance: int | None = None


@dataclass
class PreparedResponse:
    total: Stats
    moves: list[PreparedMove]
    recent_games: list[tuple[UciMove, GameId]]
    top_games: list[tuple[UciMove, GameId]]


_SPEED_CODES = {speed: code for code, speed in enumerate(Speed, start=1)}
_SPEEDS_BY_CODE = {code: speed for speed, code in _SPEED_CODES.items()}


def _new_sub_entry() -> BySpeed[ByRatingGroup[LichessGroup]]:
    return BySpeed(*(ByRatingGroup(LichessGroup() for _ in RatingGroup) for _ in Speed))


def _read_header(reader: BinaryIO) -> tuple[Speed, RatingGroup, int] | None:
    """Read a group header; None marks the end of a move's groups."""
    chunk = reader.read(1)
    if not chunk:
        raise EOFError("unexpected end of data while reading header")
    n = chunk[0]
    speed_code = n & 7
    if speed_code == 0:
        return None
    if speed_code not in _SPEEDS_BY_CODE:
        raise ValueError("invalid speed")
    group_code = (n >> 3) & 15
    if group_code >= len(RatingGroup):
        raise ValueError("invalid rating group")
    single_game = (n >> 7) != 0
    num_games = 1 if single_game else read_uint(reader)
    return _SPEEDS_BY_CODE[speed_code], RatingGroup(group_code), num_games


def _write_end(out: BinaryIO) -> None:
    out.write(b"\x00")


def _write_group_header(
    out: BinaryIO, speed: Speed, rating_group: RatingGroup, num_games: int
) -> None:
    single_game = num_games == 1
    out.write(bytes([_SPEED_CODES[speed] | (int(rating_group) << 3) | (int(single_game) << 7)]))
    if not single_game:
        write_uint(out, num_games)


@dataclass
class LichessEntry:
    """Moves played from one position, with stats and recent games per group."""

    sub_entries: dict[RawUciMove, BySpeed[ByRatingGroup[LichessGroup]]] = field(
        default_factory=dict
    )
    min_game_idx: int | None = None
    max_game_idx: int | None = None

    SIZE_HINT = 13

    @classmethod
    def new_single(
        cls,
        uci: UciMove,
        speed: Speed,
        game_id: GameId,
        outcome: Outcome,
        mover_rating: int,
        opponent_rating: int,
    ) -> "LichessEntry":
        sub_entry = _new_sub_entry()
        sub_entry.get(speed)[RatingGroup.select(mover_rating, opponent_rating)] = LichessGroup(
            stats=Stats.new_single(outcome, mover_rating),
            games=[(0, game_id)],
        )
        return cls(
            sub_entries={RawUciMove.pack(uci): sub_entry},
            min_game_idx=0,
            max_game_idx=0,
        )

    def extend_from_reader(self, reader: BinaryIO) -> None:
        """Merge an encoded entry into this one; its games come after existing ones."""
        data = reader.read()
        end = len(data)
        buf = io.BytesIO(data)
        base_game_idx = 0 if self.max_game_idx is None else self.max_game_idx + 1

        while buf.tell() < end:
            uci = RawUciMove.read(buf)
            sub_entry = self.sub_entries.get(uci)
            if sub_entry is None:
                sub_entry = self.sub_entries[uci] = _new_sub_entry()

            while buf.tell() < end:
                header = _read_header(buf)
                if header is None:
                    break
                speed, rating_group, num_games = header
                group = sub_entry.get(speed).get(rating_group)
                group.stats += Stats.read(buf)
                for _ in range(num_games):
                    game_idx = base_game_idx + read_uint(buf)
                    self.min_game_idx = (
                        game_idx if self.min_game_idx is None else min(self.min_game_idx, game_idx)
                    )
                    self.max_game_idx = (
                        game_idx if self.max_game_idx is None else max(self.max_game_idx, game_idx)
                    )
                    group.games.append((game_idx, GameId.read(buf)))

    def write(self, out: BinaryIO) -> None:
        min_game_idx = self.min_game_idx or 0
        for i, (uci, sub_entry) in enumerate(self.sub_entries.items()):
            if i > 0:
                _write_end(out)
            uci.write(out)
            for speed, by_rating_group in sub_entry.zip_speed():
                for rating_group, group in by_rating_group.zip_rating_group():
                    if group.stats.is_empty():
                        continue
                    num_games = min(len(group.games), MAX_LICHESS_GAMES)
                    _write_group_header(out, speed, rating_group, num_games)
                    group.stats.write(out)
                    for game_idx, game in group.games[len(group.games) - num_games:]:
                        write_uint(out, game_idx - min_game_idx)
                        game.write(out)

    def _selected_groups(
        self, sub_entry: BySpeed[ByRatingGroup[LichessGroup]], query_filter: _QueryFilter
    ) -> Iterator[tuple[Speed, RatingGroup, LichessGroup]]:
        for speed, by_rating_group in sub_entry.zip_speed():
            if query_filter.contains_speed(speed):
                for rating_group, group in by_rating_group.zip_rating_group():
                    if query_filter.contains_rating_group(rating_group):
                        yield speed, rating_group, group

    def total(self, query_filter: _QueryFilter) -> Stats:
        stats = Stats()
        for sub_entry in self.sub_entries.values():
            for _, _, group in self._selected_groups(sub_entry, query_filter):
                stats += group.stats
        return stats

    def prepare(self, query_filter: _QueryFilter, limits: _Limits) -> PreparedResponse:
        total = Stats()
        moves: list[PreparedMove] = []
        games: list[tuple[RatingGroup, Speed, int, UciMove, GameId]] = []
        games_wanted = limits.games_wanted()

        for raw_uci, sub_entry in self.sub_entries.items():
            uci = raw_uci.unpack()
            latest_game: tuple[int, GameId] | None = None
            stats = Stats()

            for speed, rating_group, group in self._selected_groups(sub_entry, query_filter):
                stats += group.stats
                if games_wanted:
                    for idx, game in group.games:
                        if latest_game is None or latest_game[0] < idx:
                            latest_game = (idx, game)
                    games.extend(
                        (rating_group, speed, idx, uci, game) for idx, game in group.games
                    )

            if not stats.is_empty():
                total += stats
                moves.append(
                    PreparedMove(
                        uci=uci,
                        stats=stats,
                        game=latest_game[1]
                        if latest_game is not None and stats.is_single()
                        else None,
                        average_rating=stats.average_rating(),
                    )
                )

        sort_by_key_and_truncate(moves, limits.moves, lambda m: -m.stats.total())

        # Split games into top and recent.
        top_group = query_filter.top_group()
        if top_group is not None:
            top_games = [g for g in games if g[0] >= top_group]
            sort_by_key_and_truncate(
                top_games,
                MAX_TOP_GAMES,
                lambda g: (g[1].highscore() - g[0].lower_bound(), -g[2]),
            )
            top_ids = {g[4] for g in top_games}
            recent_games = [g for g in games if g[4] not in top_ids]
        else:
            top_games = []
            recent_games = games

        valid_recent_games = MAX_LICHESS_GAMES - len(top_games)
        del top_games[limits.top_games:]

        sort_by_key_and_truncate(
            recent_games, min(valid_recent_games, limits.recent_games), lambda g: -g[2]
        )

        return PreparedResponse(
            total=total,
            moves=moves,
            top_games=[(g[3], g[4]) for g in top_games],
            recent_games=[(g[3], g[4]) for g in recent_games],
        )