"""Per-player statistics of moves from a position, and indexing status."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import BinaryIO, Collection, Iterator, Protocol

from openingexplorer.game_id import GameId
from openingexplorer.lichess import LichessGroup, PreparedMove, PreparedResponse
from openingexplorer.mode import ByMode, Mode
from openingexplorer.speed import BySpeed, Speed
from openingexplorer.stats import Outcome, Stats
from openingexplorer.uci import Color, RawUciMove, UciMove
from openingexplorer.uint import read_uint, write_uint
from openingexplorer.util import sort_by_key_and_truncate

MAX_PLAYER_GAMES = 8  # must fit into 4 bits

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_U64_MAX = (1 << 64) - 1
_REVISIT_COOLDOWN = timedelta(hours=24)
_INDEX_COOLDOWN = timedelta(minutes=2)

_SPEED_CODES = {speed: code for code, speed in enumerate(Speed, start=1)}
_SPEEDS_BY_CODE = {code: speed for speed, code in _SPEED_CODES.items()}


@dataclass(frozen=True)
class _GroupHeader:
    speed: Speed
    mode: Mode
    num_games: int


def _read_header(reader: BinaryIO) -> _GroupHeader | None:
    """Read a group header; None marks the end of a move's groups."""
    chunk = reader.read(1)
    if not chunk:
        raise EOFError("unexpected end of data while reading header")
    n = chunk[0]
    speed_code = n & 7
    if speed_code == 0:
        return None
    if speed_code not in _SPEEDS_BY_CODE:
        raise ValueError("invalid player header")
    return _GroupHeader(
        speed=_SPEEDS_BY_CODE[speed_code],
        mode=Mode.from_rated((n >> 3) & 1 == 1),
        num_games=n >> 4,
    )


def _write_header(out: BinaryIO, header: _GroupHeader | None) -> None:
    if header is None:
        out.write(b"\x00")
        return
    byte = (
        _SPEED_CODES[header.speed]
        | (int(header.mode.is_rated()) << 3)
        | ((header.num_games << 4) & 0xFF)
    )
    out.write(bytes([byte]))


class _PlayerQueryFilter(Protocol):
    speeds: Collection[Speed] | None
    modes: Collection[Mode] | None


class _PlayerLimits(Protocol):
    moves: int
    recent_games: int


def _new_sub_entry() -> BySpeed[ByMode[LichessGroup]]:
    return BySpeed(*(ByMode(LichessGroup(), LichessGroup()) for _ in Speed))


@dataclass
class PlayerEntry:
    """Moves a player made from one position, with stats and recent games."""

    sub_entries: dict[RawUciMove, BySpeed[ByMode[LichessGroup]]] = field(default_factory=dict)
    min_game_idx: int | None = None
    max_game_idx: int | None = None

    SIZE_HINT = 13

    @classmethod
    def new_single(
        cls,
        uci: UciMove,
        speed: Speed,
        mode: Mode,
        game_id: GameId,
        outcome: Outcome,
        opponent_rating: int,
    ) -> "PlayerEntry":
        sub_entry = _new_sub_entry()
        sub_entry.get(speed)[mode] = LichessGroup(
            stats=Stats.new_single(outcome, opponent_rating),
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
                group = sub_entry.get(header.speed).get(header.mode)
                group.stats += Stats.read(buf)
                for _ in range(header.num_games):
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
                _write_header(out, None)
            uci.write(out)
            for speed, by_mode in sub_entry.zip_speed():
                for mode, group in by_mode.zip_mode():
                    if group.stats.is_empty():
                        continue
                    kept = group.games[max(len(group.games) - MAX_PLAYER_GAMES, 0):]
                    _write_header(out, _GroupHeader(speed, mode, len(kept)))
                    group.stats.write(out)
                    for game_idx, game in kept:
                        write_uint(out, game_idx - min_game_idx)
                        game.write(out)

    @staticmethod
    def _selected_groups(
        sub_entry: BySpeed[ByMode[LichessGroup]], query_filter: _PlayerQueryFilter
    ) -> Iterator[LichessGroup]:
        for speed, by_mode in sub_entry.zip_speed():
            if query_filter.speeds is not None and speed not in query_filter.speeds:
                continue
            for mode, group in by_mode.zip_mode():
                if query_filter.modes is None or mode in query_filter.modes:
                    yield group

    def prepare(
        self, color: Color, query_filter: _PlayerQueryFilter, limits: _PlayerLimits
    ) -> PreparedResponse:
        total = Stats()
        moves: list[PreparedMove] = []
        recent_games: list[tuple[int, RawUciMove, GameId]] = []

        for uci, sub_entry in self.sub_entries.items():
            latest_game: tuple[int, GameId] | None = None
            stats = Stats()

            for group in self._selected_groups(sub_entry, query_filter):
                stats += group.stats
                for idx, game in group.games:
                    if latest_game is None or latest_game[0] < idx:
                        latest_game = (idx, game)
                recent_games.extend((idx, uci, game) for idx, game in group.games)

            if not stats.is_empty():
                total += stats
                moves.append(
                    PreparedMove(
                        uci=uci.unpack(),
                        stats=stats,
                        game=latest_game[1]
                        if latest_game is not None and stats.is_single()
                        else None,
                        average_rating=None,
                        average_opponent_rating=stats.average_rating(),
                        performance=stats.performance(color),
                    )
                )

        sort_by_key_and_truncate(moves, limits.moves, lambda m: -m.stats.total())
        sort_by_key_and_truncate(
            recent_games, min(limits.recent_games, MAX_PLAYER_GAMES), lambda g: -g[0]
        )

        return PreparedResponse(
            total=total,
            moves=moves,
            recent_games=[(uci.unpack(), game) for _, uci, game in recent_games],
            top_games=[],
        )


class _RunKind(Enum):
    INDEX = "index"
    REVISIT = "revisit"


@dataclass(frozen=True)
class IndexRun:
    """A pass over a player's games: new ones, or a revisit of ongoing ones."""

    kind: _RunKind
    created_at: int

    @classmethod
    def index(cls, after: int) -> "IndexRun":
        return cls(_RunKind.INDEX, after)

    @classmethod
    def revisit(cls, since: int) -> "IndexRun":
        return cls(_RunKind.REVISIT, since)

    @property
    def is_revisit(self) -> bool:
        return self.kind is _RunKind.REVISIT

    def since(self) -> int:
        if self.kind is _RunKind.INDEX:
            # Plus 1 millisecond to avoid overlap. Might miss games created
            # in the same millisecond as the previous run's latest.
            return min(self.created_at + 1, _U64_MAX)
        return self.created_at

    def __str__(self) -> str:
        if self.kind is _RunKind.INDEX:
            return f"created_at > {self.created_at}"
        return f"created_at >= {self.created_at}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _secs_since_epoch(moment: datetime) -> int:
    elapsed = moment - UNIX_EPOCH
    if elapsed < timedelta(0):
        raise ValueError("time before unix epoch")
    return elapsed // timedelta(seconds=1)


@dataclass
class PlayerStatus:
    latest_created_at: int = 0
    revisit_ongoing_created_at: int | None = None
    indexed_at: datetime = UNIX_EPOCH
    revisited_at: datetime = UNIX_EPOCH

    SIZE_HINT = 3 * 8

    def maybe_start_index_run(self) -> IndexRun | None:
        return self._maybe_revisit_ongoing() or self._maybe_index()

    def _maybe_revisit_ongoing(self) -> IndexRun | None:
        if _now() - self.revisited_at > _REVISIT_COOLDOWN:
            if self.revisit_ongoing_created_at is not None:
                return IndexRun.revisit(self.revisit_ongoing_created_at)
        return None

    def _maybe_index(self) -> IndexRun | None:
        if _now() - self.indexed_at > _INDEX_COOLDOWN:
            return IndexRun.index(self.latest_created_at)
        return None

    def finish_index_run(self, run: IndexRun) -> None:
        self.indexed_at = _now()
        if run.is_revisit:
            self.revisited_at = self.indexed_at

    @classmethod
    def read(cls, reader: BinaryIO) -> "PlayerStatus":
        latest_created_at = read_uint(reader)
        revisit = read_uint(reader)
        indexed_at = UNIX_EPOCH + timedelta(seconds=read_uint(reader))
        revisited_at = UNIX_EPOCH + timedelta(seconds=read_uint(reader))
        return cls(
            latest_created_at=latest_created_at,
            revisit_ongoing_created_at=revisit or None,
            indexed_at=indexed_at,
            revisited_at=revisited_at,
        )

    def write(self, out: BinaryIO) -> None:
        write_uint(out, self.latest_created_at)
        write_uint(out, self.revisit_ongoing_created_at or 0)
        write_uint(out, _secs_since_epoch(self.indexed_at))
        write_uint(out, _secs_since_epoch(self.revisited_at))