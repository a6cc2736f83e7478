"""Over-the-board master games and per-position statistics of them."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Protocol

from openingexplorer.date import LaxDate
from openingexplorer.game_id import GameId
from openingexplorer.lichess import PreparedMove, PreparedResponse
from openingexplorer.lichess_game import GamePlayer
from openingexplorer.stats import Outcome, Stats
from openingexplorer.uci import Color, RawUciMove, UciMove
from openingexplorer.util import ByColor, sort_by_key_and_truncate

MAX_MASTERS_GAMES = 15

_U16_MAX = 0xFFFF


class _Limits(Protocol):
    moves: int
    top_games: int


def _parse_player(data: Any) -> GamePlayer:
    return GamePlayer(name=str(data["name"]), rating=int(data["rating"]))


def _parse_moves(text: str) -> list[UciMove]:
    if not text:
        return []
    return [UciMove.parse(token) for token in text.split(" ")]


@dataclass
class MastersGame:
    """A master game with its headers and moves."""

    event: str
    site: str
    date: LaxDate
    round: str
    players: ByColor[GamePlayer]
    winner: Color | None
    moves: list[UciMove] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MastersGame":
        winner = data.get("winner")
        return cls(
            event=str(data["event"]),
            site=str(data["site"]),
            date=LaxDate.parse(str(data["date"])),
            round=str(data["round"]),
            players=ByColor(_parse_player(data["white"]), _parse_player(data["black"])),
            winner=None if winner is None else Color(winner),
            moves=_parse_moves(str(data["moves"])),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "event": self.event,
            "site": self.site,
            "date": str(self.date),
            "round": self.round,
            "white": {"name": self.players.white.name, "rating": self.players.white.rating},
            "black": {"name": self.players.black.name, "rating": self.players.black.rating},
            "winner": None if self.winner is None else self.winner.value,
            "moves": " ".join(str(uci) for uci in self.moves),
        }

    def outcome(self) -> Outcome:
        return Outcome.from_winner(self.winner)


@dataclass
class MastersGameWithId:
    id: GameId
    game: MastersGame

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MastersGameWithId":
        return cls(id=GameId.parse(str(data["id"])), game=MastersGame.from_dict(data))


@dataclass
class MastersGroup:
    stats: Stats = field(default_factory=Stats)
    games: list[tuple[int, GameId]] = field(default_factory=list)


def _read_exact(reader: BinaryIO, size: int) -> bytes:
    data = reader.read(size)
    if len(data) != size:
        raise EOFError("unexpected end of data while reading masters entry")
    return data


@dataclass
class MastersEntry:
    """Moves played from one position in master games, with the top games."""

    groups: dict[RawUciMove, MastersGroup] = field(default_factory=dict)

    SIZE_HINT = 14

    @classmethod
    def new_single(
        cls,
        uci: UciMove,
        game_id: GameId,
        outcome: Outcome,
        mover_rating: int,
        opponent_rating: int,
    ) -> "MastersEntry":
        sort_key = min(mover_rating + opponent_rating, _U16_MAX)
        return cls(
            groups={
                RawUciMove.pack(uci): MastersGroup(
                    stats=Stats.new_single(outcome, mover_rating),
                    games=[(sort_key, game_id)],
                )
            }
        )

    def extend_from_reader(self, reader: BinaryIO) -> None:
        """Merge an encoded entry into this one."""
        data = reader.read()
        end = len(data)
        buf = io.BytesIO(data)
        while buf.tell() < end:
            uci = RawUciMove.read(buf)
            group = self.groups.get(uci)
            if group is None:
                group = self.groups[uci] = MastersGroup()
            group.stats += Stats.read(buf)
            num_games = _read_exact(buf, 1)[0]
            for _ in range(num_games):
                sort_key = int.from_bytes(_read_exact(buf, 2), "little")
                group.games.append((sort_key, GameId.read(buf)))

    def write(self, out: BinaryIO) -> None:
        """Encode the entry, keeping only the top games (and every single game)."""
        all_games = [game for group in self.groups.values() for game in group.games]
        if not all_games:
            return
        if len(all_games) > MAX_MASTERS_GAMES:
            lowest_top_game = sorted(all_games, reverse=True)[MAX_MASTERS_GAMES - 1]
        else:
            lowest_top_game = min(all_games)

        for uci, group in self.groups.items():
            uci.write(out)
            group.stats.write(out)
            if len(group.games) == 1:
                kept = list(group.games)
            else:
                kept = [game for game in group.games if game >= lowest_top_game]
            if len(kept) > 0xFF:
                raise ValueError("too many games in masters group")
            out.write(bytes([len(kept)]))
            for sort_key, game_id in kept:
                out.write(sort_key.to_bytes(2, "little"))
                game_id.write(out)

    def prepare(self, limits: _Limits) -> PreparedResponse:
        total = Stats()
        moves: list[PreparedMove] = []
        top_games: list[tuple[int, UciMove, GameId]] = []

        for raw_uci, group in self.groups.items():
            total += group.stats
            uci = raw_uci.unpack()
            single_game = (
                group.games[0][1] if group.stats.is_single() and group.games else None
            )
            moves.append(
                PreparedMove(
                    uci=uci,
                    stats=group.stats,
                    game=single_game,
                    average_rating=group.stats.average_rating(),
                )
            )
            top_games.extend((sort_key, uci, game) for sort_key, game in group.games)

        sort_by_key_and_truncate(
            top_games, min(limits.top_games, MAX_MASTERS_GAMES), lambda g: -g[0]
        )
        sort_by_key_and_truncate(moves, limits.moves, lambda m: -m.stats.total())

        return PreparedResponse(
            total=total,
            moves=moves,
            top_games=[(uci, game) for _, uci, game in top_games],
            recent_games=[],
        )