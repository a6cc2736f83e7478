"""Metadata of a game played on the site, and its binary form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from openingexplorer.date import Month
from openingexplorer.mode import Mode
from openingexplorer.speed import Speed
from openingexplorer.stats import Outcome
from openingexplorer.uci import Color
from openingexplorer.uint import read_uint, write_uint
from openingexplorer.util import ByColor

_SPEED_CODES = {speed: code for code, speed in enumerate(Speed)}
_SPEEDS_BY_CODE = {code: speed for speed, code in _SPEED_CODES.items()}
_OUTCOME_CODES = {Color.BLACK: 0, Color.WHITE: 1, None: 2}
_WINNERS_BY_CODE = {code: winner for winner, code in _OUTCOME_CODES.items()}


def _read_exact(reader: BinaryIO, size: int) -> bytes:
    data = reader.read(size)
    if len(data) != size:
        raise EOFError("unexpected end of data while reading game")
    return data


@dataclass
class GamePlayer:
    name: str
    rating: int

    def write(self, out: BinaryIO) -> None:
        name = self.name.encode("utf-8")
        write_uint(out, len(name))
        out.write(name)
        out.write(self.rating.to_bytes(2, "little"))

    @classmethod
    def read(cls, reader: BinaryIO) -> "GamePlayer":
        length = read_uint(reader)
        name = _read_exact(reader, length).decode("utf-8")
        rating = int.from_bytes(_read_exact(reader, 2), "little")
        return cls(name, rating)


@dataclass
class LichessGame:
    outcome: Outcome
    speed: Speed
    mode: Mode
    players: ByColor[GamePlayer]
    month: Month
    indexed_player: ByColor[bool]
    indexed_lichess: bool

    SIZE_HINT = 1 + 2 * (1 + 20 + 2) + 2

    def write(self, out: BinaryIO) -> None:
        flags = (
            _SPEED_CODES[self.speed]
            | (_OUTCOME_CODES[self.outcome.winner] << 3)
            | (int(self.mode.is_rated()) << 5)
            | (int(self.indexed_player.white) << 6)
            | (int(self.indexed_player.black) << 7)
        )
        out.write(bytes([flags]))
        self.players.white.write(out)
        self.players.black.write(out)
        out.write(int(self.month).to_bytes(2, "little"))
        out.write(bytes([int(self.indexed_lichess)]))

    @classmethod
    def read(cls, reader: BinaryIO) -> "LichessGame":
        byte = _read_exact(reader, 1)[0]
        speed_code = byte & 7
        if speed_code not in _SPEEDS_BY_CODE:
            raise ValueError("invalid speed")
        outcome_code = (byte >> 3) & 3
        if outcome_code not in _WINNERS_BY_CODE:
            raise ValueError("invalid outcome")
        white = GamePlayer.read(reader)
        black = GamePlayer.read(reader)
        month = Month.from_int(int.from_bytes(_read_exact(reader, 2), "little"))
        indexed_lichess = _read_exact(reader, 1)[0] != 0
        return cls(
            outcome=Outcome.from_winner(_WINNERS_BY_CODE[outcome_code]),
            speed=_SPEEDS_BY_CODE[speed_code],
            mode=Mode.from_rated((byte >> 5) & 1 == 1),
            players=ByColor(white, black),
            month=month,
            indexed_player=ByColor((byte >> 6) & 1 == 1, (byte >> 7) & 1 == 1),
            indexed_lichess=indexed_lichess,
        )