import io
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from openingexplorer.game_id import GameId
from openingexplorer.mode import Mode
from openingexplorer.player import (
    UNIX_EPOCH,
    IndexRun,
    PlayerEntry,
    PlayerStatus,
    _GroupHeader,
    _read_header,
    _write_header,
)
from openingexplorer.speed import Speed
from openingexplorer.stats import Outcome
from openingexplorer.uci import Color, RawUciMove, UciMove, parse_square


@dataclass
class Filter:
    speeds: set | None = None
    modes: set | None = None


@dataclass
class Limits:
    moves: int = 12
    recent_games: int = 8


def _uci(text):
    return UciMove.normal(parse_square(text[:2]), parse_square(text[2:4]))


def _encode(entry):
    buf = io.BytesIO()
    entry.write(buf)
    return buf.getvalue()


def _merged():
    uci_ab = _uci("e2e4")
    uci_c = _uci("d2d4")
    a = PlayerEntry.new_single(
        uci_ab, Speed.BULLET, Mode.RATED, GameId.parse("aaaaaaaa"),
        Outcome.from_winner(Color.WHITE), 1600,
    )
    b = PlayerEntry.new_single(
        uci_ab, Speed.BULLET, Mode.RATED, GameId.parse("bbbbbbbb"),
        Outcome.from_winner(Color.BLACK), 1800,
    )
    c = PlayerEntry.new_single(
        uci_c, Speed.BULLET, Mode.RATED, GameId.parse("cccccccc"),
        Outcome.from_winner(None), 1700,
    )
    merged = PlayerEntry()
    for entry in (a, b, c):
        merged.extend_from_reader(io.BytesIO(_encode(entry)))
    return merged, uci_ab, uci_c


def test_header_roundtrip():
    headers = [_GroupHeader(Mode.RATED, Speed.CORRESPONDENCE, 15)._replace()
               if False else _GroupHeader(Speed.CORRESPONDENCE, Mode.RATED, 15), None]
    buf = io.BytesIO()
    for header in headers:
        _write_header(buf, header)
    buf.seek(0)
    assert [_read_header(buf) for _ in headers] == headers


def test_invalid_header():
    with pytest.raises(ValueError):
        _read_header(io.BytesIO(b"\x07"))


def test_single_entry_size():
    entry = PlayerEntry.new_single(
        _uci("e2e4"), Speed.BULLET, Mode.RATED, GameId.parse("aaaaaaaa"),
        Outcome.from_winner(Color.WHITE), 1600,
    )
    assert len(_encode(entry)) == PlayerEntry.SIZE_HINT


def test_merge_player():
    merged, uci_ab, _ = _merged()
    assert len(merged.sub_entries) == 2
    assert merged.max_game_idx == 2
    group = merged.sub_entries[RawUciMove.pack(uci_ab)].bullet.rated
    assert group.stats.white == 1
    assert group.stats.draws == 0
    assert group.stats.black == 1
    assert group.stats.average_rating() == 1700
    assert len(group.games) == 2

    roundtrip = PlayerEntry()
    roundtrip.extend_from_reader(io.BytesIO(_encode(merged)))
    assert len(roundtrip.sub_entries) == 2
    assert roundtrip.max_game_idx == 2


def test_prepare_orders_moves_and_recent_games():
    merged, uci_ab, uci_c = _merged()
    res = merged.prepare(Color.WHITE, Filter(), Limits())
    assert [m.uci for m in res.moves] == [uci_ab, uci_c]
    assert res.total.total() == 3
    assert res.moves[0].average_opponent_rating == 1700
    assert res.moves[0].average_rating is None
    assert res.moves[0].game is None
    assert res.moves[1].game == GameId.parse("cccccccc")
    assert res.recent_games == [
        (uci_c, GameId.parse("cccccccc")),
        (uci_ab, GameId.parse("bbbbbbbb")),
        (uci_ab, GameId.parse("aaaaaaaa")),
    ]
    assert res.top_games == []


def test_prepare_filters_by_mode():
    merged, _, _ = _merged()
    res = merged.prepare(Color.WHITE, Filter(modes={Mode.CASUAL}), Limits())
    assert res.moves == []
    assert res.total.is_empty()


def test_write_keeps_most_recent_games():
    uci = _uci("g1f3")
    merged = PlayerEntry()
    ids = [GameId(n) for n in range(10)]
    for game_id in ids:
        single = PlayerEntry.new_single(
            uci, Speed.BLITZ, Mode.CASUAL, game_id, Outcome.from_winner(None), 1500
        )
        merged.extend_from_reader(io.BytesIO(_encode(single)))
    roundtrip = PlayerEntry()
    roundtrip.extend_from_reader(io.BytesIO(_encode(merged)))
    group = roundtrip.sub_entries[RawUciMove.pack(uci)].blitz.casual
    assert [g for _, g in group.games] == ids[-8:]
    assert group.stats.draws == 10


def test_index_run():
    assert IndexRun.index(5).since() == 6
    assert IndexRun.revisit(5).since() == 5
    assert IndexRun.index((1 << 64) - 1).since() == (1 << 64) - 1
    assert str(IndexRun.index(5)) == "created_at > 5"
    assert str(IndexRun.revisit(5)) == "created_at >= 5"


def test_default_status_starts_index():
    run = PlayerStatus().maybe_start_index_run()
    assert run == IndexRun.index(0)


def test_status_revisit_preferred():
    status = PlayerStatus(latest_created_at=10, revisit_ongoing_created_at=7)
    assert status.maybe_start_index_run() == IndexRun.revisit(7)


def test_status_cooldown():
    now = datetime.now(timezone.utc)
    status = PlayerStatus(latest_created_at=10, revisit_ongoing_created_at=7,
                          indexed_at=now, revisited_at=now)
    assert status.maybe_start_index_run() is None
    status.indexed_at = now - timedelta(minutes=5)
    assert status.maybe_start_index_run() == IndexRun.index(10)


def test_finish_index_run():
    status = PlayerStatus()
    status.finish_index_run(IndexRun.index(0))
    assert status.indexed_at > UNIX_EPOCH
    assert status.revisited_at == UNIX_EPOCH
    status.finish_index_run(IndexRun.revisit(3))
    assert status.revisited_at == status.indexed_at


@given(
    st.integers(0, (1 << 64) - 1),
    st.integers(1, (1 << 64) - 1) | st.none(),
    st.integers(0, 10**10),
    st.integers(0, 10**10),
)
def test_status_roundtrip(latest, revisit, indexed, revisited):
    status = PlayerStatus(
        latest_created_at=latest,
        revisit_ongoing_created_at=revisit,
        indexed_at=UNIX_EPOCH + timedelta(seconds=indexed),
        revisited_at=UNIX_EPOCH + timedelta(seconds=revisited),
    )
    buf = io.BytesIO()
    status.write(buf)
    buf.seek(0)
    assert PlayerStatus.read(buf) == status