import io

import pytest
from hypothesis import given
from hypothesis import strategies as st

from openingexplorer.stats import Outcome, Stats
from openingexplorer.uci import Color

u32 = st.integers(0, 2**32 - 1)
stats_strategy = st.builds(Stats, rating_sum=u32, white=u32, draws=u32, black=u32)


@given(stats_strategy)
def test_stats_roundtrip(stats):
    out = io.BytesIO()
    stats.write(out)
    assert Stats.read(io.BytesIO(out.getvalue())) == stats


def test_performance():
    single = Stats(white=1, draws=0, black=0, rating_sum=1500)
    assert single.performance(Color.WHITE) == 2300
    assert single.performance(Color.BLACK) == 700

    symmetrical = Stats(white=123, draws=10, black=123, rating_sum=(123 + 10 + 123) * 987)
    assert symmetrical.performance(Color.WHITE) == 987
    assert symmetrical.performance(Color.BLACK) == 987

    p5 = Stats(white=5, draws=0, black=95, rating_sum=0)
    assert p5.performance(Color.WHITE) == -470
    assert p5.performance(Color.BLACK) == 470


def test_performance_empty():
    assert Stats().performance(Color.WHITE) is None
    assert Stats().average_rating() is None


def test_new_single():
    stats = Stats.new_single(Outcome.from_winner(Color.WHITE), 1600)
    assert stats == Stats(rating_sum=1600, white=1)
    assert stats.is_single()
    draw = Stats.new_single(Outcome.from_winner(None), 1700)
    assert draw.draws == 1
    assert draw.total() == 1


def test_single_draw_wire_bytes():
    out = io.BytesIO()
    Stats.new_single(Outcome.from_winner(None), 100).write(out)
    assert out.getvalue() == b"\x64\x02"


def test_add_and_average():
    stats = Stats.new_single(Outcome.from_winner(Color.WHITE), 1600)
    stats += Stats.new_single(Outcome.from_winner(Color.BLACK), 1800)
    assert stats.white == 1
    assert stats.black == 1
    assert stats.average_rating() == 1700


def test_sub_underflow():
    with pytest.raises(ValueError):
        Stats() - Stats(white=1)


def test_to_dict_skips_rating_sum():
    assert Stats(rating_sum=9, white=1, draws=2, black=3).to_dict() == {"white": 1, "draws": 2, "black": 3}


def test_outcome_str():
    assert str(Outcome.from_winner(Color.WHITE)) == "1-0"
    assert str(Outcome.from_winner(Color.BLACK)) == "0-1"
    assert str(Outcome.from_winner(None)) == "1/2-1/2"