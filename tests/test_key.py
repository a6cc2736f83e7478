import pytest
from hypothesis import given
from hypothesis import strategies as st

from openingexplorer.date import InvalidDate, Month, Year
from openingexplorer.key import Key, KeyBuilder, Variant
from openingexplorer.uci import Color
from openingexplorer.user import UserId, UserName

ZOBRIST = 0xD1D06239BD7D2AE8AD6FA208133E1F9A

months = st.integers(int(Month.min_value()), int(Month.max_value())).map(Month.from_int)


def _prefix(color=Color.WHITE, variant=Variant.CHESS):
    user_id = UserId.from_name(UserName.parse("blindfoldpig"))
    return KeyBuilder.player(user_id, color).with_zobrist(variant, ZOBRIST)


@given(months, months)
def test_key_order(a, b):
    prefix = _prefix()
    assert (a <= b) == (bytes(prefix.with_month(a)) <= bytes(prefix.with_month(b)))


@given(months)
def test_key_month_roundtrip(month):
    key = _prefix().with_month(month)
    assert len(bytes(key)) == Key.SIZE
    assert Key.from_bytes(bytes(key)).month() == month


def test_masters_prefix_is_zobrist():
    prefix = KeyBuilder.masters().with_zobrist(Variant.CHESS, ZOBRIST)
    key = prefix.with_month(Month.parse("2020-01"))
    assert bytes(key)[:12] == ZOBRIST.to_bytes(16, "little")[:12]
    assert KeyBuilder.masters() == KeyBuilder.lichess()


def test_month_suffix_big_endian():
    month = Month.parse("2020-01")
    key = KeyBuilder.lichess().with_zobrist(Variant.CHESS, 0).with_month(month)
    assert bytes(key) == bytes(12) + int(month).to_bytes(2, "big")


def test_colors_and_variants_differ():
    month = Month.parse("2020-01")
    assert _prefix(Color.WHITE).with_month(month) != _prefix(Color.BLACK).with_month(month)
    assert _prefix(variant=Variant.CHESS).with_month(month) != _prefix(variant=Variant.ATOMIC).with_month(month)


def test_year_key_is_not_a_month():
    key = _prefix().with_year(Year.parse("2020"))
    with pytest.raises(InvalidDate):
        key.month()


def test_key_wrong_length():
    with pytest.raises(ValueError):
        Key.from_bytes(b"\x00" * 13)