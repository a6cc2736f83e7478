import io

import pytest

from openingexplorer.uci import (
    Color,
    RawUciMove,
    Role,
    UciMove,
    parse_square,
    square_name,
)

A1 = parse_square("a1")
A2 = parse_square("a2")
H8 = parse_square("h8")


def test_uci_move_roundtrip():
    moves = [
        UciMove.null(),
        UciMove.normal(A1, H8, None),
        UciMove.normal(A2, A1, Role.KING),
        UciMove.put(Role.KNIGHT, A1),
    ]
    out = io.BytesIO()
    for uci in moves:
        RawUciMove.pack(uci).write(out)
    reader = io.BytesIO(out.getvalue())
    for uci in moves:
        assert RawUciMove.read(reader).unpack() == uci


def test_squares():
    assert A1 == 0
    assert H8 == 63
    assert square_name(parse_square("e4")) == "e4"


@pytest.mark.parametrize("name", ["i1", "a9", "a", "a10"])
def test_invalid_square(name):
    with pytest.raises(ValueError):
        parse_square(name)


@pytest.mark.parametrize("text", ["e2e4", "a7a8q", "N@f3", "0000", "g1f3"])
def test_text_roundtrip(text):
    assert str(UciMove.parse(text)) == text


@pytest.mark.parametrize("text", ["e2e9", "x", "e2e4x", "n@f3", "e2e4Q"])
def test_parse_invalid(text):
    with pytest.raises(ValueError):
        UciMove.parse(text)


def test_parse_fields():
    move = UciMove.parse("a7a8q")
    assert move.from_square == parse_square("a7")
    assert move.to_square == parse_square("a8")
    assert move.promotion is Role.QUEEN
    drop = UciMove.parse("N@f3")
    assert drop.is_put
    assert drop.role is Role.KNIGHT
    assert drop.promotion is None


def test_null_packs_to_zero():
    assert RawUciMove.pack(UciMove.null()).value == 0
    assert RawUciMove(0).unpack() == UciMove.null()


def test_unknown_role_bits_ignored():
    assert RawUciMove(63 << 6 | 7 << 12).unpack() == UciMove.normal(A1, H8, None)


def test_wire_is_little_endian():
    out = io.BytesIO()
    RawUciMove(0x1234).write(out)
    assert out.getvalue() == b"\x34\x12"


def test_read_truncated():
    with pytest.raises(EOFError):
        RawUciMove.read(io.BytesIO(b"\x01"))


def test_color():
    assert Color.WHITE.char() == "w"
    assert Color.BLACK.char() == "b"
    assert Color.WHITE.fold_wb(1, 2) == 1
    assert Color.BLACK.fold_wb(1, 2) == 2