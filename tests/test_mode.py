import pytest

from openingexplorer.mode import ByMode, InvalidMode, Mode


def test_parse():
    assert Mode.parse("rated") is Mode.RATED
    assert Mode.parse("casual") is Mode.CASUAL


@pytest.mark.parametrize("text", ["Rated", "", "unrated"])
def test_parse_invalid(text):
    with pytest.raises(InvalidMode):
        Mode.parse(text)


@pytest.mark.parametrize("rated", [True, False])
def test_from_rated_roundtrip(rated):
    assert Mode.from_rated(rated).is_rated() is rated


def test_str_roundtrip():
    for mode in Mode:
        assert Mode.parse(str(mode)) is mode


def test_by_mode_access():
    by = ByMode(rated="r", casual="c")
    assert by.get(Mode.RATED) == "r"
    assert by[Mode.CASUAL] == "c"
    assert list(by) == ["r", "c"]
    assert by.zip_mode() == [(Mode.RATED, "r"), (Mode.CASUAL, "c")]


def test_by_mode_setitem():
    by = ByMode(rated=0, casual=0)
    by[Mode.CASUAL] = 5
    assert by.casual == 5
    assert by.rated == 0