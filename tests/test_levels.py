import pytest

from html_compressor.levels import Level, detect_level, resolve_level


def test_levels_are_ordered():
    assert Level.BASIC < Level.AGGRESSIVE < Level.EXTREME


@pytest.mark.parametrize("level, minimum, expected", [
    (Level.BASIC, Level.BASIC, True),
    (Level.BASIC, Level.AGGRESSIVE, False),
    (Level.AGGRESSIVE, Level.AGGRESSIVE, True),
    (Level.AGGRESSIVE, Level.EXTREME, False),
    (Level.EXTREME, Level.BASIC, True),
    (Level.EXTREME, Level.EXTREME, True),
])
def test_enables(level, minimum, expected):
    assert level.enables(minimum) is expected


@pytest.mark.parametrize("value, expected", [
    (1, Level.BASIC),
    ("2", Level.AGGRESSIVE),
    (" 3 ", Level.EXTREME),
    ("extreme", Level.EXTREME),
    ("Aggressive", Level.AGGRESSIVE),
    (Level.BASIC, Level.BASIC),
])
def test_parse(value, expected):
    assert Level.parse(value) is expected


@pytest.mark.parametrize("value", [0, 4, "7", "loud", None, 2.0, True])
def test_parse_rejects(value):
    with pytest.raises(ValueError):
        Level.parse(value)


def test_detect_level_by_size():
    assert detect_level("x" * 100) is Level.BASIC
    assert detect_level("x" * 2048) is Level.AGGRESSIVE
    assert detect_level("x" * 20000) is Level.EXTREME


def test_resolve_auto():
    assert resolve_level("auto", "small") is Level.BASIC
    assert resolve_level("AUTO", "x" * 5000) is Level.AGGRESSIVE
    assert resolve_level(3, "") is Level.EXTREME
