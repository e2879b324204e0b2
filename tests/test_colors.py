import pytest

from plugtest.colors import PALETTE, Color, in_bound, palette_color, temperature_color


def test_palette_first_entry():
    assert palette_color(0) == Color(52, 233, 0)


def test_palette_wraps():
    size = len(PALETTE)
    for index in range(size):
        assert palette_color(index + size) == palette_color(index)


def test_color_default_alpha():
    assert Color(1, 2, 3).alpha == 255
    assert Color(1, 2, 3).rgb() == (1, 2, 3)


@pytest.mark.parametrize(
    "value, expected",
    [
        (36, Color(255, 90, 0)),
        (35, Color(255, 255, 0)),
        (31, Color(255, 255, 0)),
        (30, Color(100, 200, 105)),
        (25, Color(100, 128, 255)),
        (22, Color(0, 128, 255)),
        (1, Color(0, 128, 255)),
        (0, Color(200, 200, 200)),
        (-5, Color(200, 200, 200)),
    ],
)
def test_temperature_color(value, expected):
    assert temperature_color(value) == expected


@pytest.mark.parametrize(
    "low, value, high, expected",
    [(1, 1, 3, True), (1, 3, 3, True), (1, 2, 3, True), (1, 0, 3, False), (1, 4, 3, False)],
)
def test_in_bound(low, value, high, expected):
    assert in_bound(low, value, high) is expected