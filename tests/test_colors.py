import pytest

from overlay_animator.colors import (
    build_color,
    hex_to_rgb,
    hsv_to_rgb,
    lerp_color,
    parse_color,
    rgb_to_hex,
    rgb_to_hsv,
)


def test_hex_to_rgb():
    assert hex_to_rgb("#fff") == (255, 255, 255)
    assert hex_to_rgb("#1a2b3c") == (26, 43, 60)
    assert hex_to_rgb("1a2b3c") == (26, 43, 60)
    # short input is zero padded on the right
    assert hex_to_rgb("#12") == (18, 0, 0)
    assert hex_to_rgb("#zzzzzz") == (0, 0, 0)
    assert hex_to_rgb("") == (0, 0, 0)


def test_rgb_to_hex_is_lowercase_six_digits():
    assert rgb_to_hex((255, 0, 16)) == "#ff0010"
    assert rgb_to_hex((0, 0, 0)) == "#000000"
    assert rgb_to_hex((300, -5, 10)) == "#ff000a"


def test_hsv_conversion():
    assert rgb_to_hsv((255, 0, 0)) == (0, 1.0, 1.0)
    assert rgb_to_hsv((0, 0, 255)) == (240, 1.0, 1.0)
    h, s, v = rgb_to_hsv((128, 128, 128))
    assert h == 0 and s == 0
    assert v == pytest.approx(128 / 255)
    assert hsv_to_rgb((240, 1.0, 1.0)) == (0, 0, 255)
    assert hsv_to_rgb((0, 0.0, 1.0)) == (255, 255, 255)
    assert hsv_to_rgb(rgb_to_hsv((255, 136, 0))) == (255, 136, 0)


def test_parse_color():
    assert parse_color("rgba(10, 20, 30, 0.5)") == ("#0a141e", 0.5)
    assert parse_color("rgba(10,20,30)") == ("#0a141e", 1.0)
    assert parse_color("#abc") == ("#aabbcc", 1.0)
    assert parse_color("#A0B0C0") == ("#a0b0c0", 1.0)
    assert parse_color("#11223380") == ("#112233", 0.5)
    assert parse_color("#112233ff") == ("#112233", 1.0)


@pytest.mark.parametrize("value", ["", "banana", "#12345", "rgba(nope)", "transparent"])
def test_parse_color_defaults_to_opaque_white(value):
    assert parse_color(value) == ("#ffffff", 1.0)


def test_build_color():
    assert build_color("#ff0000", 1) == "#ff0000"
    assert build_color("#ff0000", 1.5) == "#ff0000"
    assert build_color("#ff0000", 0.5) == "rgba(255,0,0,0.5)"
    assert build_color("#ff0000", 0) == "rgba(255,0,0,0)"
    assert parse_color(build_color("#336699", 0.25)) == ("#336699", 0.25)


def test_lerp_color():
    assert lerp_color("#000000", "#ffffff", 0.5) == "#808080"
    assert lerp_color("#000000", "#ffffff", 0) == "#000000"
    assert lerp_color("#000000", "#ffffff", 1) == "#ffffff"
    assert lerp_color("#f00", "#00f", 1) == "#0000ff"
    # loose rgba parsing ignores alpha
    assert lerp_color("rgba(255,0,0,0.5)", "#0000ff", 0.5) == "#800080"


@pytest.mark.parametrize("color", ["#3b82f6", "#000000", "#ffffff", "#0a141e"])
@pytest.mark.parametrize("t", [0.0, 0.3, 0.5, 1.0])
def test_lerp_color_self_blend_is_identity(color, t):
    assert lerp_color(color, color, t) == color


def test_lerp_color_named_colors_read_as_black():
    assert lerp_color("red", "#ffffff", 0) == "#000000"
    assert lerp_color("red", "#ffffff", 1) == "#ffffff"
