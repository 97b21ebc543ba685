from __future__ import annotations

import re
from typing import NamedTuple, Tuple

from .utils import format_number, round_half_up


class RGB(NamedTuple):
    r: int
    g: int
    b: int


class HSV(NamedTuple):
    h: float
    s: float
    v: float


_HEX_DIGITS = re.compile(r"^[0-9a-fA-F]+$")
_RGBA = re.compile(r"rgba?\((\d+),\s*(\d+),\s*(\d+)(?:,\s*([\d.]+))?\)")
_NUMBER = re.compile(r"\d+")

WHITE = "#ffffff"


def _channel(value: float) -> int:
    return max(0, min(255, int(value)))


def hex_to_rgb(value: str) -> RGB:
    """Decode 3- or 6-digit hex; short input is zero padded, garbage is black."""
    clean = value.replace("#", "")
    if len(clean) == 3:
        full = "".join(c + c for c in clean)
    else:
        full = clean.ljust(6, "0")[:6]
    if not _HEX_DIGITS.match(full):
        return RGB(0, 0, 0)
    n = int(full, 16)
    return RGB((n >> 16) & 255, (n >> 8) & 255, n & 255)


def rgb_to_hex(rgb: Tuple[float, float, float]) -> str:
    return "#" + "".join(f"{_channel(v):02x}" for v in rgb)


def rgb_to_hsv(rgb: Tuple[float, float, float]) -> HSV:
    r, g, b = (c / 255 for c in rgb)
    high, low = max(r, g, b), min(r, g, b)
    d = high - low
    h = 0.0
    if d != 0:
        if high == r:
            h = ((g - b) / d) % 6
        elif high == g:
            h = (b - r) / d + 2
        else:
            h = (r - g) / d + 4
        h = round_half_up(h * 60)
        if h < 0:
            h += 360
        if h >= 360:
            h -= 360
    s = 0.0 if high == 0 else d / high
    return HSV(h, s, high)


def hsv_to_rgb(hsv: Tuple[float, float, float]) -> RGB:
    h, s, v = hsv

    def f(n: int) -> float:
        k = (n + h / 60) % 6
        return v - v * s * max(0.0, min(k, 4 - k, 1))

    return RGB(
        int(round_half_up(f(5) * 255)),
        int(round_half_up(f(3) * 255)),
        int(round_half_up(f(1) * 255)),
    )


def parse_color(value: str) -> Tuple[str, float]:
    """Split a color string into ``(hex, alpha)``.

    Accepts ``rgba(r,g,b[,a])``, ``#rgb``, ``#rrggbb`` and ``#rrggbbaa``.
    Anything else reads as opaque white.
    """
    if not value:
        return WHITE, 1.0
    if value.startswith("rgb"):
        m = _RGBA.match(value)
        if m:
            hex_value = rgb_to_hex((int(m.group(1)), int(m.group(2)), int(m.group(3))))
            alpha = float(m.group(4)) if m.group(4) is not None else 1.0
            return hex_value, alpha
        return WHITE, 1.0
    if value.startswith("#") and _HEX_DIGITS.match(value[1:]):
        digits = value[1:].lower()
        if len(digits) == 8:
            alpha = int(digits[6:8], 16) / 255
            return "#" + digits[:6], round_half_up(alpha, 2)
        if len(digits) == 3:
            return "#" + "".join(c + c for c in digits), 1.0
        if len(digits) == 6:
            return "#" + digits, 1.0
    return WHITE, 1.0


def build_color(hex_value: str, alpha: float) -> str:
    """Inverse of parse_color; opaque colors stay bare hex."""
    if alpha >= 1:
        return hex_value
    r, g, b = hex_to_rgb(hex_value)
    return f"rgba({r},{g},{b},{format_number(float(alpha))})"


def _loose_rgb(value: str) -> RGB:
    if value.startswith("#"):
        return hex_to_rgb(value)
    # Named colors carry no digits and read as black.
    numbers = _NUMBER.findall(value)
    if len(numbers) < 3:
        return RGB(0, 0, 0)
    return RGB(*(int(n) for n in numbers[:3]))


def lerp_color(a: str, b: str, t: float) -> str:
    """Blend two colors channel by channel; alpha is not interpolated."""
    ca, cb = _loose_rgb(a), _loose_rgb(b)
    return rgb_to_hex(
        tuple(round_half_up(x + (y - x) * t) for x, y in zip(ca, cb))
    )
