from __future__ import annotations

from typing import Sequence

from .types import Point
from .utils import format_number as _n


def solve_spline(points: Sequence[Point], tension: float = 1.0) -> str:
    """Turn a polyline into an SVG path of cubic Catmull-Rom segments.

    Control points for the segment p1 -> p2 are derived from the neighbours
    p0 and p3; at either end the missing neighbour is the end point itself.
    """
    if not points:
        return ""
    first = points[0]
    if len(points) == 1:
        return f"M {_n(first.x)} {_n(first.y)}"
    if len(points) == 2:
        last = points[1]
        return f"M {_n(first.x)} {_n(first.y)} L {_n(last.x)} {_n(last.y)}"

    parts = [f"M {_n(first.x)} {_n(first.y)}"]
    for i in range(len(points) - 1):
        p0 = points[i - 1] if i > 0 else points[0]
        p1 = points[i]
        p2 = points[i + 1]
        p3 = points[i + 2] if i + 2 < len(points) else p2
        cp1x = p1.x + (p2.x - p0.x) / 6 * tension
        cp1y = p1.y + (p2.y - p0.y) / 6 * tension
        cp2x = p2.x - (p3.x - p1.x) / 6 * tension
        cp2y = p2.y - (p3.y - p1.y) / 6 * tension
        parts.append(
            f"C {_n(cp1x)} {_n(cp1y)}, {_n(cp2x)} {_n(cp2y)}, {_n(p2.x)} {_n(p2.y)}"
        )
    return " ".join(parts)


def polyline_path(points: Sequence[Point]) -> str:
    """Straight-segment path used for freehand pencil strokes."""
    if not points:
        return ""
    return "M " + " L ".join(f"{_n(p.x)} {_n(p.y)}" for p in points)
