from overlay_animator.spline import polyline_path, solve_spline
from overlay_animator.types import Point


def _pts(*coords):
    return [Point(x=x, y=y) for x, y in coords]


def test_degenerate_inputs():
    assert solve_spline([]) == ""
    assert solve_spline(_pts((1, 2))) == "M 1 2"
    assert solve_spline(_pts((0, 0), (10, 0))) == "M 0 0 L 10 0"


def test_cubic_segment_per_pair():
    path = solve_spline(_pts((0, 0), (10, 10), (20, 0), (30, 10)))
    assert path.startswith("M 0 0 C ")
    assert path.count("C ") == 3
    assert path.endswith(", 30 10")


def test_zero_tension_puts_control_points_on_the_ends():
    path = solve_spline(_pts((0, 0), (10, 0), (20, 0)), tension=0)
    assert path == "M 0 0 C 0 0, 10 0, 10 0 C 10 0, 20 0, 20 0"


def test_end_neighbours_are_clamped():
    # first segment: p0 is p1 itself, so cp1 = p1 + (p2 - p1) / 6
    path = solve_spline(_pts((0, 0), (6, 0), (12, 0)))
    assert path.startswith("M 0 0 C 1 0, 4 0, 6 0")
    # last segment: p3 is p2 itself, so cp2 = p2 - (p2 - p1) / 6
    assert path.endswith("C 8 0, 11 0, 12 0")


def test_deterministic():
    points = _pts((0, 0), (13, 7), (21, -3), (40, 11))
    assert solve_spline(points, 0.7) == solve_spline(points, 0.7)


def test_polyline_path():
    assert polyline_path([]) == ""
    assert polyline_path(_pts((0, 0), (5, 5), (10, 0))) == "M 0 0 L 5 5 L 10 0"
