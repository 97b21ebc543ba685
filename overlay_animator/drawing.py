from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence

from .scene import new_element
from .spline import polyline_path, solve_spline
from .types import Element, Point

DEDUPE_DISTANCE = 5.0
CLOSE_DISTANCE = 10.0
MIN_PATH_SIZE = 4.0
STROKE_COLOR = "#3b82f6"
STROKE_WIDTH = 4


class Tool(str, Enum):
    SELECT = "select"
    CURVATURE = "curvature"
    PENCIL = "pencil"
    ERASER = "eraser"


def build_path_element(points: Sequence[Point], smooth: bool) -> Optional[Element]:
    """Create a path element framed by the bounding box of ``points``."""
    if len(points) < 2:
        return None
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    min_x, max_x, min_y, max_y = min(xs), max(xs), min(ys), max(ys)
    local = [Point(x=p.x - min_x, y=p.y - min_y) for p in points]
    return new_element(
        "path",
        x=min_x,
        y=min_y,
        width=max(max_x - min_x, MIN_PATH_SIZE),
        height=max(max_y - min_y, MIN_PATH_SIZE),
        path_data=solve_spline(local) if smooth else polyline_path(local),
        fill="none",
        stroke_color=STROKE_COLOR,
        stroke_width=STROKE_WIDTH,
    )


class PathDraft:
    """Points collected by the curvature or pencil tool before commit."""

    def __init__(self, tool: Tool) -> None:
        self.tool = tool
        self.points: List[Point] = []
        self.preview: Optional[Point] = None

    @property
    def smooth(self) -> bool:
        return self.tool is Tool.CURVATURE

    def press(self, point: Point) -> Optional[Element]:
        """Pointer down. Returns a committed element when the press closes a curve."""
        if self.tool is Tool.PENCIL:
            self.points = [point]
            return None
        if len(self.points) > 2:
            first = self.points[0]
            if abs(first.x - point.x) < CLOSE_DISTANCE and abs(first.y - point.y) < CLOSE_DISTANCE:
                self.points.append(first)
                return self.commit()
        if self.points:
            last = self.points[-1]
            if abs(last.x - point.x) < DEDUPE_DISTANCE and abs(last.y - point.y) < DEDUPE_DISTANCE:
                return None
        self.points.append(point)
        return None

    def drag(self, point: Point) -> None:
        if self.tool is Tool.CURVATURE:
            if self.points:
                self.preview = point
        elif self.points:
            self.points.append(point)

    def release(self) -> Optional[Element]:
        if self.tool is Tool.PENCIL:
            return self.commit()
        return None

    def commit(self) -> Optional[Element]:
        element = build_path_element(self.points, self.smooth)
        self.clear()
        return element

    def clear(self) -> None:
        self.points = []
        self.preview = None
