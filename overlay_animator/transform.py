"""Pointer gesture geometry: move, 8-handle resize and free rotation.

All functions are pure; ``GestureSession`` keeps the state captured when a
gesture starts so each pointer move is computed from the starting geometry
rather than accumulated.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .types import Element, Geometry
from .utils import round_half_up

MIN_SIZE = 4.0
SNAP_DEGREES = 15.0
HANDLES = ("n", "s", "e", "w", "ne", "nw", "se", "sw")


def _clamp_center(x: float, y: float, width: float, height: float, container: Tuple[float, float]) -> Tuple[float, float]:
    """Keep the box center inside the container; edges may overhang."""
    container_w, container_h = container
    cx = x + width / 2
    cy = y + height / 2
    if cx < 0:
        x = -width / 2
    if cx > container_w:
        x = container_w - width / 2
    if cy < 0:
        y = -height / 2
    if cy > container_h:
        y = container_h - height / 2
    return x, y


def move(start: Geometry, dx: float, dy: float, zoom: float, container: Tuple[float, float]) -> Geometry:
    """Translate by a pointer delta given in screen pixels at ``zoom``."""
    nx = start.x + dx / zoom
    ny = start.y + dy / zoom
    nx, ny = _clamp_center(nx, ny, start.width, start.height, container)
    return start.model_copy(update={"x": nx, "y": ny})


def resize(
    start: Geometry,
    handle: str,
    dx: float,
    dy: float,
    zoom: float,
    container: Tuple[float, float],
) -> Geometry:
    """Resize from ``handle`` (n/s/e/w/ne/nw/se/sw) honouring rotation.

    The pointer delta is taken into the element's unrotated frame, the
    moved edges are applied there with a floor of MIN_SIZE, and the shift of
    the center is rotated back so the opposite edge stays put on screen.
    """
    if handle not in HANDLES:
        return start
    dx /= zoom
    dy /= zoom
    width = max(0.0, start.width)
    height = max(0.0, start.height)
    rad = math.radians(start.rotation or 0.0)
    cos, sin = math.cos(rad), math.sin(rad)
    cx0 = start.x + width / 2
    cy0 = start.y + height / 2

    # rotate by -rotation
    local_dx = dx * cos + dy * sin
    local_dy = -dx * sin + dy * cos

    dw = dh = 0.0
    if "e" in handle:
        dw = local_dx
    if "w" in handle:
        dw = -local_dx
    if "s" in handle:
        dh = local_dy
    if "n" in handle:
        dh = -local_dy

    new_w = max(MIN_SIZE, width + dw)
    new_h = max(MIN_SIZE, height + dh)
    actual_dw = new_w - width
    actual_dh = new_h - height

    dcx_local = dcy_local = 0.0
    if "e" in handle:
        dcx_local = actual_dw / 2
    if "w" in handle:
        dcx_local = -actual_dw / 2
    if "s" in handle:
        dcy_local = actual_dh / 2
    if "n" in handle:
        dcy_local = -actual_dh / 2

    dcx = dcx_local * cos - dcy_local * sin
    dcy = dcx_local * sin + dcy_local * cos

    nx = cx0 + dcx - new_w / 2
    ny = cy0 + dcy - new_h / 2
    nx, ny = _clamp_center(nx, ny, new_w, new_h, container)

    return start.model_copy(update={
        "x": round_half_up(nx),
        "y": round_half_up(ny),
        "width": round_half_up(new_w),
        "height": round_half_up(new_h),
    })


def rotation_angle(center: Tuple[float, float], pointer: Tuple[float, float], snap: bool = False) -> float:
    """Angle of the pointer around ``center``: up is 0 degrees, clockwise positive."""
    dx = pointer[0] - center[0]
    dy = pointer[1] - center[1]
    angle = math.degrees(math.atan2(dx, -dy))
    if snap:
        angle = round_half_up(angle / SNAP_DEGREES) * SNAP_DEGREES
    return round_half_up(angle, 1)


def rotate(start: Geometry, center: Tuple[float, float], pointer: Tuple[float, float], snap: bool = False) -> Geometry:
    return start.model_copy(update={"rotation": rotation_angle(center, pointer, snap)})


class GestureKind(str, Enum):
    MOVE = "move"
    RESIZE = "resize"
    ROTATE = "rotate"


@dataclass
class GestureContext:
    kind: GestureKind
    element_id: str
    start: Geometry
    pointer_start: Tuple[float, float]
    handle: Optional[str] = None
    # world-space center, in the same units as pointer positions
    center: Optional[Tuple[float, float]] = None


class GestureSession:
    """Idle -> Dragging -> Idle state machine for one interaction surface.

    Only one gesture may be active; ``begin`` while dragging, or on a locked
    element, does nothing and returns False.
    """

    def __init__(self, container: Tuple[float, float], zoom: float = 1.0) -> None:
        self.container = container
        self.zoom = zoom
        self.context: Optional[GestureContext] = None

    @property
    def active(self) -> bool:
        return self.context is not None

    def begin(
        self,
        kind: GestureKind,
        element: Element,
        pointer: Tuple[float, float],
        handle: Optional[str] = None,
    ) -> bool:
        if self.context is not None or element.locked:
            return False
        if kind is GestureKind.RESIZE and handle not in HANDLES:
            return False
        start = element.geometry
        center = None
        if kind is GestureKind.ROTATE:
            cx, cy = start.center
            center = (cx * self.zoom, cy * self.zoom)
        self.context = GestureContext(
            kind=kind,
            element_id=element.id,
            start=start,
            pointer_start=pointer,
            handle=handle,
            center=center,
        )
        return True

    def update(self, pointer: Tuple[float, float], snap: bool = False) -> Optional[Geometry]:
        ctx = self.context
        if ctx is None:
            return None
        dx = pointer[0] - ctx.pointer_start[0]
        dy = pointer[1] - ctx.pointer_start[1]
        if ctx.kind is GestureKind.MOVE:
            return move(ctx.start, dx, dy, self.zoom, self.container)
        if ctx.kind is GestureKind.RESIZE:
            return resize(ctx.start, ctx.handle or "", dx, dy, self.zoom, self.container)
        return rotate(ctx.start, ctx.center or (0.0, 0.0), pointer, snap)

    def end(self) -> None:
        self.context = None
