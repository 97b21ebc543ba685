from .colors import build_color, hex_to_rgb, hsv_to_rgb, lerp_color, parse_color, rgb_to_hex, rgb_to_hsv
from .easing import EASING_FUNCTIONS, ease
from .keyframes import add_keyframe, interpolate_element, snapshot_scene
from .playback import ManualFrameScheduler, PlaybackClock, PlaybackState
from .spline import solve_spline
from .transform import move, resize, rotation_angle
from .types import Element, Geometry, GlobalKeyframe, Point, Timeline, Widget, Workspace

__all__ = [
    "EASING_FUNCTIONS",
    "Element",
    "Geometry",
    "GlobalKeyframe",
    "ManualFrameScheduler",
    "PlaybackClock",
    "PlaybackState",
    "Point",
    "Timeline",
    "Widget",
    "Workspace",
    "add_keyframe",
    "build_color",
    "ease",
    "hex_to_rgb",
    "hsv_to_rgb",
    "interpolate_element",
    "lerp_color",
    "move",
    "parse_color",
    "resize",
    "rgb_to_hex",
    "rgb_to_hsv",
    "rotation_angle",
    "snapshot_scene",
    "solve_spline",
]
