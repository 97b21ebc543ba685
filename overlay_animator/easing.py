from __future__ import annotations

import math
from typing import Callable, Dict


def linear(t: float) -> float:
    return t


def ease_in(t: float) -> float:
    return t * t


def ease_out(t: float) -> float:
    return t * (2 - t)


def ease_in_out(t: float) -> float:
    if t < 0.5:
        return 2 * t * t
    return -1 + (4 - 2 * t) * t


def bounce(t: float) -> float:
    if t < 1 / 2.75:
        return 7.5625 * t * t
    if t < 2 / 2.75:
        t -= 1.5 / 2.75
        return 7.5625 * t * t + 0.75
    if t < 2.5 / 2.75:
        t -= 2.25 / 2.75
        return 7.5625 * t * t + 0.9375
    t -= 2.625 / 2.75
    return 7.5625 * t * t + 0.984375


def elastic(t: float) -> float:
    if t == 0:
        return 0.0
    if t == 1:
        return 1.0
    return -math.pow(2, 10 * (t - 1)) * math.sin((t - 1.1) * 5 * math.pi)


EASING_FUNCTIONS: Dict[str, Callable[[float], float]] = {
    "linear": linear,
    "ease-in": ease_in,
    "ease-out": ease_out,
    "ease-in-out": ease_in_out,
    "bounce": bounce,
    "elastic": elastic,
}


def ease(t: float, kind: str) -> float:
    """Map normalized time to eased progress.

    Unknown kinds (including cubic-bezier and the step variants, which carry
    no parameters in the document format) behave as linear. ``t`` is not
    clamped; callers pass values in [0, 1].
    """
    return EASING_FUNCTIONS.get(kind, linear)(t)
