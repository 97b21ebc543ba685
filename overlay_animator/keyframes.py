"""Global keyframe interpolation.

A global keyframe stores the state of every element at one instant. The
engine reconstructs the state of a single element at an arbitrary time from
the two keyframes that bracket it. Everything here is pure apart from the
explicit keyframe management helpers, which mutate the timeline they are
given.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .colors import lerp_color
from .easing import ease
from .types import (
    ANIMATABLE_PROPERTIES,
    COLOR_PROPERTIES,
    NUMERIC_PROPERTIES,
    Element,
    ElementState,
    EasingType,
    GlobalKeyframe,
    Timeline,
)
from .utils import clamp, round_half_up

KEYFRAME_EPSILON = 0.01


def _base_value(element: Element, prop: str, default):
    value = getattr(element, prop, None)
    return default if value is None else value


def interpolate_element(
    keyframes: Sequence[GlobalKeyframe],
    element_id: str,
    element: Element,
    time: float,
) -> ElementState:
    """Return property overrides for ``element`` at ``time``.

    Outside the keyframe range the nearest keyframe's state is returned as
    is. Between two keyframes each property present on either side is
    blended with the easing of the earlier keyframe; a side that lacks the
    property uses the element's own base value.
    """
    if not keyframes:
        return {}
    ordered = sorted(keyframes, key=lambda k: k.time)

    if time <= ordered[0].time:
        return dict(ordered[0].state_for(element_id))
    if time >= ordered[-1].time:
        return dict(ordered[-1].state_for(element_id))

    prev, nxt = ordered[0], ordered[1]
    for i in range(len(ordered) - 1):
        if ordered[i].time <= time <= ordered[i + 1].time:
            prev, nxt = ordered[i], ordered[i + 1]
            break

    prev_state = prev.state_for(element_id)
    next_state = nxt.state_for(element_id)
    span = nxt.time - prev.time
    raw_t = (time - prev.time) / span if span > 0 else 1.0
    t = ease(raw_t, prev.easing)

    result: ElementState = {}
    for prop in list(prev_state) + [k for k in next_state if k not in prev_state]:
        pv = prev_state.get(prop)
        nv = next_state.get(prop)
        if pv is None and nv is None:
            continue
        if prop in NUMERIC_PROPERTIES:
            a = float(pv if pv is not None else _base_value(element, prop, 0.0))
            b = float(nv if nv is not None else _base_value(element, prop, 0.0))
            result[prop] = a + (b - a) * t
        elif prop in COLOR_PROPERTIES:
            a = str(pv if pv is not None else _base_value(element, prop, "#000000"))
            b = str(nv if nv is not None else _base_value(element, prop, "#000000"))
            result[prop] = lerp_color(a, b, t)
    return result


def apply_overrides(element: Element, overrides: ElementState) -> Element:
    """Shallow merge; properties without an override keep their base value."""
    if not overrides:
        return element
    known = {k: v for k, v in overrides.items() if k in Element.model_fields}
    return element.model_copy(update=known)


def effective_element(keyframes: Sequence[GlobalKeyframe], element: Element, time: float) -> Element:
    """Interpolated copy of ``element`` and, recursively, its children."""
    el = apply_overrides(element, interpolate_element(keyframes, element.id, element, time))
    if element.children is not None:
        el = el.model_copy(update={"children": effective_elements(keyframes, element.children, time)})
    return el


def effective_elements(
    keyframes: Sequence[GlobalKeyframe], elements: Sequence[Element], time: float
) -> List[Element]:
    return [effective_element(keyframes, el, time) for el in elements]


def _capture_state(el: Element) -> ElementState:
    state: ElementState = {
        "x": el.x,
        "y": el.y,
        "width": el.width,
        "height": el.height,
        "rotation": el.rotation,
        "opacity": el.opacity,
        "scale_x": el.scale_x if el.scale_x is not None else 1.0,
        "scale_y": el.scale_y if el.scale_y is not None else 1.0,
    }
    for prop in ANIMATABLE_PROPERTIES:
        if prop in state:
            continue
        value = getattr(el, prop)
        if value is not None:
            state[prop] = value
    return state


def snapshot_scene(
    elements: Sequence[Element],
    time: Optional[float] = None,
    keyframes: Optional[Sequence[GlobalKeyframe]] = None,
) -> Dict[str, ElementState]:
    """Capture every element's state, as currently seen, into snapshot form.

    With ``time`` and ``keyframes`` given the captured values are the
    interpolated ones, so inserting a keyframe mid-animation leaves the scene
    where it was.
    """
    states: Dict[str, ElementState] = {}

    def visit(els: Sequence[Element]) -> None:
        for el in els:
            current = el
            if time is not None and keyframes:
                current = apply_overrides(el, interpolate_element(keyframes, el.id, el, time))
            states[el.id] = _capture_state(current)
            if el.children:
                visit(el.children)

    visit(elements)
    return states


def add_keyframe(timeline: Timeline, elements: Sequence[Element], time: float) -> GlobalKeyframe:
    """Insert a keyframe at ``time``, replacing any keyframe within 0.01 s."""
    keyframe = GlobalKeyframe(
        time=clamp(round_half_up(time, 2), 0.0, timeline.duration),
        easing="linear",
        element_states=snapshot_scene(elements, time, timeline.keyframes),
    )
    kept = [k for k in timeline.keyframes if abs(k.time - time) > KEYFRAME_EPSILON]
    timeline.keyframes = kept + [keyframe]
    return keyframe


def delete_keyframe(timeline: Timeline, keyframe_id: str) -> None:
    timeline.keyframes = [k for k in timeline.keyframes if k.id != keyframe_id]


def set_keyframe_easing(timeline: Timeline, keyframe_id: str, easing: EasingType) -> None:
    keyframe = timeline.find_keyframe(keyframe_id)
    if keyframe is not None:
        keyframe.easing = easing


def move_keyframe(timeline: Timeline, keyframe_id: str, new_time: float) -> None:
    """Retime a keyframe; a keyframe already at the destination is dropped."""
    keyframe = timeline.find_keyframe(keyframe_id)
    if keyframe is None:
        return
    target = round_half_up(clamp(new_time, 0.0, timeline.duration), 2)
    timeline.keyframes = [
        k for k in timeline.keyframes
        if k.id == keyframe_id or abs(k.time - target) > KEYFRAME_EPSILON
    ]
    keyframe.time = target


def update_keyframe_state(keyframe: GlobalKeyframe, element_id: str, changes: ElementState) -> None:
    """Merge edits made while a keyframe is selected into its snapshot."""
    state = dict(keyframe.state_for(element_id))
    state.update(changes)
    keyframe.element_states[element_id] = state


def previous_keyframe_time(timeline: Timeline, keyframe_id: Optional[str]) -> Optional[float]:
    """Time of the keyframe before ``keyframe_id``, used for the ghost preview."""
    if not keyframe_id:
        return None
    ordered = timeline.sorted_keyframes()
    for i, kf in enumerate(ordered):
        if kf.id == keyframe_id:
            return ordered[i - 1].time if i > 0 else None
    return None
