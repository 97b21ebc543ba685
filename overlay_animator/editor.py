from __future__ import annotations

import time as _time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from . import keyframes as kf
from .drawing import PathDraft, Tool
from .playback import FrameScheduler, ManualFrameScheduler, PlaybackClock
from .scene import (
    add_element,
    duplicate_element,
    find_element,
    find_parent,
    patch_element,
    remove_element,
)
from .transform import GestureKind, GestureSession
from .types import Element, GlobalKeyframe, Point, Timeline, Widget
from .utils import parse_dimension

WIDGET_WIDTH_RANGE = (100, 7680)
WIDGET_HEIGHT_RANGE = (100, 4320)

_GESTURE_FIELDS = {
    GestureKind.MOVE: ("x", "y"),
    GestureKind.RESIZE: ("x", "y", "width", "height"),
    GestureKind.ROTATE: ("rotation",),
}


class Intent(str, Enum):
    ADD_KEYFRAME = "add_keyframe"
    DELETE_SELECTED = "delete_selected"
    DUPLICATE_SELECTED = "duplicate_selected"
    COPY_SELECTED = "copy_selected"
    PASTE = "paste"
    ESCAPE = "escape"


class Editor:
    """Editing state for one widget.

    Owns selection, the active keyframe, the playback clock, the current
    pointer gesture and the drawing draft. Edits go to the base elements,
    or into the selected keyframe's snapshot while one is selected.
    """

    def __init__(
        self,
        widget: Widget,
        scheduler: Optional[FrameScheduler] = None,
        now: Callable[[], float] = _time.perf_counter,
        zoom: float = 1.0,
    ) -> None:
        self.widget = widget
        self.scheduler = scheduler or ManualFrameScheduler()
        self.now = now
        self.zoom = zoom
        self.selected_id: Optional[str] = None
        self.selected_keyframe_id: Optional[str] = None
        self.tool = Tool.SELECT
        self.draft: Optional[PathDraft] = None
        self.clipboard: Optional[Element] = None
        self.gesture: Optional[GestureSession] = None
        self._clock: Optional[PlaybackClock] = None
        timeline = widget.animation_timeline
        if timeline is not None and timeline.autoplay and timeline.keyframes:
            self.clock.play()

    # -- timeline -------------------------------------------------------

    @property
    def timeline(self) -> Timeline:
        return self.widget.ensure_timeline()

    @property
    def clock(self) -> PlaybackClock:
        if self._clock is None or self._clock.timeline is not self.timeline:
            previous = self._clock
            self._clock = PlaybackClock(self.timeline, self.scheduler, self.now)
            if previous is not None:
                previous.pause()
                self._clock.seek(previous.current_time)
        return self._clock

    @property
    def current_time(self) -> float:
        return self.clock.current_time

    @property
    def should_animate(self) -> bool:
        if self.widget.animation_timeline is None:
            return False
        clock = self.clock
        return clock.is_playing or clock.scrubbing or self.selected_keyframe_id is not None

    def select_keyframe(self, keyframe_id: Optional[str]) -> None:
        keyframe = self.timeline.find_keyframe(keyframe_id) if keyframe_id else None
        self.selected_keyframe_id = keyframe.id if keyframe else None
        if keyframe is not None:
            self.clock.seek(keyframe.time)

    def add_keyframe(self, time: Optional[float] = None) -> GlobalKeyframe:
        at = self.current_time if time is None else time
        keyframe = kf.add_keyframe(self.timeline, self.widget.elements, at)
        self.selected_keyframe_id = keyframe.id
        return keyframe

    def delete_keyframe(self, keyframe_id: str) -> None:
        kf.delete_keyframe(self.timeline, keyframe_id)
        if self.selected_keyframe_id == keyframe_id:
            self.selected_keyframe_id = None

    def effective_elements(self) -> List[Element]:
        if not self.should_animate:
            return self.widget.elements
        keyframes = self.timeline.keyframes
        if keyframes:
            return kf.effective_elements(keyframes, self.widget.elements, self.current_time)
        return self.widget.elements

    def ghost_elements(self) -> Optional[List[Element]]:
        """Scene at the keyframe before the selected one, or None."""
        at = kf.previous_keyframe_time(self.timeline, self.selected_keyframe_id)
        if at is None:
            return None
        return kf.effective_elements(self.timeline.keyframes, self.widget.elements, at)

    # -- elements -------------------------------------------------------

    def select(self, element_id: Optional[str]) -> None:
        self.selected_id = element_id

    @property
    def selected(self) -> Optional[Element]:
        if self.selected_id is None:
            return None
        return find_element(self.effective_elements(), self.selected_id)

    def update_element(self, element_id: str, changes: Dict[str, Any]) -> None:
        if self.selected_keyframe_id is not None:
            keyframe = self.timeline.find_keyframe(self.selected_keyframe_id)
            if keyframe is not None:
                kf.update_keyframe_state(keyframe, element_id, changes)
                return
        patch_element(self.widget.elements, element_id, changes)

    def add(self, element: Element, group_id: Optional[str] = None) -> Element:
        add_element(self.widget, element, group_id)
        self.selected_id = element.id
        return element

    def delete_selected(self) -> None:
        if self.selected_id is None:
            return
        remove_element(self.widget.elements, self.selected_id)
        self.selected_id = None

    def duplicate_selected(self) -> Optional[Element]:
        element = self.selected
        if element is None:
            return None
        return self.add(duplicate_element(element))

    def press_element(self, element_id: str) -> None:
        """Pointer down on an element: erase it or select it, by tool."""
        if self.tool in (Tool.CURVATURE, Tool.PENCIL):
            return
        if self.tool is Tool.ERASER:
            remove_element(self.widget.elements, element_id)
            if self.selected_id == element_id:
                self.selected_id = None
            self.set_tool(Tool.SELECT)
            return
        self.selected_id = element_id

    def set_widget_size(self, width: Optional[str] = None, height: Optional[str] = None) -> Tuple[int, int]:
        """Apply typed canvas dimensions; bad entries keep the current size."""
        if width is not None:
            self.widget.width = parse_dimension(width, self.widget.width, *WIDGET_WIDTH_RANGE)
        if height is not None:
            self.widget.height = parse_dimension(height, self.widget.height, *WIDGET_HEIGHT_RANGE)
        return (self.widget.width, self.widget.height)

    # -- gestures -------------------------------------------------------

    def _container(self, element_id: str) -> Tuple[float, float]:
        parent = find_parent(self.widget.elements, element_id)
        if parent is not None:
            return (parent.width, parent.height)
        return (float(self.widget.width), float(self.widget.height))

    def begin_gesture(
        self,
        kind: GestureKind,
        element_id: str,
        pointer: Tuple[float, float],
        handle: Optional[str] = None,
    ) -> bool:
        if self.gesture is not None and self.gesture.active:
            return False
        if self.tool is not Tool.SELECT:
            return False
        element = find_element(self.effective_elements(), element_id)
        if element is None:
            return False
        session = GestureSession(self._container(element_id), self.zoom)
        if not session.begin(kind, element, pointer, handle):
            return False
        self.gesture = session
        return True

    def update_gesture(self, pointer: Tuple[float, float], snap: bool = False) -> None:
        if self.gesture is None or self.gesture.context is None:
            return
        ctx = self.gesture.context
        geometry = self.gesture.update(pointer, snap)
        if geometry is None:
            return
        changes = {name: getattr(geometry, name) for name in _GESTURE_FIELDS[ctx.kind]}
        self.update_element(ctx.element_id, changes)

    def end_gesture(self) -> None:
        if self.gesture is not None:
            self.gesture.end()
        self.gesture = None

    # -- drawing tools --------------------------------------------------

    def set_tool(self, tool: Tool) -> None:
        self.tool = tool
        if tool in (Tool.CURVATURE, Tool.PENCIL):
            self.draft = PathDraft(tool)
        else:
            self.draft = None

    def _finish_draft(self, element: Optional[Element]) -> None:
        if element is not None:
            self.add(element)
            self.set_tool(Tool.SELECT)

    def draw_press(self, point: Point) -> None:
        if self.draft is not None:
            self._finish_draft(self.draft.press(point))

    def draw_drag(self, point: Point) -> None:
        if self.draft is not None:
            self.draft.drag(point)

    def draw_release(self) -> None:
        if self.draft is not None and self.tool is Tool.PENCIL:
            self._finish_draft(self.draft.release())

    def draw_finish(self) -> None:
        """Double click: commit the curve drawn so far."""
        if self.draft is not None and self.tool is Tool.CURVATURE:
            self._finish_draft(self.draft.commit())

    # -- intents --------------------------------------------------------

    def handle(self, intent: Intent) -> None:
        if intent is Intent.ESCAPE:
            self._escape()
            return
        if self.draft is not None:
            return
        if intent is Intent.ADD_KEYFRAME:
            self.add_keyframe()
        elif intent is Intent.DELETE_SELECTED:
            self.delete_selected()
        elif intent is Intent.DUPLICATE_SELECTED:
            self.duplicate_selected()
        elif intent is Intent.COPY_SELECTED:
            if self.selected is not None:
                self.clipboard = self.selected
        elif intent is Intent.PASTE:
            if self.clipboard is not None:
                self.add(duplicate_element(self.clipboard))

    def _escape(self) -> None:
        if self.tool is not Tool.SELECT:
            if self.draft is not None and len(self.draft.points) >= 2:
                element = self.draft.commit()
                if element is not None:
                    self.add(element)
            self.set_tool(Tool.SELECT)
        elif self.selected_id is not None:
            self.selected_id = None
