from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from tqdm import tqdm

from .keyframes import effective_elements
from .types import Element, Widget


@dataclass
class Frame:
    index: int
    time: float
    elements: List[Element]

    def to_document(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "time": self.time,
            "elements": [el.to_document() for el in self.elements],
        }


def sample_at(widget: Widget, time: float) -> List[Element]:
    timeline = widget.animation_timeline
    if timeline is None or not timeline.keyframes:
        return list(widget.elements)
    return effective_elements(timeline.keyframes, widget.elements, time)


def sample_widget(
    widget: Widget,
    fps: int = 30,
    on_progress: Optional[Callable[[int, int], None]] = None,
    progress: bool = True,
) -> List[Frame]:
    """Evaluate the widget at evenly spaced times covering its whole timeline."""
    timeline = widget.ensure_timeline()
    num_frames = max(1, int(math.ceil(timeline.duration * fps)))
    frames: List[Frame] = []
    for f in tqdm(range(num_frames), desc=widget.name, disable=not progress):
        t = (f / max(1, num_frames - 1)) * timeline.duration
        frames.append(Frame(index=f, time=t, elements=sample_at(widget, t)))
        if on_progress is not None:
            on_progress(f + 1, num_frames)
    return frames
