from __future__ import annotations

import time as _time
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol

from .types import Timeline
from .utils import clamp


class PlaybackState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class FrameScheduler(Protocol):
    """Display-refresh driven callback source (requestAnimationFrame-like)."""

    def request(self, callback: Callable[[], None]) -> int: ...

    def cancel(self, handle: int) -> None: ...


class ManualFrameScheduler:
    """Scheduler driven explicitly by the host, one frame per ``run_frame``."""

    def __init__(self) -> None:
        self._pending: Dict[int, Callable[[], None]] = {}
        self._next_handle = 1

    def request(self, callback: Callable[[], None]) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_frame(self) -> int:
        callbacks = list(self._pending.values())
        self._pending.clear()
        for cb in callbacks:
            cb()
        return len(callbacks)


class PlaybackClock:
    """Advances the timeline query time from wall-clock deltas.

    ``now`` returns seconds; the scheduler calls back once per display frame.
    Listeners registered with ``on_tick`` receive the new time after every
    change, including scrubs and stops.
    """

    def __init__(
        self,
        timeline: Timeline,
        scheduler: FrameScheduler,
        now: Callable[[], float] = _time.perf_counter,
    ) -> None:
        self.timeline = timeline
        self.scheduler = scheduler
        self.now = now
        self.state = PlaybackState.STOPPED
        self.scrubbing = False
        self._time = 0.0
        self._start = 0.0
        self._offset = 0.0
        self._handle: Optional[int] = None
        self._listeners: List[Callable[[float], None]] = []

    @property
    def current_time(self) -> float:
        # duration may have shrunk since the time was set
        return clamp(self._time, 0.0, self.timeline.duration)

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    def on_tick(self, listener: Callable[[float], None]) -> None:
        self._listeners.append(listener)

    def _set_time(self, value: float) -> None:
        self._time = value
        for listener in self._listeners:
            listener(value)

    def _cancel_frame(self) -> None:
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None

    def play(self) -> None:
        if self.is_playing:
            return
        if self.scrubbing:
            self.scrubbing = False
        offset = self.current_time
        if offset >= self.timeline.duration and not self.timeline.loop:
            offset = 0.0
        self.state = PlaybackState.PLAYING
        self._start = self.now()
        self._offset = offset
        self._handle = self.scheduler.request(self._tick)

    def pause(self) -> None:
        if self.is_playing:
            self.state = PlaybackState.PAUSED
        self._cancel_frame()

    def stop(self) -> None:
        self._cancel_frame()
        self.state = PlaybackState.STOPPED
        self._set_time(0.0)

    def _tick(self) -> None:
        self._handle = None
        if not self.is_playing:
            return
        duration = self.timeline.duration
        elapsed = (self.now() - self._start) * self.timeline.speed
        t = self._offset + elapsed
        if t >= duration:
            if self.timeline.loop:
                t = t % duration
            else:
                t = duration
                self.state = PlaybackState.PAUSED
        self._set_time(t)
        if self.is_playing:
            self._handle = self.scheduler.request(self._tick)

    def begin_scrub(self, time: Optional[float] = None) -> None:
        """Start a manual time drag; playback, if running, is paused."""
        self.pause()
        self.scrubbing = True
        if time is not None:
            self.scrub(time)

    def scrub(self, time: float) -> None:
        self._set_time(clamp(time, 0.0, self.timeline.duration))

    def end_scrub(self) -> None:
        self.scrubbing = False

    def seek(self, time: float) -> None:
        self._set_time(clamp(time, 0.0, self.timeline.duration))
        if self.is_playing:
            self._start = self.now()
            self._offset = self._time
