"""Drag gestures: timeline scrubbing and value sliders.

Both are toolkit-independent state machines fed with pointer positions
along the drag axis (pixels, cells, controller units - anything linear).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from poseforge.models.enums import ScrubState

if TYPE_CHECKING:
    from poseforge.engine.clock import PlaybackClock
    from poseforge.engine.store import AnimationStore

logger = logging.getLogger(__name__)

InteractingSink = Callable[[bool], None]


class TimelineScrubber:
    """Maps a drag along the timeline to playhead time.

    Starting a drag pauses playback (it is not resumed on release) and
    raises the *interacting* flag so camera controls stop consuming the
    same pointer; releasing lowers it again.
    """

    def __init__(
        self,
        store: AnimationStore,
        *,
        clock: PlaybackClock | None = None,
        on_interacting: InteractingSink | None = None,
    ) -> None:
        self.store = store
        self.clock = clock
        self.on_interacting = on_interacting
        self.state = ScrubState.IDLE
        self._start_position = 0.0
        self._start_time = 0.0
        self._width = 0.0

    @property
    def dragging(self) -> bool:
        return self.state is ScrubState.DRAGGING

    def begin(self, position: float, width: float) -> None:
        """Start a drag at *position* on a timeline *width* units wide."""
        if self.clock is not None:
            self.clock.pause()
        self._start_position = position
        self._start_time = self.store.current_time
        self._width = width
        if not self.dragging:
            self.state = ScrubState.DRAGGING
            self._set_interacting(True)

    def move(self, position: float) -> float:
        """Update the playhead for the pointer at *position*."""
        if not self.dragging or self._width <= 0:
            return self.store.current_time
        delta = position - self._start_position
        new_time = self._start_time + (delta / self._width) * self.store.length
        return self.store.set_time(new_time)

    def end(self) -> None:
        if not self.dragging:
            return
        self.state = ScrubState.IDLE
        self._set_interacting(False)

    def _set_interacting(self, interacting: bool) -> None:
        if self.on_interacting is not None:
            self.on_interacting(interacting)


class ValueSlider:
    """Drag gesture for a bounded numeric value.

    The drag maps *width* units to the full ``max - min`` range.  The
    result is not clamped.  Releasing without moving re-commits the
    current value.
    """

    def __init__(
        self,
        minimum: float,
        maximum: float,
        on_change: Callable[[float], None],
    ) -> None:
        self.minimum = minimum
        self.maximum = maximum
        self.on_change = on_change
        self.state = ScrubState.IDLE
        self._start_position = 0.0
        self._start_value = 0.0
        self._width = 0.0
        self._moved = False

    @property
    def dragging(self) -> bool:
        return self.state is ScrubState.DRAGGING

    def begin(self, position: float, value: float, width: float) -> None:
        self.state = ScrubState.DRAGGING
        self._start_position = position
        self._start_value = value
        self._width = width
        self._moved = False

    def move(self, position: float) -> float | None:
        if not self.dragging or self._width <= 0:
            return None
        delta = position - self._start_position
        value = self._start_value + (delta / self._width) * (self.maximum - self.minimum)
        self._moved = True
        self.on_change(value)
        return value

    def end(self) -> None:
        if not self.dragging:
            return
        self.state = ScrubState.IDLE
        if not self._moved:
            self.on_change(self._start_value)
