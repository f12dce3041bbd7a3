"""Timeline widget - playhead bar with keyframe markers and mouse scrubbing."""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.widget import Widget

if TYPE_CHECKING:
    from textual import events

    from poseforge.engine.scrubber import TimelineScrubber
    from poseforge.engine.store import AnimationStore

TRACK = "─"
KEYFRAME = "◇"
SELECTED_KEYFRAME = "◆"
PLAYHEAD = "┃"


class Timeline(Widget):
    """One-line timeline.

    Dragging anywhere scrubs the playhead through the
    :class:`~poseforge.engine.scrubber.TimelineScrubber`; pressing on a
    keyframe marker also selects that keyframe.
    """

    DEFAULT_CSS = """
    Timeline {
        height: 1;
        background: #0c0a1a;
        color: #6d28d9;
        margin: 1 0;
    }

    Timeline:focus {
        color: #a78bfa;
    }
    """

    can_focus = True

    def __init__(
        self,
        store: AnimationStore,
        scrubber: TimelineScrubber,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.store = store
        self.scrubber = scrubber

    @property
    def track_width(self) -> int:
        return max(self.size.width, 1)

    def column_for(self, time: float) -> int:
        """Column of *time* on the track, clamped to the visible range."""
        span = self.track_width - 1
        col = round(time / self.store.length * span) if span > 0 else 0
        return min(max(col, 0), span)

    def keyframe_at(self, column: int) -> int | None:
        """Index of the last keyframe drawn at *column*, if any."""
        found = None
        for i, keyframe in enumerate(self.store.animation.keyframes):
            if self.column_for(keyframe.time) == column:
                found = i
        return found

    def render(self) -> str:
        cells = [TRACK] * self.track_width
        selection = self.store.selection
        for i, keyframe in enumerate(self.store.animation.keyframes):
            marker = SELECTED_KEYFRAME if i == selection else KEYFRAME
            cells[self.column_for(keyframe.time)] = marker
        cells[self.column_for(self.store.current_time)] = PLAYHEAD
        return "".join(cells)

    # ── Mouse ────────────────────────────────────────────────
    def on_mouse_down(self, event: events.MouseDown) -> None:
        index = self.keyframe_at(event.x)
        if index is not None:
            self.store.select_keyframe(index)
        self.capture_mouse()
        # Map the track onto [0, length]; the last column is t == length.
        self.scrubber.begin(event.x, self.track_width - 1)
        event.stop()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self.scrubber.dragging:
            self.scrubber.move(event.x)

    def on_mouse_up(self, event: events.MouseUp) -> None:
        self.release_mouse()
        self.scrubber.end()
