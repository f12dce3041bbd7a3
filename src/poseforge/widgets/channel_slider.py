"""Channel slider widget - drag one channel axis of a keyframe."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Literal

from textual.binding import Binding
from textual.message import Message
from textual.widget import Widget

from poseforge.bones import channel_range
from poseforge.engine.scrubber import ValueSlider
from poseforge.models.channel import Vector3

if TYPE_CHECKING:
    from textual import events
    from textual.binding import BindingType

    from poseforge.engine.store import AnimationStore

Axis = Literal["x", "y", "z"]

LABEL_WIDTH = 18
VALUE_WIDTH = 9
NUDGE_STEPS = 100


class ChannelSlider(Widget):
    """A labelled horizontal slider for a scalar channel or one vector axis.

    Reads its value from the store on every render and writes through
    :meth:`AnimationStore.set_channel_value`.  Posts ``ChannelSlider.Changed``
    after each write.
    """

    DEFAULT_CSS = """
    ChannelSlider {
        height: 1;
        color: #c4b5fd;
    }

    ChannelSlider:focus {
        background: #312e81;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("left", "nudge(-1)", "Decrease", show=False),
        Binding("right", "nudge(1)", "Increase", show=False),
    ]

    can_focus = True

    class Changed(Message):
        """Fired after the slider wrote a new channel value."""

        def __init__(self, channel: str, keyframe_index: int) -> None:
            super().__init__()
            self.channel = channel
            self.keyframe_index = keyframe_index

    def __init__(
        self,
        store: AnimationStore,
        keyframe_index: int,
        channel: str,
        axis: Axis | None = None,
    ) -> None:
        super().__init__()
        self.store = store
        self.keyframe_index = keyframe_index
        self.channel = channel
        self.axis = axis
        minimum, maximum = channel_range(channel)
        self.gesture = ValueSlider(minimum, maximum, self._commit)

    @property
    def label(self) -> str:
        return self.channel if self.axis is None else f"{self.channel}.{self.axis}"

    @property
    def bar_width(self) -> int:
        return max(self.size.width - LABEL_WIDTH - VALUE_WIDTH, 10)

    def current_value(self) -> float:
        keyframes = self.store.animation.keyframes
        if not 0 <= self.keyframe_index < len(keyframes):
            return 0.0
        value = keyframes[self.keyframe_index].pose.get(self.channel)
        match value:
            case Vector3():
                return getattr(value, self.axis or "x")
            case None:
                return 0.0
            case _:
                return value

    def _commit(self, value: float) -> None:
        if not self.store.animation.has_keyframe(self.keyframe_index):
            return
        current = self.store.animation.keyframes[self.keyframe_index].pose.get(self.channel)
        if self.axis is not None and isinstance(current, Vector3):
            new_value: float | Vector3 = current.model_copy(update={self.axis: value})
        else:
            new_value = value
        if self.store.set_channel_value(self.keyframe_index, self.channel, new_value):
            self.post_message(self.Changed(self.channel, self.keyframe_index))
        self.refresh()

    def render(self) -> str:
        value = self.current_value()
        lo, hi = self.gesture.minimum, self.gesture.maximum
        width = self.bar_width
        ratio = (value - lo) / (hi - lo) if hi > lo else 0.0
        knob = min(max(round(ratio * (width - 1)), 0), width - 1)
        bar = "".join("●" if i == knob else "─" for i in range(width))
        return f"{self.label[:LABEL_WIDTH - 1]:<{LABEL_WIDTH}}{bar}{value:>{VALUE_WIDTH}.4f}"

    # ── Input ────────────────────────────────────────────────
    def _bar_position(self, x: int) -> int:
        return x - LABEL_WIDTH

    def on_mouse_down(self, event: events.MouseDown) -> None:
        self.capture_mouse()
        self.gesture.begin(self._bar_position(event.x), self.current_value(), self.bar_width)
        event.stop()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self.gesture.dragging:
            self.gesture.move(self._bar_position(event.x))

    def on_mouse_up(self, event: events.MouseUp) -> None:
        self.release_mouse()
        self.gesture.end()

    def action_nudge(self, direction: int) -> None:
        step = (self.gesture.maximum - self.gesture.minimum) / NUDGE_STEPS
        self._commit(self.current_value() + direction * step)
