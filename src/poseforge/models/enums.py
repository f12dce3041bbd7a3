"""Enumerations used throughout PoseForge."""

from enum import StrEnum


class ChannelShape(StrEnum):
    SCALAR = "scalar"
    VECTOR = "vector"


class PlaybackState(StrEnum):
    STOPPED = "stopped"
    PLAYING = "playing"


class ScrubState(StrEnum):
    IDLE = "idle"
    DRAGGING = "dragging"


class MismatchPolicy(StrEnum):
    """What the interpolator does when a channel changes shape between keyframes."""

    HOLD = "hold"
    RAISE = "raise"
