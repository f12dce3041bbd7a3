"""Pose animation engine: interpolation, store, playback and scrubbing."""

from poseforge.engine.clock import PlaybackClock, asyncio_interval
from poseforge.engine.interpolator import (
    EvaluationStats,
    PoseInterpolator,
    ShapeMismatchError,
    evaluate,
)
from poseforge.engine.scrubber import TimelineScrubber, ValueSlider
from poseforge.engine.store import AnimationStore

__all__ = [
    "AnimationStore",
    "EvaluationStats",
    "PlaybackClock",
    "PoseInterpolator",
    "ShapeMismatchError",
    "TimelineScrubber",
    "ValueSlider",
    "asyncio_interval",
    "evaluate",
]
