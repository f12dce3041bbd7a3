"""Per-channel linear pose interpolation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from poseforge.models.channel import ChannelValue, Vector3, channel_shape
from poseforge.models.enums import MismatchPolicy

if TYPE_CHECKING:
    from poseforge.models.animation import Keyframe, PoseAnimation

logger = logging.getLogger(__name__)

Pose = dict[str, ChannelValue]


class ShapeMismatchError(ValueError):
    """Raised when a channel is a scalar in one keyframe and a vector in the next."""

    def __init__(self, channel: str, time: float) -> None:
        super().__init__(f"channel '{channel}' changes shape between keyframes around t={time:g}")
        self.channel = channel
        self.time = time


@dataclass
class EvaluationStats:
    """Counts shape mismatches seen while evaluating."""

    shape_mismatches: int = 0
    mismatched_channels: set[str] = field(default_factory=set)

    def record(self, channel: str) -> None:
        if channel not in self.mismatched_channels:
            logger.debug("Holding '%s': shape differs between keyframes", channel)
        self.shape_mismatches += 1
        self.mismatched_channels.add(channel)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def evaluate(
    animation: PoseAnimation,
    time: float,
    *,
    policy: MismatchPolicy = MismatchPolicy.HOLD,
    stats: EvaluationStats | None = None,
) -> Pose:
    """Evaluate the pose of *animation* at *time*.

    Each channel is resolved independently from the keyframes that define
    it.  Before its first keyframe a channel is absent, after its last one
    the last value is held, and in between the two neighbouring values are
    blended linearly per component.

    Cost is O(channels * keyframes) per call.
    """
    # sorted() is stable, so same-time keyframes keep insertion order.
    ordered = sorted(animation.keyframes, key=lambda kf: kf.time)
    pose: Pose = {}

    for name in animation.channel_names():
        prev: Keyframe | None = None
        nxt: Keyframe | None = None
        for keyframe in ordered:
            if name not in keyframe.pose:
                continue
            if keyframe.time <= time:
                prev = keyframe
            else:
                nxt = keyframe
                break

        if prev is None:
            continue

        prev_value = prev.pose[name]
        if nxt is None:
            pose[name] = prev_value
            continue

        next_value = nxt.pose[name]
        if channel_shape(prev_value) != channel_shape(next_value):
            if policy is MismatchPolicy.RAISE:
                raise ShapeMismatchError(name, time)
            if stats is not None:
                stats.record(name)
            else:
                logger.debug("Holding '%s' at t=%g: shape differs between keyframes", name, time)
            pose[name] = prev_value
            continue

        span = nxt.time - prev.time
        ratio = (time - prev.time) / span if span > 0 else 0.0
        pose[name] = lerp_value(prev_value, next_value, ratio)

    return pose


def lerp_value(a: ChannelValue, b: ChannelValue, t: float) -> ChannelValue:
    """Blend two channel values of the same shape."""
    match a, b:
        case Vector3(), Vector3():
            return Vector3(x=_lerp(a.x, b.x, t), y=_lerp(a.y, b.y, t), z=_lerp(a.z, b.z, t))
        case Vector3(), _:
            return a
        case _, Vector3():
            return a
        case _:
            return _lerp(a, b, t)


class PoseInterpolator:
    """Stateful front-end to :func:`evaluate` that keeps a mismatch tally.

    The tally survives across frames so an editor can surface authoring
    errors that the hold policy would otherwise hide.
    """

    def __init__(self, policy: MismatchPolicy = MismatchPolicy.HOLD) -> None:
        self.policy = policy
        self.stats = EvaluationStats()

    @property
    def mismatch_count(self) -> int:
        return self.stats.shape_mismatches

    def evaluate(self, animation: PoseAnimation, time: float) -> Pose:
        return evaluate(animation, time, policy=self.policy, stats=self.stats)

    def reset(self) -> None:
        self.stats = EvaluationStats()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t
