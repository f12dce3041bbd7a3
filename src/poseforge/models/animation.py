"""Keyframe and animation document models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from poseforge.models.channel import ChannelValue, channel_shape
from poseforge.models.enums import ChannelShape

DEFAULT_LENGTH = 15.0


class Keyframe(BaseModel):
    """An authored instant carrying values for a subset of channels."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    time: float = Field(ge=0.0)
    pose: dict[str, ChannelValue] = Field(default_factory=dict)

    def shape_of(self, name: str) -> ChannelShape | None:
        """Shape of the value currently stored for *name*, or None if absent."""
        value = self.pose.get(name)
        if value is None:
            return None
        return channel_shape(value)


class PoseAnimation(BaseModel):
    """A keyframed pose animation.

    Keyframes keep their insertion order; evaluation sorts them by time.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    length: float = Field(default=DEFAULT_LENGTH, gt=0.0)
    keyframes: list[Keyframe] = Field(default_factory=list)

    def channel_names(self) -> list[str]:
        """Every channel name used by any keyframe, in first-appearance order."""
        names: dict[str, None] = {}
        for keyframe in self.keyframes:
            for name in keyframe.pose:
                names.setdefault(name, None)
        return list(names)

    def has_keyframe(self, index: int) -> bool:
        return 0 <= index < len(self.keyframes)


def default_animation(length: float = DEFAULT_LENGTH) -> PoseAnimation:
    """Starter document: one empty keyframe at time 0."""
    return PoseAnimation(length=length, keyframes=[Keyframe(time=0.0)])
