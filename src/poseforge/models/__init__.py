"""PoseForge data models - pure Pydantic, no I/O."""

from poseforge.models.animation import (
    DEFAULT_LENGTH,
    Keyframe,
    PoseAnimation,
    default_animation,
)
from poseforge.models.channel import (
    ChannelValue,
    Vector3,
    channel_shape,
    parse_channel_value,
)
from poseforge.models.enums import (
    ChannelShape,
    MismatchPolicy,
    PlaybackState,
    ScrubState,
)

__all__ = [
    "DEFAULT_LENGTH",
    "ChannelShape",
    "ChannelValue",
    "Keyframe",
    "MismatchPolicy",
    "PlaybackState",
    "PoseAnimation",
    "ScrubState",
    "Vector3",
    "channel_shape",
    "default_animation",
    "parse_channel_value",
]
