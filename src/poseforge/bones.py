"""Catalog of known avatar channels and their editing defaults."""

from __future__ import annotations

import math
from collections.abc import Iterable

from poseforge.models.channel import ChannelValue, Vector3

# Skeleton bones of the standard humanoid avatar rig.
SKELETON_BONES: tuple[str, ...] = (
    "Hips",
    "Spine",
    "Spine1",
    "Spine2",
    "Neck",
    "Head",
    "LeftEye",
    "RightEye",
    "LeftShoulder",
    "LeftArm",
    "LeftForeArm",
    "LeftHand",
    "RightShoulder",
    "RightArm",
    "RightForeArm",
    "RightHand",
    "LeftUpLeg",
    "LeftLeg",
    "LeftFoot",
    "LeftToeBase",
    "RightUpLeg",
    "RightLeg",
    "RightFoot",
    "RightToeBase",
)

# Facial blend weights, animated as a single number in [0, 1].
SCALAR_CHANNELS: frozenset[str] = frozenset({"MouthSmile", "MouthOpen"})

ALL_BONES: tuple[str, ...] = SKELETON_BONES + tuple(sorted(SCALAR_CHANNELS))

SCALAR_RANGE: tuple[float, float] = (0.0, 1.0)
ROTATION_RANGE: tuple[float, float] = (-math.pi, math.pi)


def is_scalar_channel(name: str) -> bool:
    return name in SCALAR_CHANNELS


def default_channel_value(name: str) -> ChannelValue:
    """Value inserted when a bone is first added to a keyframe."""
    if is_scalar_channel(name):
        return 0.0
    return Vector3(x=0.0, y=0.0, z=0.0)


def channel_range(name: str) -> tuple[float, float]:
    """Slider range for one axis of *name*."""
    return SCALAR_RANGE if is_scalar_channel(name) else ROTATION_RANGE


def remaining_bones(present: Iterable[str]) -> list[str]:
    """Catalog bones not in *present*, sorted by name."""
    taken = set(present)
    return sorted(name for name in ALL_BONES if name not in taken)
