"""Shared fixtures for PoseForge tests."""

from pathlib import Path

import pytest

from poseforge.engine import AnimationStore, PlaybackClock
from poseforge.models import Keyframe, PoseAnimation, Vector3


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep ~/.poseforge and POSEFORGE_* settings out of the real environment."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def neck_animation() -> PoseAnimation:
    return PoseAnimation(
        length=10,
        keyframes=[
            Keyframe(time=0, pose={"Neck": Vector3(x=0, y=0, z=0)}),
            Keyframe(time=10, pose={"Neck": Vector3(x=0, y=1, z=0)}),
        ],
    )


@pytest.fixture
def mixed_animation() -> PoseAnimation:
    """Rotations and a facial scalar authored at different keyframes."""
    return PoseAnimation(
        length=8,
        keyframes=[
            Keyframe(time=0, pose={"Neck": Vector3(x=0.0, y=0.0, z=0.0)}),
            Keyframe(time=2, pose={"MouthSmile": 0.0, "LeftArm": Vector3(x=1.0, y=0.0, z=-1.0)}),
            Keyframe(time=4, pose={"Neck": Vector3(x=0.4, y=0.8, z=-0.4)}),
            Keyframe(time=6, pose={"MouthSmile": 1.0}),
        ],
    )


@pytest.fixture
def store(mixed_animation: PoseAnimation) -> AnimationStore:
    return AnimationStore(mixed_animation)


@pytest.fixture
def clock(store: AnimationStore) -> PlaybackClock:
    return PlaybackClock(store)
