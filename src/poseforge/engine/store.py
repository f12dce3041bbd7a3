"""Animation store - the single owner of the document, playhead and selection."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from poseforge.bones import default_channel_value, remaining_bones
from poseforge.engine.interpolator import PoseInterpolator
from poseforge.models.animation import Keyframe, PoseAnimation, default_animation
from poseforge.models.channel import parse_channel_value

if TYPE_CHECKING:
    from poseforge.engine.interpolator import Pose
    from poseforge.models.channel import ChannelValue

logger = logging.getLogger(__name__)

StoreListener = Callable[["AnimationStore"], None]


class AnimationStore:
    """Holds the authoritative :class:`PoseAnimation` and the playhead.

    Documents are immutable; every mutation swaps in a new document, so a
    reader never sees a half-applied edit.  Out-of-range indexes are
    ignored and reported by a ``False`` return value.

    The store is single-writer: callers on other threads must serialise
    their mutations.
    """

    def __init__(
        self,
        animation: PoseAnimation | None = None,
        *,
        interpolator: PoseInterpolator | None = None,
    ) -> None:
        self._animation = animation if animation is not None else default_animation()
        self._current_time = 0.0
        self._selection: int | None = 0 if self._animation.keyframes else None
        self._listeners: list[StoreListener] = []
        self.interpolator = interpolator or PoseInterpolator()

    # ── Read side ───────────────────────────────────────────
    @property
    def animation(self) -> PoseAnimation:
        return self._animation

    @property
    def current_time(self) -> float:
        return self._current_time

    @property
    def length(self) -> float:
        return self._animation.length

    @property
    def selection(self) -> int | None:
        return self._selection

    @property
    def selected_keyframe(self) -> Keyframe | None:
        if self._selection is None:
            return None
        return self._animation.keyframes[self._selection]

    def current_pose(self) -> Pose:
        """Evaluate the document at the playhead."""
        return self.interpolator.evaluate(self._animation, self._current_time)

    def remaining_bones(self, keyframe_index: int) -> list[str]:
        """Catalog bones the keyframe does not animate yet."""
        if not self._animation.has_keyframe(keyframe_index):
            return []
        return remaining_bones(self._animation.keyframes[keyframe_index].pose)

    # ── Subscribers ─────────────────────────────────────────
    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ── Playhead ────────────────────────────────────────────
    def set_time(self, time: float) -> float:
        """Move the playhead, clamped to ``[0, length]``. Returns the stored time."""
        clamped = min(max(time, 0.0), self._animation.length)
        if clamped != self._current_time:
            self._current_time = clamped
            self._notify()
        return clamped

    # ── Structure ───────────────────────────────────────────
    def replace(self, animation: PoseAnimation) -> None:
        """Swap in a whole document (import, decode, new)."""
        self._animation = animation
        self._current_time = min(self._current_time, animation.length)
        self._selection = 0 if animation.keyframes else None
        logger.debug("Document replaced (%d keyframes)", len(animation.keyframes))
        self._notify()

    def add_keyframe(self, at_time: float | None = None, *, duplicate: bool = False) -> int:
        """Append a keyframe and select it.

        With ``duplicate`` the pose of the selected keyframe is copied;
        otherwise the new keyframe starts empty.
        """
        time = self._current_time if at_time is None else max(at_time, 0.0)
        source = self.selected_keyframe if duplicate else None
        pose = dict(source.pose) if source is not None else {}
        keyframes = [*self._animation.keyframes, Keyframe(time=time, pose=pose)]
        self._animation = self._animation.model_copy(update={"keyframes": keyframes})
        self._selection = len(keyframes) - 1
        self._notify()
        return self._selection

    def delete_keyframe(self, index: int | None = None) -> bool:
        """Remove a keyframe (default: the selected one) and clear the selection."""
        if index is None:
            index = self._selection
        if index is None or not self._animation.has_keyframe(index):
            logger.debug("delete_keyframe(%s): no such keyframe", index)
            return False
        keyframes = [kf for i, kf in enumerate(self._animation.keyframes) if i != index]
        self._animation = self._animation.model_copy(update={"keyframes": keyframes})
        self._selection = None
        self._notify()
        return True

    def select_keyframe(self, index: int | None) -> bool:
        if index is not None and not self._animation.has_keyframe(index):
            logger.debug("select_keyframe(%d): out of range", index)
            return False
        if index != self._selection:
            self._selection = index
            self._notify()
        return True

    # ── Channels ────────────────────────────────────────────
    def set_channel_value(self, keyframe_index: int, name: str, value: ChannelValue) -> bool:
        """Create or replace *name* in one keyframe's pose."""
        if not self._animation.has_keyframe(keyframe_index):
            logger.debug("set_channel_value(%d, %s): no such keyframe", keyframe_index, name)
            return False
        parsed = parse_channel_value(value)
        self._update_pose(keyframe_index, lambda pose: {**pose, name: parsed})
        return True

    def remove_channel(self, keyframe_index: int, name: str) -> bool:
        """Delete *name* from one keyframe only."""
        if not self._animation.has_keyframe(keyframe_index):
            return False
        if name not in self._animation.keyframes[keyframe_index].pose:
            return False
        self._update_pose(
            keyframe_index,
            lambda pose: {k: v for k, v in pose.items() if k != name},
        )
        return True

    def add_bone(self, keyframe_index: int, name: str) -> bool:
        """Start animating *name* in a keyframe using its catalog default."""
        return self.set_channel_value(keyframe_index, name, default_channel_value(name))

    def _update_pose(
        self,
        keyframe_index: int,
        change: Callable[[dict[str, ChannelValue]], dict[str, ChannelValue]],
    ) -> None:
        keyframes = list(self._animation.keyframes)
        target = keyframes[keyframe_index]
        keyframes[keyframe_index] = target.model_copy(update={"pose": change(target.pose)})
        self._animation = self._animation.model_copy(update={"keyframes": keyframes})
        self._notify()
