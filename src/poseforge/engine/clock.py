"""Playback clock - advances the playhead at a fixed rate and loops."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, TypeAlias

from poseforge.models.enums import PlaybackState

if TYPE_CHECKING:
    from poseforge.engine.store import AnimationStore

logger = logging.getLogger(__name__)

DEFAULT_TICK_RATE = 60.0


class TimerHandle(Protocol):
    """A pending repeating callback that can be cancelled."""

    def stop(self) -> None: ...


# (interval_seconds, callback) -> handle.  Textual's ``set_interval`` fits.
Scheduler: TypeAlias = Callable[[float, Callable[[], None]], TimerHandle]


class AsyncioTimer:
    """Repeating callback on the running asyncio loop."""

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self._callback = callback
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self._callback()
            except Exception:
                logger.exception("Timer callback failed")

    @property
    def active(self) -> bool:
        return not self._task.done()

    def stop(self) -> None:
        self._task.cancel()


def asyncio_interval(interval: float, callback: Callable[[], None]) -> AsyncioTimer:
    """:data:`Scheduler` backed by asyncio. Must be called from a running loop."""
    return AsyncioTimer(interval, callback)


class PlaybackClock:
    """Two-state clock (stopped/playing) writing the store's playhead.

    The host either binds a scheduler, in which case ``play()`` starts a
    repeating tick and ``pause()`` cancels it, or calls :meth:`tick`
    itself once per frame.
    """

    def __init__(
        self,
        store: AnimationStore,
        *,
        rate: float = DEFAULT_TICK_RATE,
        scheduler: Scheduler | None = None,
    ) -> None:
        if rate <= 0:
            msg = "rate must be positive"
            raise ValueError(msg)
        self.store = store
        self.rate = rate
        self.state = PlaybackState.STOPPED
        self._scheduler = scheduler
        self._timer: TimerHandle | None = None

    @property
    def step(self) -> float:
        return 1.0 / self.rate

    @property
    def playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    def bind(self, scheduler: Scheduler | None) -> None:
        """Attach (or detach) the scheduler that drives ticks."""
        self._cancel_timer()
        self._scheduler = scheduler
        if self.playing:
            self._start_timer()

    # ── Transitions ─────────────────────────────────────────
    def play(self) -> None:
        if self.playing:
            return
        self.state = PlaybackState.PLAYING
        self._start_timer()
        logger.debug("Playback started at t=%.3f", self.store.current_time)

    def pause(self) -> None:
        if not self.playing:
            return
        self.state = PlaybackState.STOPPED
        self._cancel_timer()
        logger.debug("Playback paused at t=%.3f", self.store.current_time)

    def toggle(self) -> None:
        if self.playing:
            self.pause()
        else:
            self.play()

    def restart(self) -> None:
        """Jump to 0 and play."""
        self.store.set_time(0.0)
        self.play()

    def rewind(self) -> None:
        """Jump to 0 without changing the playback state."""
        self.store.set_time(0.0)

    def close(self) -> None:
        """Stop playing and drop any pending tick."""
        self.state = PlaybackState.STOPPED
        self._cancel_timer()

    # ── Ticking ─────────────────────────────────────────────
    def tick(self, delta: float | None = None) -> float:
        """Advance by *delta* seconds (default one step) while playing.

        Past the end of the animation the playhead wraps to 0.
        """
        if not self.playing:
            return self.store.current_time
        new_time = self.store.current_time + (self.step if delta is None else delta)
        if new_time > self.store.length:
            new_time = 0.0
        return self.store.set_time(new_time)

    def _start_timer(self) -> None:
        if self._scheduler is not None and self._timer is None:
            self._timer = self._scheduler(self.step, self.tick)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
