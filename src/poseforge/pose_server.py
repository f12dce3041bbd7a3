"""WebSocket pose stream - publishes the evaluated pose on every playhead change."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

from websockets.asyncio.server import ServerConnection, broadcast, serve

from poseforge.codec import dump_pose
from poseforge.engine.clock import DEFAULT_TICK_RATE, PlaybackClock, asyncio_interval
from poseforge.engine.interpolator import ShapeMismatchError

if TYPE_CHECKING:
    from poseforge.engine.store import AnimationStore

logger = logging.getLogger(__name__)

# Undelivered messages kept per server; older poses are dropped first.
MAX_PENDING = 8


class PoseStreamServer:
    """Drives a :class:`PlaybackClock` and streams poses to renderer clients.

    Clients receive ``{"type": "pose", "time": t, "pose": {...}}`` messages
    and may send ``{"type": "play" | "pause" | "restart" | "rewind"}``.
    When the pose cannot be evaluated (shape mismatch under the raise
    policy) they receive ``{"type": "error", "time": t, "message": ...}``.
    """

    def __init__(
        self,
        store: AnimationStore,
        *,
        host: str = "localhost",
        port: int = 8770,
        tick_rate: float = DEFAULT_TICK_RATE,
    ) -> None:
        self.store = store
        self.host = host
        self.port = port
        self.clock = PlaybackClock(store, rate=tick_rate)
        self._clients: set[ServerConnection] = set()
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=MAX_PENDING)
        self._unsubscribe = store.subscribe(self._on_store_change)

    def pose_message(self) -> dict[str, Any]:
        """The current pose as a JSON-ready message, or an error message."""
        time = self.store.current_time
        try:
            pose = self.store.current_pose()
        except ShapeMismatchError as exc:
            logger.debug("Cannot evaluate pose at t=%.3f: %s", time, exc)
            return {"type": "error", "time": time, "message": str(exc)}
        return {"type": "pose", "time": time, "pose": dump_pose(pose)}

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Send a JSON message to all connected WebSocket clients."""
        broadcast(self._clients, json.dumps(message))

    def _on_store_change(self, _store: AnimationStore) -> None:
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(self.pose_message())

    async def _broadcast_loop(self) -> None:
        """Drain the queue and broadcast messages to clients."""
        while True:
            msg = await self._queue.get()
            await self.broadcast(msg)

    def handle_command(self, raw: str | bytes) -> bool:
        """Apply a client control message. Returns False if it was ignored."""
        try:
            command = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring non-JSON client message")
            return False
        kind = command.get("type") if isinstance(command, dict) else None
        match kind:
            case "play":
                self.clock.play()
            case "pause":
                self.clock.pause()
            case "restart":
                self.clock.restart()
            case "rewind":
                self.clock.rewind()
            case _:
                logger.debug("Ignoring unknown client command: %r", kind)
                return False
        return True

    async def _ws_handler(self, websocket: ServerConnection) -> None:
        """Handle a single WebSocket connection."""
        self._clients.add(websocket)
        try:
            await websocket.send(json.dumps(self.pose_message()))
            async for message in websocket:
                self.handle_command(message)
        finally:
            self._clients.discard(websocket)

    async def run(self, *, autoplay: bool = True) -> None:
        """Serve until cancelled (Ctrl+C)."""
        broadcaster = None
        try:
            async with serve(self._ws_handler, self.host, self.port):
                logger.info("Streaming poses on ws://%s:%d", self.host, self.port)
                self.clock.bind(asyncio_interval)
                broadcaster = asyncio.create_task(self._broadcast_loop())
                if autoplay:
                    self.clock.play()
                await asyncio.Future()
        finally:
            self.clock.close()
            if broadcaster and not broadcaster.done():
                broadcaster.cancel()
            self._unsubscribe()
