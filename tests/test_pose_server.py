"""Tests for the WebSocket pose stream."""

import asyncio
import json

import pytest
from websockets.asyncio.client import connect
from websockets.asyncio.server import serve

from poseforge.engine import AnimationStore, PoseInterpolator, asyncio_interval
from poseforge.models import Keyframe, MismatchPolicy, PoseAnimation, Vector3
from poseforge.pose_server import MAX_PENDING, PoseStreamServer


@pytest.fixture
def server(neck_animation):
    return PoseStreamServer(AnimationStore(neck_animation), port=0)


class TestPoseMessages:
    def test_pose_message(self, server):
        server.store.set_time(5.0)
        msg = server.pose_message()
        assert msg["type"] == "pose"
        assert msg["time"] == 5.0
        assert msg["pose"]["Neck"] == {"x": 0.0, "y": 0.5, "z": 0.0}

    def test_store_change_queues_pose(self, server):
        server.store.set_time(2.5)
        server.store.set_time(7.5)
        assert server._queue.qsize() == 2
        assert server._queue.get_nowait()["time"] == 2.5


class TestCommands:
    def test_play_pause(self, server):
        assert server.handle_command('{"type": "play"}')
        assert server.clock.playing
        assert server.handle_command('{"type": "pause"}')
        assert not server.clock.playing

    def test_restart_and_rewind(self, server):
        server.store.set_time(6.0)
        assert server.handle_command(b'{"type": "rewind"}')
        assert server.store.current_time == 0.0
        assert not server.clock.playing
        server.store.set_time(6.0)
        assert server.handle_command('{"type": "restart"}')
        assert server.store.current_time == 0.0
        assert server.clock.playing

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]", '{"type": "explode"}', "{}"])
    def test_ignored_messages(self, server, raw):
        assert server.handle_command(raw) is False
        assert not server.clock.playing


class TestWebSocket:
    @pytest.mark.asyncio
    async def test_client_receives_current_pose_on_connect(self, server):
        server.store.set_time(10.0)
        async with serve(server._ws_handler, "127.0.0.1", 0) as ws_server:
            port = ws_server.sockets[0].getsockname()[1]
            async with connect(f"ws://127.0.0.1:{port}") as client:
                raw = await asyncio.wait_for(client.recv(), timeout=2.0)
                msg = json.loads(raw)
                assert msg["type"] == "pose"
                assert msg["pose"]["Neck"]["y"] == 1.0

    @pytest.mark.asyncio
    async def test_playhead_changes_are_broadcast(self, server):
        async with serve(server._ws_handler, "127.0.0.1", 0) as ws_server:
            port = ws_server.sockets[0].getsockname()[1]
            async with connect(f"ws://127.0.0.1:{port}") as client:
                await asyncio.wait_for(client.recv(), timeout=2.0)
                broadcaster = asyncio.create_task(server._broadcast_loop())
                try:
                    server.store.set_time(2.5)
                    raw = await asyncio.wait_for(client.recv(), timeout=2.0)
                finally:
                    broadcaster.cancel()
                msg = json.loads(raw)
                assert msg["time"] == 2.5
                assert msg["pose"]["Neck"]["y"] == pytest.approx(0.25)

    @pytest.mark.asyncio
    async def test_client_command_controls_clock(self, server):
        async with serve(server._ws_handler, "127.0.0.1", 0) as ws_server:
            port = ws_server.sockets[0].getsockname()[1]
            async with connect(f"ws://127.0.0.1:{port}") as client:
                await asyncio.wait_for(client.recv(), timeout=2.0)
                await client.send(json.dumps({"type": "play"}))
                for _ in range(40):
                    if server.clock.playing:
                        break
                    await asyncio.sleep(0.025)
                assert server.clock.playing
        server.clock.close()


@pytest.fixture
def mismatched_server():
    anim = PoseAnimation(
        length=4,
        keyframes=[
            Keyframe(time=0, pose={"Jaw": 0.5}),
            Keyframe(time=4, pose={"Jaw": Vector3(x=1, y=1, z=1)}),
        ],
    )
    store = AnimationStore(anim, interpolator=PoseInterpolator(MismatchPolicy.RAISE))
    return PoseStreamServer(store, port=0, tick_rate=100)


class TestShapeMismatch:
    def test_pose_message_reports_error(self, mismatched_server):
        mismatched_server.store.set_time(1.0)
        msg = mismatched_server.pose_message()
        assert msg["type"] == "error"
        assert msg["time"] == 1.0
        assert "Jaw" in msg["message"]

    def test_store_change_queues_error(self, mismatched_server):
        mismatched_server.store.set_time(2.0)
        assert mismatched_server._queue.get_nowait()["type"] == "error"

    @pytest.mark.asyncio
    async def test_playback_keeps_running(self, mismatched_server):
        clock = mismatched_server.clock
        clock.bind(asyncio_interval)
        clock.play()
        try:
            await asyncio.sleep(0.05)
            first = mismatched_server.store.current_time
            await asyncio.sleep(0.05)
            assert mismatched_server.store.current_time > first > 0.0
            assert clock.playing
        finally:
            clock.close()

    @pytest.mark.asyncio
    async def test_client_receives_error_on_connect(self, mismatched_server):
        mismatched_server.store.set_time(2.0)
        async with serve(mismatched_server._ws_handler, "127.0.0.1", 0) as ws_server:
            port = ws_server.sockets[0].getsockname()[1]
            async with connect(f"ws://127.0.0.1:{port}") as client:
                msg = json.loads(await asyncio.wait_for(client.recv(), timeout=2.0))
                assert msg["type"] == "error"


def test_pending_messages_are_bounded(server):
    for i in range(1, MAX_PENDING + 5):
        server.store.set_time(i * 0.5)
    assert server._queue.qsize() == MAX_PENDING
    pending = [server._queue.get_nowait()["time"] for _ in range(MAX_PENDING)]
    assert pending[-1] == (MAX_PENDING + 4) * 0.5
    assert pending == sorted(pending)
