"""Editor screen - timeline, keyframe list, channel sliders and live pose."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, DataTable, Footer, Header, Label, Static

from poseforge.codec import save_animation
from poseforge.engine.clock import DEFAULT_TICK_RATE, PlaybackClock
from poseforge.engine.interpolator import ShapeMismatchError
from poseforge.engine.scrubber import TimelineScrubber
from poseforge.models.channel import Vector3, channel_shape
from poseforge.screens.bone_picker import BonePicker
from poseforge.share import build_share_url
from poseforge.widgets.channel_slider import ChannelSlider
from poseforge.widgets.timeline import Timeline

if TYPE_CHECKING:
    from textual.app import ComposeResult
    from textual.binding import BindingType

    from poseforge.app import PoseForgeApp
    from poseforge.engine.store import AnimationStore
    from poseforge.models.animation import PoseAnimation


def _format_value(value: float | Vector3) -> str:
    match value:
        case Vector3(x=x, y=y, z=z):
            return f"x:{x:.4f} y:{y:.4f} z:{z:.4f}"
        case _:
            return f"{value:.4f}"


class EditorScreen(Screen[None]):
    """Edit keyframes of the current animation and preview the pose."""

    name = "editor"

    BINDINGS: ClassVar[list[BindingType]] = [
        ("space", "toggle_play", "Play/Pause"),
        ("0", "rewind", "time = 0"),
        ("k", "add_keyframe", "Add Keyframe"),
        ("c", "duplicate_keyframe", "Copy Keyframe"),
        ("x", "delete_keyframe", "Delete Keyframe"),
        ("b", "add_bone", "Add Bone"),
        ("e", "export", "Export"),
    ]

    def __init__(self, store: AnimationStore, *, tick_rate: float = DEFAULT_TICK_RATE) -> None:
        super().__init__()
        self.store = store
        self.clock = PlaybackClock(store, rate=tick_rate)
        self.scrubber = TimelineScrubber(
            store, clock=self.clock, on_interacting=self._set_interacting,
        )
        self._helper_message = ""
        self._table_doc: PoseAnimation | None = None
        self._table_selection: int | None = None
        self._channel_key: tuple[object, ...] | None = None
        self._unsubscribe = None

    @property
    def _app(self) -> PoseForgeApp:
        return self.app  # type: ignore[return-value]

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(classes="screen-container"):
            yield Label("", id="editor-status")
            yield Timeline(self.store, self.scrubber, id="timeline")

            with Horizontal(classes="toolbar"):
                yield Button("Play", id="btn-play", classes="primary")
                yield Button("time = 0", id="btn-rewind")
                yield Button("Add Keyframe", id="btn-add-kf", classes="success")
                yield Button("Copy Keyframe", id="btn-dup-kf")
                yield Button("Delete Keyframe", id="btn-del-kf", classes="danger")
            with Horizontal(classes="toolbar"):
                yield Button("Add Bone", id="btn-add-bone", classes="success")
                yield Button("Delete Bone", id="btn-del-bone", classes="danger")
                yield Button("Download Animation", id="btn-export")
                yield Button("Share Link", id="btn-share")

            with Horizontal(classes="row"):
                with Vertical(classes="card col", id="keyframe-card"):
                    yield Static("Keyframes", classes="card-title")
                    yield DataTable(id="keyframe-table")
                with Vertical(classes="card col", id="channel-card"):
                    yield Static("Keyframe Channels", classes="card-title")
                    yield VerticalScroll(id="channel-editor")

            with Vertical(classes="card"):
                yield Static("Current Pose", classes="card-title")
                yield DataTable(id="pose-table")
        yield Footer()

    # ── Lifecycle ────────────────────────────────────────────
    def on_mount(self) -> None:
        keyframes = self.query_one("#keyframe-table", DataTable)
        keyframes.add_columns("#", "Time", "Channels")
        keyframes.cursor_type = "row"
        pose = self.query_one("#pose-table", DataTable)
        pose.add_columns("Channel", "Value")

        self.clock.bind(self.set_interval)
        self._unsubscribe = self.store.subscribe(lambda _store: self._sync())
        self._sync()

    def on_unmount(self) -> None:
        self.clock.close()
        if self._unsubscribe is not None:
            self._unsubscribe()

    def _set_interacting(self, interacting: bool) -> None:
        self._app.interacting = interacting
        self._sync_status()

    # ── View sync ────────────────────────────────────────────
    def _sync(self) -> None:
        self.query_one(Timeline).refresh()
        self._sync_status()
        self._sync_pose_table()
        self._sync_keyframe_table()
        self._sync_channel_editor()
        self.query_one("#btn-play", Button).label = "Pause" if self.clock.playing else "Play"

    def _sync_status(self) -> None:
        text = f"Time: {self.store.current_time:.2f}/{self.store.length:.2f} seconds"
        if self._app.interacting:
            text += "  [b]scrubbing[/b]"
        mismatches = self.store.interpolator.mismatch_count
        if mismatches:
            text += f"  [red]{mismatches} shape mismatch(es)[/red]"
        if self._helper_message:
            text += f" - {self._helper_message}"
        self.query_one("#editor-status", Label).update(text)

    def _sync_pose_table(self) -> None:
        table = self.query_one("#pose-table", DataTable)
        table.clear()
        try:
            pose = self.store.current_pose()
        except ShapeMismatchError as exc:
            self._set_helper(str(exc))
            return
        for name, value in pose.items():
            table.add_row(name, _format_value(value))

    def _sync_keyframe_table(self) -> None:
        if (
            self.store.animation is self._table_doc
            and self.store.selection == self._table_selection
        ):
            return
        self._table_doc = self.store.animation
        self._table_selection = self.store.selection
        table = self.query_one("#keyframe-table", DataTable)
        table.clear()
        for i, keyframe in enumerate(self.store.animation.keyframes):
            table.add_row(
                str(i), f"{keyframe.time:.2f}", ", ".join(keyframe.pose) or "-", key=str(i),
            )
        if self.store.selection is not None:
            table.move_cursor(row=self.store.selection)

    def _sync_channel_editor(self) -> None:
        keyframe = self.store.selected_keyframe
        shapes = (
            tuple((name, channel_shape(v)) for name, v in keyframe.pose.items())
            if keyframe is not None
            else None
        )
        key = (self.store.selection, shapes)
        if key == self._channel_key:
            for slider in self.query(ChannelSlider):
                slider.refresh()
            return
        self._channel_key = key
        self.call_later(self._rebuild_channel_editor)

    async def _rebuild_channel_editor(self) -> None:
        container = self.query_one("#channel-editor", VerticalScroll)
        await container.remove_children()
        index = self.store.selection
        keyframe = self.store.selected_keyframe
        if index is None or keyframe is None:
            message = (
                "No keyframes in this animation."
                if not self.store.animation.keyframes
                else "Select a keyframe to edit it."
            )
            await container.mount(Static(message.upper()))
            return
        if not keyframe.pose:
            await container.mount(
                Static("No bones are currently being animated in this keyframe."),
                Static("[dim]Add a bone (\"Neck\" is a good start).[/dim]"),
            )
            return
        sliders: list[ChannelSlider] = []
        for name, value in keyframe.pose.items():
            if isinstance(value, Vector3):
                sliders.extend(ChannelSlider(self.store, index, name, axis) for axis in ("x", "y", "z"))
            else:
                sliders.append(ChannelSlider(self.store, index, name))
        await container.mount_all(sliders)

    # ── Events ───────────────────────────────────────────────
    def on_button_pressed(self, event: Button.Pressed) -> None:
        match event.button.id:
            case "btn-play":
                self.action_toggle_play()
            case "btn-rewind":
                self.action_rewind()
            case "btn-add-kf":
                self.action_add_keyframe()
            case "btn-dup-kf":
                self.action_duplicate_keyframe()
            case "btn-del-kf":
                self.action_delete_keyframe()
            case "btn-add-bone":
                self.action_add_bone()
            case "btn-del-bone":
                self.action_delete_bone()
            case "btn-export":
                self.action_export()
            case "btn-share":
                self.action_share()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.data_table.id == "keyframe-table" and event.row_key.value is not None:
            self.store.select_keyframe(int(event.row_key.value))

    def on_channel_slider_changed(self, event: ChannelSlider.Changed) -> None:
        keyframe = self.store.animation.keyframes[event.keyframe_index]
        value = keyframe.pose.get(event.channel)
        if value is not None:
            self._set_helper(f"Bone {event.channel} set to {_format_value(value)}")

    def _set_helper(self, text: str) -> None:
        self._helper_message = text
        self._sync_status()

    # ── Actions ──────────────────────────────────────────────
    def action_toggle_play(self) -> None:
        self.clock.toggle()
        self._sync()

    def action_rewind(self) -> None:
        self.clock.rewind()

    def action_add_keyframe(self) -> None:
        index = self.store.add_keyframe()
        self._set_helper(f"Added keyframe {index} at {self.store.current_time:.2f}s")

    def action_duplicate_keyframe(self) -> None:
        index = self.store.add_keyframe(duplicate=True)
        self._set_helper(f"Copied keyframe to {index} at {self.store.current_time:.2f}s")

    def action_delete_keyframe(self) -> None:
        if self.store.delete_keyframe():
            self._set_helper("Keyframe deleted")

    def action_add_bone(self) -> None:
        index = self.store.selection
        if index is None:
            self._set_helper("Select a keyframe first")
            return

        def add(bone: str | None) -> None:
            if bone is not None and self.store.add_bone(index, bone):
                self._set_helper(
                    f"You added {bone}! You can now adjust the sliders of its values."
                )

        self.app.push_screen(BonePicker("Add Bone", self.store.remaining_bones(index)), add)

    def action_delete_bone(self) -> None:
        index = self.store.selection
        keyframe = self.store.selected_keyframe
        if index is None or keyframe is None:
            self._set_helper("Select a keyframe first")
            return

        def remove(bone: str | None) -> None:
            if bone is not None and self.store.remove_channel(index, bone):
                self._set_helper(f"Removed {bone} from keyframe {index}")

        self.app.push_screen(BonePicker("Delete Bone", sorted(keyframe.pose)), remove)

    def action_export(self) -> None:
        config = self._app.config
        target = self._app.source or config.exports_dir / config.editor.export_filename
        try:
            path = save_animation(self.store.animation, target)
        except OSError as exc:
            self._set_helper(f"Export failed: {exc}")
            return
        self._set_helper(f"Saved {path}")

    def action_share(self) -> None:
        share = self._app.config.share
        url = build_share_url(self.store.animation, share.base_url, param=share.animation_param)
        self.app.copy_to_clipboard(url)
        self._set_helper("Share link copied to clipboard")
