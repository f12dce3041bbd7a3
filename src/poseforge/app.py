"""PoseForge - Textual TUI application entry point."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.reactive import reactive
from textual.widgets import Footer, Header

from poseforge.config import AppConfig, load_config
from poseforge.engine.interpolator import PoseInterpolator
from poseforge.engine.store import AnimationStore
from poseforge.models.animation import default_animation

if TYPE_CHECKING:
    from pathlib import Path

    from textual.binding import BindingType

    from poseforge.models.animation import PoseAnimation


class PoseForgeApp(App[None]):
    """Main PoseForge TUI application.

    Owns the :class:`AnimationStore`; screens receive it explicitly.
    """

    TITLE = "PoseForge"
    SUB_TITLE = "Pose Animation Editor"

    CSS = """
    Screen {
        background: $surface;
    }

    Header {
        background: #7c3aed;
        color: #f5f3ff;
        dock: top;
        height: 1;
    }

    Footer {
        background: #1e1b4b;
        color: #c4b5fd;
    }

    .screen-container {
        layout: vertical;
        padding: 0 2;
        background: #0f0b1e;
        height: auto;
    }

    .card {
        background: #1e1b4b;
        border: round #7c3aed;
        padding: 0 2 1 2;
        margin: 1 0 0 0;
        height: auto;
    }

    .card-title {
        text-style: bold;
        color: #c4b5fd;
        margin: 0 0 1 0;
    }

    Button {
        height: 1;
        min-width: 12;
        margin: 0 1 0 0;
        border: none;
        padding: 0 1;
        background: #312e81;
        color: #c4b5fd;
    }

    Button:hover {
        background: #4c1d95;
    }

    Button.primary {
        background: #7c3aed;
        color: #f5f3ff;
    }

    Button.danger {
        background: #7f1d1d;
        color: #fecaca;
    }

    Button.success {
        background: #065f46;
        color: #a7f3d0;
    }

    Label {
        color: #c4b5fd;
    }

    DataTable {
        background: #1e1b4b;
        color: #e9d5ff;
        height: auto;
        max-height: 12;
    }

    #channel-editor {
        height: auto;
        max-height: 16;
    }

    .toolbar {
        layout: horizontal;
        height: auto;
        margin: 1 0 0 0;
        align: left middle;
    }

    .row {
        layout: horizontal;
        height: auto;
    }

    .col {
        layout: vertical;
        width: 1fr;
        height: auto;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("q", "quit", "Quit", show=True),
    ]

    # Raised while a drag gesture owns the pointer; camera-style controls
    # must ignore input while it is set.
    interacting: reactive[bool] = reactive(False)

    def __init__(
        self,
        animation: PoseAnimation | None = None,
        *,
        config: AppConfig | None = None,
        source: Path | None = None,
    ) -> None:
        super().__init__()
        self.config = config or load_config()
        self.source = source
        self.store = AnimationStore(
            animation or default_animation(self.config.editor.default_length),
            interpolator=PoseInterpolator(self.config.editor.mismatch_policy),
        )

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Footer()

    def on_mount(self) -> None:
        """Push the editor screen."""
        from poseforge.screens.editor import EditorScreen

        self.push_screen(EditorScreen(self.store, tick_rate=self.config.playback.tick_rate))


if __name__ == "__main__":
    PoseForgeApp().run()
