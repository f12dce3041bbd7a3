"""Bone picker - modal list of channel names."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, OptionList, Static
from textual.widgets.option_list import Option

if TYPE_CHECKING:
    from textual.app import ComposeResult
    from textual.binding import BindingType


class BonePicker(ModalScreen[str | None]):
    """Pick one bone name; dismisses with the name or ``None`` on cancel."""

    DEFAULT_CSS = """
    BonePicker {
        align: center middle;
    }

    BonePicker > Vertical {
        width: 48;
        height: auto;
        max-height: 80%;
        background: #1e1b4b;
        border: round #7c3aed;
        padding: 0 1 1 1;
    }

    BonePicker .bp-title {
        text-style: bold;
        color: #a78bfa;
        margin: 0 0 1 0;
    }

    BonePicker OptionList {
        height: auto;
        max-height: 20;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [("escape", "cancel", "Cancel")]

    def __init__(self, title: str, bones: list[str]) -> None:
        super().__init__()
        self._title = title
        self._bones = bones

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(self._title, classes="bp-title")
            if self._bones:
                yield OptionList(*(Option(bone, id=bone) for bone in self._bones))
            else:
                yield Static("[dim]Nothing to choose from.[/dim]")
            yield Button("Cancel", id="bp-cancel")

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(event.option_id)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "bp-cancel":
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
