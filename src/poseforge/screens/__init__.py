"""PoseForge TUI screens."""

from poseforge.screens.bone_picker import BonePicker
from poseforge.screens.editor import EditorScreen

__all__ = [
    "BonePicker",
    "EditorScreen",
]
