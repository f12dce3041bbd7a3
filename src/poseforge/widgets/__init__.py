"""PoseForge TUI custom widgets."""

from poseforge.widgets.channel_slider import ChannelSlider
from poseforge.widgets.timeline import Timeline

__all__ = [
    "ChannelSlider",
    "Timeline",
]
