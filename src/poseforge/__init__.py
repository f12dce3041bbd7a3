"""PoseForge - keyframed character pose animation editor."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("poseforge")
except PackageNotFoundError:
    __version__ = "unknown"
