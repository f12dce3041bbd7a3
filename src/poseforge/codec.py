"""Animation document serialisation: raw JSON files and base64 share payloads."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from pathlib import Path

import jsonschema
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from poseforge.models.animation import PoseAnimation
from poseforge.models.channel import ChannelValue
from poseforge.validation import validate_animation_json

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "animation.json"
EXPORT_MIME_TYPE = "text/plain"

_pose_adapter: TypeAdapter[dict[str, ChannelValue]] = TypeAdapter(dict[str, ChannelValue])


class DecodeError(ValueError):
    """Raised when an encoded or exported animation cannot be read."""


def to_json(animation: PoseAnimation) -> str:
    """Compact JSON in the persisted ``{length, keyframes}`` layout."""
    return animation.model_dump_json()


def from_json(text: str) -> PoseAnimation:
    """Parse and validate a raw JSON animation document."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"animation contains invalid JSON: {exc}"
        raise DecodeError(msg) from None
    try:
        validate_animation_json(data)
    except jsonschema.ValidationError as exc:
        msg = f"animation does not match the schema: {exc.message}"
        raise DecodeError(msg) from None
    try:
        return PoseAnimation.model_validate(data)
    except PydanticValidationError as exc:
        msg = f"animation has invalid structure: {exc}"
        raise DecodeError(msg) from None


def encode(animation: PoseAnimation) -> str:
    """JSON-stringify then base64-encode, for embedding in a link."""
    return base64.b64encode(to_json(animation).encode("utf-8")).decode("ascii")


def decode(payload: str) -> PoseAnimation:
    """Inverse of :func:`encode`.

    Raises
    ------
    DecodeError
        If *payload* is not valid base64, UTF-8, JSON or an animation.
    """
    try:
        raw = base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        msg = f"payload is not valid base64: {exc}"
        raise DecodeError(msg) from None
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        msg = "payload does not contain UTF-8 text"
        raise DecodeError(msg) from None
    return from_json(text)


def save_animation(animation: PoseAnimation, path: Path) -> Path:
    """Write *animation* as JSON. Directories get ``animation.json`` inside."""
    save_path = path if path.suffix == ".json" else path / EXPORT_FILENAME
    save_path.parent.mkdir(parents=True, exist_ok=True)
    save_path.write_text(to_json(animation), encoding="utf-8")
    logger.info("Wrote %s", save_path)
    return save_path


def load_animation(path: Path) -> PoseAnimation:
    """Read an exported animation file (or ``animation.json`` in a directory)."""
    if path.is_dir():
        path = path / EXPORT_FILENAME
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        msg = f"animation file not found: {path}"
        raise DecodeError(msg) from None
    except PermissionError:
        msg = f"permission denied reading animation file: {path}"
        raise DecodeError(msg) from None
    except UnicodeDecodeError:
        msg = f"animation file is not UTF-8 text: {path}"
        raise DecodeError(msg) from None
    return from_json(text)


def dump_pose(pose: dict[str, ChannelValue]) -> dict[str, object]:
    """JSON-ready form of an evaluated pose (numbers and ``{x, y, z}`` dicts)."""
    return _pose_adapter.dump_python(pose, mode="json")
