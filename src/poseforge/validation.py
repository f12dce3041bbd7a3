"""Validation utilities for PoseForge animation documents."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "animation.schema.json"


@lru_cache(maxsize=1)
def _load_schema() -> dict[str, Any]:
    return json.loads(_SCHEMA_PATH.read_text(encoding="utf-8"))


def validate_animation_json(data: object) -> None:
    """Validate decoded animation data against animation.schema.json.

    Parameters
    ----------
    data:
        The parsed JSON document.

    Raises
    ------
    jsonschema.ValidationError
        If the data does not conform to the schema.
    """
    jsonschema.validate(data, _load_schema())
