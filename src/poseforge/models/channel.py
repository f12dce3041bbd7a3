"""Channel value models: a scalar weight or an x/y/z rotation."""

from __future__ import annotations

from typing import Annotated, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from poseforge.models.enums import ChannelShape


class Vector3(BaseModel):
    """Three independent axis values (Euler-like rotation, radians)."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


# Serialised as a bare number or as {"x", "y", "z"}; JSON has no inf or nan.
FiniteFloat: TypeAlias = Annotated[float, Field(allow_inf_nan=False)]
ChannelValue: TypeAlias = FiniteFloat | Vector3

_channel_value_adapter: TypeAdapter[ChannelValue] = TypeAdapter(ChannelValue)


def parse_channel_value(value: object) -> ChannelValue:
    """Validate a raw number, mapping or :class:`Vector3` into a channel value."""
    return _channel_value_adapter.validate_python(value)


def channel_shape(value: ChannelValue) -> ChannelShape:
    """Return the shape of *value* as it is stored right now."""
    match value:
        case Vector3():
            return ChannelShape.VECTOR
        case _:
            return ChannelShape.SCALAR
