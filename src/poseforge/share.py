"""Share links and the initial-animation source precedence."""

from __future__ import annotations

import logging
import math
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from poseforge.codec import decode, encode
from poseforge.models.animation import DEFAULT_LENGTH, PoseAnimation, default_animation

logger = logging.getLogger(__name__)

ANIMATION_PARAM = "animation"
LENGTH_PARAM = "length"


def build_share_url(
    animation: PoseAnimation,
    base_url: str,
    *,
    param: str = ANIMATION_PARAM,
) -> str:
    """Return *base_url* with the encoded animation in its query string.

    Existing query parameters other than *param* are kept.
    """
    parts = urlsplit(base_url)
    query = {k: v for k, v in parse_qs(parts.query).items() if k != param}
    query[param] = [encode(animation)]
    return urlunsplit(parts._replace(query=urlencode(query, doseq=True)))


def parse_share_url(
    url: str,
    *,
    animation_param: str = ANIMATION_PARAM,
    length_param: str = LENGTH_PARAM,
) -> tuple[str | None, float | None]:
    """Extract the raw ``(encoded_animation, length)`` parameters of *url*.

    A length that is not a positive number is ignored.
    """
    query = parse_qs(urlsplit(url).query)
    encoded = query.get(animation_param, [None])[0] or None
    if encoded is not None:
        # An unescaped "+" arrives as a space.
        encoded = encoded.replace(" ", "+")
    length: float | None = None
    raw_length = query.get(length_param, [None])[0]
    if raw_length:
        try:
            length = float(raw_length)
        except ValueError:
            logger.warning("Ignoring non-numeric length parameter: %r", raw_length)
        else:
            if not 0 < length < math.inf:
                logger.warning("Ignoring out-of-range length parameter: %r", raw_length)
                length = None
    return encoded, length


def resolve_initial_animation(
    encoded: str | None = None,
    length: float | None = None,
    *,
    default_length: float = DEFAULT_LENGTH,
) -> PoseAnimation:
    """Pick the document an editor session starts with.

    An encoded animation wins; *length* only shapes the default starter.
    A supplied but corrupt payload raises :class:`~poseforge.codec.DecodeError`
    rather than falling back.
    """
    if encoded:
        return decode(encoded)
    return default_animation(length if length is not None else default_length)


def animation_from_url(
    url: str,
    *,
    default_length: float = DEFAULT_LENGTH,
    animation_param: str = ANIMATION_PARAM,
    length_param: str = LENGTH_PARAM,
) -> PoseAnimation:
    """:func:`parse_share_url` followed by :func:`resolve_initial_animation`."""
    encoded, length = parse_share_url(
        url, animation_param=animation_param, length_param=length_param,
    )
    return resolve_initial_animation(encoded, length, default_length=default_length)
