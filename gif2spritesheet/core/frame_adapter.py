"""Normalize decoder output into canonical frames."""

from __future__ import annotations

import logging
from typing import Sequence

from . import DecodedAnimation, Frame

logger = logging.getLogger(__name__)


def adapt_animation(animation: DecodedAnimation) -> list[Frame]:
    """Turn decoded patches into frames, numbered in decode order.

    An animation without frames yields an empty list; rejecting it is left
    to the spritesheet builder.
    """

    frames = [
        Frame(
            index=idx,
            pixels=bytes(decoded.patch),
            width=decoded.width,
            height=decoded.height,
            offset_left=decoded.left,
            offset_top=decoded.top,
            duration=max(0, int(decoded.delay)),
        )
        for idx, decoded in enumerate(animation.frames)
    ]
    logger.debug("Adapted %s decoded frames", len(frames))
    return frames


def remove_frame(frames: Sequence[Frame], position: int) -> list[Frame]:
    """Return a copy of ``frames`` without the one at ``position``.

    Remaining frames keep their original ``index``.
    """

    if position < 0 or position >= len(frames):
        raise IndexError(f"Frame position {position} out of range for {len(frames)} frames")
    return [frame for i, frame in enumerate(frames) if i != position]


def remove_frames(frames: Sequence[Frame], positions: Sequence[int]) -> list[Frame]:
    """Drop several positions at once; positions refer to the input sequence."""

    doomed = set(positions)
    for position in doomed:
        if position < 0 or position >= len(frames):
            raise IndexError(f"Frame position {position} out of range for {len(frames)} frames")
    return [frame for i, frame in enumerate(frames) if i not in doomed]
