"""Animation decoding via Pillow's GIF plugin."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageSequence, UnidentifiedImageError

from . import DecodedAnimation, DecodedFrame
from .errors import DecodeError
from ..utils import validators

logger = logging.getLogger(__name__)


def load_animation(path: Path) -> DecodedAnimation:
    """Decode an animation file from disk."""

    validated_path = validators.validate_animation_path(path)
    try:
        with Image.open(validated_path) as image:
            animation = _decode(image)
    except DecodeError:
        raise
    except (UnidentifiedImageError, OSError, EOFError, SyntaxError) as exc:
        raise DecodeError(validated_path, reason=f"Could not decode: {exc}") from exc

    logger.info(
        "Decoded %s -> %s frames on a %sx%s canvas",
        validated_path,
        len(animation.frames),
        animation.width,
        animation.height,
    )
    return animation


def decode_animation(data: bytes, name: str = "<memory>") -> DecodedAnimation:
    """Decode an animation held in memory (e.g. an upload)."""

    if not data:
        raise DecodeError(name, reason="Empty payload")
    try:
        with Image.open(io.BytesIO(data)) as image:
            if image.format != "GIF":
                raise DecodeError(name, reason=f"Unsupported format {image.format}")
            return _decode(image)
    except DecodeError:
        raise
    except (UnidentifiedImageError, OSError, EOFError, SyntaxError) as exc:
        raise DecodeError(name, reason=f"Could not decode: {exc}") from exc


def _decode(image: Image.Image) -> DecodedAnimation:
    """Collect one patch per frame.

    Pillow only hands out composed frames, so a patch is the composed frame
    cropped to ``dispose_extent``. Pixels drawn with the transparent index
    therefore show the previous frame rather than being transparent.
    """

    canvas_width, canvas_height = image.size
    frames: list[DecodedFrame] = []
    for frame in ImageSequence.Iterator(image):
        left, top, right, bottom = _frame_extent(frame, canvas_width, canvas_height)
        patch = frame.convert("RGBA").crop((left, top, right, bottom))
        pixels = np.asarray(patch, dtype=np.uint8)
        frames.append(
            DecodedFrame(
                patch=pixels.tobytes(),
                width=patch.width,
                height=patch.height,
                left=left,
                top=top,
                delay=int(frame.info.get("duration", 0) or 0),
            )
        )
    return DecodedAnimation(width=canvas_width, height=canvas_height, frames=frames)


def _frame_extent(frame: Image.Image, canvas_width: int, canvas_height: int) -> tuple[int, int, int, int]:
    """Region updated by the current frame, clamped to the logical screen."""

    extent = getattr(frame, "dispose_extent", None)
    if not extent:
        return 0, 0, canvas_width, canvas_height
    left, top, right, bottom = (int(v) for v in extent)
    left = max(0, min(left, canvas_width - 1))
    top = max(0, min(top, canvas_height - 1))
    right = max(left + 1, min(right, canvas_width))
    bottom = max(top + 1, min(bottom, canvas_height))
    return left, top, right, bottom
