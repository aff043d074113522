"""Persist a generated spritesheet and its atlas."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from . import SpriteSheetResult
from .atlas_writer import write_atlas
from .errors import ProcessingError
from ..utils import file_tools

logger = logging.getLogger(__name__)


def export_spritesheet(
    result: SpriteSheetResult,
    output_path: Path,
    atlas_path: Optional[Path] = None,
    image_name: Optional[str] = None,
) -> tuple[Path, Optional[Path]]:
    """Write the PNG and, when ``atlas_path`` is given, the atlas JSON.

    Either every requested file is written or none is left behind.
    """

    image_path = output_path.with_suffix(".png")
    try:
        file_tools.ensure_directory(image_path.parent)
        image_path.write_bytes(result.data)
    except OSError as exc:
        raise ProcessingError(f"Failed to write spritesheet to {image_path}: {exc}") from exc
    logger.info("Wrote spritesheet to %s", image_path)

    written_atlas = None
    if atlas_path is not None:
        try:
            written_atlas = write_atlas(result, atlas_path, image_name or image_path.name)
        except OSError as exc:
            image_path.unlink(missing_ok=True)
            raise ProcessingError(f"Failed to write atlas to {atlas_path}: {exc}") from exc
    return image_path, written_atlas
