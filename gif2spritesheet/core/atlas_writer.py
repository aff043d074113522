"""Atlas (frame metadata) writing logic."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from . import SpriteSheetResult
from .. import __version__
from ..utils import file_tools

logger = logging.getLogger(__name__)

APP_NAME = "gif2spritesheet"


def build_atlas(result: SpriteSheetResult, image_name: str = "spritesheet.png") -> dict[str, Any]:
    """Describe where each frame sits on the sheet and how long it shows."""

    return {
        "meta": {
            "app": APP_NAME,
            "version": __version__,
            "image": image_name,
            "format": "RGBA8888",
            "size": {"w": result.width, "h": result.height},
            "scale": "1",
        },
        "frames": [placement.as_dict() for placement in result.placements],
    }


def atlas_json(result: SpriteSheetResult, image_name: str = "spritesheet.png") -> str:
    return json.dumps(build_atlas(result, image_name), indent=2)


def write_atlas(result: SpriteSheetResult, path: Path, image_name: str | None = None) -> Path:
    """Write the atlas JSON; the image name defaults to ``<stem>.png``."""

    atlas_path = path.with_suffix(".json")
    file_tools.ensure_directory(atlas_path.parent)
    name = image_name or f"{atlas_path.stem}.png"
    atlas_path.write_text(atlas_json(result, name), encoding="utf-8")
    logger.info("Wrote atlas to %s", atlas_path)
    return atlas_path
