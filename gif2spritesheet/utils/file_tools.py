"""Filesystem helpers."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_STEM = "spritesheet"


def ensure_directory(path: Path) -> Path:
    """Create a directory if it does not exist."""

    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)
    return path


def default_stem(filename: str | None) -> str:
    """Source file name without its extension, or ``spritesheet``."""

    if not filename:
        return DEFAULT_STEM
    name = Path(filename).name
    stem = ".".join(name.split(".")[:-1])
    return stem or DEFAULT_STEM


def default_output_path(source_path: Path, suffix: str = ".png") -> Path:
    """Return a default output path next to the source file."""

    if not suffix.startswith("."):
        suffix = "." + suffix
    return source_path.with_name(default_stem(source_path.name) + suffix)
