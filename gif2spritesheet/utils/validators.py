"""Validation helpers for user inputs."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..core import LayoutConfig, LayoutMode
from ..core.errors import DecodeError, ValidationError


ALLOWED_ANIMATION_EXTENSIONS = {".gif"}
MAX_PADDING = 100


def validate_animation_path(path: Path) -> Path:
    """Ensure the animation path exists and appears to be a supported format."""

    if not path:
        raise DecodeError(Path("<unset>"), reason="No path provided")
    if not path.exists():
        raise DecodeError(path, reason="File not found")
    if path.suffix.lower() not in ALLOWED_ANIMATION_EXTENSIONS:
        raise DecodeError(path, reason="Unsupported format")
    return path


def parse_layout_mode(value: str | LayoutMode | None) -> LayoutMode:
    """Accept a mode name in any case; default to horizontal."""

    if value is None or value == "":
        return LayoutMode.HORIZONTAL
    if isinstance(value, LayoutMode):
        return value
    try:
        return LayoutMode(str(value).strip().lower())
    except ValueError as exc:
        choices = ", ".join(mode.value for mode in LayoutMode)
        raise ValidationError(f"Layout must be one of: {choices}") from exc


def parse_padding(value: int | str | None) -> int:
    """Parse padding in pixels (0 to MAX_PADDING)."""

    if value is None or value == "":
        return 0
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Padding must be an integer") from exc
    if parsed < 0:
        raise ValidationError("Padding must be zero or greater")
    if parsed > MAX_PADDING:
        raise ValidationError(f"Padding must be at most {MAX_PADDING}")
    return parsed


def clamp_columns(value: int | str | None) -> Optional[int]:
    """Clamp a column count to at least one; blank means automatic."""

    if value is None or value == "":
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return 1
    return max(1, parsed)


def normalize_config(
    mode: str | LayoutMode | None = None,
    padding: int | str | None = None,
    columns: int | str | None = None,
) -> LayoutConfig:
    """Build a LayoutConfig that satisfies the engine's invariants."""

    return LayoutConfig(
        mode=parse_layout_mode(mode),
        padding=parse_padding(padding),
        columns=clamp_columns(columns),
    )
