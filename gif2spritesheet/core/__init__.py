"""Core data model for spritesheet generation."""

__all__ = [
    "LayoutMode",
    "LayoutConfig",
    "Frame",
    "DecodedFrame",
    "DecodedAnimation",
    "Placement",
    "SheetGeometry",
    "SpriteSheetResult",
]

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class LayoutMode(str, Enum):
    """How frames are arranged on the sheet."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    GRID = "grid"


@dataclass(frozen=True)
class LayoutConfig:
    """Normalized layout settings consumed by the engine."""

    mode: LayoutMode = LayoutMode.HORIZONTAL
    padding: int = 0
    columns: Optional[int] = None


@dataclass(frozen=True)
class Frame:
    """One decoded still image, held as a raw RGBA8888 patch."""

    index: int
    pixels: bytes = field(repr=False)
    width: int
    height: int
    offset_left: int = 0
    offset_top: int = 0
    duration: int = 0

    def __post_init__(self) -> None:
        for name in ("index", "offset_left", "offset_top", "duration"):
            if getattr(self, name) < 0:
                raise ValueError(f"Frame {name} must be non-negative, got {getattr(self, name)}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Frame {self.index} has invalid size {self.width}x{self.height}")
        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise ValueError(
                f"Frame {self.index} pixel buffer is {len(self.pixels)} bytes, expected {expected}"
            )


@dataclass
class DecodedFrame:
    """A patch as handed over by the decoder."""

    patch: bytes = field(repr=False)
    width: int
    height: int
    left: int = 0
    top: int = 0
    delay: int = 0


@dataclass
class DecodedAnimation:
    """Decoder output: logical screen size plus per-step patches."""

    width: int
    height: int
    frames: list[DecodedFrame] = field(default_factory=list)


@dataclass(frozen=True)
class Placement:
    """Where a frame was drawn on the sheet, using its intrinsic size."""

    x: int
    y: int
    w: int
    h: int
    duration: int

    def as_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h, "duration": self.duration}


@dataclass(frozen=True)
class SheetGeometry:
    """Pure layout numbers for a frame sequence."""

    columns: int
    rows: int
    cell_width: int
    cell_height: int
    width: int
    height: int
    placements: tuple[Placement, ...]


@dataclass
class SpriteSheetResult:
    """Encoded spritesheet plus its frame atlas.

    ``url`` is a handle registered in a raster store. Call :meth:`release`
    (or use the result as a context manager) once the result is superseded.
    """

    data: bytes = field(repr=False)
    url: str
    width: int
    height: int
    placements: list[Placement]
    columns: int
    rows: int
    cell_width: int
    cell_height: int
    store: Any = field(default=None, repr=False, compare=False)

    @property
    def frame_count(self) -> int:
        return len(self.placements)

    def release(self) -> None:
        if self.store is not None:
            self.store.release(self.url)

    def __enter__(self) -> "SpriteSheetResult":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
