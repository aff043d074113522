"""Spritesheet layout and composition using numpy and Pillow."""

from __future__ import annotations

import io
import math
import logging
from typing import Sequence

import numpy as np
from PIL import Image

from . import Frame, LayoutConfig, LayoutMode, Placement, SheetGeometry, SpriteSheetResult
from .errors import EmptyInputError, ProcessingError, RenderSurfaceError
from .raster_store import RasterStore, default_store

logger = logging.getLogger(__name__)


def _resolve_grid(frame_count: int, mode: LayoutMode, columns: int | None) -> tuple[int, int]:
    """Compute (columns, rows) for the layout mode."""

    if frame_count == 1:
        return 1, 1
    if mode == LayoutMode.HORIZONTAL:
        return frame_count, 1
    if mode == LayoutMode.VERTICAL:
        return 1, frame_count

    # Square-ish fallback when no column count was given
    columns = max(1, columns or math.ceil(math.sqrt(frame_count)))
    rows = math.ceil(frame_count / columns)
    return columns, rows


def compute_layout(frames: Sequence[Frame], config: LayoutConfig) -> SheetGeometry:
    """Place every frame into a uniform cell grid sized to the largest patch."""

    if not frames:
        raise EmptyInputError("No frames provided to pack.")

    count = len(frames)
    cell_w = max(frame.width for frame in frames)
    cell_h = max(frame.height for frame in frames)
    columns, rows = _resolve_grid(count, LayoutMode(config.mode), config.columns)
    pad = max(0, config.padding)

    sheet_width = columns * cell_w + (columns - 1) * pad
    sheet_height = rows * cell_h + (rows - 1) * pad

    placements = []
    for idx, frame in enumerate(frames):
        col = idx % columns
        row = idx // columns
        placements.append(
            Placement(
                x=col * (cell_w + pad),
                y=row * (cell_h + pad),
                w=frame.width,
                h=frame.height,
                duration=frame.duration,
            )
        )

    logger.debug(
        "Layout %s: %s frames in %sx%s cells of %sx%s -> %sx%s",
        LayoutMode(config.mode).value,
        count,
        columns,
        rows,
        cell_w,
        cell_h,
        sheet_width,
        sheet_height,
    )
    return SheetGeometry(
        columns=columns,
        rows=rows,
        cell_width=cell_w,
        cell_height=cell_h,
        width=sheet_width,
        height=sheet_height,
        placements=tuple(placements),
    )


def render_sheet(frames: Sequence[Frame], geometry: SheetGeometry) -> Image.Image:
    """Copy each patch into a transparent canvas at its placement."""

    canvas = _allocate_canvas(geometry.width, geometry.height)
    for frame, placement in zip(frames, geometry.placements):
        patch = np.frombuffer(frame.pixels, dtype=np.uint8).reshape(frame.height, frame.width, 4)
        canvas[placement.y : placement.y + placement.h, placement.x : placement.x + placement.w] = patch
    try:
        return Image.fromarray(canvas)
    except (MemoryError, ValueError) as exc:
        raise RenderSurfaceError(f"Could not build a {geometry.width}x{geometry.height} image") from exc


def encode_png(image: Image.Image) -> bytes:
    """Lossless RGBA encoding of the composite."""

    buffer = io.BytesIO()
    try:
        image.convert("RGBA").save(buffer, format="PNG")
    except (OSError, ValueError) as exc:
        raise ProcessingError(f"Failed to encode spritesheet: {exc}") from exc
    return buffer.getvalue()


def build_spritesheet(
    frames: Sequence[Frame],
    config: LayoutConfig,
    store: RasterStore | None = None,
) -> SpriteSheetResult:
    """Lay out, composite and encode ``frames`` into one spritesheet.

    Each call is independent. The returned result owns a handle in ``store``
    (the module-wide store by default) that the caller must release.
    """

    geometry = compute_layout(frames, config)
    sheet = render_sheet(frames, geometry)
    data = encode_png(sheet)

    target_store = store if store is not None else default_store
    url = target_store.register(data)
    logger.info(
        "Built %sx%s spritesheet from %s frames (%s bytes)",
        geometry.width,
        geometry.height,
        len(frames),
        len(data),
    )
    return SpriteSheetResult(
        data=data,
        url=url,
        width=geometry.width,
        height=geometry.height,
        placements=list(geometry.placements),
        columns=geometry.columns,
        rows=geometry.rows,
        cell_width=geometry.cell_width,
        cell_height=geometry.cell_height,
        store=target_store,
    )


def _allocate_canvas(width: int, height: int) -> np.ndarray:
    try:
        return np.zeros((height, width, 4), dtype=np.uint8)
    except (MemoryError, ValueError) as exc:
        raise RenderSurfaceError(f"Could not allocate a {width}x{height} canvas") from exc
