"""Shared test fixtures for gif2spritesheet tests."""

import pytest
from PIL import Image

from gif2spritesheet.core import Frame
from gif2spritesheet.core.raster_store import RasterStore

SAMPLE_COLORS = [(255, 0, 0), (0, 255, 0), (0, 0, 255)]
SAMPLE_DURATIONS = [100, 200, 300]


@pytest.fixture
def make_frame():
    """Factory for solid-color RGBA frames."""

    def _make(index=0, width=10, height=10, color=(255, 0, 0, 255), duration=100, left=0, top=0):
        return Frame(
            index=index,
            pixels=bytes(color) * (width * height),
            width=width,
            height=height,
            offset_left=left,
            offset_top=top,
            duration=duration,
        )

    return _make


@pytest.fixture
def store():
    return RasterStore()


@pytest.fixture
def sample_gif(tmp_path):
    """A 3-frame 8x6 GIF, one solid color per frame."""

    path = tmp_path / "walk.gif"
    frames = [Image.new("RGB", (8, 6), color) for color in SAMPLE_COLORS]
    frames[0].save(
        path,
        save_all=True,
        append_images=frames[1:],
        duration=SAMPLE_DURATIONS,
        loop=0,
    )
    return path


@pytest.fixture
def partial_update_gif(tmp_path):
    """A 20x20 GIF whose later frames only repaint a 3x4 patch at (5, 5)."""

    path = tmp_path / "blink.gif"
    base = Image.new("RGB", (20, 20), (255, 0, 0))
    second = base.copy()
    second.paste((0, 0, 255), (5, 5, 8, 9))
    third = base.copy()
    third.paste((0, 255, 0), (5, 5, 8, 9))
    base.save(path, save_all=True, append_images=[second, third], duration=[50, 60, 70], loop=0)
    return path
