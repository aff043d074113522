"""Debounced, last-request-wins spritesheet regeneration.

Callers that rebuild on every settings edit (a slider drag, a frame removal)
hand each new request to :class:`SpriteSheetRegenerator`. A request only runs
after ``delay`` seconds without a newer one, and a result that finishes after
a newer request was made is released instead of published.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Sequence

from . import Frame, LayoutConfig, SpriteSheetResult
from .raster_store import RasterStore
from .spritesheet_builder import build_spritesheet

logger = logging.getLogger(__name__)
DEFAULT_DEBOUNCE_SECONDS = 0.1


class SpriteSheetRegenerator:
    def __init__(
        self,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        store: RasterStore | None = None,
        on_result: Optional[Callable[[SpriteSheetResult], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        self._delay = max(0.0, float(delay))
        self._store = store
        self._on_result = on_result
        self._on_error = on_error
        self._generation = 0
        self._current: SpriteSheetResult | None = None
        self._latest_task: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def current(self) -> SpriteSheetResult | None:
        return self._current

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def request(self, frames: Sequence[Frame], config: LayoutConfig) -> asyncio.Task:
        """Schedule a rebuild; supersedes every earlier request.

        Must be called from a running event loop. Frames are snapshotted so
        later edits to the caller's list do not leak into this run.
        """

        self._generation += 1
        task = asyncio.get_running_loop().create_task(
            self._run(self._generation, tuple(frames), config)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._latest_task = task
        return task

    async def wait(self) -> SpriteSheetResult | None:
        """Wait for the newest request and return the published result.

        Re-raises the newest request's failure when no ``on_error`` is set.
        """

        while self._latest_task is not None:
            task = self._latest_task
            await asyncio.wait({task})
            if task is self._latest_task:
                exc = task.exception()
                if exc is not None:
                    raise exc
                break
        return self._current

    async def aclose(self) -> None:
        """Supersede everything in flight and release the current result."""

        self._generation += 1
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        if self._current is not None:
            self._current.release()
            self._current = None

    async def _run(
        self, generation: int, frames: tuple[Frame, ...], config: LayoutConfig
    ) -> SpriteSheetResult | None:
        await asyncio.sleep(self._delay)
        if generation != self._generation:
            logger.debug("Request %s superseded before starting", generation)
            return None

        try:
            result = await asyncio.to_thread(build_spritesheet, frames, config, self._store)
        except Exception as exc:
            if generation != self._generation:
                logger.debug("Superseded request %s failed: %s", generation, exc)
                return None
            if self._on_error is None:
                raise
            self._on_error(exc)
            return None

        if generation != self._generation:
            logger.debug("Discarding stale result of request %s", generation)
            result.release()
            return None

        previous, self._current = self._current, result
        if previous is not None:
            previous.release()
        if self._on_result is not None:
            self._on_result(result)
        return result
