import asyncio

import pytest

from gif2spritesheet.core import LayoutConfig, LayoutMode
from gif2spritesheet.core.errors import EmptyInputError
from gif2spritesheet.core.regenerator import SpriteSheetRegenerator


def test_rapid_requests_publish_only_the_last(make_frame, store):
    frames = [make_frame(index=i) for i in range(4)]
    published = []

    async def scenario():
        regen = SpriteSheetRegenerator(delay=0.01, store=store, on_result=published.append)
        for padding in range(5):
            regen.request(frames, LayoutConfig(LayoutMode.HORIZONTAL, padding=padding))
        result = await regen.wait()
        return regen, result

    regen, result = asyncio.run(scenario())

    assert len(published) == 1
    assert result is published[0] is regen.current
    assert result.width == 4 * 10 + 3 * 4
    assert len(store) == 1


def test_newer_result_releases_previous(make_frame, store):
    frames = [make_frame()]

    async def scenario():
        regen = SpriteSheetRegenerator(delay=0, store=store)
        regen.request(frames, LayoutConfig())
        first = await regen.wait()
        regen.request(frames, LayoutConfig(padding=2))
        second = await regen.wait()
        return first, second

    first, second = asyncio.run(scenario())

    assert first.url not in store
    assert second.url in store
    assert len(store) == 1


def test_stale_result_is_released_when_superseded_mid_render(make_frame, store, monkeypatch):
    from gif2spritesheet.core import regenerator

    frames = [make_frame()]
    real_build = regenerator.build_spritesheet
    started = []

    def slow_build(*args, **kwargs):
        started.append(True)
        import time

        time.sleep(0.05)
        return real_build(*args, **kwargs)

    monkeypatch.setattr(regenerator, "build_spritesheet", slow_build)

    async def scenario():
        regen = SpriteSheetRegenerator(delay=0, store=store)
        stale_task = regen.request(frames, LayoutConfig())
        while not started:
            await asyncio.sleep(0.001)
        regen.request(frames, LayoutConfig(padding=1))
        stale = await stale_task
        latest = await regen.wait()
        return stale, latest

    stale, latest = asyncio.run(scenario())

    assert stale is None
    assert len(started) == 2
    assert len(store) == 1
    assert latest.url in store


def test_aclose_releases_current(make_frame, store):
    async def scenario():
        regen = SpriteSheetRegenerator(delay=0, store=store)
        regen.request([make_frame()], LayoutConfig())
        await regen.wait()
        await regen.aclose()
        return regen

    regen = asyncio.run(scenario())

    assert regen.current is None
    assert len(store) == 0


def test_errors_go_to_on_error(store):
    errors = []

    async def scenario():
        regen = SpriteSheetRegenerator(delay=0, store=store, on_error=errors.append)
        regen.request([], LayoutConfig())
        return await regen.wait()

    assert asyncio.run(scenario()) is None
    assert len(errors) == 1
    assert isinstance(errors[0], EmptyInputError)


def test_errors_surface_from_wait_without_handler(store):
    async def scenario():
        regen = SpriteSheetRegenerator(delay=0, store=store)
        regen.request([], LayoutConfig())
        await regen.wait()

    with pytest.raises(EmptyInputError):
        asyncio.run(scenario())


def test_request_snapshots_frames(make_frame, store):
    frames = [make_frame(index=0), make_frame(index=1)]

    async def scenario():
        regen = SpriteSheetRegenerator(delay=0.01, store=store)
        regen.request(frames, LayoutConfig())
        frames.pop()
        return await regen.wait()

    assert asyncio.run(scenario()).frame_count == 2


def test_generation_and_pending_track_requests(make_frame, store):
    frames = [make_frame()]

    async def scenario():
        regen = SpriteSheetRegenerator(delay=0.01, store=store)
        assert regen.generation == 0
        assert regen.pending is False
        regen.request(frames, LayoutConfig())
        regen.request(frames, LayoutConfig(padding=1))
        assert regen.generation == 2
        assert regen.pending is True
        await regen.wait()
        await asyncio.sleep(0)
        assert regen.pending is False
        await regen.aclose()
        return regen

    regen = asyncio.run(scenario())

    assert regen.generation == 3
    assert regen.current is None
    assert len(store) == 0
