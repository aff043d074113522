import json

import pytest
from fastapi.testclient import TestClient

from gif2spritesheet.core import LayoutMode
from gif2spritesheet.core.raster_store import RasterStore
from gif2spritesheet.web.server import GenerationRequest, create_app


@pytest.fixture
def rasters():
    return RasterStore()


@pytest.fixture
def client(rasters):
    return TestClient(create_app(store=rasters))


def _post(client, gif_path, settings=None, filename="walk.gif"):
    return client.post(
        "/api/generate",
        files={"image": (filename, gif_path.read_bytes(), "image/gif")},
        data={"settings": json.dumps(settings or {})},
    )


def test_generation_request_normalizes_layout_and_columns():
    req = GenerationRequest.model_validate({"layout": "GRID", "columns": 0, "padding": 5})
    assert req.layout is LayoutMode.GRID
    assert req.columns == 1
    assert req.to_config().padding == 5


def test_generation_request_rejects_large_padding():
    with pytest.raises(ValueError):
        GenerationRequest.model_validate({"padding": 500})


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_generate_returns_atlas_and_serves_png(client, rasters, sample_gif):
    response = _post(client, sample_gif, {"layout": "vertical", "padding": 2})

    assert response.status_code == 200
    body = response.json()
    assert (body["width"], body["height"]) == (8, 22)
    assert body["atlas"]["meta"]["image"] == "walk.png"
    assert [f["y"] for f in body["atlas"]["frames"]] == [0, 8, 16]
    assert len(rasters) == 1

    png = client.get(body["spritesheet_url"])
    assert png.status_code == 200
    assert png.headers["content-type"] == "image/png"
    assert png.content.startswith(b"\x89PNG")


def test_release_spritesheet(client, rasters, sample_gif):
    url = _post(client, sample_gif).json()["spritesheet_url"]

    assert client.delete(url).json() == {"status": "released"}
    assert len(rasters) == 0
    assert client.get(url).status_code == 404
    assert client.delete(url).status_code == 404


def test_removed_frames_are_skipped(client, sample_gif):
    body = _post(client, sample_gif, {"removed_frames": [1]}).json()
    assert [f["duration"] for f in body["atlas"]["frames"]] == [100, 300]


def test_removing_every_frame_is_bad_request(client, sample_gif):
    response = _post(client, sample_gif, {"removed_frames": [0, 1, 2]})
    assert response.status_code == 400


def test_corrupt_upload_is_bad_request(client, tmp_path):
    bogus = tmp_path / "bogus.gif"
    bogus.write_bytes(b"definitely not an image")
    assert _post(client, bogus).status_code == 400


def test_invalid_settings(client, sample_gif):
    response = client.post(
        "/api/generate",
        files={"image": ("walk.gif", sample_gif.read_bytes(), "image/gif")},
        data={"settings": "{not json"},
    )
    assert response.status_code == 400
    assert _post(client, sample_gif, {"layout": "spiral"}).status_code == 422
