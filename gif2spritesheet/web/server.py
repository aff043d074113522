"""FastAPI surface for gif2spritesheet processing."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, field_validator
from starlette.concurrency import run_in_threadpool

from .. import __version__
from ..core import LayoutConfig, LayoutMode, SpriteSheetResult
from ..core import atlas_writer, frame_adapter, gif_loader, spritesheet_builder
from ..core.errors import DecodeError, EmptyInputError, ProcessingError, RenderSurfaceError, ValidationError
from ..core.raster_store import RasterStore, token_from_url, url_for_token
from ..utils import file_tools, validators

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 50 * 1024 * 1024  # 50MB guardrail
RASTER_TTL_SECONDS = int(os.environ.get("G2S_RASTER_TTL_SECONDS", str(60 * 30)))
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("G2S_ALLOWED_ORIGINS", "http://localhost:8000").split(",")
    if origin.strip()
]


class GenerationRequest(BaseModel):
    """Incoming settings payload for spritesheet generation."""

    layout: LayoutMode = LayoutMode.HORIZONTAL
    padding: int = Field(0, ge=0, le=validators.MAX_PADDING)
    columns: Optional[int] = None
    removed_frames: list[int] = Field(default_factory=list)
    image_name: Optional[str] = None

    @field_validator("layout", mode="before")
    @classmethod
    def _parse_layout(cls, value):
        if isinstance(value, str):
            return value.strip().lower() or LayoutMode.HORIZONTAL.value
        return value

    @field_validator("columns", mode="before")
    @classmethod
    def _clamp_columns(cls, value):
        return validators.clamp_columns(value)

    def to_config(self) -> LayoutConfig:
        return LayoutConfig(mode=self.layout, padding=self.padding, columns=self.columns)


class GenerationResponse(BaseModel):
    """Payload returned after generation completes."""

    spritesheet_url: str
    frame_count: int
    columns: int
    rows: int
    width: int
    height: int
    cell_width: int
    cell_height: int
    atlas: dict[str, Any]


def create_app(store: RasterStore | None = None) -> FastAPI:
    app = FastAPI(title="gif2spritesheet", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.rasters = store if store is not None else RasterStore()

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/generate", response_model=GenerationResponse)
    async def generate_spritesheet(
        request: Request,
        image: UploadFile = File(...),
        settings: str = Form("{}"),
    ) -> GenerationResponse:
        try:
            payload = json.loads(settings) if settings else {}
        except json.JSONDecodeError as exc:
            raise HTTPException(status_code=400, detail=f"Invalid settings JSON: {exc}") from exc

        try:
            request_settings = GenerationRequest.model_validate(payload)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

        _enforce_size_limit(request)
        data = await image.read(MAX_UPLOAD_BYTES + 1)
        if len(data) > MAX_UPLOAD_BYTES:
            raise HTTPException(status_code=413, detail="File too large")

        rasters: RasterStore = request.app.state.rasters
        try:
            result = await run_in_threadpool(
                _run_generation, data, image.filename or "upload.gif", request_settings, rasters
            )
        except (DecodeError, EmptyInputError, ValidationError, IndexError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except (RenderSurfaceError, ProcessingError) as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unexpected failure during generation")
            raise HTTPException(status_code=500, detail="Unexpected error") from exc

        _schedule_release(rasters, result.url)
        image_name = request_settings.image_name or f"{file_tools.default_stem(image.filename)}.png"
        return GenerationResponse(
            spritesheet_url=f"/api/spritesheets/{token_from_url(result.url)}",
            frame_count=result.frame_count,
            columns=result.columns,
            rows=result.rows,
            width=result.width,
            height=result.height,
            cell_width=result.cell_width,
            cell_height=result.cell_height,
            atlas=atlas_writer.build_atlas(result, image_name),
        )

    @app.get("/api/spritesheets/{token}")
    async def get_spritesheet(token: str, request: Request) -> Response:
        rasters: RasterStore = request.app.state.rasters
        try:
            data = rasters.get(url_for_token(token))
        except KeyError:
            raise HTTPException(status_code=404, detail="Not found") from None
        return Response(content=data, media_type="image/png")

    @app.delete("/api/spritesheets/{token}")
    async def release_spritesheet(token: str, request: Request) -> dict[str, str]:
        rasters: RasterStore = request.app.state.rasters
        if not rasters.release(url_for_token(token)):
            raise HTTPException(status_code=404, detail="Not found")
        return {"status": "released"}

    return app


def _enforce_size_limit(request: Request) -> None:
    """Simple guardrail on upload size based on Content-Length."""

    content_length = request.headers.get("content-length")
    if not content_length:
        return
    try:
        size = int(content_length)
    except ValueError:
        return
    if size > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="Upload exceeds limit")


def _schedule_release(rasters: RasterStore, url: str, delay: int = RASTER_TTL_SECONDS) -> None:
    """Release a raster the client never deleted once its TTL passes."""

    asyncio.get_running_loop().call_later(delay, rasters.release, url)


def _run_generation(
    data: bytes, filename: str, request: GenerationRequest, rasters: RasterStore
) -> SpriteSheetResult:
    """Perform the full pipeline for a single upload."""

    animation = gif_loader.decode_animation(data, name=filename)
    frames = frame_adapter.adapt_animation(animation)
    if request.removed_frames:
        frames = frame_adapter.remove_frames(frames, request.removed_frames)
    return spritesheet_builder.build_spritesheet(frames, request.to_config(), store=rasters)


app = create_app()
